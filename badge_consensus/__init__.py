"""
Badge Consensus - Non-transferable badge registry with unanimous approval

Badges are non-transferable records owned by a single identity. Issuing a
badge and invalidating a badge are irreversible, so both are gated behind
unanimous approval from a fixed set of voters established at construction.

Core Rules:
- Only registered voters may approve
- A voter approves a given target at most once per round
- The registry is mutated exactly when every voter slot has approved
- A completed round resets and the target may be approved again
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
