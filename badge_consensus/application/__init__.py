"""Application layer for badge consensus.

Use cases (services) and the ports they depend on. Imports from the
domain layer only.
"""
