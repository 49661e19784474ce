"""Domain layer for badge consensus.

Pure business rules: voter registry, approval rounds, domain events and
domain errors. Imports nothing from the other layers.
"""
