"""Composition root: wires application services to infrastructure adapters."""
