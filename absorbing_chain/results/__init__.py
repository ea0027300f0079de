"""Absorption results keyed by original node IDs."""

from absorbing_chain.results.projector import AbsorptionResult

__all__ = [
    "AbsorptionResult",
]
