"""
Numerical policy for the elimination routines.

The pivot threshold is the single tolerance the engine applies: a diagonal
cell whose magnitude is below it is not used as a pivot. It can be
overridden per call through ``Matrix.solve(..., tolerance=...)``.
"""

from __future__ import annotations

from dataclasses import dataclass

from densemat.errors import ValidationError


@dataclass(frozen=True)
class PivotPolicy:
    """Pivot acceptance threshold for Gauss-Jordan elimination."""
    threshold: float


GAUSS_JORDAN = PivotPolicy(threshold=1e-10)

# Cofactor expansion is O(n!). Above this size determinant() logs a warning.
COFACTOR_WARNING_SIZE = 8


def resolve_tolerance(tolerance: float | None = None) -> float:
    """Return the caller's tolerance, or the default pivot threshold.

    The threshold must be strictly positive; with zero an exactly zero pivot
    would never be repaired and elimination would divide by it.
    """
    if tolerance is None:
        return GAUSS_JORDAN.threshold
    if not tolerance > 0:
        raise ValidationError(f"Pivot tolerance must be positive, got {tolerance}")
    return float(tolerance)
