"""Small numeric helpers shared by the enclosure engine."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from math import exp, isfinite, log10


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(value, upper))


def gaussian(frequency: float, center: float, width: float) -> float:
    """Unit-height bell centred on ``center``; zero when ``width`` is not positive."""

    if width <= 0:
        return 1.0 if frequency == center else 0.0
    return exp(-(((frequency - center) / width) ** 2))


def resonance(frequency: float, center: float, width: float, tail: float) -> float:
    """Gaussian bell that never falls below a Lorentzian ``tail``.

    Both terms decrease with distance from ``center``, so the maximum over any
    sweep sits at the sample nearest ``center`` even where the bell underflows.
    """

    if width <= 0:
        return 1.0 if frequency == center else 0.0
    z = (frequency - center) / width
    z2 = z * z
    return max(exp(-z2), tail / (1.0 + z2))


def power_db(ratio: float, floor: float = 1e-12) -> float:
    """Return ``10·log10(ratio)`` with ``ratio`` floored to keep the result finite."""

    return 10.0 * log10(max(ratio, floor))


def all_finite(values: Iterable[float]) -> bool:
    return all(isfinite(float(value)) for value in values)


def peak_index(values: Sequence[float]) -> int | None:
    """Return the index of the first maximum, or ``None`` for an empty sequence."""

    if not values:
        return None
    best = 0
    for idx, value in enumerate(values):
        if value > values[best]:
            best = idx
    return best


__all__ = ["clamp", "gaussian", "resonance", "power_db", "all_finite", "peak_index"]
