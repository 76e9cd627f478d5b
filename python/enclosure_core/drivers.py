"""Driver records and the bundled driver catalog."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class DriverParams:
    """Thiele/Small subset needed by the enclosure designer."""

    name: str
    """Display name, used as the catalog key."""

    fs_hz: float
    """Free-air resonance frequency (Hz)."""

    qts: float
    """Total Q at fs (dimensionless)."""

    vas_l: float
    """Equivalent compliance volume (litres)."""

    xmax_mm: float
    """One-way linear excursion limit (millimetres)."""

    sd_cm2: float
    """Effective piston area (square centimetres)."""

    def with_changes(self, changes: Mapping[str, Any]) -> DriverParams:
        """Return a copy with ``changes`` applied field by field."""

        known = {f.name for f in fields(self)}
        coerced: dict[str, Any] = {}
        for key, value in changes.items():
            if key not in known:
                raise TypeError(f"Unknown driver field: {key}")
            coerced[key] = str(value) if key == "name" else _as_float(key, value)
        return replace(self, **coerced)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "fs_hz": self.fs_hz,
            "qts": self.qts,
            "vas_l": self.vas_l,
            "xmax_mm": self.xmax_mm,
            "sd_cm2": self.sd_cm2,
        }


def _as_float(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be a number, got {value!r}") from exc


DRIVER_CATALOG: tuple[DriverParams, ...] = (
    DriverParams('Generic 12" (Standard)', fs_hz=34.0, qts=0.45, vas_l=56.0, xmax_mm=12.0, sd_cm2=510.0),
    DriverParams("JL Audio 12W7AE (SPL)", fs_hz=27.2, qts=0.48, vas_l=66.0, xmax_mm=29.0, sd_cm2=593.0),
    DriverParams("Kicker L7 12 (Square)", fs_hz=34.0, qts=0.54, vas_l=45.0, xmax_mm=16.0, sd_cm2=620.0),
    DriverParams("Dayton Ultimax 12 (Hi-Fi)", fs_hz=26.0, qts=0.42, vas_l=72.0, xmax_mm=19.0, sd_cm2=490.0),
    DriverParams("Skar Audio EVL-12 (Street)", fs_hz=38.0, qts=0.45, vas_l=35.0, xmax_mm=24.0, sd_cm2=480.0),
    DriverParams("B&C 18TBW100 (Pro Audio)", fs_hz=35.0, qts=0.35, vas_l=180.0, xmax_mm=12.0, sd_cm2=1210.0),
    DriverParams("Scan-Speak 18W (Studio)", fs_hz=42.0, qts=0.38, vas_l=25.0, xmax_mm=8.0, sd_cm2=145.0),
)

DEFAULT_DRIVER = DRIVER_CATALOG[0]


def driver_names() -> list[str]:
    return [driver.name for driver in DRIVER_CATALOG]


def get_driver(name: str) -> DriverParams:
    """Return the catalog record called ``name``.

    Raises ``KeyError`` when the catalog has no such driver.
    """

    for driver in DRIVER_CATALOG:
        if driver.name == name:
            return driver
    raise KeyError(f"Unknown driver: {name}")


__all__ = ["DriverParams", "DRIVER_CATALOG", "DEFAULT_DRIVER", "driver_names", "get_driver"]
