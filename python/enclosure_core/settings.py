"""Tunable constants for the closed-form enclosure simulation.

The engine is a lumped approximation, so none of these numbers are physically
authoritative. They are grouped here so callers (tests, the gateway) can pin or
override them without touching the formulas.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

SPEED_OF_SOUND_CM_S = 34300.0  # cm/s at 20°C


def _default_end_corrections() -> dict[str, float]:
    return {"circular": 0.732, "slot": 0.825, "aero": 0.95}


def _default_wall_factors() -> dict[str, float]:
    return {"circular": 1.2, "slot": 1.35, "aero": 1.15}


@dataclass(frozen=True, slots=True)
class SimulationSettings:
    """Constants consumed by :func:`enclosure_core.acoustics.enclosure.calculate`."""

    sweep_start_hz: float = 10.0
    sweep_stop_hz: float = 150.0
    sweep_step_hz: float = 1.0

    drive_power_w: float = 500.0
    """Reference amplifier power used for excursion and port velocity curves."""

    nominal_impedance_ohm: float = 4.0

    cone_depth_cm: float = 20.0
    cone_fill_fraction: float = 0.4
    bracing_fraction: float = 0.06

    end_corrections: Mapping[str, float] = field(default_factory=_default_end_corrections)
    """Port end-correction coefficient keyed by port type value."""

    wall_factors: Mapping[str, float] = field(default_factory=_default_wall_factors)
    """Multiplier on the port air volume accounting for tube/slot walls."""

    min_port_length_cm: float = 1.0

    response_ceiling_db: float = 12.0
    port_boost_db: float = 6.0
    port_boost_width_hz: float = 10.0
    boost_reference_qts: float = 0.45
    bandpass_upper_ratio: float = 2.5

    excursion_penalty: float = 3.0
    excursion_scale: float = 5.0
    excursion_ceiling_mm: float = 40.0

    port_velocity_width_hz: float = 5.0
    port_velocity_tail: float = 1e-12
    """Lorentzian floor under the port resonance; keeps the peak located when the bell underflows."""

    port_noise_limit_ms: float = 30.0
    collision_margin_cm: float = 5.0

    parameter_floor: float = 1e-3
    """Smallest accepted value for Fs, Qts, Sd, tuning and the port dimensions in use."""

    parameter_ceiling: float = 1e6
    """Largest accepted magnitude for any numeric design parameter."""

    def frequencies(self) -> list[float]:
        """Return the swept frequency axis (inclusive of both bounds)."""

        if self.sweep_step_hz <= 0 or self.sweep_stop_hz < self.sweep_start_hz:
            return [self.sweep_start_hz]
        count = int(round((self.sweep_stop_hz - self.sweep_start_hz) / self.sweep_step_hz)) + 1
        return [self.sweep_start_hz + i * self.sweep_step_hz for i in range(count)]

    def drive_voltage(self) -> float:
        return (self.drive_power_w * self.nominal_impedance_ohm) ** 0.5

    def end_correction(self, port_type: str) -> float:
        return float(self.end_corrections.get(port_type, self.end_corrections["circular"]))

    def wall_factor(self, port_type: str) -> float:
        return float(self.wall_factors.get(port_type, self.wall_factors["circular"]))


DEFAULT_SETTINGS = SimulationSettings()

ENV_OVERRIDES = {
    "ENCLOSURE_SWEEP_START_HZ": "sweep_start_hz",
    "ENCLOSURE_SWEEP_STOP_HZ": "sweep_stop_hz",
    "ENCLOSURE_DRIVE_POWER_W": "drive_power_w",
    "ENCLOSURE_PORT_NOISE_LIMIT_MS": "port_noise_limit_ms",
    "ENCLOSURE_COLLISION_MARGIN_CM": "collision_margin_cm",
}


def settings_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    base: SimulationSettings = DEFAULT_SETTINGS,
) -> SimulationSettings:
    """Return ``base`` with any ``ENCLOSURE_*`` overrides found in ``environ`` applied."""

    env = os.environ if environ is None else environ
    overrides: dict[str, float] = {}
    for variable, attribute in ENV_OVERRIDES.items():
        raw = env.get(variable)
        if raw is None or not raw.strip():
            continue
        try:
            value = float(raw)
        except ValueError as exc:
            raise ValueError(f"{variable} must be a number, got {raw!r}") from exc
        if not math.isfinite(value):
            raise ValueError(f"{variable} must be finite")
        overrides[attribute] = value

    if not overrides:
        return base
    return replace(base, **overrides)


__all__ = [
    "SPEED_OF_SOUND_CM_S",
    "SimulationSettings",
    "DEFAULT_SETTINGS",
    "ENV_OVERRIDES",
    "settings_from_env",
]
