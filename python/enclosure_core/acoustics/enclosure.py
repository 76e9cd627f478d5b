"""Closed-form enclosure simulation.

Derives volumes, port geometry, response/excursion/port-velocity curves and a
cut sheet from a :class:`~enclosure_core.design.DesignParams` snapshot. The
models are lumped approximations tuned for design feedback rather than exact
prediction: the vented response is a high-pass roll-off plus a bell-shaped
boost at the tuning frequency, and the excursion model only tracks the shape
of the real curve (rising below tuning, notched at tuning).

:func:`calculate` never raises for structurally valid input. Geometry that
cannot be built yields a zeroed result carrying a single warning.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from math import log10, pi, sqrt
from typing import TYPE_CHECKING, Any

from ..design import BoxType, BracingType, DesignParams, PortParams, PortType
from ..settings import DEFAULT_SETTINGS, SPEED_OF_SOUND_CM_S, SimulationSettings
from ._utils import all_finite, clamp, gaussian, peak_index, power_db, resonance

if TYPE_CHECKING:  # pragma: no cover
    from ..advisor import Advice

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GraphPoint:
    """One sample of a swept curve: ``x`` in Hz, ``y`` in the curve's unit."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True, slots=True)
class Displacement:
    """Litres of internal volume taken up by hardware."""

    driver_l: float = 0.0
    port_l: float = 0.0
    bracing_l: float = 0.0
    divider_l: float = 0.0

    def total(self) -> float:
        return self.driver_l + self.bracing_l + self.divider_l + self.port_l

    def to_dict(self) -> dict[str, float]:
        return {
            "driver_l": self.driver_l,
            "port_l": self.port_l,
            "bracing_l": self.bracing_l,
            "divider_l": self.divider_l,
        }


@dataclass(frozen=True, slots=True)
class PanelCut:
    """A rectangle to cut from sheet stock (centimetres)."""

    name: str
    width_cm: float
    height_cm: float
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "width_cm": self.width_cm,
            "height_cm": self.height_cm,
            "count": self.count,
        }


@dataclass(frozen=True, slots=True)
class SimulationResult:
    """Everything derived from one design snapshot."""

    gross_volume_l: float
    net_volume_l: float
    chamber1_l: float
    """Sealed (rear) chamber for bandpass designs, otherwise the whole net volume."""

    chamber2_l: float
    """Ported (front) chamber of a bandpass design, zero otherwise."""

    displacement: Displacement
    port_length_cm: float
    port_area_cm2: float
    is_port_collision: bool
    warnings: tuple[str, ...]
    frequency_response: tuple[GraphPoint, ...]
    cone_excursion: tuple[GraphPoint, ...]
    port_velocity: tuple[GraphPoint, ...]
    cut_sheet: tuple[PanelCut, ...]
    advice: tuple[Advice, ...] = ()
    is_valid: bool = True

    def with_advice(self, advice: Iterable[Advice]) -> SimulationResult:
        """Return a copy carrying ``advice``; the receiver is left untouched."""

        return replace(self, advice=tuple(advice))

    def peak_response_db(self) -> float | None:
        if not self.frequency_response:
            return None
        return max(point.y for point in self.frequency_response)

    def peak_excursion_mm(self) -> float:
        return max((point.y for point in self.cone_excursion), default=0.0)

    def peak_port_velocity_ms(self) -> float:
        return max((point.y for point in self.port_velocity), default=0.0)

    def peak_port_velocity_hz(self) -> float | None:
        idx = peak_index([point.y for point in self.port_velocity])
        if idx is None:
            return None
        return self.port_velocity[idx].x

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable representation of the result."""

        return {
            "gross_volume_l": self.gross_volume_l,
            "net_volume_l": self.net_volume_l,
            "chamber1_l": self.chamber1_l,
            "chamber2_l": self.chamber2_l,
            "displacement": self.displacement.to_dict(),
            "port_length_cm": self.port_length_cm,
            "port_area_cm2": self.port_area_cm2,
            "is_port_collision": self.is_port_collision,
            "warnings": list(self.warnings),
            "advice": [item.to_dict() for item in self.advice],
            "frequency_response": [point.to_dict() for point in self.frequency_response],
            "cone_excursion": [point.to_dict() for point in self.cone_excursion],
            "port_velocity": [point.to_dict() for point in self.port_velocity],
            "cut_sheet": [cut.to_dict() for cut in self.cut_sheet],
            "is_valid": self.is_valid,
        }


def degenerate_result(message: str) -> SimulationResult:
    """Return the zeroed result used to report an unbuildable design."""

    return SimulationResult(
        gross_volume_l=0.0,
        net_volume_l=0.0,
        chamber1_l=0.0,
        chamber2_l=0.0,
        displacement=Displacement(),
        port_length_cm=0.0,
        port_area_cm2=0.0,
        is_port_collision=False,
        warnings=(message,),
        frequency_response=(),
        cone_excursion=(),
        port_velocity=(),
        cut_sheet=(),
        is_valid=False,
    )


def port_area_cm2(port: PortParams) -> float:
    """Return the combined cross-section of all ports, or 0 for unusable dimensions."""

    if port.port_type is PortType.SLOT:
        if port.width_cm <= 0 or port.height_cm <= 0:
            return 0.0
        single = port.width_cm * port.height_cm
    else:
        if port.diameter_cm <= 0:
            return 0.0
        single = pi * (port.diameter_cm / 2.0) ** 2
    return single * port.count


def required_port_length(
    area_cm2: float,
    tuning_hz: float,
    volume_l: float,
    end_correction: float,
    min_length_cm: float = 1.0,
) -> float:
    """Solve the Helmholtz relation for the physical port length (cm).

    ``L = c²·Av / (4π²·Fb²·V) − k·√Av`` with the end-correction coefficient
    ``k`` standing in for the air mass moving just outside the port mouths.
    """

    volume_cm3 = volume_l * 1000.0
    length = (SPEED_OF_SOUND_CM_S**2 * area_cm2) / (4 * pi**2 * tuning_hz * tuning_hz * volume_cm3)
    length -= end_correction * sqrt(area_cm2)
    return max(length, min_length_cm)


def _input_problem(params: DesignParams, settings: SimulationSettings) -> str | None:
    driver = params.driver
    port = params.port
    numbers = (
        params.width_cm,
        params.height_cm,
        params.depth_cm,
        params.thickness_mm,
        params.chamber_ratio,
        driver.fs_hz,
        driver.qts,
        driver.vas_l,
        driver.xmax_mm,
        driver.sd_cm2,
        port.tuning_hz,
        port.diameter_cm,
        port.width_cm,
        port.height_cm,
        port.count,
    )
    if not all_finite(numbers):
        return "Invalid design: every dimension and driver parameter must be a finite number."

    ceiling = settings.parameter_ceiling
    if max(abs(value) for value in numbers) > ceiling:
        return f"Invalid design: values above {ceiling:g} are outside the range the model can simulate."

    if min(params.width_cm, params.height_cm, params.depth_cm, params.thickness_mm) <= 0:
        return "Invalid dimensions: width, height, depth and thickness must be greater than zero."

    if min(params.internal_dimensions()) <= 0:
        return "Invalid dimensions: panel thickness leaves no internal space."

    floor = settings.parameter_floor
    if driver.fs_hz <= 0 or driver.qts <= 0 or driver.sd_cm2 <= 0:
        return "Invalid driver: Fs, Qts and Sd must be greater than zero."
    if min(driver.fs_hz, driver.qts, driver.sd_cm2) < floor:
        return f"Invalid driver: Fs, Qts and Sd must be at least {floor:g}."
    if driver.vas_l < 0 or driver.xmax_mm < 0:
        return "Invalid driver: Vas and Xmax cannot be negative."

    if params.box_type is not BoxType.SEALED:
        if port.count < 1 or port.count != int(port.count):
            return "Invalid port: the port count must be a whole number of at least 1."
        if port.tuning_hz <= 0:
            return "Invalid port: the tuning frequency must be greater than zero."
        if port.port_type is PortType.SLOT:
            sizes = (port.width_cm, port.height_cm)
        else:
            sizes = (port.diameter_cm,)
        if min(sizes) <= 0:
            return "Invalid port: the port cross-section must be greater than zero."
        if min(port.tuning_hz, *sizes) < floor:
            return f"Invalid port: tuning and port dimensions must be at least {floor:g}."

    return None


def calculate(params: DesignParams, settings: SimulationSettings = DEFAULT_SETTINGS) -> SimulationResult:
    """Run the full simulation for ``params``."""

    problem = _input_problem(params, settings)
    if problem is not None:
        logger.debug("Degenerate design: %s", problem)
        return degenerate_result(problem)

    wi, hi, di = params.internal_dimensions()
    thick_cm = params.thickness_cm
    gross = (wi * hi * di) / 1000.0

    driver_disp = (params.driver.sd_cm2 * settings.cone_depth_cm / 1000.0) * settings.cone_fill_fraction
    bracing_disp = gross * settings.bracing_fraction if params.bracing_type is not BracingType.NONE else 0.0
    is_bandpass = params.box_type is BoxType.BANDPASS_4TH
    divider_disp = (wi * hi * thick_cm) / 1000.0 if is_bandpass else 0.0
    ratio = clamp(params.chamber_ratio, 0.0, 1.0)

    vented = params.box_type is not BoxType.SEALED
    area = 0.0
    port_length = 0.0
    port_disp = 0.0
    if vented:
        area = port_area_cm2(params.port)

        # Volume the port resonates against, before the port's own displacement.
        tuning_volume = gross - driver_disp - bracing_disp
        if is_bandpass:
            tuning_volume = (tuning_volume - divider_disp) * (1.0 - ratio)
        if tuning_volume <= 0:
            return _degenerate("Invalid design: no air volume is left for the ported chamber.")

        port_type = params.port.port_type.value
        port_length = required_port_length(
            area,
            params.port.tuning_hz,
            tuning_volume,
            settings.end_correction(port_type),
            settings.min_port_length_cm,
        )
        port_disp = (area * settings.wall_factor(port_type) * port_length) / 1000.0
        if not all_finite((area, tuning_volume, port_length, port_disp)):
            return _degenerate("Invalid port: the port dimensions are outside the range the model can simulate.")

    displacement = Displacement(
        driver_l=driver_disp,
        port_l=port_disp,
        bracing_l=bracing_disp,
        divider_l=divider_disp,
    )
    net = gross - displacement.total()
    if not all_finite((gross, net)) or net <= 0:
        return _degenerate("Invalid design: driver, port and bracing displace the entire internal volume.")

    if is_bandpass:
        chamber1 = net * ratio
        chamber2 = net - chamber1
    else:
        chamber1 = net
        chamber2 = 0.0

    warnings: list[str] = []
    collision_limit = params.depth_cm - settings.collision_margin_cm
    is_collision = vented and port_length > collision_limit
    if is_collision:
        warnings.append(
            f"CRITICAL: the port needs {port_length:.1f} cm but only {max(collision_limit, 0.0):.1f} cm "
            "of depth is available. It will hit the back panel."
        )

    frequencies = [f for f in settings.frequencies() if f > 0]
    response = tuple(GraphPoint(f, _response_db(f, params, net, settings)) for f in frequencies)
    excursion = tuple(GraphPoint(f, _excursion_mm(f, params, settings)) for f in frequencies)
    velocity = tuple(GraphPoint(f, _port_velocity_ms(f, params, area, settings)) for f in frequencies)
    if not all_finite(point.y for curve in (response, excursion, velocity) for point in curve):
        return _degenerate("Invalid design: the parameters are outside the range the model can simulate.")

    peak_excursion = max((point.y for point in excursion), default=0.0)
    peak_velocity = max((point.y for point in velocity), default=0.0)
    xmax = params.driver.xmax_mm
    if peak_excursion > xmax:
        warnings.append(
            f"DANGER: cone excursion reaches {peak_excursion:.1f} mm at full power, beyond Xmax ({xmax:g} mm)."
        )
    if peak_velocity > settings.port_noise_limit_ms:
        warnings.append(
            f"Port noise likely: air velocity peaks at {peak_velocity:.1f} m/s "
            f"(> {settings.port_noise_limit_ms:g} m/s). Increase the port area."
        )

    return SimulationResult(
        gross_volume_l=gross,
        net_volume_l=net,
        chamber1_l=chamber1,
        chamber2_l=chamber2,
        displacement=displacement,
        port_length_cm=port_length,
        port_area_cm2=area,
        is_port_collision=is_collision,
        warnings=tuple(warnings),
        frequency_response=response,
        cone_excursion=excursion,
        port_velocity=velocity,
        cut_sheet=cut_sheet(params, port_length),
    )


def _degenerate(message: str) -> SimulationResult:
    logger.debug("Degenerate design: %s", message)
    return degenerate_result(message)


# Bound on frequency ratios before they are raised to a power.
_RATIO_LIMIT = 1e6


def _ratio(numerator: float, denominator: float) -> float:
    return clamp(numerator / denominator, 0.0, _RATIO_LIMIT)


def _response_db(frequency: float, params: DesignParams, net_l: float, settings: SimulationSettings) -> float:
    driver = params.driver

    if params.box_type is BoxType.SEALED:
        alpha = driver.vas_l / net_l
        fc = driver.fs_hz * sqrt(1.0 + alpha)
        qtc = driver.qts * sqrt(1.0 + alpha)
        r = _ratio(frequency, fc)
        magnitude = r**2 / sqrt((1.0 - r**2) ** 2 + (r / qtc) ** 2)
        db = 20.0 * log10(max(magnitude, 1e-6))
    else:
        fb = params.port.tuning_hz
        r8 = _ratio(frequency, fb) ** 8
        db = power_db(r8 / (1.0 + r8))
        boost_scale = min(driver.qts / settings.boost_reference_qts, 2.0)
        db += settings.port_boost_db * boost_scale * gaussian(frequency, fb, settings.port_boost_width_hz)
        if params.box_type is BoxType.BANDPASS_4TH:
            upper = fb * settings.bandpass_upper_ratio
            db += power_db(1.0 / (1.0 + _ratio(frequency, upper) ** 4))

    return min(db, settings.response_ceiling_db)


def _excursion_mm(frequency: float, params: DesignParams, settings: SimulationSettings) -> float:
    # Inverse-frequency cone motion at the reference drive voltage.
    base = settings.drive_voltage() / (frequency * 0.1) * 0.5

    if params.box_type is BoxType.SEALED:
        excursion = base / (1.0 + _ratio(frequency, params.driver.fs_hz) ** 2)
    else:
        fb = params.port.tuning_hz
        if frequency < fb:
            excursion = base * settings.excursion_penalty
        else:
            excursion = base * abs(frequency - fb) / fb

    return min(excursion * settings.excursion_scale, settings.excursion_ceiling_mm)


def _port_velocity_ms(
    frequency: float,
    params: DesignParams,
    area_cm2: float,
    settings: SimulationSettings,
) -> float:
    if params.box_type is BoxType.SEALED or area_cm2 <= 0:
        return 0.0
    weight = resonance(frequency, params.port.tuning_hz, settings.port_velocity_width_hz, settings.port_velocity_tail)
    velocity = weight * (params.driver.sd_cm2 / area_cm2) * (sqrt(settings.drive_power_w) / 2.0)
    return velocity


def cut_sheet(params: DesignParams, port_length_cm: float = 0.0) -> tuple[PanelCut, ...]:
    """Return the panels needed to build ``params``.

    Top and bottom run the full footprint, the sides sit between them and the
    baffle/back are inset between the sides.
    """

    t = params.thickness_cm
    w, h, d = params.width_cm, params.height_cm, params.depth_cm
    wi, hi, di = params.internal_dimensions()

    cuts = [
        PanelCut("Top/Bottom", _cm(w), _cm(d), 2),
        PanelCut("Left/Right", _cm(d), _cm(h - 2 * t), 2),
        PanelCut("Front/Back", _cm(w - 2 * t), _cm(h - 2 * t), 2),
    ]
    if params.box_type is BoxType.BANDPASS_4TH:
        cuts.append(PanelCut("Divider", _cm(wi), _cm(hi), 1))
    if params.bracing_type is BracingType.WINDOW:
        cuts.append(PanelCut("Window brace", _cm(wi), _cm(hi), 1))
    elif params.bracing_type is BracingType.CROSS:
        cuts.append(PanelCut("Cross brace", _cm(wi), _cm(di), 2))
    if params.box_type is not BoxType.SEALED and params.port.port_type is PortType.SLOT and port_length_cm > 0:
        cuts.append(PanelCut("Slot port wall", _cm(port_length_cm), _cm(hi), params.port.count))
    return tuple(cuts)


def _cm(value: float) -> float:
    return round(value, 1)


__all__ = [
    "GraphPoint",
    "Displacement",
    "PanelCut",
    "SimulationResult",
    "calculate",
    "cut_sheet",
    "degenerate_result",
    "port_area_cm2",
    "required_port_length",
]
