"""Design parameters edited by the user and the enumerations they use."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any

from .drivers import DEFAULT_DRIVER, DriverParams, _as_float


class ApplicationType(str, Enum):
    CAR_AUDIO = "car_audio"
    HIFI_HOME = "hifi_home"
    STUDIO = "studio"
    PA_LIVE = "pa_live"


class SpeakerType(str, Enum):
    SUBWOOFER_BOX = "subwoofer_box"
    TOWER = "tower"
    BOOKSHELF = "bookshelf"
    SOUNDBAR = "soundbar"


class BoxType(str, Enum):
    SEALED = "sealed"
    PORTED = "ported"
    BANDPASS_4TH = "bandpass4"


class PortType(str, Enum):
    CIRCULAR = "circular"
    SLOT = "slot"
    AERO_FLARE = "aero"


class BracingType(str, Enum):
    NONE = "none"
    WINDOW = "window"
    CROSS = "cross"


_BOOL_FIELDS = frozenset({"is_exploded", "is_transparent", "is_solid"})


def _as_count(value: Any) -> int:
    number = _as_float("count", value)
    if not number.is_integer() or number < 1:
        raise ValueError(f"count must be a whole number of at least 1, got {value!r}")
    return int(number)


@dataclass(frozen=True, slots=True)
class PortParams:
    """Vent configuration. Diameter applies to circular/aero ports, width/height to slots."""

    port_type: PortType = PortType.AERO_FLARE
    tuning_hz: float = 36.0
    diameter_cm: float = 10.0
    width_cm: float = 30.0
    height_cm: float = 5.0
    count: int = 1

    def with_changes(self, changes: Mapping[str, Any]) -> PortParams:
        """Return a copy with ``changes`` applied field by field."""

        known = {f.name for f in fields(self)}
        coerced: dict[str, Any] = {}
        for key, value in changes.items():
            if key not in known:
                raise TypeError(f"Unknown port field: {key}")
            if key == "port_type":
                coerced[key] = PortType(value)
            elif key == "count":
                coerced[key] = _as_count(value)
            else:
                coerced[key] = _as_float(key, value)
        return replace(self, **coerced)

    def to_dict(self) -> dict[str, Any]:
        return {
            "port_type": self.port_type.value,
            "tuning_hz": self.tuning_hz,
            "diameter_cm": self.diameter_cm,
            "width_cm": self.width_cm,
            "height_cm": self.height_cm,
            "count": self.count,
        }


@dataclass(frozen=True, slots=True)
class DesignParams:
    """Complete, immutable snapshot of a design.

    Dimensions are external and in centimetres; panel thickness is in
    millimetres. The ``is_*`` flags belong to the 3D view and are never read by
    the simulation.
    """

    application: ApplicationType = ApplicationType.CAR_AUDIO
    speaker_type: SpeakerType = SpeakerType.SUBWOOFER_BOX

    width_cm: float = 45.0
    height_cm: float = 60.0
    depth_cm: float = 40.0
    thickness_mm: float = 18.0

    box_type: BoxType = BoxType.PORTED
    bracing_type: BracingType = BracingType.WINDOW

    driver_size_in: float = 12.0
    """Nominal driver size, only used to draw the cone."""

    driver: DriverParams = DEFAULT_DRIVER
    port: PortParams = PortParams()

    chamber_ratio: float = 0.5
    """Rear (sealed) share of the usable volume in a 4th-order bandpass."""

    is_exploded: bool = False
    is_transparent: bool = False
    is_solid: bool = False

    @property
    def thickness_cm(self) -> float:
        return self.thickness_mm / 10.0

    def internal_dimensions(self) -> tuple[float, float, float]:
        """Return internal (width, height, depth) in centimetres."""

        wall = 2.0 * self.thickness_cm
        return (self.width_cm - wall, self.height_cm - wall, self.depth_cm - wall)

    def with_changes(self, changes: Mapping[str, Any]) -> DesignParams:
        """Return a new snapshot with ``changes`` overwriting the matching fields.

        Enum fields accept their string values. ``driver`` and ``port`` accept
        either a record or a mapping; a mapping is merged into the current
        nested record.
        """

        known = {f.name for f in fields(self)}
        coerced: dict[str, Any] = {}
        for key, value in changes.items():
            if key not in known:
                raise TypeError(f"Unknown design field: {key}")
            coerced[key] = self._coerce(key, value)
        return replace(self, **coerced)

    def _coerce(self, key: str, value: Any) -> Any:
        if key == "application":
            return ApplicationType(value)
        if key == "speaker_type":
            return SpeakerType(value)
        if key == "box_type":
            return BoxType(value)
        if key == "bracing_type":
            return BracingType(value)
        if key == "driver":
            if isinstance(value, DriverParams):
                return value
            if isinstance(value, Mapping):
                return self.driver.with_changes(value)
            raise TypeError("driver must be a DriverParams or a mapping")
        if key == "port":
            if isinstance(value, PortParams):
                return value
            if isinstance(value, Mapping):
                return self.port.with_changes(value)
            raise TypeError("port must be a PortParams or a mapping")
        if key in _BOOL_FIELDS:
            return bool(value)
        return _as_float(key, value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "application": self.application.value,
            "speaker_type": self.speaker_type.value,
            "width_cm": self.width_cm,
            "height_cm": self.height_cm,
            "depth_cm": self.depth_cm,
            "thickness_mm": self.thickness_mm,
            "box_type": self.box_type.value,
            "bracing_type": self.bracing_type.value,
            "driver_size_in": self.driver_size_in,
            "driver": self.driver.to_dict(),
            "port": self.port.to_dict(),
            "chamber_ratio": self.chamber_ratio,
            "is_exploded": self.is_exploded,
            "is_transparent": self.is_transparent,
            "is_solid": self.is_solid,
        }


DEFAULT_DESIGN = DesignParams()


__all__ = [
    "ApplicationType",
    "SpeakerType",
    "BoxType",
    "PortType",
    "BracingType",
    "PortParams",
    "DesignParams",
    "DEFAULT_DESIGN",
]
