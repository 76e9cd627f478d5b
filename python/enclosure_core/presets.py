"""Starting points applied when the user picks an application and speaker format."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .design import ApplicationType, BoxType, BracingType, DesignParams, SpeakerType


@dataclass(frozen=True, slots=True)
class SpeakerPreset:
    width_cm: float
    height_cm: float
    depth_cm: float
    driver_size_in: float
    tuning_hz: float | None = None
    box_type: BoxType | None = None

    def changes(self) -> dict[str, Any]:
        changes: dict[str, Any] = {
            "width_cm": self.width_cm,
            "height_cm": self.height_cm,
            "depth_cm": self.depth_cm,
            "driver_size_in": self.driver_size_in,
        }
        if self.box_type is not None:
            changes["box_type"] = self.box_type
        return changes

    def to_dict(self) -> dict[str, Any]:
        payload = self.changes()
        if self.box_type is not None:
            payload["box_type"] = self.box_type.value
        payload["tuning_hz"] = self.tuning_hz
        return payload


SPEAKER_PRESETS: Mapping[SpeakerType, SpeakerPreset] = {
    SpeakerType.TOWER: SpeakerPreset(22.0, 95.0, 30.0, 6.5, tuning_hz=42.0),
    SpeakerType.SOUNDBAR: SpeakerPreset(100.0, 12.0, 12.0, 4.0, box_type=BoxType.SEALED),
    SpeakerType.BOOKSHELF: SpeakerPreset(20.0, 35.0, 25.0, 6.0),
    SpeakerType.SUBWOOFER_BOX: SpeakerPreset(45.0, 40.0, 40.0, 12.0),
}

APPLICATION_OVERRIDES: Mapping[ApplicationType, Mapping[str, Any]] = {
    ApplicationType.STUDIO: {"thickness_mm": 25.0, "bracing_type": BracingType.CROSS},
}


def apply_project_context(
    params: DesignParams,
    application: ApplicationType | str,
    speaker_type: SpeakerType | str,
) -> DesignParams:
    """Return ``params`` reset to the preset for ``speaker_type`` and ``application``.

    Fields the presets do not mention (driver record, port shape, flags) are
    carried over unchanged.
    """

    app = ApplicationType(application)
    speaker = SpeakerType(speaker_type)
    preset = SPEAKER_PRESETS[speaker]

    changes: dict[str, Any] = {"application": app, "speaker_type": speaker}
    changes.update(preset.changes())
    if preset.tuning_hz is not None:
        changes["port"] = params.port.with_changes({"tuning_hz": preset.tuning_hz})
    changes.update(APPLICATION_OVERRIDES.get(app, {}))
    return params.with_changes(changes)


__all__ = ["SpeakerPreset", "SPEAKER_PRESETS", "APPLICATION_OVERRIDES", "apply_project_context"]
