"""Rule-based design advice layered on top of a simulation result.

Each rule is a predicate over ``(params, result)`` paired with a fixed message.
:func:`analyze` evaluates every rule in declaration order and keeps all that
match, so the returned sequence is stable for a given design.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .acoustics.enclosure import SimulationResult
from .design import ApplicationType, BoxType, BracingType, DesignParams, SpeakerType


class AdviceLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Advice:
    level: AdviceLevel
    message: str
    code: str = ""
    """Identifier of the rule that produced the entry."""

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level.value, "message": self.message, "code": self.code}


Condition = Callable[[DesignParams, SimulationResult], bool]


@dataclass(frozen=True, slots=True)
class AdviceRule:
    code: str
    level: AdviceLevel
    message: str
    condition: Condition

    def evaluate(self, params: DesignParams, result: SimulationResult) -> Advice | None:
        if not self.condition(params, result):
            return None
        return Advice(level=self.level, message=self.message, code=self.code)

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "level": self.level.value, "message": self.message}


def _studio_peak(params: DesignParams, result: SimulationResult) -> bool:
    peak = result.peak_response_db()
    return params.application is ApplicationType.STUDIO and peak is not None and peak > 3.0


def _port_too_long(params: DesignParams, result: SimulationResult) -> bool:
    return result.port_length_cm > 0 and result.port_length_cm > params.depth_cm - 5.0


ADVICE_RULES: tuple[AdviceRule, ...] = (
    # Application
    AdviceRule(
        "car_audio.low_tuning",
        AdviceLevel.WARNING,
        "Car audio: tuning below 32 Hz loses efficiency in a cabin. Raise it to 34-38 Hz.",
        lambda p, r: p.application is ApplicationType.CAR_AUDIO
        and p.box_type is BoxType.PORTED
        and p.port.tuning_hz < 32.0,
    ),
    AdviceRule(
        "car_audio.sealed_power",
        AdviceLevel.INFO,
        "Sealed: tight control, but it needs more amplifier power for the same SPL.",
        lambda p, r: p.application is ApplicationType.CAR_AUDIO and p.box_type is BoxType.SEALED,
    ),
    AdviceRule(
        "hifi_home.high_tuning",
        AdviceLevel.INFO,
        "Hi-Fi: tuning above 40 Hz gives shallow bass. For deep extension lower it to 30-35 Hz.",
        lambda p, r: p.application is ApplicationType.HIFI_HOME
        and p.box_type is BoxType.PORTED
        and p.port.tuning_hz > 40.0,
    ),
    AdviceRule(
        "studio.response_peak",
        AdviceLevel.WARNING,
        "Studio: the predicted response is not flat (peak above +3 dB). Reduce the volume or lower the tuning.",
        _studio_peak,
    ),
    AdviceRule(
        "pa_live.thin_panels",
        AdviceLevel.ERROR,
        "PA live: use 25 mm panels for enclosures above 80 L.",
        lambda p, r: p.application is ApplicationType.PA_LIVE and p.thickness_mm < 25.0 and r.net_volume_l > 80.0,
    ),
    # Format
    AdviceRule(
        "soundbar.depth",
        AdviceLevel.INFO,
        "Soundbar: a depth above 20 cm is awkward to wall-mount.",
        lambda p, r: p.speaker_type is SpeakerType.SOUNDBAR and p.depth_cm > 20.0,
    ),
    AdviceRule(
        "soundbar.ported",
        AdviceLevel.WARNING,
        "Soundbar: a port this small is prone to chuffing noise. Consider sealed or a passive radiator.",
        lambda p, r: p.speaker_type is SpeakerType.SOUNDBAR and p.box_type is BoxType.PORTED,
    ),
    AdviceRule(
        "tower.height",
        AdviceLevel.INFO,
        "Tower: under 80 cm is short for a tower. Is this a bookshelf design?",
        lambda p, r: p.speaker_type is SpeakerType.TOWER and p.height_cm < 80.0,
    ),
    AdviceRule(
        "tower.bracing",
        AdviceLevel.ERROR,
        "Tower: internal bracing is mandatory for tall cabinets.",
        lambda p, r: p.speaker_type is SpeakerType.TOWER and p.bracing_type is BracingType.NONE,
    ),
    # Physical
    AdviceRule(
        "physical.port_length",
        AdviceLevel.ERROR,
        "Port too long for the cabinet. Use an elbow (L-port) or increase the depth.",
        _port_too_long,
    ),
)


def analyze(
    params: DesignParams,
    result: SimulationResult,
    rules: Sequence[AdviceRule] = ADVICE_RULES,
) -> tuple[Advice, ...]:
    """Return the advice for every matching rule, in rule order."""

    advice: list[Advice] = []
    for rule in rules:
        entry = rule.evaluate(params, result)
        if entry is not None:
            advice.append(entry)
    return tuple(advice)


__all__ = ["AdviceLevel", "Advice", "AdviceRule", "ADVICE_RULES", "analyze"]
