"""Stateful owner of the current design.

:class:`DesignStore` keeps one immutable :class:`DesignParams` snapshot. Every
mutating call builds a new snapshot, reruns the simulation and the advisor,
and pushes ``(params, result)`` to each listener in registration order before
returning.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .acoustics.enclosure import SimulationResult, calculate
from .advisor import analyze
from .design import DEFAULT_DESIGN, ApplicationType, DesignParams, SpeakerType
from .drivers import get_driver
from .presets import apply_project_context
from .settings import DEFAULT_SETTINGS, SimulationSettings

logger = logging.getLogger(__name__)

Listener = Callable[[DesignParams, SimulationResult], None]


def _merge(changes: Mapping[str, Any] | None, fields: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(changes or {})
    merged.update(fields)
    return merged


def evaluate(params: DesignParams, settings: SimulationSettings = DEFAULT_SETTINGS) -> SimulationResult:
    """Simulate ``params`` and attach the advisor's output."""

    result = calculate(params, settings)
    return result.with_advice(analyze(params, result))


class DesignStore:
    """Parameter store driving the simulate-then-advise pipeline."""

    def __init__(
        self,
        initial: DesignParams = DEFAULT_DESIGN,
        *,
        settings: SimulationSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._settings = settings
        self._params = initial
        self._listeners: list[Listener] = []
        self._result = evaluate(initial, settings)

    @property
    def current(self) -> DesignParams:
        """The live snapshot. It is frozen, so handing it out cannot leak mutation."""

        return self._params

    @property
    def result(self) -> SimulationResult:
        return self._result

    @property
    def settings(self) -> SimulationSettings:
        return self._settings

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and replay the latest state to it immediately.

        Returns a callable that removes the listener again.
        """

        self._listeners.append(listener)
        listener(self._params, self._result)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, changes: Mapping[str, Any] | None = None, /, **fields: Any) -> SimulationResult:
        """Overwrite top-level design fields and recompute."""

        return self._commit(self._params.with_changes(_merge(changes, fields)))

    def update_port(self, changes: Mapping[str, Any] | None = None, /, **fields: Any) -> SimulationResult:
        port = self._params.port.with_changes(_merge(changes, fields))
        return self._commit(self._params.with_changes({"port": port}))

    def update_driver(self, changes: Mapping[str, Any] | None = None, /, **fields: Any) -> SimulationResult:
        driver = self._params.driver.with_changes(_merge(changes, fields))
        return self._commit(self._params.with_changes({"driver": driver}))

    def select_driver(self, name: str) -> SimulationResult:
        """Swap in the catalog driver called ``name`` (``KeyError`` if unknown)."""

        return self._commit(self._params.with_changes({"driver": get_driver(name)}))

    def set_project_context(
        self,
        application: ApplicationType | str,
        speaker_type: SpeakerType | str,
    ) -> SimulationResult:
        """Apply the format preset and application overrides, then recompute."""

        return self._commit(apply_project_context(self._params, application, speaker_type))

    def recompute(self) -> SimulationResult:
        """Rerun the pipeline on the current snapshot and notify listeners."""

        return self._commit(self._params)

    def _commit(self, params: DesignParams) -> SimulationResult:
        result = evaluate(params, self._settings)
        self._params = params
        self._result = result
        logger.debug(
            "Recomputed %s design: net=%.2f L, port=%.1f cm, %d warnings, %d advice",
            params.box_type.value,
            result.net_volume_l,
            result.port_length_cm,
            len(result.warnings),
            len(result.advice),
        )
        # A listener may update the store; later listeners then see the newest state.
        for listener in list(self._listeners):
            listener(self._params, self._result)
        return self._result


__all__ = ["DesignStore", "Listener", "evaluate"]
