"""FastAPI gateway exposing the enclosure designer over HTTP."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from enclosure_core import (
    ADVICE_RULES,
    DRIVER_CATALOG,
    SPEAKER_PRESETS,
    ApplicationType,
    BoxType,
    BracingType,
    DesignStore,
    PortType,
    SimulationResult,
    SpeakerType,
    design_from_dict,
    design_json_schemas,
    evaluate,
    evaluation_to_dict,
    settings_from_env,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DriverPayload(BaseModel):
    name: str = "Custom driver"
    fs_hz: float = Field(..., gt=0)
    qts: float = Field(..., gt=0)
    vas_l: float = Field(..., ge=0)
    xmax_mm: float = Field(..., ge=0)
    sd_cm2: float = Field(..., gt=0)


class DriverPatch(BaseModel):
    name: str | None = None
    fs_hz: float | None = Field(None, gt=0)
    qts: float | None = Field(None, gt=0)
    vas_l: float | None = Field(None, ge=0)
    xmax_mm: float | None = Field(None, ge=0)
    sd_cm2: float | None = Field(None, gt=0)


class PortPayload(BaseModel):
    port_type: PortType = PortType.AERO_FLARE
    tuning_hz: float = Field(36.0, gt=0)
    diameter_cm: float = Field(10.0, ge=0)
    width_cm: float = Field(30.0, ge=0)
    height_cm: float = Field(5.0, ge=0)
    count: int = Field(1, ge=1)


class PortPatch(BaseModel):
    port_type: PortType | None = None
    tuning_hz: float | None = Field(None, gt=0)
    diameter_cm: float | None = Field(None, ge=0)
    width_cm: float | None = Field(None, ge=0)
    height_cm: float | None = Field(None, ge=0)
    count: int | None = Field(None, ge=1)


class DesignPatch(BaseModel):
    """Partial design; only the fields that were sent are applied."""

    application: ApplicationType | None = None
    speaker_type: SpeakerType | None = None
    width_cm: float | None = None
    height_cm: float | None = None
    depth_cm: float | None = None
    thickness_mm: float | None = None
    box_type: BoxType | None = None
    bracing_type: BracingType | None = None
    driver_size_in: float | None = None
    driver: DriverPayload | None = None
    port: PortPayload | None = None
    chamber_ratio: float | None = Field(None, ge=0, le=1)
    is_exploded: bool | None = None
    is_transparent: bool | None = None
    is_solid: bool | None = None


class ProjectContextRequest(BaseModel):
    application: ApplicationType
    speaker_type: SpeakerType


class DriverSelection(BaseModel):
    name: str


def _changes(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(exclude_unset=True, exclude_none=True, mode="python")


def _guarded(action: Callable[[], T]) -> T:
    try:
        return action()
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _store_payload(store: DesignStore) -> dict[str, Any]:
    return evaluation_to_dict(store.current, store.result)


def create_app(store: DesignStore | None = None) -> FastAPI:
    """Build the gateway around ``store`` (a fresh store when omitted)."""

    settings = settings_from_env()
    design_store = store if store is not None else DesignStore(settings=settings)
    app = FastAPI(title="Enclosure Designer Gateway", version="0.3.0")
    app.state.design_store = design_store

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/drivers")
    async def list_drivers() -> dict[str, Any]:
        return {"drivers": [driver.to_dict() for driver in DRIVER_CATALOG]}

    @app.get("/presets")
    async def list_presets() -> dict[str, Any]:
        return {"presets": {speaker.value: preset.to_dict() for speaker, preset in SPEAKER_PRESETS.items()}}

    @app.get("/rules")
    async def list_rules() -> dict[str, Any]:
        return {"rules": [rule.to_dict() for rule in ADVICE_RULES]}

    @app.post("/simulate")
    async def simulate(payload: DesignPatch) -> dict[str, Any]:
        """Evaluate a design without touching the shared store."""

        params = _guarded(lambda: design_from_dict(_changes(payload)))
        result: SimulationResult = evaluate(params, design_store.settings)
        return evaluation_to_dict(params, result)

    @app.get("/design")
    async def fetch_design() -> dict[str, Any]:
        return _store_payload(design_store)

    @app.patch("/design")
    async def patch_design(payload: DesignPatch) -> dict[str, Any]:
        changes = _changes(payload)
        _guarded(lambda: design_store.update(changes))
        logger.info("Design updated: %s", sorted(changes))
        return _store_payload(design_store)

    @app.patch("/design/port")
    async def patch_port(payload: PortPatch) -> dict[str, Any]:
        changes = _changes(payload)
        _guarded(lambda: design_store.update_port(changes))
        logger.info("Port updated: %s", sorted(changes))
        return _store_payload(design_store)

    @app.patch("/design/driver")
    async def patch_driver(payload: DriverPatch) -> dict[str, Any]:
        changes = _changes(payload)
        _guarded(lambda: design_store.update_driver(changes))
        logger.info("Driver updated: %s", sorted(changes))
        return _store_payload(design_store)

    @app.post("/design/driver/select")
    async def select_driver(payload: DriverSelection) -> dict[str, Any]:
        try:
            design_store.select_driver(payload.name)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Driver not found") from exc
        logger.info("Driver selected: %s", payload.name)
        return _store_payload(design_store)

    @app.post("/design/context")
    async def set_context(payload: ProjectContextRequest) -> dict[str, Any]:
        design_store.set_project_context(payload.application, payload.speaker_type)
        logger.info("Project context set: %s / %s", payload.application.value, payload.speaker_type.value)
        return _store_payload(design_store)

    @app.get("/schemas/design")
    async def list_design_schemas() -> dict[str, Any]:
        return {"schemas": design_json_schemas()}

    @app.get("/schemas/design/{name}")
    async def fetch_design_schema(name: str) -> dict[str, Any]:
        schema = design_json_schemas().get(name.lower())
        if schema is None:
            raise HTTPException(status_code=404, detail="Schema not found")
        return {"name": name.lower(), "schema": schema}

    return app


app = create_app()


__all__ = [
    "app",
    "create_app",
    "DesignPatch",
    "DriverPayload",
    "DriverPatch",
    "PortPayload",
    "PortPatch",
    "ProjectContextRequest",
    "DriverSelection",
]
