"""Dict conversion and JSON schema helpers for designs and simulation results.

The schemas are JSON Schema v2020-12 documents generated from the dataclasses
so the gateway, the export script and any UI share one description of the
payloads.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import MISSING, fields, is_dataclass
from enum import Enum
from types import UnionType
from typing import Any, Union, get_args, get_origin, get_type_hints

from .acoustics.enclosure import Displacement, GraphPoint, PanelCut, SimulationResult
from .advisor import Advice, AdviceLevel
from .design import DEFAULT_DESIGN, DesignParams, PortParams
from .drivers import DriverParams

SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"

# Names needed to resolve postponed annotations on the result dataclasses.
_TYPE_NAMESPACE: dict[str, Any] = {
    "Advice": Advice,
    "AdviceLevel": AdviceLevel,
    "Displacement": Displacement,
    "GraphPoint": GraphPoint,
    "PanelCut": PanelCut,
    "DriverParams": DriverParams,
    "PortParams": PortParams,
}


def design_to_dict(params: DesignParams) -> dict[str, Any]:
    return params.to_dict()


def design_from_dict(payload: Mapping[str, Any], *, base: DesignParams = DEFAULT_DESIGN) -> DesignParams:
    """Build a design from a (possibly partial) mapping layered over ``base``."""

    return base.with_changes(payload)


def evaluation_to_dict(params: DesignParams, result: SimulationResult) -> dict[str, Any]:
    """Return the ``{"params": ..., "result": ...}`` payload pushed to consumers."""

    return {"params": params.to_dict(), "result": result.to_dict()}


def dataclass_schema(
    cls: type[Any],
    *,
    field_overrides: Mapping[str, Mapping[str, Any]] | None = None,
) -> dict[str, Any]:
    """Return a JSON schema describing the given dataclass."""

    if not is_dataclass(cls):  # pragma: no cover - defensive guard
        raise TypeError(f"{cls!r} is not a dataclass")

    overrides = field_overrides or _DATACLASS_OVERRIDES.get(cls)
    type_hints = get_type_hints(cls, localns=_TYPE_NAMESPACE)

    properties: dict[str, dict[str, Any]] = {}
    required: list[str] = []

    for field in fields(cls):
        field_type = type_hints.get(field.name, field.type)
        properties[field.name] = _schema_for_type(field_type)
        if field.default is MISSING and field.default_factory is MISSING:
            required.append(field.name)

    schema_doc: dict[str, Any] = {
        "title": cls.__name__,
        "type": "object",
        "additionalProperties": False,
        "properties": properties,
        "required": required,
    }

    if overrides:
        for name, override in overrides.items():
            prop = properties.get(name)
            if prop:
                prop.update(override)

    return schema_doc


def design_params_schema() -> dict[str, Any]:
    schema = dataclass_schema(DesignParams)
    schema["$schema"] = SCHEMA_DRAFT
    return schema


def simulation_result_schema() -> dict[str, Any]:
    schema = dataclass_schema(SimulationResult)
    schema["$schema"] = SCHEMA_DRAFT
    return schema


def evaluation_schema() -> dict[str, Any]:
    """Schema of the ``(params, result)`` pair delivered to subscribers."""

    return {
        "$schema": SCHEMA_DRAFT,
        "title": "DesignEvaluation",
        "type": "object",
        "additionalProperties": False,
        "required": ["params", "result"],
        "properties": {
            "params": dataclass_schema(DesignParams),
            "result": dataclass_schema(SimulationResult),
        },
    }


def design_json_schemas() -> dict[str, dict[str, Any]]:
    """Return the schema catalog keyed by document name."""

    return {
        "design-params": design_params_schema(),
        "simulation-result": simulation_result_schema(),
        "evaluation": evaluation_schema(),
    }


def _schema_for_type(tp: Any) -> dict[str, Any]:
    origin = get_origin(tp)

    if origin is None:
        if isinstance(tp, type) and issubclass(tp, Enum):
            return {"type": "string", "enum": [member.value for member in tp]}
        if tp is bool:
            return {"type": "boolean"}
        if tp is float:
            return {"type": "number"}
        if tp is int:
            return {"type": "integer"}
        if tp is str:
            return {"type": "string"}
        if tp is type(None):
            return {"type": "null"}
        if isinstance(tp, type) and is_dataclass(tp):
            return dataclass_schema(tp)
        return {}

    if origin in (list, Sequence, Iterable):
        args = get_args(tp)
        return {"type": "array", "items": _schema_for_type(args[0]) if args else {}}

    if origin is tuple:
        args = get_args(tp)
        if len(args) == 2 and args[1] is Ellipsis:
            return {"type": "array", "items": _schema_for_type(args[0]) or {}}
        return {
            "type": "array",
            "prefixItems": [_schema_for_type(arg) or {} for arg in args],
            "items": False,
        }

    if origin in (dict, Mapping):
        args = get_args(tp)
        value_schema = _schema_for_type(args[1]) if len(args) > 1 else {}
        return {"type": "object", "additionalProperties": value_schema or {}}

    if origin is Union or origin is UnionType:
        options = [opt for opt in (_schema_for_type(arg) for arg in get_args(tp)) if opt]
        if not options:
            return {}
        if len(options) == 1:
            return options[0]
        return {"anyOf": options}

    return {}


_DESIGN_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "width_cm": {"exclusiveMinimum": 0.0},
    "height_cm": {"exclusiveMinimum": 0.0},
    "depth_cm": {"exclusiveMinimum": 0.0},
    "thickness_mm": {"exclusiveMinimum": 0.0},
    "chamber_ratio": {"minimum": 0.0, "maximum": 1.0},
}

_DRIVER_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "fs_hz": {"exclusiveMinimum": 0.0},
    "qts": {"exclusiveMinimum": 0.0},
    "vas_l": {"minimum": 0.0},
    "xmax_mm": {"minimum": 0.0},
    "sd_cm2": {"exclusiveMinimum": 0.0},
}

_PORT_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "tuning_hz": {"exclusiveMinimum": 0.0},
    "count": {"minimum": 1},
}

_DATACLASS_OVERRIDES: dict[type[Any], dict[str, dict[str, Any]]] = {
    DesignParams: _DESIGN_FIELD_OVERRIDES,
    DriverParams: _DRIVER_FIELD_OVERRIDES,
    PortParams: _PORT_FIELD_OVERRIDES,
}


__all__ = [
    "SCHEMA_DRAFT",
    "design_to_dict",
    "design_from_dict",
    "evaluation_to_dict",
    "dataclass_schema",
    "design_params_schema",
    "simulation_result_schema",
    "evaluation_schema",
    "design_json_schemas",
]
