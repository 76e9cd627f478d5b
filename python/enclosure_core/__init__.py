"""Public interface for the enclosure designer core."""

from .acoustics.enclosure import (
    Displacement,
    GraphPoint,
    PanelCut,
    SimulationResult,
    calculate,
    degenerate_result,
    port_area_cm2,
    required_port_length,
)
from .advisor import ADVICE_RULES, Advice, AdviceLevel, AdviceRule, analyze
from .design import (
    DEFAULT_DESIGN,
    ApplicationType,
    BoxType,
    BracingType,
    DesignParams,
    PortParams,
    PortType,
    SpeakerType,
)
from .drivers import DEFAULT_DRIVER, DRIVER_CATALOG, DriverParams, driver_names, get_driver
from .presets import APPLICATION_OVERRIDES, SPEAKER_PRESETS, SpeakerPreset, apply_project_context
from .serialization import (
    dataclass_schema,
    design_from_dict,
    design_json_schemas,
    design_params_schema,
    design_to_dict,
    evaluation_schema,
    evaluation_to_dict,
    simulation_result_schema,
)
from .settings import DEFAULT_SETTINGS, SimulationSettings, settings_from_env
from .state import DesignStore, Listener, evaluate

__all__ = [
    "DriverParams",
    "DRIVER_CATALOG",
    "DEFAULT_DRIVER",
    "driver_names",
    "get_driver",
    "ApplicationType",
    "SpeakerType",
    "BoxType",
    "PortType",
    "BracingType",
    "PortParams",
    "DesignParams",
    "DEFAULT_DESIGN",
    "SimulationSettings",
    "DEFAULT_SETTINGS",
    "settings_from_env",
    "calculate",
    "degenerate_result",
    "port_area_cm2",
    "required_port_length",
    "SimulationResult",
    "Displacement",
    "GraphPoint",
    "PanelCut",
    "Advice",
    "AdviceLevel",
    "AdviceRule",
    "ADVICE_RULES",
    "analyze",
    "SpeakerPreset",
    "SPEAKER_PRESETS",
    "APPLICATION_OVERRIDES",
    "apply_project_context",
    "DesignStore",
    "Listener",
    "evaluate",
    "dataclass_schema",
    "design_to_dict",
    "design_from_dict",
    "evaluation_to_dict",
    "design_params_schema",
    "simulation_result_schema",
    "evaluation_schema",
    "design_json_schemas",
]
