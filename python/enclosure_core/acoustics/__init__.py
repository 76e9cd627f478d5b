"""Enclosure simulation engine."""

from .enclosure import (
    Displacement,
    GraphPoint,
    PanelCut,
    SimulationResult,
    calculate,
    cut_sheet,
    degenerate_result,
    port_area_cm2,
    required_port_length,
)

__all__ = [
    "calculate",
    "SimulationResult",
    "Displacement",
    "GraphPoint",
    "PanelCut",
    "cut_sheet",
    "degenerate_result",
    "port_area_cm2",
    "required_port_length",
]
