"""photosim public API: the chloroplast photosynthesis simulation engine."""

from photosim.engine.config import SimulationConfig, load_config, save_config
from photosim.engine.history import HistoryBuffer, HistoryRow, HistorySeries
from photosim.engine.scheduler import AsyncioTickSource, ManualTickSource, TickSource
from photosim.engine.simulator import ControlInputs, SimulationEngine, SimulationState
from photosim.engine.smoother import DriverSmoother
from photosim.export.history_csv import export_history_csv, format_history_csv, history_to_frame
from photosim.kinetics.response import (
    ResponseOutputs,
    ResponseParams,
    reference_response,
    steady_state_response,
)
from photosim.twin.scenario import ControlEvent, lights_off_scenario, run_scenario
from photosim.twin.visual import ChartWindow, build_visual_frame, chart_window

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ResponseParams",
    "ResponseOutputs",
    "steady_state_response",
    "reference_response",
    "SimulationConfig",
    "load_config",
    "save_config",
    "DriverSmoother",
    "HistoryBuffer",
    "HistoryRow",
    "HistorySeries",
    "ControlInputs",
    "SimulationState",
    "SimulationEngine",
    "TickSource",
    "ManualTickSource",
    "AsyncioTickSource",
    "ControlEvent",
    "run_scenario",
    "lights_off_scenario",
    "ChartWindow",
    "chart_window",
    "build_visual_frame",
    "history_to_frame",
    "format_history_csv",
    "export_history_csv",
]
