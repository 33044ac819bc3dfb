from photosim.engine.config import SimulationConfig, load_config, save_config
from photosim.engine.history import HistoryBuffer, HistoryRow, HistorySeries
from photosim.engine.scheduler import AsyncioTickSource, ManualTickSource, TickSource
from photosim.engine.simulator import ControlInputs, SimulationEngine, SimulationState
from photosim.engine.smoother import DriverSmoother

__all__ = [
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
]
