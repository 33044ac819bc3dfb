from photosim.twin.scenario import ControlEvent, lights_off_scenario, run_scenario
from photosim.twin.visual import ChartWindow, build_visual_frame, chart_window

__all__ = [
    "ControlEvent",
    "run_scenario",
    "lights_off_scenario",
    "ChartWindow",
    "chart_window",
    "build_visual_frame",
]
