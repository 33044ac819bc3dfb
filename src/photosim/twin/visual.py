from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np

from photosim.engine.history import HistorySeries
from photosim.engine.simulator import SimulationEngine

FOLLOW_POINTS = 300
ChartMode = Literal["follow", "global"]


@dataclass(frozen=True)
class ChartWindow:
    x_start: int
    x_end: int
    y_min: float
    y_max: float


def chart_window(
    series: HistorySeries,
    mode: ChartMode = "follow",
    *,
    follow_points: int = FOLLOW_POINTS,
) -> ChartWindow:
    """Target axes for the history chart.

    Follow mode tracks the most recent ``follow_points`` samples with a padded
    y-range; global mode shows the whole window with the y-axis anchored at 0.
    Only P_total, C3 and C5 are plotted, so only they set the range.
    """
    if mode not in ("follow", "global"):
        msg = f"Unknown chart mode: {mode!r}"
        raise ValueError(msg)
    n_points = len(series)
    if n_points < 2:
        msg = "chart window needs at least two samples"
        raise ValueError(msg)

    x_end = n_points - 1
    x_start = max(0, n_points - follow_points) if mode == "follow" else 0
    plotted = (series.p_total, series.c3, series.c5)
    window = np.concatenate([np.asarray(values[x_start : x_end + 1]) for values in plotted])
    window = window[np.isfinite(window)]
    max_v = float(window.max())

    if mode == "follow":
        min_v = float(window.min())
        span = max(max_v - min_v, max(10.0, abs(max_v) * 0.15))
        pad = span * 0.12
        return ChartWindow(x_start=x_start, x_end=x_end, y_min=min_v - pad, y_max=max_v + pad)

    min_span = max(50.0, abs(max_v) * 0.2)
    return ChartWindow(x_start=x_start, x_end=x_end, y_min=0.0, y_max=max(max_v * 1.08, min_span))


def build_visual_frame(engine: SimulationEngine) -> dict[str, float | bool | str | None]:
    """Map the engine's current state into a renderer-ready frame payload."""
    state = engine.state
    latest = engine.latest
    controls = engine.controls
    return {
        "time_s": engine.simulated_time,
        "is_paused": controls.is_paused,
        "is_light_on": controls.is_light_on,
        "light_intensity": controls.light_intensity,
        "co2_level": controls.co2_level,
        "smoothed_light": engine.smoothed_light,
        "smoothed_co2": engine.smoothed_co2,
        "atp": state.atp,
        "nadph": state.nadph,
        "c3": state.c3,
        "c5": state.c5,
        "sugar": state.sugar,
        "p_total": latest.net_production_rate,
        "energy": latest.energy_pool,
        "precursor": latest.precursor_pool,
        "pending_marker": engine.pending_marker,
    }


__all__ = ["FOLLOW_POINTS", "ChartWindow", "build_visual_frame", "chart_window"]
