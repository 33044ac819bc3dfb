from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import pandas as pd

from photosim.engine.config import SimulationConfig
from photosim.engine.simulator import ControlInputs, SimulationEngine


@dataclass(frozen=True)
class ControlEvent:
    """A change to the controls applied just before frame ``tick`` runs."""

    tick: int
    light_intensity: float | None = None
    co2_level: float | None = None
    is_light_on: bool | None = None
    is_paused: bool | None = None
    toggle_light: bool = False
    marker: str | None = None

    def __post_init__(self) -> None:
        if self.tick < 0:
            msg = "tick must be non-negative"
            raise ValueError(msg)
        if self.toggle_light and self.is_light_on is not None:
            msg = "toggle_light and is_light_on are mutually exclusive"
            raise ValueError(msg)

    def apply(self, engine: SimulationEngine) -> None:
        controls = engine.controls
        if self.light_intensity is not None:
            controls.light_intensity = self.light_intensity
        if self.co2_level is not None:
            controls.co2_level = self.co2_level
        if self.is_paused is not None:
            controls.is_paused = self.is_paused
        if self.is_light_on is not None:
            controls.is_light_on = self.is_light_on
        if self.toggle_light:
            engine.toggle_light()
        # An explicit label wins over the toggle's default marker.
        if self.marker is not None:
            engine.set_marker(self.marker)


def run_scenario(
    *,
    n_ticks: int,
    events: Iterable[ControlEvent] = (),
    config: SimulationConfig | None = None,
    controls: ControlInputs | None = None,
    engine: SimulationEngine | None = None,
) -> pd.DataFrame:
    """Run a deterministic frame-by-frame scenario and return one row per frame."""
    if n_ticks <= 0:
        msg = "n_ticks must be positive"
        raise ValueError(msg)
    if engine is not None and (config is not None or controls is not None):
        msg = "pass either an engine or config/controls, not both"
        raise ValueError(msg)

    sim = engine or SimulationEngine(config=config, controls=controls)
    schedule: dict[int, list[ControlEvent]] = {}
    for event in events:
        schedule.setdefault(event.tick, []).append(event)

    rows: list[dict[str, object]] = []
    for tick in range(n_ticks):
        for event in schedule.get(tick, []):
            event.apply(sim)
        marker = sim.pending_marker
        advanced = sim.tick()
        latest = sim.latest
        state = sim.state
        rows.append(
            {
                "tick": tick,
                "time_s": sim.simulated_time,
                "advanced": advanced,
                "light_intensity": sim.controls.light_intensity,
                "co2_level": sim.controls.co2_level,
                "is_light_on": sim.controls.is_light_on,
                "smoothed_light": sim.smoothed_light,
                "smoothed_co2": sim.smoothed_co2,
                "c3": latest.fixation_intermediate,
                "c5": latest.regeneration_intermediate,
                "p_total": latest.net_production_rate,
                "energy": latest.energy_pool,
                "precursor": latest.precursor_pool,
                "atp": state.atp,
                "nadph": state.nadph,
                "c3_display": state.c3,
                "c5_display": state.c5,
                "marker": marker if advanced else None,
            }
        )

    df = pd.DataFrame(rows)
    step = sim.config.time_step
    df["cum_production"] = (df["p_total"] * step * df["advanced"].astype(float)).cumsum()
    return df


def lights_off_scenario(
    *,
    settle_ticks: int = 600,
    dark_ticks: int = 1800,
    config: SimulationConfig | None = None,
) -> pd.DataFrame:
    """Steady light at the standard point, then switch the light off with a marker."""
    if settle_ticks < 0 or dark_ticks <= 0:
        msg = "settle_ticks must be non-negative and dark_ticks positive"
        raise ValueError(msg)
    cfg = config or SimulationConfig()
    controls = ControlInputs(
        light_intensity=cfg.response.standard_light,
        co2_level=cfg.response.standard_co2,
    )
    return run_scenario(
        n_ticks=settle_ticks + dark_ticks,
        events=[ControlEvent(tick=settle_ticks, toggle_light=True)],
        config=cfg,
        controls=controls,
    )


__all__ = ["ControlEvent", "lights_off_scenario", "run_scenario"]
