from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, fields

from photosim.engine.config import SimulationConfig
from photosim.engine.history import HistoryBuffer, HistoryRow, HistorySeries
from photosim.engine.smoother import DriverSmoother
from photosim.kinetics.response import (
    STANDARD_CO2_UL_PER_L,
    STANDARD_LIGHT_LX,
    ResponseOutputs,
    steady_state_response,
)

logger = logging.getLogger(__name__)

LIGHT_ON_MARKER = "开灯"
LIGHT_OFF_MARKER = "关灯"


def _clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(value, max_value))


@dataclass
class ControlInputs:
    """Driver values sampled by the engine on every tick."""

    light_intensity: float = STANDARD_LIGHT_LX
    co2_level: float = STANDARD_CO2_UL_PER_L
    is_light_on: bool = True
    is_paused: bool = False

    @property
    def target_light(self) -> float:
        return self.light_intensity if self.is_light_on else 0.0


@dataclass
class SimulationState:
    """Display-scale levels (0-100) driving the 3D view."""

    atp: float = 50.0
    nadph: float = 50.0
    c3: float = 50.0
    c5: float = 50.0
    sugar: float = 0.0

    @property
    def energy_carrier_level(self) -> float:
        return self.atp

    def restore_defaults(self) -> None:
        """Reset every level in place so held references stay live."""
        for item in fields(self):
            setattr(self, item.name, item.default)


class SimulationEngine:
    """Owns the simulated chloroplast: drivers, response, display state and history.

    The engine is the only writer of its state. ``tick`` performs one step of the
    loop and is what a scheduler calls; ``advance`` steps it directly.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        controls: ControlInputs | None = None,
    ) -> None:
        self.config = config or SimulationConfig()
        self.controls = controls or ControlInputs()
        self._lock = threading.Lock()
        self._state = SimulationState()
        self._time = 0.0
        self._pending_marker: str | None = None
        self._smoother = DriverSmoother(
            self.config.lag_rate,
            light=self.controls.target_light,
            co2=self.controls.co2_level,
            max_light=self.config.max_light,
            max_co2=self.config.max_co2,
        )
        params = self.config.response
        self._latest = steady_state_response(params.standard_light, params.standard_co2, params)
        self._history = HistoryBuffer(
            self.config.history_capacity,
            HistoryRow.from_outputs(0.0, self._latest),
        )

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def history(self) -> HistorySeries:
        with self._lock:
            return self._history.snapshot()

    @property
    def simulated_time(self) -> float:
        return self._time

    @property
    def smoothed_light(self) -> float:
        return self._smoother.light

    @property
    def smoothed_co2(self) -> float:
        return self._smoother.co2

    @property
    def latest(self) -> ResponseOutputs:
        return self._latest

    @property
    def pending_marker(self) -> str | None:
        return self._pending_marker

    @property
    def is_paused(self) -> bool:
        return self.controls.is_paused

    def _project_display(self, light: float, outputs: ResponseOutputs) -> None:
        params = self.config.response
        ceiling = self.config.display_ceiling
        baseline = self.config.display_baseline
        energy_level = _clamp((light / self.config.max_light) * ceiling, 0.0, ceiling)
        self._state.atp = energy_level
        self._state.nadph = energy_level
        c3_ratio = 0.0
        if params.fixation_base > 0:
            c3_ratio = outputs.fixation_intermediate / params.fixation_base
        c5_ratio = 0.0
        if params.regen_base > 0:
            c5_ratio = outputs.regeneration_intermediate / params.regen_base
        self._state.c3 = _clamp(c3_ratio * baseline, 0.0, ceiling)
        self._state.c5 = _clamp(c5_ratio * baseline, 0.0, ceiling)

    def tick(self) -> bool:
        """Run one loop step; returns ``False`` without side effects while paused."""
        if self.controls.is_paused:
            return False

        with self._lock:
            self._time += self.config.time_step
            light, co2 = self._smoother.update(
                self.controls.target_light,
                self.controls.co2_level,
            )
            outputs = steady_state_response(light, co2, self.config.response)
            self._latest = outputs
            self._project_display(light, outputs)

            marker = self._pending_marker
            self._pending_marker = None
            self._history.append(HistoryRow.from_outputs(round(self._time, 1), outputs, marker))

        if marker is not None:
            logger.info("Marker %r recorded at t=%.1fs", marker, self._time)
        return True

    def advance(self, n_ticks: int = 1) -> int:
        """Step the loop ``n_ticks`` times and return how many ticks mutated state."""
        if n_ticks < 0:
            msg = "n_ticks must be non-negative"
            raise ValueError(msg)
        return sum(1 for _ in range(n_ticks) if self.tick())

    def set_marker(self, label: str) -> None:
        with self._lock:
            self._set_pending_marker(label)

    def _set_pending_marker(self, label: str) -> None:
        if self._pending_marker is not None:
            logger.debug("Replacing pending marker %r with %r", self._pending_marker, label)
        self._pending_marker = str(label)

    def reset_simulation(
        self,
        target_light: float | None = None,
        target_co2: float | None = None,
    ) -> ResponseOutputs:
        """Restart at ``(target_light, target_co2)`` with the history filled at steady state.

        Omitted targets fall back to the drivers currently reported by the
        controls. The result depends only on the operating point, so repeated
        calls are harmless.
        """
        light = self.controls.target_light if target_light is None else target_light
        co2 = self.controls.co2_level if target_co2 is None else target_co2

        with self._lock:
            self._state.restore_defaults()
            self._time = 0.0
            self._pending_marker = None
            self._smoother.reset(light, co2)
            outputs = steady_state_response(
                self._smoother.light,
                self._smoother.co2,
                self.config.response,
            )
            self._latest = outputs
            self._history.reset(HistoryRow.from_outputs(0.0, outputs))

        logger.debug(
            "Simulation reset at light=%.1f co2=%.1f",
            self._smoother.light,
            self._smoother.co2,
        )
        return outputs

    def toggle_light(self) -> bool:
        """Flip the light switch and mark the transition on the chart."""
        with self._lock:
            turning_off = self.controls.is_light_on
            self._set_pending_marker(LIGHT_OFF_MARKER if turning_off else LIGHT_ON_MARKER)
            self.controls.is_light_on = not turning_off
        return not turning_off

    def reset_experiment(self) -> ResponseOutputs:
        """Return the controls to the standard operating point and restart there."""
        params = self.config.response
        self.controls.light_intensity = params.standard_light
        self.controls.co2_level = params.standard_co2
        self.controls.is_light_on = True
        self.controls.is_paused = False
        return self.reset_simulation(params.standard_light, params.standard_co2)


__all__ = [
    "LIGHT_OFF_MARKER",
    "LIGHT_ON_MARKER",
    "ControlInputs",
    "SimulationEngine",
    "SimulationState",
]
