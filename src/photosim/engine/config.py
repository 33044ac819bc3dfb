from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

from photosim.kinetics.response import ResponseParams


@dataclass(frozen=True)
class SimulationConfig:
    """Every tunable of one simulation session.

    ``lag_rate`` is the per-tick fraction by which the smoothed drivers close the
    gap to their targets; at 0.005 a light switch takes several hundred ticks to
    settle. ``time_step`` is the simulated seconds added per tick, independent of
    the host frame rate.
    """

    response: ResponseParams = field(default_factory=ResponseParams)
    lag_rate: float = 0.005
    time_step: float = 0.1
    history_capacity: int = 1200
    display_ceiling: float = 100.0
    display_baseline: float = 50.0

    def __post_init__(self) -> None:
        if not 0 < self.lag_rate <= 1:
            msg = "lag_rate must be in (0, 1]"
            raise ValueError(msg)
        if self.time_step <= 0:
            msg = "time_step must be positive"
            raise ValueError(msg)
        if self.history_capacity < 2:
            msg = "history_capacity must be at least 2"
            raise ValueError(msg)
        if self.display_ceiling <= 0:
            msg = "display_ceiling must be positive"
            raise ValueError(msg)
        if not 0 <= self.display_baseline <= self.display_ceiling:
            msg = "display_baseline must be between 0 and display_ceiling"
            raise ValueError(msg)

    @property
    def max_light(self) -> float:
        return self.response.max_light

    @property
    def max_co2(self) -> float:
        return self.response.max_co2

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(payload: dict[str, Any]) -> SimulationConfig:
        known = {item.name for item in fields(SimulationConfig)}
        unknown = sorted(set(payload) - known)
        if unknown:
            msg = f"Unknown simulation config keys: {unknown}"
            raise ValueError(msg)

        response_payload = dict(payload.get("response", {}))
        response_known = {item.name for item in fields(ResponseParams)}
        unknown_response = sorted(set(response_payload) - response_known)
        if unknown_response:
            msg = f"Unknown response parameter keys: {unknown_response}"
            raise ValueError(msg)

        values = {key: value for key, value in payload.items() if key != "response"}
        if "history_capacity" in values:
            values["history_capacity"] = int(values["history_capacity"])
        return SimulationConfig(response=ResponseParams(**response_payload), **values)


def save_config(config: SimulationConfig, config_path: str | Path) -> Path:
    path = Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    return path


def load_config(config_path: str | Path) -> SimulationConfig:
    path = Path(config_path)
    if not path.exists():
        msg = f"Simulation config file does not exist: {path}"
        raise FileNotFoundError(msg)
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        msg = "Simulation config must be a JSON object"
        raise ValueError(msg)
    return SimulationConfig.from_dict(payload)


__all__ = ["SimulationConfig", "load_config", "save_config"]
