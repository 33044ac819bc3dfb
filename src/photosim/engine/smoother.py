from __future__ import annotations

from photosim.kinetics.response import clamp_driver


class DriverSmoother:
    """Exponential lag of the light and CO2 drivers toward their targets.

    With ``lag_rate`` in (0, 1] each update moves the smoothed value a fixed
    fraction of the remaining gap, so it approaches the target monotonically and
    never overshoots.
    """

    def __init__(
        self,
        lag_rate: float,
        *,
        light: float = 0.0,
        co2: float = 0.0,
        max_light: float = float("inf"),
        max_co2: float = float("inf"),
    ) -> None:
        if not 0 < lag_rate <= 1:
            msg = "lag_rate must be in (0, 1]"
            raise ValueError(msg)
        self.lag_rate = lag_rate
        self.max_light = max_light
        self.max_co2 = max_co2
        self.light = clamp_driver(light, max_light)
        self.co2 = clamp_driver(co2, max_co2)

    def update(self, target_light: float, target_co2: float) -> tuple[float, float]:
        target_light = clamp_driver(target_light, self.max_light)
        target_co2 = clamp_driver(target_co2, self.max_co2)
        self.light += (target_light - self.light) * self.lag_rate
        self.co2 += (target_co2 - self.co2) * self.lag_rate
        return self.light, self.co2

    def reset(self, light: float, co2: float) -> None:
        self.light = clamp_driver(light, self.max_light)
        self.co2 = clamp_driver(co2, self.max_co2)

    def __repr__(self) -> str:
        return (
            f"DriverSmoother(lag_rate={self.lag_rate}, light={self.light:.3f}, "
            f"co2={self.co2:.3f})"
        )


__all__ = ["DriverSmoother"]
