from __future__ import annotations

import math
from dataclasses import asdict, dataclass

STANDARD_LIGHT_LX = 12000.0
STANDARD_CO2_UL_PER_L = 420.0
MAX_LIGHT_LX = 50000.0
MAX_CO2_UL_PER_L = 1000.0


def _clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(value, max_value))


def clamp_driver(value: float, max_value: float) -> float:
    """Clamp one driver into ``[0, max_value]``; NaN and -inf collapse to 0."""
    value = float(value)
    if math.isnan(value):
        return 0.0
    return _clamp(value, 0.0, max_value)


@dataclass(frozen=True)
class ResponseParams:
    """Tunable constants of the steady-state response.

    The values were picked so the chart curves stay readable in the classroom
    view. They are not fitted Calvin-cycle kinetics.
    """

    standard_light: float = STANDARD_LIGHT_LX
    standard_co2: float = STANDARD_CO2_UL_PER_L
    max_light: float = MAX_LIGHT_LX
    max_co2: float = MAX_CO2_UL_PER_L
    k_light: float = STANDARD_LIGHT_LX
    co2_scale: float = 5.0
    k_co2: float = 60.0
    co2_amplify: float = 3.8
    rate_max: float = 200.0
    energy_max: float = 200.0
    precursor_total: float = 200.0
    energy_consumption_coeff: float = 0.7
    partial_factor: float = 0.8
    # Sets the maximum C3/C5 swing when one driver drops to zero.
    epsilon: float = 0.003
    fixation_base: float = 200.0
    regen_base: float = 120.0
    output_ceiling: float = 1000.0

    def __post_init__(self) -> None:
        positive = {
            "standard_light": self.standard_light,
            "standard_co2": self.standard_co2,
            "max_light": self.max_light,
            "max_co2": self.max_co2,
            "k_light": self.k_light,
            "co2_scale": self.co2_scale,
            "k_co2": self.k_co2,
            "epsilon": self.epsilon,
            "output_ceiling": self.output_ceiling,
        }
        for name, value in positive.items():
            if not value > 0:
                msg = f"{name} must be positive"
                raise ValueError(msg)
        non_negative = {
            "rate_max": self.rate_max,
            "energy_max": self.energy_max,
            "precursor_total": self.precursor_total,
            "energy_consumption_coeff": self.energy_consumption_coeff,
            "partial_factor": self.partial_factor,
            "fixation_base": self.fixation_base,
            "regen_base": self.regen_base,
        }
        for name, value in non_negative.items():
            if value < 0:
                msg = f"{name} must be non-negative"
                raise ValueError(msg)
        if self.co2_amplify <= 1:
            msg = "co2_amplify must be greater than 1"
            raise ValueError(msg)
        if self.standard_light > self.max_light:
            msg = "standard_light must not exceed max_light"
            raise ValueError(msg)
        if self.standard_co2 > self.max_co2:
            msg = "standard_co2 must not exceed max_co2"
            raise ValueError(msg)
        if self.energy_max > self.precursor_total:
            msg = "energy_max must not exceed precursor_total"
            raise ValueError(msg)
        if self.energy_consumption_coeff * self.partial_factor > 1:
            msg = "energy_consumption_coeff * partial_factor must be at most 1"
            raise ValueError(msg)


@dataclass(frozen=True)
class ResponseOutputs:
    fixation_intermediate: float
    regeneration_intermediate: float
    net_production_rate: float
    energy_pool: float
    precursor_pool: float

    def __post_init__(self) -> None:
        for name, value in self.as_dict().items():
            if not math.isfinite(value) or value < 0:
                msg = f"{name} must be finite and non-negative"
                raise ValueError(msg)

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


def light_saturation(light: float, params: ResponseParams) -> float:
    light = clamp_driver(light, params.max_light)
    if light <= 0:
        return 0.0
    return light / (light + params.k_light)


def co2_saturation(co2: float, params: ResponseParams) -> float:
    """Saturating CO2 factor after internal scaling and power-law enhancement."""
    co2_internal = clamp_driver(co2, params.max_co2) * params.co2_scale
    if co2_internal <= 0:
        return 0.0
    f_co2 = co2_internal / (co2_internal + params.k_co2)
    return f_co2**params.co2_amplify


def _intermediate_ratios(f_light: float, f_co2: float, epsilon: float) -> tuple[float, float]:
    fixation_raw = f_co2 / (f_light + epsilon)
    regen_raw = f_light / (f_co2 + epsilon)
    return fixation_raw, regen_raw


def steady_state_response(
    light: float,
    co2: float,
    params: ResponseParams | None = None,
) -> ResponseOutputs:
    """Map (light, CO2) drivers to the five absolute pool levels.

    Light and CO2 each saturate as ``x / (x + K)``. The two intermediates are
    ratios of the saturation factors, normalised so that the standard operating
    point returns ``fixation_base`` and ``regen_base``. Energy and precursor
    always sum to ``precursor_total``.
    """
    params = params or ResponseParams()

    f_light = light_saturation(light, params)
    f_co2 = co2_saturation(co2, params)

    net_rate = params.rate_max * f_light * f_co2
    energy = params.energy_max * f_light * (
        1.0 - params.energy_consumption_coeff * f_co2 * params.partial_factor
    )
    precursor = _clamp(params.precursor_total - energy, 0.0, params.precursor_total)

    fixation_raw, regen_raw = _intermediate_ratios(f_light, f_co2, params.epsilon)
    fixation_ref, regen_ref = _intermediate_ratios(
        light_saturation(params.standard_light, params),
        co2_saturation(params.standard_co2, params),
        params.epsilon,
    )
    fixation = params.fixation_base * (fixation_raw / fixation_ref if fixation_ref > 0 else 0.0)
    regen = params.regen_base * (regen_raw / regen_ref if regen_ref > 0 else 0.0)

    ceiling = params.output_ceiling
    return ResponseOutputs(
        fixation_intermediate=_clamp(fixation, 0.0, ceiling),
        regeneration_intermediate=_clamp(regen, 0.0, ceiling),
        net_production_rate=_clamp(net_rate, 0.0, ceiling),
        energy_pool=_clamp(energy, 0.0, ceiling),
        precursor_pool=_clamp(precursor, 0.0, ceiling),
    )


def reference_response(params: ResponseParams | None = None) -> ResponseOutputs:
    params = params or ResponseParams()
    return steady_state_response(params.standard_light, params.standard_co2, params)


__all__ = [
    "MAX_CO2_UL_PER_L",
    "MAX_LIGHT_LX",
    "STANDARD_CO2_UL_PER_L",
    "STANDARD_LIGHT_LX",
    "ResponseOutputs",
    "ResponseParams",
    "clamp_driver",
    "co2_saturation",
    "light_saturation",
    "reference_response",
    "steady_state_response",
]
