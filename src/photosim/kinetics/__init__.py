from photosim.kinetics.response import (
    ResponseOutputs,
    ResponseParams,
    co2_saturation,
    light_saturation,
    reference_response,
    steady_state_response,
)

__all__ = [
    "ResponseParams",
    "ResponseOutputs",
    "light_saturation",
    "co2_saturation",
    "steady_state_response",
    "reference_response",
]
