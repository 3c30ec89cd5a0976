"""
Exponential moving average helper for downstream consumers.
"""

from typing import Optional


class ExponentialSmoother:
    """
    One-pole smoother.

    Blends against ``last_smoothed`` when one has been set. ``smooth`` does
    not record its own result, so with nothing set it returns the input
    as-is on every call.
    """

    def __init__(self, smoothing_factor: float = 0.7):
        self.smoothing_factor = smoothing_factor
        self.last_smoothed: Optional[float] = None

    def smooth(self, value: float, smoothing_factor: Optional[float] = None) -> float:
        factor = self.smoothing_factor if smoothing_factor is None else smoothing_factor
        if self.last_smoothed is None:
            return float(value)
        return value * (1.0 - factor) + self.last_smoothed * factor

    def reset(self) -> None:
        self.last_smoothed = None
