"""
Energy-based beat detection.

A frame is a beat when its total energy rises above the previous frame's
and exceeds ``threshold`` times the rolling average energy. The decision is
made fresh every frame; only ``prev_energy`` carries over.
"""

from dataclasses import dataclass, replace

THRESHOLD_RANGE = (0.0, 1.0)
SENSITIVITY_RANGE = (0.5, 2.0)

DEFAULT_THRESHOLD = 0.6
DEFAULT_SENSITIVITY = 1.2


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(value)))


def clamp_threshold(value: float) -> float:
    """Clamp a beat threshold multiplier into [0, 1]."""
    return _clamp(value, *THRESHOLD_RANGE)


def clamp_sensitivity(value: float) -> float:
    """Clamp a beat sensitivity multiplier into [0.5, 2]."""
    return _clamp(value, *SENSITIVITY_RANGE)


@dataclass(frozen=True)
class BeatState:
    """Beat detector state after one frame."""

    is_beat: bool = False
    beat_energy: float = 0.0
    prev_energy: float = 0.0
    threshold: float = DEFAULT_THRESHOLD
    sensitivity: float = DEFAULT_SENSITIVITY

    @classmethod
    def initial(
        cls,
        threshold: float = DEFAULT_THRESHOLD,
        sensitivity: float = DEFAULT_SENSITIVITY,
    ) -> "BeatState":
        """Fresh state with clamped configuration and no energy memory."""
        return cls(
            threshold=clamp_threshold(threshold),
            sensitivity=clamp_sensitivity(sensitivity),
        )

    def with_threshold(self, threshold: float) -> "BeatState":
        return replace(self, threshold=clamp_threshold(threshold))

    def with_sensitivity(self, sensitivity: float) -> "BeatState":
        return replace(self, sensitivity=clamp_sensitivity(sensitivity))

    def reset(self) -> "BeatState":
        """Forget energy memory, keep threshold and sensitivity."""
        return BeatState.initial(self.threshold, self.sensitivity)


class BeatDetector:
    """Adaptive energy-threshold beat detector."""

    @staticmethod
    def detect(state: BeatState, current_energy: float, average_energy: float) -> BeatState:
        """
        Evaluate one frame.

        With an empty history the average is 0, so the first frame with any
        energy after silence is flagged as a beat.

        Args:
            state: State after the previous frame.
            current_energy: Total energy of this frame.
            average_energy: Mean total energy of the stored history,
                excluding this frame.

        Returns:
            New BeatState; ``prev_energy`` always becomes ``current_energy``.
        """
        energy_threshold = state.threshold * average_energy
        delta = current_energy - state.prev_energy

        is_beat = current_energy > energy_threshold and delta > 0
        beat_energy = current_energy * state.sensitivity if is_beat else current_energy

        return replace(
            state,
            is_beat=bool(is_beat),
            beat_energy=float(beat_energy),
            prev_energy=float(current_energy),
        )
