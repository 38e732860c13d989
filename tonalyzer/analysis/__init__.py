"""Analysis layer - Low-level signal analysis.

This layer works directly on sample buffers:
- Pitch detection (autocorrelation period search)
- Tempo estimation (onset-strength comb search)
"""

from .tempo import (
    TempoAnalyzer,
    TempoInfo,
    detect_tempo,
    calculate_average_interval,
    quantize_tempo,
)
from .pitch import (
    PitchAnalyzer,
    detect_pitch,
    frequency_to_note,
    frequency_to_pitch_class,
    note_to_frequency,
    transpose_note,
    format_note_for_notation,
)

__all__ = [
    "TempoAnalyzer",
    "TempoInfo",
    "detect_tempo",
    "calculate_average_interval",
    "quantize_tempo",
    "PitchAnalyzer",
    "detect_pitch",
    "frequency_to_note",
    "frequency_to_pitch_class",
    "note_to_frequency",
    "transpose_note",
    "format_note_for_notation",
]
