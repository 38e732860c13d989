"""Note quantization - Snap note events to a rhythmic grid."""

import math
import warnings
from dataclasses import replace
from typing import List, Sequence

from ..core import NoteEvent
from ..core.constants import DEFAULT_GRID_FRACTION, DEFAULT_TEMPO, QUANTIZE_GRID


class Quantizer:
    """Quantize note timings to a rhythmic grid."""

    def __init__(
        self,
        tempo: float = 120.0,
        quantize_value: str = "1/16",
    ):
        """
        Initialize Quantizer.

        Args:
            tempo: Tempo in BPM (non-positive values fall back to 120)
            quantize_value: Grid value: '1/4', '1/8', '1/16', '1/32' or 'none'
        """
        self.quantize_value = quantize_value

        if tempo <= 0:
            warnings.warn(f"Invalid tempo {tempo!r}, quantizing at {DEFAULT_TEMPO} BPM")
            tempo = DEFAULT_TEMPO
        self.tempo = tempo

        if quantize_value != "none" and quantize_value not in QUANTIZE_GRID:
            warnings.warn(
                f"Unknown quantize value {quantize_value!r}, using a 1/16 grid"
            )

    @property
    def beat_duration(self) -> float:
        """Duration of one beat in seconds."""
        return 60.0 / self.tempo

    @property
    def grid_duration(self) -> float:
        """Duration of one grid unit in seconds."""
        return self.beat_duration * QUANTIZE_GRID.get(self.quantize_value, DEFAULT_GRID_FRACTION)

    def quantize(self, notes: Sequence[NoteEvent]) -> List[NoteEvent]:
        """
        Snap start times and durations to the grid.

        Args:
            notes: Notes to quantize

        Returns:
            New list of quantized notes (same notes, unsnapped, for 'none')
        """
        if self.quantize_value == "none":
            return list(notes)

        grid = self.grid_duration
        quantized = []

        for note in notes:
            duration = note.duration
            if duration:
                duration = max(grid, self._snap(duration, grid))
            quantized.append(
                replace(note, time=self._snap(note.time, grid), duration=duration or None)
            )

        return quantized

    @staticmethod
    def _snap(value: float, grid: float) -> float:
        """Nearest grid multiple, halves rounding up."""
        return math.floor(value / grid + 0.5) * grid


def quantize_notes(
    notes: Sequence[NoteEvent], tempo: float, quantize_value: str
) -> List[NoteEvent]:
    """Quantize notes to a grid derived from tempo and grid value."""
    return Quantizer(tempo=tempo, quantize_value=quantize_value).quantize(notes)
