"""Melody extraction - Segment a monophonic buffer into note events.

A frame/hop window slides over the buffer. Each frame is either silent
(RMS under the sensitivity-scaled threshold) or voiced; voiced frames are
pitch-tracked and a note boundary is placed wherever the detected note
label changes. The RMS of voiced frames is accumulated per pitch class,
giving the histogram used for key detection.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from ..core import AnalysisParams, NoteEvent, REST
from ..core.constants import MAX_MELODY_NOTES, MELODY_FRAME_SIZE, MELODY_HOP_SIZE
from ..analysis.pitch import PitchAnalyzer, frequency_to_note, frequency_to_pitch_class


@dataclass
class MelodyInfo:
    """Container for melody extraction results."""

    notes: List[NoteEvent]
    pitch_class_histogram: np.ndarray  # 12 RMS-weighted bins, index 0 = C


@dataclass
class _SegmentState:
    """Running state of one extraction pass."""

    min_duration: float
    histogram: np.ndarray = field(default_factory=lambda: np.zeros(12))
    notes: List[NoteEvent] = field(default_factory=list)
    current: Optional[str] = None
    start_time: float = 0.0

    def close(self, end_time: float) -> None:
        """Finish the open note, keeping it only if it is long enough."""
        if self.current is None:
            return
        duration = end_time - self.start_time
        if duration > self.min_duration:
            self.notes.append(NoteEvent(self.current, self.start_time, duration))
        self.current = None

    def open(self, note: str, time: float) -> None:
        self.current = note
        self.start_time = time


class MelodyExtractor:
    """Extract a melody line and pitch-class histogram from audio."""

    def __init__(
        self,
        params: Optional[AnalysisParams] = None,
        frame_size: int = MELODY_FRAME_SIZE,
        hop_size: int = MELODY_HOP_SIZE,
        max_notes: int = MAX_MELODY_NOTES,
        pitch_analyzer: Optional[PitchAnalyzer] = None,
    ):
        """
        Initialize MelodyExtractor.

        Args:
            params: Analysis parameters (sensitivity, thresholds, min note length)
            frame_size: Analysis window length in samples
            hop_size: Step between windows in samples
            max_notes: Notes kept after segmentation (later ones are dropped)
            pitch_analyzer: Per-frame pitch estimator
        """
        self.params = params or AnalysisParams()
        self.frame_size = frame_size
        self.hop_size = hop_size
        self.max_notes = max_notes
        self.pitch_analyzer = pitch_analyzer or PitchAnalyzer()

    def extract(self, data: np.ndarray, sample_rate: int) -> MelodyInfo:
        """
        Extract melody notes.

        Args:
            data: Mono audio samples
            sample_rate: Sample rate (Hz)

        Returns:
            MelodyInfo with at most max_notes notes and the pitch-class histogram
        """
        data = np.asarray(data, dtype=np.float64)
        threshold = self.params.rms_threshold
        state = _SegmentState(min_duration=self.params.min_note_seconds)

        for start in range(0, len(data) - self.frame_size, self.hop_size):
            frame = data[start:start + self.frame_size]
            self._step(state, frame, start / sample_rate, sample_rate, threshold)

        state.close(len(data) / sample_rate)

        return MelodyInfo(
            notes=state.notes[: self.max_notes],
            pitch_class_histogram=state.histogram,
        )

    def _step(
        self,
        state: _SegmentState,
        frame: np.ndarray,
        time: float,
        sample_rate: int,
        threshold: float,
    ) -> None:
        rms = float(np.sqrt(np.mean(frame ** 2)))

        if rms < threshold:
            state.close(time)
            return

        freq = self.pitch_analyzer.detect(frame, sample_rate)
        note = frequency_to_note(freq)
        pitch_class = frequency_to_pitch_class(freq)

        if pitch_class >= 0:
            state.histogram[pitch_class] += rms

        # An unpitched but loud frame sustains the open note
        if note != REST and note != state.current:
            state.close(time)
            state.open(note, time)


def extract_melody(
    data: np.ndarray,
    sample_rate: int,
    params: Optional[AnalysisParams] = None,
) -> MelodyInfo:
    """Extract melody notes and the pitch-class histogram."""
    return MelodyExtractor(params=params).extract(data, sample_rate)


def get_note_at_time(notes: Sequence[NoteEvent], time: float) -> Optional[NoteEvent]:
    """First note whose [time, time + duration) interval contains the timestamp."""
    for note in notes:
        if note.time <= time < note.end:
            return note
    return None


def filter_notes_by_octave(
    notes: Sequence[NoteEvent], min_octave: int, max_octave: int
) -> List[NoteEvent]:
    """Keep notes whose octave lies in [min_octave, max_octave]."""
    return [
        note for note in notes
        if note.octave is not None and min_octave <= note.octave <= max_octave
    ]


def calculate_note_density(notes: Sequence[NoteEvent], duration: float) -> float:
    """Notes per second."""
    if duration <= 0:
        return 0.0
    return len(notes) / duration
