"""Chord synthesis - Build a chord progression for a detected key.

Two strategies are provided:
- Energy-driven: diatonic triads of the detected key are picked per
  2-second segment from the segment's absolute-amplitude energy
- Note clustering: melody notes falling in the same bar-sized window are
  stacked into one chord
"""

import re
from collections import OrderedDict
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core import ChordEvent, NoteEvent, parse_time_signature
from ..core.constants import (
    CHORD_SEGMENT_DURATION,
    MAX_CHORD_NOTES,
    MAX_CHORD_SEGMENTS,
)
from ..analysis.pitch import transpose_note
from .key import get_chord_name_in_key, get_key_transposition


@dataclass(frozen=True)
class ChordTemplate:
    """A diatonic triad voiced in the anchor key."""
    notes: Tuple[str, ...]
    name: str
    degree: str

    def transposed(self, semitones: int) -> "ChordTemplate":
        return ChordTemplate(
            notes=tuple(transpose_note(n, semitones) for n in self.notes),
            name=get_chord_name_in_key(self.name, semitones),
            degree=self.degree,
        )


# Diatonic triads of C major
MAJOR_TEMPLATES = (
    ChordTemplate(("c3", "e3", "g3"), "C", "I"),
    ChordTemplate(("d3", "f3", "a3"), "Dm", "ii"),
    ChordTemplate(("e3", "g3", "b3"), "Em", "iii"),
    ChordTemplate(("f3", "a3", "c4"), "F", "IV"),
    ChordTemplate(("g3", "b3", "d4"), "G", "V"),
    ChordTemplate(("a3", "c4", "e4"), "Am", "vi"),
)

# Diatonic triads of A natural minor
MINOR_TEMPLATES = (
    ChordTemplate(("a2", "c3", "e3"), "Am", "i"),
    ChordTemplate(("b2", "d3", "f3"), "Bdim", "ii°"),
    ChordTemplate(("c3", "e3", "g3"), "C", "III"),
    ChordTemplate(("d3", "f3", "a3"), "Dm", "iv"),
    ChordTemplate(("e3", "g3", "b3"), "Em", "v"),
    ChordTemplate(("f3", "a3", "c4"), "F", "VI"),
    ChordTemplate(("g3", "b3", "d4"), "G", "VII"),
)

MAJOR_ANCHOR = "C"
MINOR_ANCHOR = "Am"

ROMAN_NUMERALS_MAJOR = MappingProxyType({
    "I": "I", "ii": "ii", "iii": "iii", "IV": "IV", "V": "V", "vi": "vi",
})
ROMAN_NUMERALS_MINOR = MappingProxyType({
    "i": "i", "ii°": "ii°", "III": "III", "iv": "iv", "v": "v", "VI": "VI", "VII": "VII",
})

_OCTAVE_SUFFIX = re.compile(r"\d+$")


def is_minor_key(key: str) -> bool:
    """True for labels like 'Am' or 'F#m' (but not 'Cmaj')."""
    return "m" in key and "maj" not in key


class ChordSynthesizer:
    """Generate a diatonic chord progression from the signal's energy contour."""

    def __init__(
        self,
        segment_duration: float = CHORD_SEGMENT_DURATION,
        max_segments: int = MAX_CHORD_SEGMENTS,
    ):
        """
        Initialize ChordSynthesizer.

        Args:
            segment_duration: Length of each chord in seconds
            max_segments: Maximum number of chords produced
        """
        self.segment_duration = segment_duration
        self.max_segments = max_segments

    def templates_for_key(self, key: str) -> List[ChordTemplate]:
        """Diatonic triads of the key's mode, transposed to its tonic."""
        if is_minor_key(key):
            anchor, templates = MINOR_ANCHOR, MINOR_TEMPLATES
        else:
            anchor, templates = MAJOR_ANCHOR, MAJOR_TEMPLATES

        semitones = get_key_transposition(anchor, key)
        return [t.transposed(semitones) for t in templates]

    def extract(
        self,
        data: np.ndarray,
        sample_rate: int,
        duration: float,
        detected_key: str,
    ) -> List[ChordEvent]:
        """
        Build a chord progression.

        Args:
            data: Audio samples
            sample_rate: Sample rate (Hz)
            duration: Buffer duration in seconds
            detected_key: Key label, e.g. 'G' or 'Em'

        Returns:
            One ChordEvent per segment
        """
        data = np.asarray(data, dtype=np.float64)
        templates = self.templates_for_key(detected_key)

        num_segments = min(self.max_segments, int(duration // self.segment_duration))
        samples_per_segment = len(data) // max(1, num_segments)

        chords = []
        for i in range(num_segments):
            start = i * samples_per_segment
            energy = float(np.abs(data[start:start + samples_per_segment]).sum())

            # Deterministic walk over the diatonic set driven by segment energy
            chord = templates[int((energy * 1000) % len(templates))]

            chords.append(ChordEvent(
                notes=list(chord.notes),
                name=chord.name,
                time=i * self.segment_duration,
                duration=self.segment_duration,
                degree=chord.degree,
            ))

        return chords


def extract_chords(
    data: np.ndarray,
    sample_rate: int,
    duration: float,
    detected_key: str,
) -> List[ChordEvent]:
    """Energy-driven chord progression in the detected key."""
    return ChordSynthesizer().extract(data, sample_rate, duration, detected_key)


def generate_chords_from_notes(
    notes: Sequence[NoteEvent],
    time_signature: str = "4/4",
) -> List[ChordEvent]:
    """
    Stack melody notes into chords, one per bar-sized window.

    The window is beats_per_bar * 0.5 seconds (quarter notes at 120 BPM).

    Args:
        notes: Melody notes
        time_signature: "beats/unit" string

    Returns:
        Chords sorted by start time
    """
    if not notes:
        return []

    beats_per_bar, _ = parse_time_signature(time_signature)
    chord_duration = beats_per_bar * 0.5

    buckets = OrderedDict()
    for note in notes:
        window = int(note.time // chord_duration) * chord_duration
        buckets.setdefault(window, []).append(note.note)

    chords = []
    for time, labels in buckets.items():
        unique = list(OrderedDict.fromkeys(labels))
        chords.append(ChordEvent(
            notes=unique[:MAX_CHORD_NOTES],
            name=_OCTAVE_SUFFIX.sub("", unique[0]) or "C",
            time=time,
            duration=chord_duration,
        ))

    return sorted(chords, key=lambda c: c.time)


def simplify_chord_progression(chords: Sequence[ChordEvent]) -> List[ChordEvent]:
    """Drop chords that repeat the name of the chord right before them."""
    simplified = []
    for chord in chords:
        if not simplified or chord.name != simplified[-1].name:
            simplified.append(chord)
    return simplified


def get_chord_at_time(chords: Sequence[ChordEvent], time: float) -> Optional[ChordEvent]:
    """First chord whose [time, time + duration) interval contains the timestamp."""
    for chord in chords:
        if chord.time <= time < chord.end:
            return chord
    return None


def get_roman_numeral(chord: ChordEvent, key: str) -> str:
    """Roman numeral of a chord's scale degree, or its name when unknown."""
    if not chord.degree:
        return chord.name

    table = ROMAN_NUMERALS_MINOR if is_minor_key(key) else ROMAN_NUMERALS_MAJOR
    return table.get(chord.degree, chord.name)
