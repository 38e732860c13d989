"""Inference layer - Musical understanding built on the analysis layer.

- Key detection (tonal center from a pitch-class histogram)
- Melody extraction (note segmentation over a sliding window)
- Chord synthesis (diatonic progression for the detected key)

Pipeline: Samples → Melody + histogram → Key → Chords
"""

from .key import (
    KeyDetector,
    KeyInfo,
    KeyCandidate,
    detect_key,
    detect_key_detailed,
    get_key_transposition,
    get_chord_name_in_key,
)
from .melody import (
    MelodyExtractor,
    MelodyInfo,
    extract_melody,
    get_note_at_time,
    filter_notes_by_octave,
    calculate_note_density,
)
from .chords import (
    ChordSynthesizer,
    ChordTemplate,
    extract_chords,
    generate_chords_from_notes,
    simplify_chord_progression,
    get_chord_at_time,
    get_roman_numeral,
)

__all__ = [
    # Key detection
    "KeyDetector",
    "KeyInfo",
    "KeyCandidate",
    "detect_key",
    "detect_key_detailed",
    "get_key_transposition",
    "get_chord_name_in_key",
    # Melody extraction
    "MelodyExtractor",
    "MelodyInfo",
    "extract_melody",
    "get_note_at_time",
    "filter_notes_by_octave",
    "calculate_note_density",
    # Chord synthesis
    "ChordSynthesizer",
    "ChordTemplate",
    "extract_chords",
    "generate_chords_from_notes",
    "simplify_chord_progression",
    "get_chord_at_time",
    "get_roman_numeral",
]
