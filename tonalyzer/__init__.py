"""Tonalyzer - Monophonic audio to melody, key, tempo and chords.

Architecture Layers:
    1. core/        - Note/chord events, analysis parameters, constants
    2. analysis/    - Signal analysis (pitch per frame, tempo)
    3. inference/   - Musical understanding (melody, key, chords)
    4. processing/  - Note post-processing (quantize)
    5. input/       - Audio file loading (command line only)
"""

__version__ = "0.1.0"

# Core types
from .core import NoteEvent, ChordEvent, AnalysisParams

# Analysis layer
from .analysis import (
    PitchAnalyzer,
    TempoAnalyzer,
    TempoInfo,
    detect_pitch,
    detect_tempo,
    frequency_to_note,
    frequency_to_pitch_class,
    note_to_frequency,
    transpose_note,
    format_note_for_notation,
    calculate_average_interval,
    quantize_tempo,
)

# Inference layer
from .inference import (
    KeyDetector,
    KeyInfo,
    MelodyExtractor,
    MelodyInfo,
    ChordSynthesizer,
    detect_key,
    detect_key_detailed,
    get_key_transposition,
    get_chord_name_in_key,
    extract_melody,
    get_note_at_time,
    filter_notes_by_octave,
    calculate_note_density,
    extract_chords,
    generate_chords_from_notes,
    simplify_chord_progression,
    get_chord_at_time,
    get_roman_numeral,
)

# Processing layer
from .processing import Quantizer, quantize_notes

# Pipeline
from .pipeline import AnalysisResult, analyze_audio

__all__ = [
    # Core
    "NoteEvent",
    "ChordEvent",
    "AnalysisParams",
    # Analysis
    "PitchAnalyzer",
    "TempoAnalyzer",
    "TempoInfo",
    "detect_pitch",
    "detect_tempo",
    "frequency_to_note",
    "frequency_to_pitch_class",
    "note_to_frequency",
    "transpose_note",
    "format_note_for_notation",
    "calculate_average_interval",
    "quantize_tempo",
    # Inference
    "KeyDetector",
    "KeyInfo",
    "MelodyExtractor",
    "MelodyInfo",
    "ChordSynthesizer",
    "detect_key",
    "detect_key_detailed",
    "get_key_transposition",
    "get_chord_name_in_key",
    "extract_melody",
    "get_note_at_time",
    "filter_notes_by_octave",
    "calculate_note_density",
    "extract_chords",
    "generate_chords_from_notes",
    "simplify_chord_progression",
    "get_chord_at_time",
    "get_roman_numeral",
    # Processing
    "Quantizer",
    "quantize_notes",
    # Pipeline
    "AnalysisResult",
    "analyze_audio",
]
