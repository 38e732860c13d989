"""Core types and constants for Tonalyzer."""

from .note import NoteEvent, ChordEvent
from .params import AnalysisParams, parse_time_signature
from .constants import (
    PITCH_NAMES,
    NOTE_LABELS,
    REST,
    DEFAULT_TEMPO,
    MAX_MELODY_NOTES,
)

__all__ = [
    "NoteEvent",
    "ChordEvent",
    "AnalysisParams",
    "parse_time_signature",
    "PITCH_NAMES",
    "NOTE_LABELS",
    "REST",
    "DEFAULT_TEMPO",
    "MAX_MELODY_NOTES",
]
