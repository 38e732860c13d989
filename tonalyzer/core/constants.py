"""Global constants for Tonalyzer."""

from types import MappingProxyType

# Pitch names
PITCH_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

# Lowercase note labels used for NoteEvent.note ("s" marks a sharp)
NOTE_LABELS = ("c", "cs", "d", "ds", "e", "f", "fs", "g", "gs", "a", "as", "b")

REST = "rest"

# Tuning
A4_FREQ = 440.0
C0_FREQ = A4_FREQ * 2 ** -4.75
MIN_PITCHED_FREQ = 50.0  # below this a frequency is treated as silence

# Pitch search defaults
DEFAULT_MIN_FREQ = 80.0
DEFAULT_MAX_FREQ = 1000.0

# Tempo search defaults
DEFAULT_MIN_BPM = 60
DEFAULT_MAX_BPM = 200
DEFAULT_TEMPO = 120
TEMPO_FRAME_SIZE = 1024
TEMPO_HOP_SIZE = 512
COMMON_TEMPOS = (60, 70, 80, 90, 100, 110, 120, 130, 140, 150, 160, 170, 180, 190, 200)

# Melody segmentation defaults
MELODY_FRAME_SIZE = 4096
MELODY_HOP_SIZE = 2048
MAX_MELODY_NOTES = 64
SILENCE_RMS = 0.01  # scaled by pitch_sensitivity / 100

# Musical defaults
DEFAULT_TIME_SIGNATURE = (4, 4)

# Grid size per quantize value, as a fraction of one beat
QUANTIZE_GRID = MappingProxyType({
    "1/4": 1.0,
    "1/8": 0.5,
    "1/16": 0.25,
    "1/32": 0.125,
})
DEFAULT_GRID_FRACTION = 0.25

# Chord synthesis
CHORD_SEGMENT_DURATION = 2.0
MAX_CHORD_SEGMENTS = 8
MAX_CHORD_NOTES = 4
