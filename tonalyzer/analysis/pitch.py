"""Pitch estimation and note/frequency conversions."""

import re

import numpy as np
import librosa

from ..core.constants import (
    NOTE_LABELS,
    REST,
    A4_FREQ,
    C0_FREQ,
    MIN_PITCHED_FREQ,
    DEFAULT_MIN_FREQ,
    DEFAULT_MAX_FREQ,
)

_NOTE_LABEL = re.compile(r"^([a-gs]+)(\d+)$")
_NOTE_NAME = re.compile(r"^([A-Ga-g])([#b]?)(\d+)$")
_ACCIDENTALS = {"#": "s", "b": "f", "": ""}


class PitchAnalyzer:
    """Fundamental frequency estimation for a single frame.

    Searches integer periods between sample_rate/max_freq and
    sample_rate/min_freq for the lag with the largest positive
    (unnormalized) autocorrelation.
    """

    def __init__(
        self,
        min_freq: float = DEFAULT_MIN_FREQ,
        max_freq: float = DEFAULT_MAX_FREQ,
        method: str = "direct",
    ):
        """
        Initialize PitchAnalyzer.

        Args:
            min_freq: Lowest detectable frequency (Hz)
            max_freq: Highest detectable frequency (Hz)
            method: 'direct' (lag-by-lag dot products) or 'fft' (librosa.autocorrelate)
        """
        self.min_freq = min_freq
        self.max_freq = max_freq
        self.method = method

    def period_range(self, sample_rate: int) -> range:
        """Candidate periods in samples."""
        min_period = max(1, int(sample_rate // self.max_freq))
        max_period = int(sample_rate // self.min_freq)
        return range(min_period, max_period)

    def autocorrelation(self, frame: np.ndarray, sample_rate: int) -> np.ndarray:
        """
        Unnormalized autocorrelation for every candidate period.

        Returns:
            Array aligned with period_range(sample_rate)
        """
        frame = np.asarray(frame, dtype=np.float64)
        periods = self.period_range(sample_rate)
        if len(periods) == 0:
            return np.zeros(0)

        n = len(frame)
        if self.method == "fft":
            full = librosa.autocorrelate(frame, max_size=periods.stop)
            corr = np.zeros(len(periods))
            available = full[periods.start:periods.stop]
            corr[: len(available)] = available
            return corr

        return np.array(
            [np.dot(frame[: n - p], frame[p:]) if p < n else 0.0 for p in periods]
        )

    def detect(self, frame: np.ndarray, sample_rate: int) -> float:
        """
        Estimate the fundamental frequency of a frame.

        Args:
            frame: Audio samples
            sample_rate: Sample rate (Hz)

        Returns:
            Frequency in Hz, or 0.0 if no period has positive correlation
        """
        corr = self.autocorrelation(frame, sample_rate)
        if len(corr) == 0:
            return 0.0

        # argmax keeps the first (shortest) period on ties
        best = int(np.argmax(corr))
        if corr[best] <= 0:
            return 0.0

        period = self.period_range(sample_rate)[best]
        return sample_rate / period


def detect_pitch(
    frame: np.ndarray,
    sample_rate: int,
    min_freq: float = DEFAULT_MIN_FREQ,
    max_freq: float = DEFAULT_MAX_FREQ,
) -> float:
    """Estimate the fundamental frequency of one frame (0.0 when unpitched)."""
    return PitchAnalyzer(min_freq=min_freq, max_freq=max_freq).detect(frame, sample_rate)


def _semitones_above_c0(freq: float) -> int:
    return int(np.floor(12 * np.log2(freq / C0_FREQ) + 0.5))


def frequency_to_pitch_class(freq: float) -> int:
    """Convert frequency to pitch class (0-11), or -1 below 50 Hz."""
    if freq < MIN_PITCHED_FREQ:
        return -1
    return _semitones_above_c0(freq) % 12


def frequency_to_note(freq: float) -> str:
    """Convert frequency to a note label such as 'a4' or 'cs3'.

    Frequencies below 50 Hz map to 'rest'.
    """
    if freq < MIN_PITCHED_FREQ:
        return REST

    semitones = _semitones_above_c0(freq)
    octave, pitch_class = divmod(semitones, 12)
    return f"{NOTE_LABELS[pitch_class]}{octave}"


def note_to_frequency(note: str) -> float:
    """Convert a note label to frequency in Hz (0.0 if unparseable)."""
    match = _NOTE_LABEL.match(note)
    if not match:
        return 0.0

    name, octave = match.group(1), int(match.group(2))
    if name not in NOTE_LABELS:
        return 0.0

    half_steps = (octave - 4) * 12 + NOTE_LABELS.index(name) - 9
    return A4_FREQ * 2 ** (half_steps / 12)


def transpose_note(note: str, semitones: int) -> str:
    """Transpose a note label, carrying into the next/previous octave."""
    match = _NOTE_LABEL.match(note)
    if not match:
        return note

    name, octave = match.group(1), int(match.group(2))
    if name not in NOTE_LABELS:
        return note

    octave_change, pitch_class = divmod(NOTE_LABELS.index(name) + semitones, 12)
    return f"{NOTE_LABELS[pitch_class]}{octave + octave_change}"


def format_note_for_notation(note: str) -> str:
    """Render a note name like 'C#4' or 'Bb3' as 'cs4' / 'bf3'."""
    match = _NOTE_NAME.match(note)
    if not match:
        return note.lower()

    name, accidental, octave = match.groups()
    return f"{name.lower()}{_ACCIDENTALS[accidental]}{octave}"
