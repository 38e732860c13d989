"""Tempo and beat analysis."""

import math
from dataclasses import dataclass, field
from typing import Sequence, Tuple

import numpy as np
import librosa

from ..core.constants import (
    COMMON_TEMPOS,
    DEFAULT_MAX_BPM,
    DEFAULT_MIN_BPM,
    DEFAULT_TEMPO,
    TEMPO_FRAME_SIZE,
    TEMPO_HOP_SIZE,
)


@dataclass
class TempoInfo:
    """Container for tempo analysis results."""

    bpm: int
    beat_times: np.ndarray = field(default_factory=lambda: np.zeros(0))  # Beat positions in seconds
    confidence: float = 0.0  # Summed onset strength on the winning beat grid


class TempoAnalyzer:
    """Estimate tempo with a comb search over an onset-strength envelope."""

    def __init__(
        self,
        min_bpm: int = DEFAULT_MIN_BPM,
        max_bpm: int = DEFAULT_MAX_BPM,
        frame_size: int = TEMPO_FRAME_SIZE,
        hop_size: int = TEMPO_HOP_SIZE,
    ):
        self.min_bpm = min_bpm
        self.max_bpm = max_bpm
        self.frame_size = frame_size
        self.hop_size = hop_size

    @property
    def fallback_bpm(self) -> int:
        """Tempo reported when the signal has no onsets."""
        return min(max(DEFAULT_TEMPO, self.min_bpm), self.max_bpm)

    def energy_envelope(self, data: np.ndarray) -> np.ndarray:
        """RMS energy per frame for frame starts in [0, len - frame_size)."""
        data = np.asarray(data, dtype=np.float64)
        n_frames = len(range(0, len(data) - self.frame_size, self.hop_size))
        if n_frames == 0:
            return np.zeros(0)

        rms = librosa.feature.rms(
            y=data,
            frame_length=self.frame_size,
            hop_length=self.hop_size,
            center=False,
        )[0]
        return rms[:n_frames]

    @staticmethod
    def onset_strength(energies: np.ndarray) -> np.ndarray:
        """Half-wave rectified first difference of the energy envelope."""
        if len(energies) < 2:
            return np.zeros(0)
        return np.maximum(0.0, np.diff(energies))

    def _best_phase(self, onsets: np.ndarray, beat_interval: float) -> Tuple[float, int]:
        """
        Best summed onset strength over all integer phases of a beat grid.

        Returns:
            Tuple of (score, phase offset in envelope frames)
        """
        n = len(onsets)
        offsets = np.arange(0, beat_interval)
        beats = np.arange(int(math.ceil(n / beat_interval)) + 1)
        positions = offsets[:, None] + beats[None, :] * beat_interval
        valid = positions < n
        indices = np.where(valid, np.floor(positions), 0).astype(int)
        scores = np.where(valid, onsets[indices], 0.0).sum(axis=1)

        best = int(np.argmax(scores))
        return max(0.0, float(scores[best])), int(offsets[best])

    def _search(self, data: np.ndarray, sr: int) -> Tuple[int, float, int]:
        onsets = self.onset_strength(self.energy_envelope(data))
        frames_per_second = sr / self.hop_size

        best_bpm, best_score, best_offset = self.fallback_bpm, 0.0, 0
        if len(onsets) == 0:
            return best_bpm, best_score, best_offset

        for bpm in range(self.min_bpm, self.max_bpm + 1):
            beat_interval = (60.0 / bpm) * frames_per_second
            score, offset = self._best_phase(onsets, beat_interval)
            if score > best_score:
                best_bpm, best_score, best_offset = bpm, score, offset

        return best_bpm, best_score, best_offset

    def detect(self, data: np.ndarray, sr: int) -> int:
        """
        Detect tempo.

        Args:
            data: Audio array
            sr: Sample rate

        Returns:
            Tempo in whole BPM within [min_bpm, max_bpm]
        """
        bpm, _, _ = self._search(data, sr)
        return bpm

    def analyze(self, data: np.ndarray, sr: int) -> TempoInfo:
        """
        Perform full tempo analysis.

        Args:
            data: Audio array
            sr: Sample rate

        Returns:
            TempoInfo with the beat grid of the winning tempo
        """
        bpm, score, offset = self._search(data, sr)
        if score <= 0:
            return TempoInfo(bpm=bpm)

        n_onsets = len(self.energy_envelope(data)) - 1
        beat_interval = (60.0 / bpm) * (sr / self.hop_size)
        positions = np.arange(offset, n_onsets, beat_interval)
        # onset i measures the rise into energy frame i + 1
        beat_times = librosa.frames_to_time(
            np.floor(positions).astype(int) + 1,
            sr=sr,
            hop_length=self.hop_size,
        )
        return TempoInfo(bpm=bpm, beat_times=beat_times, confidence=score)


def detect_tempo(
    data: np.ndarray,
    sr: int,
    min_bpm: int = DEFAULT_MIN_BPM,
    max_bpm: int = DEFAULT_MAX_BPM,
) -> int:
    """Estimate tempo of an audio buffer in whole BPM."""
    return TempoAnalyzer(min_bpm=min_bpm, max_bpm=max_bpm).detect(data, sr)


def calculate_average_interval(onsets: Sequence[float]) -> int:
    """
    Estimate tempo from onset timestamps.

    The mean inter-onset interval is converted to BPM and folded into
    [60, 200] by doubling or halving.

    Returns:
        Rounded BPM, or 0 when fewer than two onsets are given
    """
    if len(onsets) < 2:
        return 0

    avg_interval = float(np.mean(np.diff(np.asarray(onsets, dtype=np.float64))))
    if avg_interval <= 0:
        return 0

    bpm = 60.0 / avg_interval
    while bpm < 60:
        bpm *= 2
    while bpm > 200:
        bpm /= 2

    return int(math.floor(bpm + 0.5))


def quantize_tempo(tempo: float) -> int:
    """Snap a tempo to the nearest of 60, 70, ..., 200 (lower wins ties)."""
    return min(COMMON_TEMPOS, key=lambda t: abs(tempo - t))
