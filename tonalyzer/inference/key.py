"""Key detection - Identify the tonal center of a piece.

Implements Krumhansl-Schmuckler key finding over a 12-bin pitch-class
histogram:
- Both the histogram and each rotated key profile are L1-normalized
- The score of a candidate key is the dot product of the two
- Candidates are scanned tonic by tonic, major before minor
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Optional, Sequence

import numpy as np

from ..core import PITCH_NAMES


@dataclass
class KeyCandidate:
    """A candidate key with its score."""
    tonic: str
    mode: str
    score: float

    @property
    def key(self) -> str:
        return key_label(self.tonic, self.mode)


@dataclass
class KeyInfo:
    """Container for key detection results."""

    tonic: str  # Key root note (e.g., "C", "F#")
    mode: str  # "major" or "minor"
    confidence: float  # Winning score, floored at zero
    pitch_class_distribution: np.ndarray = None  # Input histogram
    alternatives: List[KeyCandidate] = field(default_factory=list)  # Next best keys
    relative_key: Optional[str] = None
    parallel_key: Optional[str] = None

    @property
    def key(self) -> str:
        """Key label, e.g. 'C' or 'Am'."""
        return key_label(self.tonic, self.mode)


def key_label(tonic: str, mode: str) -> str:
    return f"{tonic}m" if mode == "minor" else tonic


def _normalize(values: np.ndarray) -> np.ndarray:
    total = values.sum()
    if total > 0:
        return values / total
    return values


class KeyDetector:
    """Detect musical key from a pitch-class histogram."""

    # Krumhansl-Schmuckler key profiles (index 0 = tonic)
    MAJOR_PROFILE = np.array(
        [6.35, 2.23, 3.48, 2.33, 4.38, 4.09, 2.52, 5.19, 2.39, 3.66, 2.29, 2.88]
    )
    MINOR_PROFILE = np.array(
        [6.33, 2.68, 3.52, 5.38, 2.60, 3.53, 2.54, 4.75, 3.98, 2.69, 3.34, 3.17]
    )

    def __init__(self, num_alternatives: int = 3):
        """
        Initialize KeyDetector.

        Args:
            num_alternatives: How many runner-up keys analyze() reports
        """
        self.num_alternatives = num_alternatives

    def get_candidates(self, histogram: Sequence[float]) -> List[KeyCandidate]:
        """
        Score all 24 keys.

        Args:
            histogram: 12-element pitch class weights (index 0 = C)

        Returns:
            KeyCandidates in scan order: C major, C minor, C# major, ...
        """
        normalized = _normalize(np.asarray(histogram, dtype=np.float64))
        candidates = []

        for tonic in range(12):
            for mode, profile in (("major", self.MAJOR_PROFILE), ("minor", self.MINOR_PROFILE)):
                rotated = _normalize(np.roll(profile, tonic))
                score = float(np.dot(normalized, rotated))
                candidates.append(KeyCandidate(PITCH_NAMES[tonic], mode, score))

        return candidates

    @staticmethod
    def _pick_best(candidates: List[KeyCandidate]) -> KeyCandidate:
        # Only a strictly greater score replaces the current best
        best = candidates[0]
        for candidate in candidates[1:]:
            if candidate.score > best.score:
                best = candidate
        return best

    def detect(self, histogram: Sequence[float]) -> str:
        """Detect key and return its label ('C', 'F#m', ...)."""
        return self._pick_best(self.get_candidates(histogram)).key

    def analyze(self, histogram: Sequence[float]) -> KeyInfo:
        """
        Perform full key analysis.

        Args:
            histogram: 12-element pitch class weights

        Returns:
            KeyInfo with confidence, runner-up keys and related keys
        """
        candidates = self.get_candidates(histogram)
        best = self._pick_best(candidates)

        runners_up = sorted(
            (c for c in candidates if c is not best),
            key=lambda c: c.score,
            reverse=True,
        )

        return KeyInfo(
            tonic=best.tonic,
            mode=best.mode,
            confidence=max(0.0, best.score),
            pitch_class_distribution=np.asarray(histogram, dtype=np.float64),
            alternatives=runners_up[: self.num_alternatives],
            relative_key=self._get_relative_key(best.tonic, best.mode),
            parallel_key=self._get_parallel_key(best.tonic, best.mode),
        )

    @staticmethod
    def _get_relative_key(tonic: str, mode: str) -> str:
        """Relative minor is 3 semitones down, relative major 3 up."""
        tonic_idx = PITCH_NAMES.index(tonic)
        if mode == "major":
            return key_label(PITCH_NAMES[(tonic_idx - 3) % 12], "minor")
        return key_label(PITCH_NAMES[(tonic_idx + 3) % 12], "major")

    @staticmethod
    def _get_parallel_key(tonic: str, mode: str) -> str:
        return key_label(tonic, "major" if mode == "minor" else "minor")


def detect_key(histogram: Sequence[float]) -> str:
    """Detect key label from a pitch-class histogram."""
    return KeyDetector().detect(histogram)


def detect_key_detailed(histogram: Sequence[float]) -> KeyInfo:
    """Detect key with mode and confidence."""
    return KeyDetector().analyze(histogram)


KEY_SEMITONES = MappingProxyType({
    "C": 0, "C#": 1, "C#/Db": 1, "Db": 1,
    "D": 2, "D#": 3, "D#/Eb": 3, "Eb": 3,
    "E": 4,
    "F": 5, "F#": 6, "F#/Gb": 6, "Gb": 6,
    "G": 7, "G#": 8, "G#/Ab": 8, "Ab": 8,
    "A": 9, "A#": 10, "A#/Bb": 10, "Bb": 10,
    "B": 11,
})

_ENHARMONIC_SUFFIXES = ("/Db", "/Eb", "/Gb", "/Ab", "/Bb")
_CHORD_ROOT = re.compile(r"^([A-G]#?)(.*)$")


def key_tonic_semitone(key: str) -> int:
    """Pitch class of a key label's tonic; unknown spellings map to 0."""
    root = key.replace("m", "", 1)
    for suffix in _ENHARMONIC_SUFFIXES:
        root = root.replace(suffix, "")
    return KEY_SEMITONES.get(root, 0)


def get_key_transposition(from_key: str, to_key: str) -> int:
    """Semitone distance from one key's tonic to another's (may be negative)."""
    return key_tonic_semitone(to_key) - key_tonic_semitone(from_key)


def get_chord_name_in_key(name: str, semitones: int) -> str:
    """Transpose a chord symbol's root, keeping its quality suffix."""
    match = _CHORD_ROOT.match(name)
    if not match:
        return name

    root, suffix = match.groups()
    if root not in PITCH_NAMES:
        return name

    return f"{PITCH_NAMES[(PITCH_NAMES.index(root) + semitones) % 12]}{suffix}"
