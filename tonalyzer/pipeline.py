"""Full analysis pipeline: samples in, melody/key/tempo/chords out."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

import numpy as np

from .core import AnalysisParams, ChordEvent, NoteEvent
from .analysis import TempoAnalyzer
from .inference import ChordSynthesizer, KeyDetector, KeyInfo, MelodyExtractor
from .processing import Quantizer


@dataclass
class AnalysisResult:
    """Everything a downstream consumer needs from one analysis pass."""

    melody: List[NoteEvent]
    chords: List[ChordEvent]
    detected_key: str
    estimated_tempo: int
    duration: float
    sample_rate: int
    key_info: Optional[KeyInfo] = None  # Set when the key was detected
    pitch_class_histogram: np.ndarray = field(default_factory=lambda: np.zeros(12))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        result = {
            "melody": [n.to_dict() for n in self.melody],
            "chords": [c.to_dict() for c in self.chords],
            "detected_key": self.detected_key,
            "estimated_tempo": self.estimated_tempo,
            "duration": self.duration,
            "sample_rate": self.sample_rate,
            "pitch_class_histogram": [float(v) for v in self.pitch_class_histogram],
        }
        if self.key_info is not None:
            result["key"] = {
                "tonic": self.key_info.tonic,
                "mode": self.key_info.mode,
                "confidence": self.key_info.confidence,
            }
        return result


def analyze_audio(
    data: np.ndarray,
    sample_rate: int,
    params: Optional[Union[AnalysisParams, Mapping[str, Any]]] = None,
) -> AnalysisResult:
    """
    Analyze a mono sample buffer.

    Args:
        data: Audio samples, roughly in [-1, 1]
        sample_rate: Sample rate (Hz)
        params: AnalysisParams, or a partial mapping of options over the defaults

    Returns:
        AnalysisResult with melody, chords, key and tempo

    Raises:
        ValueError: If sample_rate is not positive
    """
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}")

    if not isinstance(params, AnalysisParams):
        params = AnalysisParams.from_overrides(params)

    data = np.asarray(data, dtype=np.float64)
    duration = len(data) / sample_rate

    if params.auto_detect_tempo:
        tempo = TempoAnalyzer().detect(data, sample_rate)
    else:
        tempo = params.target_tempo

    melody_info = MelodyExtractor(params=params).extract(data, sample_rate)

    key_info = None
    if params.auto_detect_key:
        key_info = KeyDetector().analyze(melody_info.pitch_class_histogram)
        detected_key = key_info.key
    else:
        detected_key = params.target_key

    melody = melody_info.notes
    if params.quantize_notes:
        melody = Quantizer(tempo=tempo, quantize_value=params.quantize_value).quantize(melody)

    chords = ChordSynthesizer().extract(data, sample_rate, duration, detected_key)

    return AnalysisResult(
        melody=melody,
        chords=chords,
        detected_key=detected_key,
        estimated_tempo=tempo,
        duration=duration,
        sample_rate=sample_rate,
        key_info=key_info,
        pitch_class_histogram=melody_info.pitch_class_histogram,
    )
