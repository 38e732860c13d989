"""Analysis parameters - user-tunable settings for a full analysis."""

import warnings
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Tuple

from .constants import DEFAULT_TIME_SIGNATURE, SILENCE_RMS

# Camel-case spellings accepted by AnalysisParams.from_overrides
_CAMEL_ALIASES = {
    "pitchSensitivity": "pitch_sensitivity",
    "amplitudeThreshold": "amplitude_threshold",
    "minNoteDuration": "min_note_duration",
    "quantizeNotes": "quantize_notes",
    "quantizeValue": "quantize_value",
    "autoDetectTempo": "auto_detect_tempo",
    "targetTempo": "target_tempo",
    "autoDetectKey": "auto_detect_key",
    "targetKey": "target_key",
    "timeSignature": "time_signature",
}


@dataclass(frozen=True)
class AnalysisParams:
    """Configuration for audio analysis.

    Attributes:
        pitch_sensitivity: 0-100, scales the RMS silence threshold (default: 50)
        amplitude_threshold: Accepted for compatibility, does not affect the silence gate (default: 0.01)
        min_note_duration: Minimum note length to keep, in milliseconds (default: 100)
        quantize_notes: Snap melody timing to a grid (default: True)
        quantize_value: Grid value, one of 1/4, 1/8, 1/16, 1/32, none (default: "1/16")
        auto_detect_tempo: Estimate tempo from audio, else use target_tempo (default: True)
        target_tempo: Tempo in BPM used when auto detection is off (default: 120)
        auto_detect_key: Estimate key from audio, else use target_key (default: True)
        target_key: Key label used when auto detection is off (default: "C")
        time_signature: "beats/unit" string (default: "4/4")
    """

    pitch_sensitivity: float = 50.0
    amplitude_threshold: float = 0.01
    min_note_duration: float = 100.0
    quantize_notes: bool = True
    quantize_value: str = "1/16"
    auto_detect_tempo: bool = True
    target_tempo: int = 120
    auto_detect_key: bool = True
    target_key: str = "C"
    time_signature: str = "4/4"

    @property
    def rms_threshold(self) -> float:
        """RMS level below which a melody frame counts as silence."""
        return SILENCE_RMS * (self.pitch_sensitivity / 100.0)

    @property
    def min_note_seconds(self) -> float:
        return self.min_note_duration / 1000.0

    @classmethod
    def from_overrides(
        cls,
        overrides: Optional[Mapping[str, Any]] = None,
        base: Optional["AnalysisParams"] = None,
    ) -> "AnalysisParams":
        """
        Overlay a partial set of options on top of the defaults.

        Args:
            overrides: Mapping of option name to value (snake_case or camelCase)
            base: Parameters to overlay onto (default: the defaults)

        Returns:
            New AnalysisParams with each supplied field replaced
        """
        base = base or cls()
        if not overrides:
            return base

        known = {f.name for f in fields(cls)}
        changes = {}
        for key, value in overrides.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name not in known:
                warnings.warn(f"Ignoring unknown analysis option: {key!r}")
                continue
            changes[name] = value

        return replace(base, **changes)


def parse_time_signature(time_signature: str) -> Tuple[int, int]:
    """
    Parse a "beats/unit" string.

    Falls back to 4/4 components for any part that is not a positive integer.
    """
    default_beats, default_unit = DEFAULT_TIME_SIGNATURE
    parts = str(time_signature).split("/")

    def _parse(text: str, default: int) -> int:
        try:
            value = int(text.strip())
        except ValueError:
            return default
        return value if value > 0 else default

    beats = _parse(parts[0], default_beats)
    unit = _parse(parts[1], default_unit) if len(parts) > 1 else default_unit
    return beats, unit
