"""Note and chord events - the output units of an analysis."""

import re
from dataclasses import dataclass
from typing import List, Optional

_OCTAVE_SUFFIX = re.compile(r"(\d+)$")


@dataclass
class NoteEvent:
    """A single melody note."""

    note: str  # Lowercase label, e.g. "c4", "fs3"
    time: float  # Start time in seconds
    duration: Optional[float] = None  # Length in seconds

    @property
    def end(self) -> float:
        """End time in seconds (start time when the duration is unknown)."""
        return self.time + (self.duration or 0.0)

    @property
    def octave(self) -> Optional[int]:
        """Octave parsed from the trailing digits of the label."""
        match = _OCTAVE_SUFFIX.search(self.note)
        if not match:
            return None
        return int(match.group(1))

    @property
    def pitch_label(self) -> str:
        """Label with the octave stripped (e.g. 'cs')."""
        return _OCTAVE_SUFFIX.sub("", self.note)

    def to_dict(self) -> dict:
        data = {"note": self.note, "time": self.time}
        if self.duration is not None:
            data["duration"] = self.duration
        return data


@dataclass
class ChordEvent:
    """A chord spanning a stretch of time."""

    notes: List[str]  # Note labels, at most four
    name: str  # Chord symbol (e.g. "Am", "G")
    time: float
    duration: Optional[float] = None
    degree: Optional[str] = None  # Scale degree (e.g. "I", "ii°")

    @property
    def end(self) -> float:
        return self.time + (self.duration or 0.0)

    def to_dict(self) -> dict:
        data = {"notes": list(self.notes), "name": self.name, "time": self.time}
        if self.duration is not None:
            data["duration"] = self.duration
        if self.degree is not None:
            data["degree"] = self.degree
        return data
