"""Tests for chord synthesis and progression utilities."""

import pytest
import numpy as np

from tonalyzer.core import ChordEvent, NoteEvent
from tonalyzer.inference.chords import (
    ChordSynthesizer,
    extract_chords,
    generate_chords_from_notes,
    simplify_chord_progression,
    get_chord_at_time,
    get_roman_numeral,
    is_minor_key,
)


class TestTemplates:
    def test_major_key_templates(self):
        templates = ChordSynthesizer().templates_for_key("G")
        assert [t.name for t in templates] == ["G", "Am", "Bm", "C", "D", "Em"]
        assert [t.degree for t in templates] == ["I", "ii", "iii", "IV", "V", "vi"]
        assert templates[0].notes == ("g3", "b3", "d4")

    def test_minor_key_templates(self):
        templates = ChordSynthesizer().templates_for_key("Em")
        assert [t.name for t in templates] == ["Em", "F#dim", "G", "Am", "Bm", "C", "D"]
        assert templates[0].notes == ("e2", "g2", "b2")
        assert templates[1].degree == "ii°"

    def test_c_major_is_untransposed(self):
        templates = ChordSynthesizer().templates_for_key("C")
        assert templates[3].notes == ("f3", "a3", "c4")

    def test_minor_detection(self):
        assert is_minor_key("Am")
        assert is_minor_key("F#m")
        assert not is_minor_key("C")
        assert not is_minor_key("Cmaj")


class TestExtractChords:
    """Energy-driven progression."""

    def test_silence_picks_tonic(self):
        sr = 1000
        chords = extract_chords(np.zeros(sr * 6), sr, 6.0, "D")

        assert len(chords) == 3
        assert [c.name for c in chords] == ["D", "D", "D"]
        assert [c.degree for c in chords] == ["I", "I", "I"]
        assert [c.time for c in chords] == [0.0, 2.0, 4.0]
        assert all(c.duration == 2.0 for c in chords)

    def test_energy_selects_template(self):
        sr = 1000
        data = np.full(sr * 4, -0.5)
        # each 2000-sample segment sums to 1000 -> 1000000 % 6 == 4 -> V
        chords = extract_chords(data, sr, 4.0, "C")

        assert [c.name for c in chords] == ["G", "G"]
        assert chords[0].degree == "V"
        assert chords[0].notes == ["g3", "b3", "d4"]

    def test_segment_count_capped_at_eight(self):
        sr = 100
        chords = extract_chords(np.zeros(sr * 30), sr, 30.0, "Am")
        assert len(chords) == 8
        assert chords[-1].time == 14.0
        assert all(c.name == "Am" for c in chords)

    def test_short_buffer_has_no_chords(self):
        assert extract_chords(np.zeros(1500), 1000, 1.5, "C") == []

    def test_uneven_duration_uses_whole_segments(self):
        sr = 1000
        chords = ChordSynthesizer().extract(np.zeros(5000), sr, 5.0, "C")
        assert [c.time for c in chords] == [0.0, 2.0]


class TestChordsFromNotes:
    def test_groups_simultaneous_notes(self):
        notes = [NoteEvent("c4", 0.0), NoteEvent("e4", 0.0)]
        chords = generate_chords_from_notes(notes, "4/4")

        assert len(chords) == 1
        assert chords[0].notes == ["c4", "e4"]
        assert chords[0].name == "c"
        assert chords[0].time == 0.0
        assert chords[0].duration == 2.0

    def test_windows_follow_time_signature(self):
        notes = [
            NoteEvent("g3", 0.2),
            NoteEvent("a3", 1.6),
            NoteEvent("b3", 3.1),
        ]
        chords = generate_chords_from_notes(notes, "3/4")
        assert [c.time for c in chords] == [0.0, 1.5, 3.0]
        assert all(c.duration == 1.5 for c in chords)

    def test_duplicates_collapsed_and_capped(self):
        labels = ["c4", "e4", "c4", "g4", "b4", "d5", "e4"]
        notes = [NoteEvent(label, 0.1 * i) for i, label in enumerate(labels)]
        chords = generate_chords_from_notes(notes)
        assert chords[0].notes == ["c4", "e4", "g4", "b4"]

    def test_sorted_by_time(self):
        notes = [NoteEvent("fs3", 5.0), NoteEvent("a3", 0.5)]
        chords = generate_chords_from_notes(notes)
        assert [c.time for c in chords] == [0.0, 4.0]
        assert [c.name for c in chords] == ["a", "fs"]

    def test_empty(self):
        assert generate_chords_from_notes([]) == []

    def test_bad_time_signature_uses_four_beats(self):
        chords = generate_chords_from_notes([NoteEvent("c4", 0.0)], "x/y")
        assert chords[0].duration == 2.0


def _chord(name: str, time: float, duration=2.0, degree=None) -> ChordEvent:
    return ChordEvent(notes=[], name=name, time=time, duration=duration, degree=degree)


class TestProgressionUtilities:
    def test_simplify_drops_adjacent_repeats(self):
        chords = [_chord("C", 0), _chord("C", 2), _chord("G", 4), _chord("C", 6), _chord("C", 8)]
        simplified = simplify_chord_progression(chords)
        assert [c.name for c in simplified] == ["C", "G", "C"]
        assert [c.time for c in simplified] == [0, 4, 6]

    def test_simplify_short_inputs(self):
        assert simplify_chord_progression([]) == []
        single = [_chord("Am", 0)]
        assert simplify_chord_progression(single) == single

    def test_chord_at_time(self):
        chords = [_chord("C", 0.0), _chord("F", 2.0), _chord("G", 4.0, duration=None)]
        assert get_chord_at_time(chords, 1.99).name == "C"
        assert get_chord_at_time(chords, 2.0).name == "F"
        assert get_chord_at_time(chords, 4.0) is None
        assert get_chord_at_time([], 0.0) is None

    def test_roman_numerals(self):
        assert get_roman_numeral(_chord("G", 0, degree="V"), "C") == "V"
        assert get_roman_numeral(_chord("Bdim", 0, degree="ii°"), "Am") == "ii°"
        assert get_roman_numeral(_chord("E", 0, degree="V"), "Am") == "E"
        assert get_roman_numeral(_chord("Am", 0, degree="i"), "C") == "Am"
        assert get_roman_numeral(_chord("F", 0), "C") == "F"

    def test_roman_numerals_for_synthesized_chords(self):
        chords = extract_chords(np.zeros(4000), 1000, 4.0, "Em")
        assert [get_roman_numeral(c, "Em") for c in chords] == ["i", "i"]

    def test_to_dict(self):
        chord = ChordEvent(["c3", "e3", "g3"], "C", 0.0, 2.0, "I")
        assert chord.to_dict() == {
            "notes": ["c3", "e3", "g3"],
            "name": "C",
            "time": 0.0,
            "duration": 2.0,
            "degree": "I",
        }
