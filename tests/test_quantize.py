"""Tests for note quantization."""

import pytest

from tonalyzer.core import NoteEvent
from tonalyzer.processing.quantize import Quantizer, quantize_notes


class TestQuantizer:
    def test_grid_sizes(self):
        assert Quantizer(tempo=120, quantize_value="1/4").grid_duration == 0.5
        assert Quantizer(tempo=120, quantize_value="1/8").grid_duration == 0.25
        assert Quantizer(tempo=120, quantize_value="1/16").grid_duration == 0.125
        assert Quantizer(tempo=120, quantize_value="1/32").grid_duration == 0.0625
        assert Quantizer(tempo=60, quantize_value="1/4").grid_duration == 1.0

    def test_unknown_grid_falls_back_to_sixteenths(self):
        with pytest.warns(UserWarning, match="Unknown quantize value"):
            quantizer = Quantizer(tempo=120, quantize_value="1/3")
        assert quantizer.grid_duration == 0.125

    def test_snaps_start_and_duration(self):
        notes = [NoteEvent("c4", 0.13, 0.3), NoteEvent("e4", 0.48, 0.52)]
        quantized = quantize_notes(notes, 120, "1/16")

        assert quantized[0].time == pytest.approx(0.125)
        assert quantized[0].duration == pytest.approx(0.25)
        assert quantized[1].time == pytest.approx(0.5)
        assert quantized[1].duration == pytest.approx(0.5)
        assert [n.note for n in quantized] == ["c4", "e4"]

    def test_duration_never_below_one_grid(self):
        quantized = quantize_notes([NoteEvent("c4", 0.0, 0.01)], 120, "1/8")
        assert quantized[0].duration == 0.25

    def test_halves_round_up(self):
        quantized = quantize_notes([NoteEvent("c4", 0.0625, 0.1875)], 120, "1/16")
        assert quantized[0].time == 0.125
        assert quantized[0].duration == 0.25

    def test_missing_duration_stays_missing(self):
        quantized = quantize_notes([NoteEvent("c4", 0.3)], 120, "1/4")
        assert quantized[0].time == 0.5
        assert quantized[0].duration is None

    def test_none_passes_through(self):
        notes = [NoteEvent("c4", 0.13, 0.3)]
        assert quantize_notes(notes, 120, "none") == notes

    def test_input_not_modified(self):
        notes = [NoteEvent("c4", 0.13, 0.3)]
        quantize_notes(notes, 120, "1/4")
        assert notes[0] == NoteEvent("c4", 0.13, 0.3)

    @pytest.mark.parametrize("tempo", [0, -90])
    def test_non_positive_tempo_uses_120(self, tempo):
        with pytest.warns(UserWarning, match="Invalid tempo"):
            quantized = quantize_notes([NoteEvent("c4", 0.13, 0.3)], tempo, "1/16")
        assert quantized[0].time == pytest.approx(0.125)
        assert quantized[0].duration == pytest.approx(0.25)

    def test_empty(self):
        assert quantize_notes([], 120, "1/16") == []
