"""Tests for the command-line interface."""

import pytest
import soundfile as sf
from typer.testing import CliRunner

from tonalyzer.cli import app
from generate_test_audio import generate_sine_wave, generate_note_sequence

runner = CliRunner()


@pytest.fixture
def tone_file(tmp_path):
    path = tmp_path / "tone.wav"
    sf.write(str(path), generate_sine_wave(261.6, 2.0, sr=22050), 22050)
    return path


class TestAnalyzeCommand:
    def test_table_output(self, tone_file):
        result = runner.invoke(app, ["analyze", str(tone_file)])
        assert result.exit_code == 0, result.output
        assert "c4" in result.output
        assert "Analysis complete" in result.output

    def test_json_output(self, tone_file):
        result = runner.invoke(app, ["analyze", str(tone_file), "--json"])
        assert result.exit_code == 0, result.output
        assert '"detected_key"' in result.output
        assert '"timings"' in result.output

    def test_overrides(self, tone_file):
        result = runner.invoke(
            app,
            ["analyze", str(tone_file), "--tempo", "96", "--key", "Em", "-q", "none", "--simplify"],
        )
        assert result.exit_code == 0, result.output
        assert "96 BPM" in result.output
        assert "Key: Em" in result.output

    def test_chords_from_notes_follow_time_signature(self, tone_file):
        result = runner.invoke(
            app,
            ["analyze", str(tone_file), "--chords", "notes", "--time-signature", "3/4", "--json"],
        )
        assert result.exit_code == 0, result.output
        assert '"name": "c"' in result.output
        assert '"duration": 1.5' in result.output

    def test_unknown_chord_source(self, tone_file):
        result = runner.invoke(app, ["analyze", str(tone_file), "--chords", "guess"])
        assert result.exit_code == 1
        assert "Unknown chord source" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "missing.wav")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("not audio")
        result = runner.invoke(app, ["analyze", str(path)])
        assert result.exit_code == 1
        assert "Unsupported format" in result.output


class TestInfoCommand:
    def test_key_line(self, tone_file):
        result = runner.invoke(app, ["info", str(tone_file)])
        assert result.exit_code == 0, result.output
        assert "Estimated key: C major" in result.output

    def test_info(self, tmp_path):
        path = tmp_path / "melody.wav"
        audio = generate_note_sequence([261.63, 329.63, 392.0], [0.5, 0.5, 1.0], sr=22050)
        sf.write(str(path), audio, 22050)

        result = runner.invoke(app, ["info", str(path)])
        assert result.exit_code == 0, result.output
        assert "Sample rate: 22050 Hz" in result.output
        assert "Estimated key" in result.output

    def test_info_missing_file(self, tmp_path):
        result = runner.invoke(app, ["info", str(tmp_path / "missing.wav")])
        assert result.exit_code == 1
