"""Command-line interface for Tonalyzer.

Provides commands for:
- analyze: Melody, key, tempo and chord progression of an audio file
- info: Show audio file information with quick tempo/key estimates
"""

import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Dict, Any

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="tonalyzer",
    help="Monophonic audio to melody, key, tempo and chords",
    rich_markup_mode="markdown",
)
console = Console()

CHORD_SOURCES = ("energy", "notes")


class StageClock:
    """Wall-clock seconds spent in each named stage."""

    def __init__(self):
        self.stages: Dict[str, float] = {}

    @contextmanager
    def stage(self, name: str):
        started = time.perf_counter()
        try:
            yield
        finally:
            self.stages[name] = time.perf_counter() - started

    def to_dict(self) -> Dict[str, Any]:
        return {"stages": dict(self.stages), "total_time": sum(self.stages.values())}

    def print_summary(self) -> None:
        console.print("\n[bold]Timing Summary:[/bold]")
        for name, seconds in self.stages.items():
            console.print(f"  {name}: {seconds:.2f}s")
        console.print(f"  [bold]Total: {sum(self.stages.values()):.2f}s[/bold]")


def _load(input_file: Path, normalize: bool):
    from .input import AudioLoader

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    loader = AudioLoader(normalize=normalize)
    try:
        audio, sr = loader.load(str(input_file))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return audio, sr, loader.get_duration(audio, sr)


@app.command()
def analyze(
    input_file: Path = typer.Argument(..., help="Input audio file (WAV, MP3, FLAC, ...)"),
    sensitivity: float = typer.Option(
        50.0, "-s", "--sensitivity", help="Pitch sensitivity 0-100 (scales the silence threshold)"
    ),
    min_note_duration: float = typer.Option(
        100.0, "--min-note", help="Minimum note duration in milliseconds"
    ),
    quantize: str = typer.Option(
        "1/16", "-q", "--quantize", help="Quantize grid: 1/4, 1/8, 1/16, 1/32 or none"
    ),
    tempo: int = typer.Option(
        0, "-t", "--tempo", help="Override tempo (BPM). 0 = auto-detect"
    ),
    key: Optional[str] = typer.Option(
        None, "-k", "--key", help="Override key (e.g. 'G', 'Em'). Default: auto-detect"
    ),
    chords: str = typer.Option(
        "energy", "--chords",
        help="Chord source: 'energy' (diatonic triads of the key) or 'notes' (stacked melody notes)",
    ),
    time_signature: str = typer.Option(
        "4/4", "--time-signature", help="Time signature as beats/unit, sets the bar width for --chords notes"
    ),
    simplify: bool = typer.Option(
        False, "--simplify", help="Merge consecutive repeated chords"
    ),
    normalize: bool = typer.Option(
        True, "--normalize/--no-normalize", help="Peak-normalize audio before analysis"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
):
    """Analyze a monophonic recording.

    **Examples:**

        tonalyzer analyze hum.wav

        tonalyzer analyze riff.mp3 -q 1/8 --tempo 96 --json

        tonalyzer analyze waltz.wav --chords notes --time-signature 3/4
    """
    from .core import AnalysisParams
    from .inference import generate_chords_from_notes, simplify_chord_progression
    from .pipeline import analyze_audio

    if chords not in CHORD_SOURCES:
        console.print(f"[red]Error: Unknown chord source {chords!r} (use energy or notes)[/red]")
        raise typer.Exit(1)

    params = AnalysisParams(
        pitch_sensitivity=sensitivity,
        min_note_duration=min_note_duration,
        quantize_notes=quantize != "none",
        quantize_value=quantize,
        auto_detect_tempo=tempo <= 0,
        target_tempo=tempo if tempo > 0 else 120,
        auto_detect_key=key is None,
        target_key=key or "C",
        time_signature=time_signature,
    )

    clock = StageClock()
    with clock.stage("load"):
        audio, sr, duration = _load(input_file, normalize)

    if not json_output:
        console.print(f"[blue]Loaded:[/blue] {input_file} ({duration:.2f}s, {sr}Hz)")

    with clock.stage("analysis"):
        try:
            result = analyze_audio(audio, sr, params)
        except ValueError as e:
            console.print(f"[red]Analysis failed: {e}[/red]")
            raise typer.Exit(1)

    if chords == "notes":
        result.chords = generate_chords_from_notes(result.melody, params.time_signature)

    if simplify:
        result.chords = simplify_chord_progression(result.chords)

    if json_output:
        data = result.to_dict()
        data["input"] = str(input_file)
        data["timings"] = clock.to_dict()
        console.print_json(data=data)
        return

    console.print(f"  Tempo: {result.estimated_tempo} BPM")
    if result.key_info is not None:
        console.print(
            f"  Key: {result.detected_key} "
            f"(confidence: {result.key_info.confidence:.3f}, "
            f"relative: {result.key_info.relative_key})"
        )
    else:
        console.print(f"  Key: {result.detected_key}")

    if result.melody:
        _show_notes_table(result.melody)
    else:
        console.print("[yellow]No notes detected![/yellow]")

    if result.chords:
        _show_chords_table(result.chords, result.detected_key)

    if verbose:
        clock.print_summary()

    console.print("[green]Analysis complete![/green]")


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Input audio file"),
):
    """Show information about an audio file."""
    from .analysis import TempoAnalyzer
    from .inference import MelodyExtractor, KeyDetector

    audio, sr, duration = _load(input_file, normalize=True)

    console.print(f"\n[bold]Audio Info:[/bold] {input_file.name}")
    console.print(f"  Duration: {duration:.2f} seconds")
    console.print(f"  Sample rate: {sr} Hz")
    console.print(f"  Samples: {len(audio):,}")

    tempo_info = TempoAnalyzer().analyze(audio, sr)
    console.print(f"  Estimated tempo: {tempo_info.bpm} BPM ({len(tempo_info.beat_times)} beats)")

    melody = MelodyExtractor().extract(audio, sr)
    key_info = KeyDetector().analyze(melody.pitch_class_histogram)
    console.print(f"  Estimated key: {key_info.tonic} {key_info.mode} (confidence: {key_info.confidence:.3f})")


def _show_notes_table(notes):
    """Display notes in a table."""
    table = Table(title="Melody")
    table.add_column("Note", style="cyan")
    table.add_column("Time (s)", style="green")
    table.add_column("Duration (s)", style="yellow")

    for note in notes:
        duration = f"{note.duration:.3f}" if note.duration else "-"
        table.add_row(note.note, f"{note.time:.3f}", duration)

    console.print(table)


def _show_chords_table(chords, key):
    """Display chords in a table."""
    from .inference import get_roman_numeral

    table = Table(title="Chords")
    table.add_column("Chord", style="cyan")
    table.add_column("Roman", style="green")
    table.add_column("Time", style="yellow")
    table.add_column("Notes", style="magenta")

    for chord in chords:
        table.add_row(
            chord.name,
            get_roman_numeral(chord, key),
            f"{chord.time:.2f}-{chord.end:.2f}s",
            " ".join(chord.notes),
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
