"""Command-line interface for Sonura.

Provides commands for:
- chord: Parse a chord symbol, spell its notes and show its fingering
- fretboard: Draw the fingering of one or more chords
- tune: Run the tuner over an audio file
- listen: Run the tuner on the microphone
- render: Render a chord progression to WAV
- info: Show engine defaults
"""

import json
import queue
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

app = typer.Typer(
    name="sonura",
    help="Tuner and chord engine for songwriting and ear training",
    rich_markup_mode="markdown",
)
console = Console()


@dataclass
class StageTimings:
    """Track timing of processing stages."""

    stages: Dict[str, float] = field(default_factory=dict)
    _current_stage: Optional[str] = field(default=None, repr=False)
    _start_time: float = field(default=0.0, repr=False)

    def start(self, stage: str) -> None:
        """Start timing a stage."""
        self._current_stage = stage
        self._start_time = time.perf_counter()

    def stop(self) -> float:
        """Stop timing the current stage, return duration."""
        if self._current_stage is None:
            return 0.0
        duration = time.perf_counter() - self._start_time
        self.stages[self._current_stage] = duration
        self._current_stage = None
        return duration

    @property
    def total_time(self) -> float:
        return sum(self.stages.values())

    def print_summary(self) -> None:
        """Print timing summary to console."""
        console.print("\n[bold]Timing Summary:[/bold]")
        for stage, duration in self.stages.items():
            console.print(f"  {stage}: {duration * 1000:.1f}ms")
        console.print(f"  [bold]Total: {self.total_time * 1000:.1f}ms[/bold]")


def _format_frets(frets) -> str:
    return " ".join("x" if f < 0 else str(f) for f in frets)


@app.command()
def chord(
    symbol: str = typer.Argument(..., help="Chord symbol, e.g. C#m7/G"),
    transpose: int = typer.Option(
        0, "-t", "--transpose", help="Transpose by this many semitones first"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """Parse a chord symbol and show its notes and guitar fingering.

    **Examples:**

        sonura chord Am7

        sonura chord Bb/D --transpose 2
    """
    from .core import match_interval_set
    from .inference import parse_chord, transpose_chord, chord_notes
    from .fretboard import FingeringResolver

    if transpose:
        symbol = transpose_chord(symbol, transpose)

    parsed = parse_chord(symbol)
    match = match_interval_set(parsed.quality)
    notes = chord_notes(symbol)
    fingering = FingeringResolver().resolve(symbol)
    barre = fingering.barre

    if json_output:
        print(json.dumps({
            "symbol": parsed.symbol,
            "root": parsed.root,
            "quality": parsed.quality,
            "bass": parsed.bass,
            "intervals": list(match.intervals),
            "match": match.rule,
            "notes": notes,
            "fretting": list(fingering.frets),
            "shape": fingering.source,
            "barre": None if barre is None else {
                "fret": barre.fret,
                "first_string": barre.first_string,
                "last_string": barre.last_string,
            },
        }, indent=2))
        return

    table = Table(title=f"Chord {parsed.symbol}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Root", parsed.root)
    table.add_row("Quality", parsed.quality or "(major)")
    table.add_row("Bass", parsed.bass or "-")
    table.add_row("Intervals", ", ".join(str(i) for i in match.intervals))
    table.add_row("Notes", " ".join(notes))
    table.add_row("Fretting", _format_frets(fingering.frets))
    table.add_row("Shape", fingering.source if not fingering.base_fret
                  else f"{fingering.source} @ fret {fingering.base_fret}")
    if barre is not None:
        table.add_row("Barre", f"fret {barre.fret}, strings {barre.first_string}-{barre.last_string}")
    console.print(table)

    if match.degraded:
        console.print(
            f"[yellow]Quality '{parsed.quality}' not recognized; "
            f"used {match.rule} match '{match.key or ''}'[/yellow]"
        )


@app.command()
def fretboard(
    symbols: List[str] = typer.Argument(..., help="One or more chord symbols"),
    frets: int = typer.Option(15, "--frets", help="Number of frets to draw"),
):
    """Draw fret diagrams for chords."""
    from .fretboard import FingeringResolver, render_diagram

    resolver = FingeringResolver(max_fret=frets)
    for symbol in symbols:
        fingering = resolver.resolve(symbol)
        console.print(f"\n[bold cyan]{symbol}[/bold cyan]  ({_format_frets(fingering.frets)})")
        console.print(render_diagram(fingering.frets, num_frets=frets), highlight=False)


@app.command()
def tune(
    input_file: Path = typer.Argument(..., help="Input audio file"),
    reference: float = typer.Option(440.0, "-r", "--reference", help="A4 reference in Hz"),
    transposition: int = typer.Option(
        0, "-t", "--transpose", help="Display transposition in semitones"
    ),
    window: int = typer.Option(2048, "-w", "--window", help="Analysis window in samples"),
    hop: int = typer.Option(0, "--hop", help="Samples between windows (0 = window size)"),
    no_filter: bool = typer.Option(False, "--no-filter", help="Disable the low-pass pre-filter"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """Run the tuner over an audio file, one window at a time.

    **Examples:**

        sonura tune string_a.wav

        sonura tune horn.wav --transpose 2 --reference 442
    """
    from .input import AudioLoader
    from .analysis import PitchDetector, TunerCalibration, TunerConfig, TunerSession

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    timings = StageTimings()
    try:
        timings.start("Loading")
        loader = AudioLoader()
        audio, sr = loader.load(str(input_file))
        timings.stop()

        # Debounce runs on file time rather than wall-clock time
        file_clock = [0.0]
        session = TunerSession(
            detector=PitchDetector(window_size=window),
            calibration=TunerCalibration(reference, transposition),
            config=TunerConfig(prefilter_hz=None) if no_filter else TunerConfig(),
            clock=lambda: file_clock[0],
        )
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    timings.start("Detection")
    session.start()
    rows = []
    contiguous = (hop or window) == window
    for start, frame in loader.frames(audio, window, hop or None):
        file_clock[0] = start / sr
        result = session.process_frame(frame, sr, contiguous=contiguous)
        rows.append((start / sr, result))
    session.stop()
    timings.stop()

    if json_output:
        print(json.dumps([
            {
                "time": round(t, 4),
                "frequency": None if r.reading is None else round(r.reading.frequency, 2),
                "note": None if r.reading is None else r.reading.note,
                "cents": None if r.reading is None else r.reading.cents,
                "needle": round(r.needle_angle, 2),
                "chime": r.chime,
            }
            for t, r in rows
        ], indent=2))
        return

    table = Table(title=f"Tuner: {input_file.name}")
    table.add_column("Time (s)", style="yellow")
    table.add_column("Note", style="cyan")
    table.add_column("Frequency", style="green")
    table.add_column("Cents", style="magenta")
    table.add_column("Status")

    status_style = {"in_tune": "bold cyan", "close": "yellow", "off": "red", "silent": "dim"}
    for t, result in rows:
        reading = result.reading
        status = result.status
        table.add_row(
            f"{t:.3f}",
            reading.note if reading else "--",
            f"{reading.frequency:.1f} Hz" if reading else "---",
            (f"{reading.cents:+d}" if reading else ""),
            f"[{status_style[status]}]{status}{' ♪' if result.chime else ''}[/]",
        )
    console.print(table)

    if verbose:
        console.print(f"  Duration: {loader.get_duration(audio, sr):.2f}s, Sample rate: {sr}Hz")
        console.print(f"  Frames: {len(rows)}, with pitch: {sum(r.has_pitch for _, r in rows)}")
        timings.print_summary()


@app.command()
def listen(
    seconds: float = typer.Option(10.0, "-s", "--seconds", help="How long to listen"),
    reference: float = typer.Option(440.0, "-r", "--reference", help="A4 reference in Hz"),
    transposition: int = typer.Option(
        0, "-t", "--transpose", help="Display transposition in semitones"
    ),
    sr: int = typer.Option(44100, "--sr", help="Capture sample rate"),
    chime: bool = typer.Option(True, "--chime/--no-chime", help="Play a chime when in tune"),
):
    """Live tuner on the default microphone."""
    from .analysis import TunerCalibration, TunerSession
    from .output import AudioUnavailableError, open_input_stream, play_buffer
    from .synthesis import render_chime

    blocks: "queue.Queue" = queue.Queue()
    chime_audio = render_chime(sr) if chime else None

    def on_chime():
        try:
            play_buffer(chime_audio, sr, blocking=False)
        except AudioUnavailableError as e:
            console.print(f"[yellow]{escape(str(e))}[/yellow]")

    session = TunerSession(
        calibration=TunerCalibration(reference, transposition),
        on_chime=on_chime if chime else None,
    )

    try:
        stream = open_input_stream(blocks.put, sr=sr, blocksize=session.detector.window_size)
        with stream:
            session.start()
            console.print("[blue]Listening... (Ctrl+C to stop)[/blue]")
            deadline = time.monotonic() + seconds
            while time.monotonic() < deadline:
                try:
                    block = blocks.get(timeout=0.5)
                except queue.Empty:
                    continue
                frame = session.process_frame(block, sr)
                if frame.reading is not None:
                    r = frame.reading
                    console.print(
                        f"  {r.note:<2} {r.frequency:7.1f} Hz  {r.cents:+3d} cents  {frame.status}"
                    )
    except AudioUnavailableError as e:
        console.print(f"[red]Audio unavailable: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        pass
    finally:
        session.stop()


@app.command()
def render(
    symbols: List[str] = typer.Argument(..., help="Chord symbols to play in order"),
    output: Path = typer.Option(Path("chords.wav"), "-o", "--output", help="Output WAV path"),
    instrument: str = typer.Option("guitar", "-i", "--instrument", help="guitar or piano"),
    spacing: float = typer.Option(1.0, "--spacing", help="Seconds between chords"),
    sr: int = typer.Option(44100, "--sr", help="Sample rate"),
    play: bool = typer.Option(False, "--play", help="Also play through the speakers"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """Render a chord progression to a WAV file.

    **Examples:**

        sonura render C G Am F -o pop.wav

        sonura render Dm7 G7 Cmaj7 --instrument piano --spacing 2
    """
    from .synthesis import OfflineRenderer, ToneScheduler
    from .output import AudioUnavailableError, DeviceSink, write_wav

    timings = StageTimings()
    renderer = OfflineRenderer(sr)
    scheduler = ToneScheduler(sink=renderer)

    try:
        timings.start("Scheduling")
        events = scheduler.play_progression(symbols, instrument, spacing=spacing)
        timings.stop()
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    timings.start("Rendering")
    audio = renderer.bounce()
    timings.stop()

    timings.start("Writing")
    path = write_wav(output, audio, sr)
    timings.stop()
    console.print(f"[green]Wrote {path}[/green] ({len(events)} tones, {len(audio) / sr:.2f}s)")

    if verbose:
        for event in events:
            console.print(f"  {event.start:6.3f}s  {event.note}{event.octave_offset + 4}  {event.frequency:.1f} Hz")
        timings.print_summary()

    if play:
        try:
            with DeviceSink(sr) as sink:
                console.print("[blue]Playing...[/blue]")
                sink.submit(events)
                sink.wait()
        except AudioUnavailableError as e:
            console.print(f"[red]Audio unavailable: {escape(str(e))}[/red]")
            raise typer.Exit(1)


@app.command()
def info():
    """Show engine version and defaults."""
    from . import __version__
    from .core import constants
    from .synthesis import TIMBRES

    console.print(f"\n[bold]Sonura[/bold] {__version__}")
    console.print(f"  Reference pitch: A4 = {constants.DEFAULT_REFERENCE_HZ} Hz")
    console.print(f"  Analysis window: {constants.DEFAULT_WINDOW_SIZE} samples")
    console.print(f"  Silence threshold (RMS): {constants.SILENCE_RMS_THRESHOLD}")
    console.print(f"  Tuning: {' '.join(constants.STANDARD_TUNING)}")
    console.print(f"  Instruments: {', '.join(sorted(TIMBRES))}")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
