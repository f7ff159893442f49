"""pianoscript CLI entry point."""

import logging
import sys
from pathlib import Path

import click

from pianoscript import __version__
from pianoscript.config import ConverterConfig
from pianoscript.errors import PianoscriptError
from pianoscript.track_manager import TrackManager


def _load_manager(midi_file: str, config: ConverterConfig) -> TrackManager:
    """Read *midi_file* into a TrackManager, exiting with status 1 on failure."""
    manager = TrackManager(config)
    try:
        manager.load(Path(midi_file).read_bytes())
    except OSError as exc:
        click.echo(f"  ERROR: Could not read MIDI file — {exc}", err=True)
        sys.exit(1)
    except PianoscriptError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)
    return manager


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="pianoscript")
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline details to stderr.")
def main(verbose: bool) -> None:
    """pianoscript — MIDI to text piano notation converter."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ── convert subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.argument("midi_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination text file. Prints to stdout when omitted.",
)
@click.option(
    "--max-line-length",
    type=click.IntRange(min=1),
    default=50,
    show_default=True,
    help="Maximum characters per line.",
)
@click.option(
    "--max-lines",
    type=click.IntRange(min=1),
    default=200,
    show_default=True,
    help="Maximum number of lines.",
)
@click.option(
    "--tick-lag",
    type=click.FloatRange(min=0, min_open=True),
    default=0.5,
    show_default=True,
    help="Duration grid scale; durations round to multiples of 100 × tick lag ms.",
)
@click.option(
    "--octave-transpose",
    type=int,
    default=0,
    show_default=True,
    help="Whole octaves added to every note.",
)
@click.option(
    "--precision",
    type=click.IntRange(min=0),
    default=2,
    show_default=True,
    help="Decimal places of duration modifiers.",
)
@click.option(
    "--disable-track",
    "disabled",
    type=int,
    multiple=True,
    metavar="N",
    help="Leave track N out of the conversion. May be repeated.",
)
@click.option(
    "--enable-track",
    "enabled",
    type=int,
    multiple=True,
    metavar="N",
    help="Include track N even if it was disabled by default. May be repeated.",
)
def convert(
    midi_file: str,
    output: str | None,
    max_line_length: int,
    max_lines: int,
    tick_lag: float,
    octave_transpose: int,
    precision: int,
    disabled: tuple[int, ...],
    enabled: tuple[int, ...],
) -> None:
    """
    Convert a MIDI file to text piano notation.

    MIDI_FILE is the path to an existing .mid file. Percussion tracks are
    left out unless enabled with --enable-track.

    \b
    Examples:
      pianoscript convert song.mid
      pianoscript convert song.mid -o song.txt --tick-lag 1
      pianoscript convert song.mid --disable-track 3 --enable-track 9
    """
    config = ConverterConfig(
        max_line_length=max_line_length,
        max_line_count=max_lines,
        tick_lag=tick_lag,
        octave_transpose=octave_transpose,
        float_precision=precision,
    )
    manager = _load_manager(midi_file, config)

    try:
        for number in enabled:
            manager.enable_track(number)
        for number in disabled:
            manager.disable_track(number)
        text = manager.to_piano()
    except PianoscriptError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)

    if output is None:
        click.echo(text)
        return

    click.echo(f"pianoscript v{__version__}")
    click.echo(f"  MIDI   : {midi_file}")
    click.echo(f"  Tracks : {sum(not track.disabled for track in manager.identified_tracks)} enabled")
    click.echo(f"  Output : {output}")
    try:
        Path(output).write_text(text + "\n", encoding="utf-8")
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file — {exc}", err=True)
        sys.exit(1)

    click.echo()
    click.echo(f"Done!  Wrote {len(text.splitlines()) - 1} line(s) of notation to '{output}'.")


# ── tracks subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("midi_file", type=click.Path(exists=True, dir_okay=False, readable=True))
def tracks(midi_file: str) -> None:
    """
    List the instrument tracks of a MIDI file.

    Disabled tracks are marked with [X]; pass their numbers to
    `pianoscript convert --enable-track` to include them.
    """
    manager = _load_manager(midi_file, ConverterConfig())
    if not manager.identified_tracks:
        click.echo("  WARNING: No instrument tracks found.", err=True)
        sys.exit(1)

    for track in manager.identified_tracks:
        click.echo(str(track))
