"""Tests for the pianoscript CLI commands."""

from pathlib import Path

from click.testing import CliRunner

from pianoscript import __version__
from pianoscript.cli import main


def _write_song(tmp_path: Path, data: bytes) -> str:
    path = tmp_path / "song.mid"
    path.write_bytes(data)
    return str(path)


def test_version_option() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_convert_prints_notation(tmp_path: Path, song_bytes: bytes) -> None:
    result = CliRunner().invoke(main, ["convert", _write_song(tmp_path, song_bytes)])
    assert result.exit_code == 0
    assert "BPM: 120\nC5,E5/0.5" in result.output


def test_convert_enable_track(tmp_path: Path, song_bytes: bytes) -> None:
    result = CliRunner().invoke(main, ["convert", _write_song(tmp_path, song_bytes), "--enable-track", "2"])
    assert result.exit_code == 0
    assert "BPM: 120\nC5-C3,E5-D/0.5" in result.output


def test_convert_writes_output_file(tmp_path: Path, song_bytes: bytes) -> None:
    out = tmp_path / "song.txt"
    result = CliRunner().invoke(main, ["convert", _write_song(tmp_path, song_bytes), "-o", str(out)])
    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8") == "BPM: 120\nC5,E5/0.5\n"
    assert "Done!" in result.output


def test_convert_with_every_track_disabled_fails(tmp_path: Path, song_bytes: bytes) -> None:
    result = CliRunner().invoke(main, ["convert", _write_song(tmp_path, song_bytes), "--disable-track", "1"])
    assert result.exit_code == 1
    assert "At least one track must be enabled." in result.output


def test_convert_rejects_non_midi_file(tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["convert", _write_song(tmp_path, b"not midi at all")])
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_tracks_lists_identified_tracks(tmp_path: Path, song_bytes: bytes) -> None:
    result = CliRunner().invoke(main, ["tracks", _write_song(tmp_path, song_bytes)])
    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "~1~ Piano: [Acoustic Grand Piano] <Piano> Notes: 2",
        "[X] ~2~ [Percussion] <Percussion> Notes: 2 [X]",
    ]
