"""End-to-end tests for PianoConverter."""

import os
from collections.abc import Callable

import mido
import pytest

from pianoscript.config import ConverterConfig
from pianoscript.errors import MidiReadError
from pianoscript.midi_models import MidiEvent, Opus
from pianoscript.piano_converter import PianoConverter


def _on(pitch: int, delta: int = 0) -> MidiEvent:
    return MidiEvent("note_on", delta, channel=0, pitch=pitch, velocity=64)


def _off(pitch: int, delta: int = 0) -> MidiEvent:
    return MidiEvent("note_off", delta, channel=0, pitch=pitch, velocity=0)


def _melody_opus(*pitches: int, ticks: int = 480, tempo: int | None = None) -> Opus:
    conductor: tuple[MidiEvent, ...] = ()
    if tempo is not None:
        conductor = (MidiEvent("set_tempo", 0, tempo=tempo),)
    melody: list[MidiEvent] = []
    for pitch in pitches:
        melody += [_on(pitch), _off(pitch, ticks)]
    return Opus(ticks_per_beat=480, tracks=(conductor, tuple(melody)))


def test_single_note_takes_terminal_duration() -> None:
    assert PianoConverter().to_piano(_melody_opus(60)) == "BPM: 60\nC5"


def test_tempo_changes_drive_bpm() -> None:
    opus = _melody_opus(60, 62, tempo=500000)
    assert PianoConverter().to_piano(opus) == "BPM: 120\nC5,D5/0.5"


def test_natural_cancel_through_pipeline() -> None:
    assert PianoConverter().to_piano(_melody_opus(61, 60)) == "BPM: 60\nC#5,Cn"


def test_simultaneous_notes_form_chord() -> None:
    melody = (_on(60), _on(64), _on(67), _off(60, 480), _off(64), _off(67), _on(62), _off(62, 480))
    opus = Opus(ticks_per_beat=480, tracks=((), melody))
    assert PianoConverter().to_piano(opus) == "BPM: 60\nC5-E5-G5,D5"


def test_fewer_than_two_tracks_gives_header_only() -> None:
    one_track = Opus(ticks_per_beat=480, tracks=((_on(60), _off(60, 480)),))
    assert PianoConverter().to_piano(one_track) == "BPM: 0"
    assert PianoConverter().to_piano(Opus(ticks_per_beat=480, tracks=())) == "BPM: 0"


def test_conversion_is_repeatable_and_leaves_input_intact() -> None:
    opus = _melody_opus(60, 62, 64, 61, 60, tempo=500000)
    snapshot = _melody_opus(60, 62, 64, 61, 60, tempo=500000)
    converter = PianoConverter()
    first = converter.to_piano(opus)
    assert converter.to_piano(opus) == first
    assert opus == snapshot


def test_tick_lag_only_changes_duration_modifiers() -> None:
    opus = Opus(
        ticks_per_beat=1000,
        tracks=((), (_on(60), _off(60, 1000), _on(62), _off(62, 230), _on(64), _off(64, 1000))),
    )
    # gaps (ms): 1000, 230, 1000 (terminal)
    fine = PianoConverter(ConverterConfig(tick_lag=0.1)).to_piano(opus)
    coarse = PianoConverter(ConverterConfig(tick_lag=1.0)).to_piano(opus)
    assert fine == "BPM: 60\nC5,D5/4.35,E5"
    assert coarse == "BPM: 60\nC5,D5/5,E5"


def test_output_respects_overall_limit() -> None:
    pitches = [60 + (i % 24) for i in range(300)]
    config = ConverterConfig(max_line_length=20, max_line_count=3)
    text = PianoConverter(config).to_piano(_melody_opus(*pitches))
    assert len(text) <= config.overall_limit
    # header plus at most max_line_count body lines
    assert len(text.splitlines()) <= config.max_line_count + 1


def test_convert_bytes(midi_bytes: Callable[..., bytes]) -> None:
    data = midi_bytes(
        [mido.MetaMessage("set_tempo", tempo=500000, time=0)],
        [
            mido.Message("note_on", note=67, velocity=80, time=0),
            mido.Message("note_on", note=67, velocity=0, time=240),
            mido.Message("note_on", note=69, velocity=80, time=0),
            mido.Message("note_off", note=69, velocity=0, time=240),
        ],
    )
    assert PianoConverter().convert_bytes(data) == "BPM: 240\nG5,A5/0.25"


def test_convert_bytes_rejects_garbage() -> None:
    with pytest.raises(MidiReadError):
        PianoConverter().convert_bytes(b"definitely not a midi file")


# ---------------------------------------------------------------------------
# Integration tests: convert real .mid files found in the working directory.
# Skipped by default; run with -m integration.
# ---------------------------------------------------------------------------

@pytest.mark.integration
def test_convert_real_midi_files() -> None:
    mid_files = [f for f in os.listdir(".") if f.endswith(".mid")]
    if not mid_files:
        pytest.skip("No .mid file found in working directory for integration test.")

    config = ConverterConfig()
    for mid_file in mid_files:
        with open(mid_file, "rb") as fh:
            text = PianoConverter(config).convert_bytes(fh.read())
        assert text.startswith("BPM: ")
        assert len(text) <= config.overall_limit
