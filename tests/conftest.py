"""Shared fixtures: MIDI files built in memory with mido."""

import io
from collections.abc import Callable, Sequence

import mido
import pytest

MidiMessages = Sequence[mido.Message | mido.MetaMessage]


def build_midi(*tracks: MidiMessages, ticks_per_beat: int = 480) -> bytes:
    midi = mido.MidiFile(ticks_per_beat=ticks_per_beat)
    for messages in tracks:
        midi.tracks.append(mido.MidiTrack(messages))
    buffer = io.BytesIO()
    midi.save(file=buffer)
    return buffer.getvalue()


@pytest.fixture
def midi_bytes() -> Callable[..., bytes]:
    return build_midi


@pytest.fixture
def song_bytes() -> bytes:
    """
    Three tracks at 120 BPM: a conductor track, a piano playing C5 then E5,
    and a drum kit on channel 10 playing two hits at the same times.
    """
    conductor = [
        mido.MetaMessage("track_name", name="Conductor", time=0),
        mido.MetaMessage("set_tempo", tempo=500000, time=0),
    ]
    piano = [
        mido.MetaMessage("track_name", name=" Piano ", time=0),
        mido.Message("program_change", channel=0, program=0, time=0),
        mido.Message("note_on", channel=0, note=60, velocity=64, time=0),
        mido.Message("note_off", channel=0, note=60, velocity=0, time=480),
        mido.Message("note_on", channel=0, note=64, velocity=64, time=0),
        mido.Message("note_off", channel=0, note=64, velocity=0, time=480),
    ]
    drums = [
        mido.Message("note_on", channel=9, note=36, velocity=100, time=0),
        mido.Message("note_off", channel=9, note=36, velocity=0, time=480),
        mido.Message("note_on", channel=9, note=38, velocity=100, time=0),
        mido.Message("note_off", channel=9, note=38, velocity=0, time=480),
    ]
    return build_midi(conductor, piano, drums)
