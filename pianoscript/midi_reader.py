"""Reads Standard MIDI File bytes into an Opus of delta-timed events."""

import io
import logging

import mido

from pianoscript.errors import MidiReadError
from pianoscript.midi_models import FALLBACK_TICKS_PER_BEAT, MidiEvent, Opus

logger = logging.getLogger(__name__)


def message_to_event(msg: mido.Message) -> MidiEvent:
    """Map a mido message (or meta message) to a MidiEvent keeping its delta ticks."""
    delta = int(msg.time)
    if msg.type == "note_on":
        return MidiEvent("note_on", delta, channel=msg.channel, pitch=msg.note, velocity=msg.velocity)
    if msg.type == "note_off":
        return MidiEvent("note_off", delta, channel=msg.channel, pitch=msg.note, velocity=msg.velocity)
    if msg.type == "program_change":
        return MidiEvent("program_change", delta, channel=msg.channel, program=msg.program)
    if msg.type == "track_name":
        return MidiEvent("track_name", delta, text=msg.name)
    if msg.type == "set_tempo":
        return MidiEvent("set_tempo", delta, tempo=msg.tempo)
    return MidiEvent("other", delta, channel=getattr(msg, "channel", None), subtype=msg.type)


def read_opus(data: bytes) -> Opus:
    """
    Parse raw MIDI bytes.

    Raises:
        MidiReadError: If mido cannot parse the data.
    """
    try:
        midi = mido.MidiFile(file=io.BytesIO(data))
    except (OSError, EOFError, ValueError, KeyError, IndexError) as exc:
        raise MidiReadError(f"Could not parse MIDI data: {exc}") from exc

    ticks_per_beat = midi.ticks_per_beat or FALLBACK_TICKS_PER_BEAT
    tracks = tuple(tuple(message_to_event(msg) for msg in track) for track in midi.tracks)
    logger.debug("Read %d track(s) at %s ticks per beat", len(tracks), ticks_per_beat)
    return Opus(ticks_per_beat=ticks_per_beat, tracks=tracks)
