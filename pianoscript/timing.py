"""Time reconstruction: millisecond rebasing and note-on/note-off pairing."""

import logging
import math
from collections import deque
from dataclasses import replace

from pianoscript.midi_models import (
    DEFAULT_TEMPO,
    FALLBACK_TICKS_PER_BEAT,
    MILLISECOND_TIME_BASE,
    MidiEvent,
    Opus,
    Score,
    ScoreEvent,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up."""
    return math.floor(value + 0.5)


def to_milliseconds(opus: Opus) -> Opus:
    """
    Rebase an opus from ticks to milliseconds.

    Tempo changes are folded into the tick-to-millisecond rate and are not
    emitted; their own delta still counts towards the next emitted event.
    The rate carries over from one track to the next, so a conductor track's
    tempo applies to the tracks after it. Every output track starts with a
    synthetic tempo event.
    """
    ticks_per_beat = opus.ticks_per_beat or FALLBACK_TICKS_PER_BEAT
    ms_per_tick = (DEFAULT_TEMPO / 1000.0) / round_half_up(ticks_per_beat)

    tracks: list[tuple[MidiEvent, ...]] = []
    for track in opus.tracks:
        ms_so_far = 0.0
        previous_ms_so_far = 0.0
        new_track = [MidiEvent("set_tempo", 0, tempo=DEFAULT_TEMPO)]

        for event in track:
            ms_so_far += ms_per_tick * event.delta
            if event.kind == "set_tempo" and event.tempo is not None:
                ms_per_tick = event.tempo / (1000.0 * ticks_per_beat)
                continue
            new_track.append(replace(event, delta=round_half_up(ms_so_far - previous_ms_so_far)))
            previous_ms_so_far = ms_so_far

        tracks.append(tuple(new_track))

    return Opus(ticks_per_beat=MILLISECOND_TIME_BASE, tracks=tuple(tracks))


def _is_note_off(event: MidiEvent) -> bool:
    return event.kind == "note_off" or (event.kind == "note_on" and event.velocity == 0)


def _pair_track(track: tuple[MidiEvent, ...]) -> tuple[ScoreEvent, ...]:
    position = 0
    paired: list[ScoreEvent] = []
    pending: dict[tuple[int, int], deque[tuple[int, MidiEvent]]] = {}

    for event in track:
        position += event.delta

        if _is_note_off(event):
            key = (event.channel or 0, event.pitch or 0)
            queue = pending.get(key)
            if queue:
                begin, note_on = queue.popleft()
                paired.append(_note(note_on, begin, position - begin))
        elif event.kind == "note_on":
            key = (event.channel or 0, event.pitch or 0)
            pending.setdefault(key, deque()).append((position, event))
        else:
            paired.append(
                ScoreEvent(
                    kind=event.kind,  # type: ignore[arg-type]
                    begin=position,
                    channel=event.channel,
                    pitch=event.pitch,
                    velocity=event.velocity,
                    tempo=event.tempo,
                    program=event.program,
                    text=event.text,
                    subtype=event.subtype,
                )
            )

    # Unterminated notes last until the end of the track
    for key in sorted(pending):
        for begin, note_on in pending[key]:
            paired.append(_note(note_on, begin, position - begin))

    return tuple(paired)


def _note(note_on: MidiEvent, begin: int, duration: int) -> ScoreEvent:
    return ScoreEvent(
        kind="note",
        begin=begin,
        duration=duration,
        channel=note_on.channel,
        pitch=note_on.pitch,
        velocity=note_on.velocity,
    )


def opus_to_score(opus: Opus) -> Score:
    """
    Convert delta-timed tracks into absolute-time tracks with paired notes.

    Overlapping notes of the same channel and pitch are closed first-in,
    first-out. Note-offs without a pending note-on are ignored. An opus with
    fewer than two tracks yields an empty score.
    """
    if len(opus.tracks) < 2:
        logger.info("Opus has %d track(s); at least two are needed, producing an empty score", len(opus.tracks))
        return Score(ticks_per_beat=MILLISECOND_TIME_BASE, tracks=())

    tracks = tuple(_pair_track(track) for track in opus.tracks)
    return Score(ticks_per_beat=opus.ticks_per_beat, tracks=tracks)
