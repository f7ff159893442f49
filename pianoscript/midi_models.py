"""Data models for the MIDI event streams passed between conversion stages."""

from dataclasses import dataclass
from typing import Literal, NamedTuple

EventKind = Literal[
    "note_on",
    "note_off",
    "program_change",
    "track_name",
    "set_tempo",
    "other",
]

ScoreEventKind = Literal[
    "note",
    "program_change",
    "track_name",
    "set_tempo",
    "other",
]

#: Time-base of a millisecond-rebased opus or score (ticks per second).
MILLISECOND_TIME_BASE = 1000

#: Ticks per beat assumed when a file header carries no time-base.
FALLBACK_TICKS_PER_BEAT = 160

#: Tempo assumed before any set_tempo event (microseconds per beat).
DEFAULT_TEMPO = 1_000_000


@dataclass(frozen=True)
class MidiEvent:
    """
    A single delta-timed event of a MIDI track.

    Attributes:
        kind:     Event variant; see ``EventKind``.
        delta:    Time since the previous event of the same track, in ticks
                  (or milliseconds once the opus has been rebased).
        channel:  MIDI channel (0-15) for channel events.
        pitch:    MIDI note number (0-127) for note events.
        velocity: Note velocity (0-127) for note events.
        tempo:    Microseconds per beat for set_tempo events.
        program:  Program number (0-127) for program_change events.
        text:     Track name for track_name events.
        subtype:  Original message type for ``other`` events.
    """

    kind: EventKind
    delta: int = 0
    channel: int | None = None
    pitch: int | None = None
    velocity: int | None = None
    tempo: int | None = None
    program: int | None = None
    text: str | None = None
    subtype: str | None = None


@dataclass(frozen=True)
class Opus:
    """A track collection using delta-time encoding."""

    ticks_per_beat: float
    tracks: tuple[tuple[MidiEvent, ...], ...]


@dataclass(frozen=True)
class ScoreEvent:
    """
    An event stamped with its absolute position.

    ``note`` events replace note_on/note_off pairs and carry the sustain
    ``duration``; every other kind passes through from the opus.
    """

    kind: ScoreEventKind
    begin: int
    duration: int = 0
    channel: int | None = None
    pitch: int | None = None
    velocity: int | None = None
    tempo: int | None = None
    program: int | None = None
    text: str | None = None
    subtype: str | None = None


@dataclass(frozen=True)
class Score:
    """A track collection using absolute onsets and resolved note durations."""

    ticks_per_beat: float
    tracks: tuple[tuple[ScoreEvent, ...], ...]


class QuantizedNote(NamedTuple):
    duration: float
    pitch: int


@dataclass(frozen=True)
class Chord:
    """Simultaneous pitches sharing one quantized duration."""

    pitches: tuple[int, ...]
    duration: float
