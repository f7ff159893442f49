"""Reduces a score to a single stream of quantized chords."""

import logging
import math
from collections import Counter
from operator import attrgetter

from pianoscript.midi_models import Chord, QuantizedNote, Score, ScoreEvent

logger = logging.getLogger(__name__)

#: Duration given to the final note, which has no following onset.
TERMINAL_DURATION_MS = 1000


# ----------------------------------------------------------------------
# Track merging
# ----------------------------------------------------------------------


def filter_note_events(score: Score) -> Score:
    """Keep only ``note`` events in every track."""
    tracks = tuple(tuple(event for event in track if event.kind == "note") for track in score.tracks)
    return Score(ticks_per_beat=score.ticks_per_beat, tracks=tracks)


def drop_empty_tracks(score: Score) -> Score:
    return Score(ticks_per_beat=score.ticks_per_beat, tracks=tuple(track for track in score.tracks if track))


def merge_tracks(score: Score) -> Score:
    """Concatenate all tracks, in order, into one."""
    merged = tuple(event for track in score.tracks for event in track)
    return Score(ticks_per_beat=score.ticks_per_beat, tracks=(merged,))


def sort_by_begin(score: Score) -> Score:
    """Stable sort of every track by onset, so simultaneous events keep source order."""
    tracks = tuple(tuple(sorted(track, key=attrgetter("begin"))) for track in score.tracks)
    return Score(ticks_per_beat=score.ticks_per_beat, tracks=tracks)


def merged_notes(score: Score) -> tuple[ScoreEvent, ...]:
    """Run the merge stage and return the single chronological note stream."""
    merged = sort_by_begin(merge_tracks(drop_empty_tracks(filter_note_events(score))))
    return merged.tracks[0]


# ----------------------------------------------------------------------
# Quantization
# ----------------------------------------------------------------------


def round_to_grid(duration: float, quantum: float) -> float:
    """Round *duration* half-up to the nearest multiple of *quantum*."""
    return math.floor(duration / quantum + 0.5) * quantum


def onset_gaps(notes: tuple[ScoreEvent, ...]) -> list[int]:
    """
    Time from each note's onset to the next one's.

    The last note has no successor and gets ``TERMINAL_DURATION_MS``.
    """
    gaps = [following.begin - current.begin for current, following in zip(notes, notes[1:])]
    if notes:
        gaps.append(TERMINAL_DURATION_MS)
    return gaps


def quantize(notes: tuple[ScoreEvent, ...], quantum: float) -> list[QuantizedNote]:
    """Convert onsets into grid-rounded durations paired with pitches."""
    return [
        QuantizedNote(round_to_grid(gap, quantum), note.pitch or 0)
        for gap, note in zip(onset_gaps(notes), notes)
    ]


def dominant_duration(notes: list[QuantizedNote]) -> float | None:
    """
    Most frequent nonzero duration, ties going to the first one seen.

    Returns None when there are no nonzero durations.
    """
    counts = Counter(note.duration for note in notes if note.duration != 0)
    if not counts:
        return None
    return max(counts, key=counts.__getitem__)


def beats_per_minute(dominant: float | None) -> int:
    """BPM implied by the dominant duration; 0 when there is none."""
    if not dominant:
        return 0
    return math.floor(60000 / dominant)


# ----------------------------------------------------------------------
# Chord reduction
# ----------------------------------------------------------------------


def reduce_to_chords(notes: list[QuantizedNote]) -> list[Chord]:
    """
    Fold zero-duration runs into chords.

    Pitches accumulate while durations are 0; the first nonzero duration
    closes the chord with that duration. Pitches never closed are dropped.
    """
    chords: list[Chord] = []
    pitches: list[int] = []

    for note in notes:
        pitches.append(note.pitch)
        if note.duration == 0:
            continue
        chords.append(Chord(pitches=tuple(pitches), duration=note.duration))
        pitches = []

    if pitches:
        logger.debug("Dropping %d trailing pitch(es) without a closing duration", len(pitches))
    return chords
