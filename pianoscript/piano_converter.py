"""PianoConverter: runs the full MIDI to text notation pipeline."""

from __future__ import annotations

import logging

from pianoscript.config import ConverterConfig
from pianoscript.line_formatter import LineFormatter
from pianoscript.midi_models import Opus
from pianoscript.midi_reader import read_opus
from pianoscript.notation import NotationRenderer
from pianoscript.score_reducer import (
    beats_per_minute,
    dominant_duration,
    merged_notes,
    quantize,
    reduce_to_chords,
)
from pianoscript.timing import opus_to_score, to_milliseconds

logger = logging.getLogger(__name__)


class PianoConverter:
    """
    Convert an opus into text piano notation.

    Pipeline
    --------
    1. Rebase tick deltas to milliseconds, folding in tempo changes.
    2. Pair note-on/note-off events into notes with absolute onsets.
    3. Merge all tracks into one stream sorted by onset.
    4. Round onset gaps to the ``100 * tick_lag`` grid and find the dominant
       duration, which sets the BPM.
    5. Group simultaneous notes into chords.
    6. Name every pitch and append duration modifiers.
    7. Wrap the tokens into lines under a ``BPM: <n>`` header.

    The converter keeps no state between calls, so one instance may convert
    any number of songs and the input opus is never modified.
    """

    def __init__(self, config: ConverterConfig | None = None) -> None:
        self.config = config or ConverterConfig()
        self.renderer = NotationRenderer(self.config)
        self.formatter = LineFormatter(self.config)

    def to_piano(self, opus: Opus) -> str:
        """Convert a parsed opus and return the notation text."""
        score = opus_to_score(to_milliseconds(opus))
        notes = merged_notes(score)
        logger.debug("Merged %d note(s) from %d track(s)", len(notes), len(score.tracks))

        quantized = quantize(notes, self.config.quantum)
        dominant = dominant_duration(quantized)
        chords = reduce_to_chords(quantized)
        logger.debug("Reduced to %d chord(s); dominant duration %s ms", len(chords), dominant)

        sheet_music = self.renderer.render(chords, dominant)
        return self.formatter.format(sheet_music, beats_per_minute(dominant))

    def convert_bytes(self, data: bytes) -> str:
        """
        Parse raw MIDI bytes and convert every track.

        Raises:
            MidiReadError: If the bytes are not a readable MIDI file.
        """
        return self.to_piano(read_opus(data))
