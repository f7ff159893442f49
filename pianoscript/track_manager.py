"""TrackManager: identifies the tracks of a MIDI file and picks which ones to convert."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from pianoscript.config import ConverterConfig
from pianoscript.errors import AllTracksDisabledError, NoMidiLoadedError
from pianoscript.instruments import (
    DEFAULT_IGNORED_PROGRAMS,
    PERCUSSION_CHANNEL,
    PERCUSSION_LABEL,
    program_group,
    program_name,
)
from pianoscript.midi_models import MidiEvent, Opus
from pianoscript.midi_reader import read_opus
from pianoscript.piano_converter import PianoConverter

logger = logging.getLogger(__name__)

_NOTHING_LOADED = "There is no MIDI loaded, or the MIDI has no valid tracks."


@dataclass
class Track:
    """
    Summary of one instrument track found in a MIDI file.

    Attributes:
        track:               Position of the track in the file.
        title:               Track name, if the track carries one.
        instruments:         Program numbers used by the track.
        instrument_strings:  Instrument names for display.
        instrument_groups:   Instrument families for display.
        note_count:          Number of sounding note-on events.
        channels:            Channels the track plays on.
        percussion_channels: Channels carrying drums or sound effects.
        disabled:            Whether the track is left out of conversions.
    """

    track: int
    title: str = ""
    instruments: set[int] = field(default_factory=set)
    instrument_strings: set[str] = field(default_factory=set)
    instrument_groups: set[str] = field(default_factory=set)
    note_count: int = 0
    channels: set[int] = field(default_factory=set)
    percussion_channels: set[int] = field(default_factory=set)
    disabled: bool = False

    @property
    def is_percussive(self) -> bool:
        return bool(self.percussion_channels)

    def __str__(self) -> str:
        marker = "[X]" if self.disabled else ""
        parts = [
            marker,
            f"~{self.track}~",
            f"{self.title}:" if self.title else "",
            f"[{', '.join(sorted(self.instrument_strings))}]",
            f"<{', '.join(sorted(self.instrument_groups))}>",
            f"Notes: {self.note_count}",
            marker,
        ]
        return " ".join(part for part in parts if part)


def identify_track(number: int, events: Iterable[MidiEvent]) -> Track:
    """Collect title, instruments, channels and note count of one track."""
    track = Track(track=number)
    has_notes = False

    for event in events:
        if event.kind == "track_name" and event.text is not None:
            track.title = event.text.strip()
        elif event.kind == "note_on" and event.velocity:
            has_notes = True
            track.note_count += 1
            if event.channel is not None:
                track.channels.add(event.channel)
                if event.channel == PERCUSSION_CHANNEL:
                    track.percussion_channels.add(event.channel)
        elif event.kind == "program_change" and event.program is not None:
            has_notes = True
            track.instruments.add(event.program)
            if event.channel is not None:
                track.channels.add(event.channel)
                if event.program in DEFAULT_IGNORED_PROGRAMS or event.channel == PERCUSSION_CHANNEL:
                    track.percussion_channels.add(event.channel)

    if has_notes and not track.instruments:
        track.instruments.add(0)
        track.instrument_strings.add(program_name(0))

    drum_kit = len(track.instruments) == 1 and PERCUSSION_CHANNEL in track.channels
    for program in track.instruments:
        if drum_kit:
            track.instrument_groups.add(PERCUSSION_LABEL)
            track.instrument_strings.add(PERCUSSION_LABEL)
            track.instrument_strings.discard(program_name(0))
        else:
            track.instrument_groups.add(program_group(program))
            track.instrument_strings.add(program_name(program))

    track.disabled = track.is_percussive
    return track


class TrackManager:
    """
    Holds a loaded MIDI file and the enabled/disabled state of its tracks.

    Only tracks with at least one instrument are identified. Percussive
    tracks start disabled. Tracks that were not identified (a conductor
    track, for instance) are always passed on to the converter.

    Usage:

        manager = TrackManager()
        manager.load(midi_bytes)
        manager.disable_track(2)
        text = manager.to_piano()
    """

    def __init__(self, config: ConverterConfig | None = None) -> None:
        self.config = config or ConverterConfig()
        self.opus: Opus | None = None
        self.identified_tracks: list[Track] = []

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _require_tracks(self) -> None:
        if self.opus is None or not self.identified_tracks:
            raise NoMidiLoadedError(_NOTHING_LOADED)

    def _find(self, number: int) -> Track | None:
        return next((track for track in self.identified_tracks if track.track == number), None)

    def _disabled_numbers(self) -> set[int]:
        return {track.track for track in self.identified_tracks if track.disabled}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self, data: bytes) -> None:
        """
        Parse a MIDI file and identify its tracks, replacing any previous one.

        Raises:
            MidiReadError: If the bytes are not a readable MIDI file.
        """
        opus = read_opus(data)
        identified = [identify_track(number, events) for number, events in enumerate(opus.tracks)]
        self.opus = opus
        self.identified_tracks = [track for track in identified if track.instruments]
        logger.info(
            "Loaded %d track(s), %d identified, %d disabled",
            len(opus.tracks),
            len(self.identified_tracks),
            len(self._disabled_numbers()),
        )

    def toggle_tracks(self, numbers: Iterable[int]) -> None:
        self._require_tracks()
        wanted = set(numbers)
        for track in self.identified_tracks:
            if track.track in wanted:
                track.disabled = not track.disabled

    def toggle_track(self, number: int) -> None:
        self.toggle_tracks([number])

    def disable_track(self, number: int) -> None:
        self._require_tracks()
        track = self._find(number)
        if track is not None:
            track.disabled = True

    def enable_track(self, number: int) -> None:
        self._require_tracks()
        track = self._find(number)
        if track is not None:
            track.disabled = False

    def disable_all_tracks(self) -> None:
        self._require_tracks()
        for track in self.identified_tracks:
            track.disabled = True

    def enable_all_tracks(self) -> None:
        self._require_tracks()
        for track in self.identified_tracks:
            track.disabled = False

    def selected_opus(self) -> Opus:
        """The loaded opus without its disabled tracks."""
        if self.opus is None:
            raise NoMidiLoadedError(_NOTHING_LOADED)
        disabled = self._disabled_numbers()
        tracks = tuple(events for number, events in enumerate(self.opus.tracks) if number not in disabled)
        return Opus(ticks_per_beat=self.opus.ticks_per_beat, tracks=tracks)

    def to_piano(self) -> str:
        """
        Convert the enabled tracks to text notation.

        Raises:
            NoMidiLoadedError:      If nothing has been loaded.
            AllTracksDisabledError: If no identified track is enabled.
        """
        if self.opus is None:
            raise NoMidiLoadedError("There's nothing to convert, please load a MIDI file first.")
        if len(self._disabled_numbers()) >= len(self.identified_tracks):
            raise AllTracksDisabledError("At least one track must be enabled.")

        return PianoConverter(self.config).to_piano(self.selected_opus())
