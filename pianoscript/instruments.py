"""General MIDI instrument labels used in track summaries."""

from typing import Final

import pretty_midi

#: General MIDI channel 10, reserved for drum kits.
PERCUSSION_CHANNEL: Final[int] = 9

PERCUSSIVE_PROGRAMS: Final[frozenset[int]] = frozenset(range(112, 119))
SOUND_EFFECT_PROGRAMS: Final[frozenset[int]] = frozenset(range(119, 128))

#: Programs whose tracks start disabled.
DEFAULT_IGNORED_PROGRAMS: Final[frozenset[int]] = PERCUSSIVE_PROGRAMS | SOUND_EFFECT_PROGRAMS

PERCUSSION_LABEL: Final[str] = "Percussion"


def program_name(program: int) -> str:
    """General MIDI instrument name, e.g. 'Acoustic Grand Piano'."""
    return str(pretty_midi.program_to_instrument_name(program))


def program_group(program: int) -> str:
    """General MIDI instrument family, e.g. 'Piano' or 'Strings'."""
    return str(pretty_midi.program_to_instrument_class(program))
