"""NotationRenderer: turns chords into note-name tokens with accidental and octave elision."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from pianoscript.config import ConverterConfig
from pianoscript.midi_models import Chord

# Chromatic pitch class names (index 0 = C)
NOTE_NAMES: Final[tuple[str, ...]] = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

#: Letter slot (C D E F G A B -> 0..6) of each pitch class.
LETTER_SLOT: Final[tuple[int, ...]] = (0, 0, 1, 1, 2, 3, 3, 4, 4, 5, 5, 6)

#: Accidental flag (C# D# F# G# A# -> 0..4) set by each sharped pitch class.
SHARP_SLOT: Final[tuple[int | None, ...]] = (None, 0, None, 1, None, None, 2, None, 3, None, 4, None)

#: Accidental flag cancelled by each natural pitch class sharing a letter with a sharp.
NATURAL_SLOT: Final[tuple[int | None, ...]] = (0, None, 1, None, None, 2, None, 3, None, 4, None, None)

#: Octave every letter is assumed to be in before it is first written.
BASE_OCTAVE: Final[int] = 3

NATURAL_SIGN: Final[str] = "n"
CHORD_SEPARATOR: Final[str] = "-"
MODIFIER_SEPARATOR: Final[str] = "/"
TERMINATOR: Final[str] = ","


@dataclass(frozen=True)
class RenderState:
    """
    Notation state carried from one written note to the next.

    Attributes:
        octaves:     Last written octave per letter (C, D, E, F, G, A, B).
        accidentals: Whether C#, D#, F#, G#, A# is currently in effect.
    """

    octaves: tuple[int, ...] = (BASE_OCTAVE,) * 7
    accidentals: tuple[bool, ...] = (False,) * 5


def format_modifier(value: float, precision: int) -> str:
    """Fixed-point format, halves rounding up, with trailing zeros and a trailing point removed."""
    text = f"{Decimal(value).quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP):f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class NotationRenderer:
    """
    Render pitch numbers and chords as text tokens.

    Naming conventions
    ------------------
    - Sharps always print their ``#`` and put that accidental in effect.
    - C, D, F, G and A print a natural sign (``n``) when the sharp sharing
      their letter is in effect, which cancels it.
    - The octave digit is written only when it differs from the last octave
      written for the same letter.

    The state is never reset during a piece.
    """

    def __init__(self, config: ConverterConfig | None = None) -> None:
        self.config = config or ConverterConfig()

    def note_name(self, pitch: int, state: RenderState) -> tuple[str, RenderState]:
        """
        Name a single pitch.

        Returns:
            The note token (empty when the pitch is out of range) and the
            updated state. *state* itself is left untouched.
        """
        keys = self.config.octave_keys
        pitch += keys * self.config.octave_transpose
        octave = pitch // keys
        name_index = pitch % keys
        if octave < 1 or octave > self.config.highest_octave or name_index >= len(NOTE_NAMES):
            return "", state

        octaves = list(state.octaves)
        accidentals = list(state.accidentals)
        letter = LETTER_SLOT[name_index]
        octaves[letter] = octave

        natural_sign = ""
        sharp = SHARP_SLOT[name_index]
        natural = NATURAL_SLOT[name_index]
        if sharp is not None:
            accidentals[sharp] = True
        elif natural is not None:
            if state.accidentals[natural]:
                natural_sign = NATURAL_SIGN
            accidentals[natural] = False

        octave_digit = str(octave) if octave != state.octaves[letter] else ""
        token = f"{NOTE_NAMES[name_index]}{natural_sign}{octave_digit}"
        return token, RenderState(octaves=tuple(octaves), accidentals=tuple(accidentals))

    def duration_modifier(self, duration: float, dominant: float) -> str:
        """Modifier written after a chord lasting *duration* (dominant / duration)."""
        return format_modifier(dominant / duration, self.config.float_precision)

    def render_chord(self, chord: Chord, dominant: float, state: RenderState) -> tuple[str, RenderState]:
        names: list[str] = []
        for pitch in chord.pitches:
            name, state = self.note_name(pitch, state)
            names.append(name)

        token = CHORD_SEPARATOR.join(names)
        if chord.duration != dominant:
            token += MODIFIER_SEPARATOR + self.duration_modifier(chord.duration, dominant)
        return token + TERMINATOR, state

    def render(self, chords: list[Chord], dominant: float | None) -> str:
        """Render chords in order with a fresh RenderState."""
        if dominant is None:
            return ""

        state = RenderState()
        tokens: list[str] = []
        for chord in chords:
            token, state = self.render_chord(chord, dominant, state)
            tokens.append(token)
        return "".join(tokens)
