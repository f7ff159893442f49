"""LineFormatter: wraps rendered tokens into bounded lines under a BPM header."""

from __future__ import annotations

from pianoscript.config import ConverterConfig
from pianoscript.notation import TERMINATOR

#: Characters kept free at the end of every line.
LINE_MARGIN = 2


class LineFormatter:
    """
    Lay out rendered notation text.

    Lines break at token boundaries only; once ``max_line_count`` is reached
    the remaining tokens are dropped. The final text is capped at
    ``2 * max_line_length * max_line_count`` characters.
    """

    def __init__(self, config: ConverterConfig | None = None) -> None:
        self.config = config or ConverterConfig()

    def explode(self, sheet_music: str) -> list[str]:
        """Split *sheet_music* into terminated pieces, inserting line breaks."""
        pieces: list[str] = []
        counter = 0
        line_counter = 1

        for token in sheet_music.split(TERMINATOR):
            if line_counter > self.config.max_line_count - 1:
                break

            if pieces and counter + len(token) > self.config.max_line_length - LINE_MARGIN:
                pieces[-1] = pieces[-1].removesuffix(TERMINATOR) + self.config.line_terminator
                counter = 0
                line_counter += 1

            pieces.append(token + TERMINATOR)
            counter += len(token)

        return pieces

    def finalize(self, pieces: list[str], bpm: int) -> str:
        """Join *pieces* under the header, trim and apply the overall size cap."""
        text = f"BPM: {bpm}{self.config.line_terminator}" + "".join(pieces)
        text = text.strip()
        text = text.removesuffix(TERMINATOR).removesuffix(TERMINATOR).rstrip()
        return text[: self.config.overall_limit]

    def format(self, sheet_music: str, bpm: int) -> str:
        return self.finalize(self.explode(sheet_music), bpm)
