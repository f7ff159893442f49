"""Conversion settings shared by every pipeline stage."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConverterConfig:
    """
    Options controlling notation coarseness and text layout.

    Attributes:
        max_line_length:  Maximum characters per output line.
        max_line_count:   Maximum number of output lines.
        tick_lag:         Scaling factor for the duration rounding grid.
                          Larger values give coarser notation.
        octave_transpose: Whole octaves added to every pitch before naming.
        float_precision:  Decimal places of duration modifiers.
        octave_keys:      Keys per octave used to split pitch numbers.
        highest_octave:   Highest octave that can be written; pitches above
                          it (or below octave 1) are dropped.
        line_terminator:  Text appended at every line break.
    """

    max_line_length: int = 50
    max_line_count: int = 200
    tick_lag: float = 0.5
    octave_transpose: int = 0
    float_precision: int = 2
    octave_keys: int = 12
    highest_octave: int = 8
    line_terminator: str = "\n"

    def __post_init__(self) -> None:
        if self.max_line_length < 1:
            raise ValueError(f"max_line_length must be positive, got {self.max_line_length}.")
        if self.max_line_count < 1:
            raise ValueError(f"max_line_count must be positive, got {self.max_line_count}.")
        if self.tick_lag <= 0:
            raise ValueError(f"tick_lag must be positive, got {self.tick_lag}.")
        if self.float_precision < 0:
            raise ValueError(f"float_precision cannot be negative, got {self.float_precision}.")
        if self.octave_keys < 1:
            raise ValueError(f"octave_keys must be positive, got {self.octave_keys}.")

    @property
    def quantum(self) -> float:
        """Duration rounding grid in milliseconds."""
        return round(100 * self.tick_lag, 9)

    @property
    def overall_limit(self) -> int:
        """Hard cap on the length of the converted text."""
        return 2 * self.max_line_length * self.max_line_count
