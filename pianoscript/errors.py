"""Exceptions raised outside the conversion pipeline itself."""


class PianoscriptError(Exception):
    """Base class for all pianoscript errors."""


class MidiReadError(PianoscriptError):
    """Raised when raw bytes cannot be parsed as a Standard MIDI File."""


class NoMidiLoadedError(PianoscriptError):
    """Raised by TrackManager when no MIDI with usable tracks has been loaded."""


class AllTracksDisabledError(PianoscriptError):
    """Raised by TrackManager when a conversion is requested with every track disabled."""
