"""pianoscript: converts MIDI songs into compact text piano notation."""

__version__ = "0.1.0"
