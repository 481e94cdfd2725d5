"""Pass-and-play impostor party game: session setup engine and turn/phase state machine."""

__version__ = "0.1.0"
