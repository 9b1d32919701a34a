"""listengraph: artist relationship graphs built from listening history."""

__version__ = "0.1.0"
