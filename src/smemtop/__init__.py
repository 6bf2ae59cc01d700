"""smemtop - live per-process memory monitor."""

__version__ = "0.3.0"
