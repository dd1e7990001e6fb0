"""Tea effect engine: table-driven effect profiles for teas."""

__version__ = "0.1.0"
