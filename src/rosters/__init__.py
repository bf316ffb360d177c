"""Team roster service: players, rosters and atomic status swaps."""

__version__ = "0.1.0"
