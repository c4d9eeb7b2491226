"""Combat-resolution core for a turn-based tactical deck-building game."""

__version__ = "0.1.0"
