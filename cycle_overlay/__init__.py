"""Live overlay data for The Cycle, rebuilt from the game's Prospect.log."""

__version__ = "0.3.0"
