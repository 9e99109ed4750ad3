"""mazegame - play randomly generated mazes in your terminal."""

__version__ = "0.1.0"
