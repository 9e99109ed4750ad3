"""
The maze game built on top of the console driver.

Main classes:
- Maze: Grid generation, movement and rendering
- play(): The game loop
"""

from .loop import GameResult, play
from .maze import Maze

__all__ = ["Maze", "GameResult", "play"]
