"""
Game loop.

Draw the maze, wait for a key, apply it, repeat until the goal is reached or
the player quits. Keys come from ConsoleInput.read_and_reset(), so the
terminal is back in its normal mode whenever we're not waiting for input.
"""

import logging
import random
import sys
import time
from dataclasses import dataclass
from typing import Callable, TextIO

from mazegame.console import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    ConsoleInput,
    Key,
    KeySentinel,
)
from .maze import Maze

logger = logging.getLogger(__name__)

# Key -> Maze method. Letters are matched case-insensitively.
MOVES: dict[str, Callable[[Maze], bool]] = {
    "w": Maze.move_up,
    "a": Maze.move_left,
    "s": Maze.move_down,
    "d": Maze.move_right,
    ARROW_UP: Maze.move_up,
    ARROW_LEFT: Maze.move_left,
    ARROW_DOWN: Maze.move_down,
    ARROW_RIGHT: Maze.move_right,
}

RESTART_KEY = "r"
QUIT_KEY = "q"


@dataclass
class GameResult:
    """
    Outcome of one game session.

    Attributes:
        completed: True if the goal was reached, False if the player quit
        elapsed_seconds: Wall time from start to finish
        moves: Moves made in the final maze
    """
    completed: bool
    elapsed_seconds: float
    moves: int


def _normalize(key: Key) -> Key:
    if isinstance(key, KeySentinel):
        return key
    return key.lower()


def play(
    console: ConsoleInput,
    size: int = 40,
    out: TextIO = sys.stdout,
    rng: random.Random | None = None,
    clock: Callable[[], int] = time.perf_counter_ns,
) -> GameResult:
    """
    Run one game session.

    Args:
        console: Key source
        size: Maze width and height (at least 2)
        out: Where the board is drawn
        rng: Random source for maze generation
        clock: Nanosecond clock used for timing

    Returns:
        How the session ended. The board is cleared from the screen either way.
    """
    start = clock()
    maze = Maze(size, rng)

    # Room for the first clear_sequence() to walk up through
    out.write("\n" * (size + 1))

    while True:
        out.write(maze.clear_sequence())
        out.write(maze.render())
        out.flush()
        if maze.completed:
            break

        key = _normalize(console.read_and_reset(True))

        if key == QUIT_KEY or key is KeySentinel.END_OF_INPUT:
            logger.info(f"Player quit after {maze.moves} moves")
            out.write(maze.clear_sequence())
            out.flush()
            return GameResult(False, (clock() - start) / 1e9, maze.moves)

        if key == RESTART_KEY:
            logger.info("Generating a new maze")
            maze = Maze(size, rng)
            continue

        move = MOVES.get(key) if isinstance(key, str) else None
        if move is None:
            logger.debug(f"Ignoring key {key!r}")
            continue
        move(maze)

    out.write(maze.clear_sequence())
    out.flush()
    elapsed = (clock() - start) / 1e9
    logger.info(f"Maze completed in {elapsed:.3f}s after {maze.moves} moves")
    return GameResult(True, elapsed, maze.moves)
