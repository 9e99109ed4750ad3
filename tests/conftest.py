"""
Shared fixtures and helpers.

POSIX driver tests run against a real pseudo-terminal (os.openpty), so they
exercise the actual termios calls. They are skipped on Windows.
"""

import os
import random
from collections import deque

import pytest

from mazegame.game.maze import GOAL, OPEN, Maze

posix_only = pytest.mark.skipif(os.name == "nt", reason="needs a POSIX pseudo-terminal")


@pytest.fixture
def pty_pair():
    """A pseudo-terminal as (master_fd, slave_fd). Input is written to master."""
    master, slave = os.openpty()
    yield master, slave
    os.close(master)
    os.close(slave)


@pytest.fixture
def tty_stream(pty_pair):
    """The slave end of a pseudo-terminal, opened as an unbuffered binary stream."""
    _, slave = pty_pair
    stream = open(slave, "rb", buffering=0, closefd=False)
    yield stream
    stream.close()


# Key that moves in each direction
STEP_KEYS = {(1, 0): "d", (-1, 0): "a", (0, 1): "s", (0, -1): "w"}


def solve(maze: Maze) -> str | None:
    """Breadth-first search from the player to the goal. Returns the keys to press."""
    start = maze.position
    previous = {start: None}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        if maze[x, y] == GOAL:
            keys = []
            position = (x, y)
            while previous[position] is not None:
                prev_position, key = previous[position]
                keys.append(key)
                position = prev_position
            return "".join(reversed(keys))
        for (dx, dy), key in STEP_KEYS.items():
            nx, ny = x + dx, y + dy
            if not (0 <= nx < maze.size and 0 <= ny < maze.size):
                continue
            if (nx, ny) in previous or maze[nx, ny] not in (OPEN, GOAL):
                continue
            previous[(nx, ny)] = ((x, y), key)
            queue.append((nx, ny))
    return None


def solvable_seed(size: int) -> tuple[int, str]:
    """Find a seed whose maze has a path to the goal. Returns (seed, keys)."""
    for seed in range(1000):
        keys = solve(Maze(size, random.Random(seed)))
        if keys:
            return seed, keys
    raise AssertionError(f"no solvable {size}x{size} maze in the first 1000 seeds")
