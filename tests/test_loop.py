"""
Test the game loop by feeding it scripted keys.
"""

import io
import random

from conftest import solvable_seed
from mazegame.console import ARROW_DOWN, ARROW_RIGHT, ConsoleInput, KeySentinel
from mazegame.game import GameResult, play
from mazegame.game.maze import TOP_LEFT


class ScriptedConsole:
    """Stands in for ConsoleInput, returning keys from a list."""

    def __init__(self, keys):
        self._keys = list(keys)
        self.reads = 0

    def read_and_reset(self, wait: bool):
        assert wait
        self.reads += 1
        if not self._keys:
            return KeySentinel.END_OF_INPUT
        return self._keys.pop(0)


class FakeClock:
    """Nanosecond clock that advances a fixed step per call."""

    def __init__(self, step_ns: int):
        self._now = 0
        self._step = step_ns

    def __call__(self) -> int:
        now = self._now
        self._now += self._step
        return now


def stream_console(data: bytes) -> ConsoleInput:
    return ConsoleInput(stream=io.BytesIO(data))


class TestPlay:
    """Whole sessions."""

    def test_quit(self):
        out = io.StringIO()
        result = play(stream_console(b"q"), 5, out=out, rng=random.Random(0))
        assert isinstance(result, GameResult)
        assert not result.completed

    def test_quit_uppercase(self):
        console = ScriptedConsole(["Q", "w"])
        result = play(console, 5, out=io.StringIO(), rng=random.Random(0))
        assert not result.completed
        assert console.reads == 1

    def test_end_of_input_quits(self):
        result = play(stream_console(b""), 5, out=io.StringIO(), rng=random.Random(0))
        assert not result.completed

    def test_solve(self):
        seed, keys = solvable_seed(6)
        out = io.StringIO()
        result = play(
            stream_console(keys.encode("ascii")), 6, out=out, rng=random.Random(seed)
        )
        assert result.completed
        assert result.moves == len(keys)

    def test_solve_with_uppercase_keys(self):
        seed, keys = solvable_seed(6)
        result = play(
            stream_console(keys.upper().encode("ascii")), 6,
            out=io.StringIO(), rng=random.Random(seed),
        )
        assert result.completed

    def test_stops_reading_after_goal(self):
        seed, keys = solvable_seed(6)
        console = ScriptedConsole(list(keys) + ["q"])
        result = play(console, 6, out=io.StringIO(), rng=random.Random(seed))
        assert result.completed
        assert console.reads == len(keys)

    def test_unknown_and_invalid_keys_ignored(self):
        seed, keys = solvable_seed(6)
        script = ["x", KeySentinel.INVALID_KEY, "1"] + list(keys)
        result = play(ScriptedConsole(script), 6, out=io.StringIO(), rng=random.Random(seed))
        assert result.completed
        assert result.moves == len(keys)

    def test_arrow_keys(self):
        seed, keys = solvable_seed(6)
        arrows = {"d": ARROW_RIGHT, "s": ARROW_DOWN, "a": "a", "w": "w"}
        script = [arrows[key] for key in keys]
        result = play(ScriptedConsole(script), 6, out=io.StringIO(), rng=random.Random(seed))
        assert result.completed

    def test_restart_draws_new_maze(self):
        out = io.StringIO()
        play(ScriptedConsole(["r", "q"]), 5, out=out, rng=random.Random(0))
        # Initial maze, then the regenerated one
        assert out.getvalue().count(TOP_LEFT) == 2

    def test_board_redrawn_after_each_key(self):
        out = io.StringIO()
        play(ScriptedConsole(["x", "x", "q"]), 5, out=out, rng=random.Random(0))
        assert out.getvalue().count(TOP_LEFT) == 3

    def test_elapsed_time(self):
        seed, keys = solvable_seed(6)
        result = play(
            ScriptedConsole(list(keys)), 6, out=io.StringIO(),
            rng=random.Random(seed), clock=FakeClock(2_500_000_000),
        )
        assert result.elapsed_seconds == 2.5
