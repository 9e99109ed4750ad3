"""
Command-line interface for mazegame.

This module defines all CLI commands using the Typer library.
"""

import logging
import random
import sys
from pathlib import Path
from typing import Annotated

import typer

from mazegame import __version__

app = typer.Typer(
    name="mazegame",
    help="mazegame - play randomly generated mazes in your terminal",
    no_args_is_help=True,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Width of "You completed the maze in X seconds!" without X, roughly
COMPLETION_MESSAGE_WIDTH = 36


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"mazegame {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", envvar="MAZEGAME_LOG_LEVEL", help="Logging level"),
    ] = "WARNING",
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write logs here instead of stderr"),
    ] = None,
) -> None:
    """mazegame - play randomly generated mazes in your terminal."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}", param_hint="--log-level")
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        filename=str(log_file) if log_file is not None else None,
    )


@app.command("play")
def play_maze(
    size: Annotated[
        int,
        typer.Argument(min=0, envvar="MAZEGAME_SIZE", help="Maze width and height in cells"),
    ] = 40,
    seed: Annotated[
        int | None,
        typer.Option("--seed", "-s", help="Random seed, for replaying the same maze"),
    ] = None,
) -> None:
    """
    Play a maze.

    Move with W/A/S/D (or the arrow keys on Windows), R for a new maze,
    Q to quit. The time taken to reach the goal is printed at the end.

    Example:
        mazegame play
        mazegame play 20 --seed 1234
    """
    from mazegame.console import ConsoleError, ConsoleInput
    from mazegame.game import play

    # Nothing to walk through
    if size < 2:
        print("You completed the maze in NaN seconds!")
        return

    try:
        with ConsoleInput() as console:
            result = play(console, size, out=sys.stdout, rng=random.Random(seed))
    except ConsoleError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1) from e

    if result.completed:
        # Padding overwrites what's left of the cleared board
        padding = " " * max(0, size * 2 - COMPLETION_MESSAGE_WIDTH)
        print(f"You completed the maze in {result.elapsed_seconds} seconds!{padding}")


@app.command("keys")
def show_keys() -> None:
    """
    Show what the raw input driver reports for each key.

    Reads keys one at a time and prints their codes until Q is pressed or
    input ends. Useful for checking arrow and function keys on a new
    terminal.
    """
    from mazegame.console import ConsoleError, ConsoleInput, KeySentinel, describe_key

    try:
        with ConsoleInput() as console:
            kind = "interactive" if console.interactive else "not interactive"
            print(f"Input backend:     {console.backend.name} ({kind})")
            print("Press keys to see their codes, Q to quit.")
            print("-" * 60)
            while True:
                key = console.read_and_reset(True)
                print(describe_key(key))
                if key in ("q", "Q") or key is KeySentinel.END_OF_INPUT:
                    break
    except ConsoleError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
