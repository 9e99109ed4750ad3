"""Allow running as `python -m mazegame`."""

from mazegame.cli import app

app(prog_name="mazegame")
