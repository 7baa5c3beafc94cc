"""Typer command-line interface (``hetzner``)."""

from hetzner_cli.cli.main import app, run

__all__ = ["app", "run"]
