"""Runtask CLI - Command-line interface for runtask."""

from __future__ import annotations

from runtask.cli.base import cli

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
