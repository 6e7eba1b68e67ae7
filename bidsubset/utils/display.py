"""Utility functions to print formatted CLI messages for subset runs."""

from __future__ import annotations

import click

__all__ = ["printable", "echo_path", "echo_warning", "echo_summary"]


def printable(text: str) -> str:
    """Return *text* safe for a strict UTF-8 stream.

    File names that are not valid UTF-8 reach Python as lone surrogates
    (``surrogateescape``); the offending bytes are shown as U+FFFD instead.
    """
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def echo_path(text: str) -> None:
    """Print one matched relative path, uncoloured so output stays pipeable."""
    click.echo(printable(text))


def echo_warning(text: str) -> None:
    """Print a yellow ``WARNING:`` line on stdout.

    Args:
        text: Message without the prefix.
    """
    click.secho(f"WARNING: {printable(text)}", fg="yellow")


def echo_summary(text: str) -> None:
    """Print the end-of-run summary in green.

    Args:
        text: Summary line.
    """
    click.secho(printable(text), fg="green")
