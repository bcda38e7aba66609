"""Operator-facing output."""

from __future__ import annotations

import datetime

import click


def printable(text: str) -> str:
    """Make *text* safe to write to a UTF-8 terminal.

    Host file names that are not valid UTF-8 come back from the OS with
    surrogate escapes, which no stream can encode.  Undecodable bytes become
    U+FFFD; any other lone surrogate is shown as a backslash escape.
    """
    try:
        raw = text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", "backslashreplace").decode("utf-8")
    return raw.decode("utf-8", "replace")


class Reporter:
    """Timestamped, color-coded lines on stdout/stderr.

    ``status`` lines only appear in verbose mode; everything else is always
    shown.  Errors go to stderr so they survive ``> /dev/null``.
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    @staticmethod
    def _stamp(msg: str) -> str:
        now = datetime.datetime.now().strftime("%H:%M:%S")
        return f"[{now}] {printable(msg)}"

    def info(self, msg: str) -> None:
        click.secho(self._stamp(msg), fg="cyan")

    def success(self, msg: str) -> None:
        click.secho(self._stamp(msg), fg="green")

    def removed(self, msg: str) -> None:
        click.secho(self._stamp(msg), fg="red")

    def error(self, msg: str) -> None:
        click.secho(self._stamp(f"ERROR: {msg}"), fg="red", err=True)

    def status(self, msg: str) -> None:
        """Diagnostic line, shown with -v only."""
        if self.verbose:
            click.echo(self._stamp(msg), err=True)
