"""
Console entry point for forgecast.

Errors that escape a command are rendered as a panel with suggestions
instead of a raw traceback; the traceback is still logged at DEBUG.
"""

import logging
import os
import sys

import typer
from rich.console import Console

from forgecast.cli.app import app
from forgecast.cli.formatters import format_error_with_suggestions
from forgecast.exceptions import ForgecastError

log = logging.getLogger("forgecast")


def _use_utf8_streams() -> None:
    # Windows consoles default to a legacy code page and choke on the
    # status glyphs used by the CLI.
    if os.name != "nt":
        return
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass


def _fail(console: Console, error: Exception, context: dict | None = None) -> None:
    console.print()
    console.print(format_error_with_suggestions(error, context))
    sys.exit(1)


def main() -> None:
    _use_utf8_streams()
    console = Console(stderr=True)

    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Interrupted, nothing further was published.[/yellow]")
        sys.exit(130)
    except ForgecastError as e:
        _fail(console, e)
    except Exception as e:
        log.debug("Unhandled error", exc_info=True)
        _fail(console, e, {"type": "Unexpected"})


if __name__ == "__main__":
    main()
