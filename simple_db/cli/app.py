"""Core CLI app setup."""

from __future__ import annotations

import sys
from contextlib import ExitStack
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, TextIO

import structlog
import typer
from rich.console import Console

if TYPE_CHECKING:
  from structlog.typing import FilteringBoundLogger

from simple_db.logging_config import configure_logging
from simple_db.session import Session
from simple_db.settings import settings

FILE_MODE_BANNER = "IN FILE MODE"
INTERACTIVE_MODE_BANNER = "IN INTERACTIVE MODE"
MISSING_SCRIPT_MESSAGE = "File doesn't exist, starting interactive mode"

# stderr console for diagnostics, stdout console for the mode banner
err_console = Console(stderr=True, highlight=False, emoji=False)
out_console = Console(highlight=False, emoji=False, soft_wrap=True)


def get_logger(level: str, log_file: TextIO | None) -> FilteringBoundLogger:
  """Configure logging and return a logger instance."""
  configure_logging(level, log_file)
  return structlog.get_logger()


def open_script(script: Path | None, stack: ExitStack) -> TextIO | None:
  """Open the command script, or return None to fall back to stdin.

  Undecodable bytes are replaced rather than aborting the session.
  """
  if script is None:
    return None
  try:
    return stack.enter_context(script.open(encoding="utf-8", errors="replace"))
  except OSError:
    err_console.print(MISSING_SCRIPT_MESSAGE, markup=False)
    return None


def emit(line: str) -> None:
  """Write one protocol line to stdout exactly as given."""
  sys.stdout.write(line + "\n")
  sys.stdout.flush()


app = typer.Typer(
  help="SimpleDB: an in-memory key/value store with nested transactions.",
)


@app.command()
def run(
  script: Annotated[
    Path | None,
    typer.Argument(help="File of commands to run. Reads stdin when omitted."),
  ] = None,
  quiet: Annotated[
    bool, typer.Option("--quiet", "-q", help="Do not print the mode banner.")
  ] = False,
  log_level: Annotated[
    str | None, typer.Option("--log-level", help="Log level (default from settings).")
  ] = None,
  log_file: Annotated[
    Path | None, typer.Option("--log-file", help="Append log events to this file.")
  ] = None,
):
  """
  Run SimpleDB commands from a file or interactively.
  """
  level = log_level or settings.log_level
  show_banner = settings.show_banner and not quiet

  with ExitStack() as stack:
    try:
      log_stream = None
      if log_file is not None:
        log_stream = stack.enter_context(log_file.open("a", encoding="utf-8"))
      log = get_logger(level, log_stream)
    except (ValueError, OSError) as e:
      err_console.print(str(e), style="red", markup=False)
      raise typer.Exit(code=2) from e

    if log_stream is not None:
      # Runs before the log file is closed.
      stack.callback(configure_logging, level)

    source = open_script(script, stack)
    if source is not None:
      banner = FILE_MODE_BANNER
    else:
      banner = INTERACTIVE_MODE_BANNER
      source = typer.get_text_stream("stdin", errors="replace")

    if show_banner:
      out_console.print(banner, markup=False)
    log.info("session_started", mode=banner, script=str(script) if script else None)

    session = Session()
    for output in session.run(source):
      emit(output)

    log.info("session_finished", ended=session.finished)


if __name__ == "__main__":
  app()
