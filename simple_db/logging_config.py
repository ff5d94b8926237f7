import logging
import sys
from typing import TextIO

import structlog


def resolve_level(level: str) -> int:
  """Translate a level name such as "debug" or "WARNING" to its number.

  Raises:
      ValueError: If the name is not a standard logging level
  """
  levels = logging.getLevelNamesMapping()
  try:
    return levels[level.upper()]
  except KeyError:
    raise ValueError(f"Unknown log level: {level}") from None


def configure_logging(level: str = "WARNING", log_file: TextIO | None = None) -> None:
  """Configure structlog for application logging.

  Events go to stderr so stdout carries only protocol output.

  Args:
      level: Minimum level name to emit
      log_file: Optional open text stream; when given, events are written
          there instead. The caller owns the stream and closes it.
  """
  if log_file is None:
    logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)
    renderer = structlog.dev.ConsoleRenderer()
  else:
    logger_factory = structlog.WriteLoggerFactory(file=log_file)
    renderer = structlog.dev.ConsoleRenderer(colors=False)

  structlog.configure(
    processors=[
      structlog.processors.TimeStamper(fmt="iso"),
      structlog.processors.add_log_level,
      renderer,
    ],
    wrapper_class=structlog.make_filtering_bound_logger(resolve_level(level)),
    context_class=dict,
    logger_factory=logger_factory,
  )
