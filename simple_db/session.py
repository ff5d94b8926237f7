"""Line-protocol session driving a TransactionalStore."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from simple_db.commands import Command, CommandError, CommandName, parse_command
from simple_db.core.store import TransactionalStore

if TYPE_CHECKING:
  from collections.abc import Iterable, Iterator

logger = structlog.get_logger()

NULL_MARKER = "NULL"
NO_TRANSACTION = "NO TRANSACTION"


class Session:
  """Executes protocol commands against one store and renders their output.

  A session stays open until an END command is executed; lines fed after
  that are ignored.
  """

  def __init__(self, store: TransactionalStore | None = None) -> None:
    self.store = store if store is not None else TransactionalStore()
    self._finished = False

  @property
  def finished(self) -> bool:
    return self._finished

  def execute(self, command: Command) -> str | None:
    """Run one parsed command.

    Args:
        command: A validated command

    Returns:
        The output line for the command, or None if it prints nothing
    """
    store = self.store
    match command.name:
      case CommandName.SET:
        name, value = command.args
        store.set(name, value)
      case CommandName.UNSET:
        store.unset(command.args[0])
      case CommandName.GET:
        value = store.get(command.args[0])
        return NULL_MARKER if value is None else value
      case CommandName.NUMEQUALTO:
        return str(store.num_equal_to(command.args[0]))
      case CommandName.BEGIN:
        store.begin()
      case CommandName.ROLLBACK:
        if not store.rollback():
          return NO_TRANSACTION
      case CommandName.COMMIT:
        if not store.commit():
          return NO_TRANSACTION
      case CommandName.END:
        self._finished = True
        logger.debug("session_ended")
    return None

  def feed(self, line: str) -> str | None:
    """Parse and run one input line.

    Malformed lines never reach the store; their diagnostic is returned as
    the output line instead.
    """
    if self._finished:
      return None
    try:
      command = parse_command(line)
    except CommandError as e:
      logger.info("command_rejected", line=line.rstrip("\n"), error=str(e))
      return str(e)
    if command is None:
      return None
    return self.execute(command)

  def run(self, lines: Iterable[str]) -> Iterator[str]:
    """Feed lines until they run out or END is seen, yielding output lines."""
    for line in lines:
      output = self.feed(line)
      if output is not None:
        yield output
      if self._finished:
        break
