"""Command parsing for the SimpleDB line protocol.

Each input line holds one command: a case-sensitive name followed by a
fixed number of whitespace-separated argument tokens. Blank lines carry no
command.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class CommandName(StrEnum):
  """Commands understood by the line protocol."""

  SET = "SET"
  GET = "GET"
  UNSET = "UNSET"
  NUMEQUALTO = "NUMEQUALTO"
  BEGIN = "BEGIN"
  ROLLBACK = "ROLLBACK"
  COMMIT = "COMMIT"
  END = "END"

  @property
  def arity(self) -> int:
    """Number of argument tokens the command takes."""
    return _ARITY[self]


_ARITY = {
  CommandName.SET: 2,
  CommandName.GET: 1,
  CommandName.UNSET: 1,
  CommandName.NUMEQUALTO: 1,
  CommandName.BEGIN: 0,
  CommandName.ROLLBACK: 0,
  CommandName.COMMIT: 0,
  CommandName.END: 0,
}


class CommandError(ValueError):
  """A line that cannot be turned into a command."""


class UnknownCommandError(CommandError):
  def __init__(self, token: str) -> None:
    self.token = token
    super().__init__(f"Incorrect input command : {token}")


class ArityError(CommandError):
  def __init__(self, name: CommandName, got: int) -> None:
    self.name = name
    self.expected = name.arity
    self.got = got
    super().__init__(
      f"Incorrect number of arguments for {name} : expected {self.expected}, got {got}"
    )


@dataclass(frozen=True)
class Command:
  name: CommandName
  args: tuple[str, ...] = ()


def parse_command(line: str) -> Command | None:
  """Parse one protocol line.

  Args:
      line: Raw input line, with or without its trailing newline

  Returns:
      The parsed Command, or None for a blank line

  Raises:
      UnknownCommandError: If the first token is not a command name
      ArityError: If the command has the wrong number of arguments
  """
  tokens = line.split()
  if not tokens:
    return None

  head, *args = tokens
  try:
    name = CommandName(head)
  except ValueError:
    raise UnknownCommandError(head) from None

  if len(args) != name.arity:
    raise ArityError(name, len(args))

  return Command(name=name, args=tuple(args))
