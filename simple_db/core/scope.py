"""Transaction scope bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
  from simple_db.core.history import Frame


@dataclass
class TransactionScope:
  """One open transaction.

  Records the variables first written during this scope's own lifetime,
  together with the single frame the scope currently has on top of each
  variable's history. Writes made by enclosing scopes are not tracked here.
  """

  frames: dict[str, Frame] = field(default_factory=dict)

  def record(self, name: str, frame: Frame) -> None:
    """Remember the frame this scope pushed for name, replacing any earlier one."""
    self.frames[name] = frame

  def has_written(self, name: str) -> bool:
    return name in self.frames

  def frame_for(self, name: str) -> Frame | None:
    return self.frames.get(name)

  @property
  def written(self) -> list[str]:
    """Names written in this scope, in first-write order."""
    return list(self.frames)

  def __len__(self) -> int:
    return len(self.frames)
