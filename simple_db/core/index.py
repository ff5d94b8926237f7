"""Inverted value index for O(1) equality counts."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
  from simple_db.core.history import Frame


class ValueIndex:
  """Maps each value to the number of variables currently holding it.

  Only present frames are counted. Entries that drop to zero are removed,
  so absence always means a count of 0.
  """

  def __init__(self) -> None:
    self._counts: dict[str, int] = {}

  def admit(self, frame: Frame) -> None:
    """Count a frame that just became a variable's current version."""
    if not frame.present:
      return
    self._counts[frame.value] = self._counts.get(frame.value, 0) + 1

  def retire(self, frame: Frame) -> None:
    """Stop counting a frame that is no longer a variable's current version.

    Raises:
        KeyError: If the frame's value is not indexed
    """
    if not frame.present:
      return
    remaining = self._counts[frame.value] - 1
    if remaining:
      self._counts[frame.value] = remaining
    else:
      del self._counts[frame.value]

  def count(self, value: str) -> int:
    return self._counts.get(value, 0)

  def as_dict(self) -> dict[str, int]:
    return dict(self._counts)

  def __len__(self) -> int:
    return len(self._counts)

  def __contains__(self, value: object) -> bool:
    return value in self._counts
