"""Version frames for variable histories."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Frame:
  """One version of a variable.

  A frame is either present (holding a value) or absent (the variable was
  unset). The explicit tag means every string, including ``"UNSET"``, is a
  legal value.
  """

  value: str = ""
  present: bool = True

  @classmethod
  def of(cls, value: str) -> Frame:
    """Create a present frame holding value."""
    return cls(value=value, present=True)

  def __repr__(self) -> str:
    if not self.present:
      return "Frame(<absent>)"
    return f"Frame({self.value!r})"


ABSENT = Frame(present=False)


def top_value(history: list[Frame]) -> str | None:
  """Return the visible value of a history, or None if it has none."""
  if not history or not history[-1].present:
    return None
  return history[-1].value
