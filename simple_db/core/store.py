"""Transactional key/value store with nested scopes.

This module provides the state engine behind SimpleDB: a per-variable
history of frames, a stack of open transaction scopes, and a value index
that always reflects the current top frame of every variable.

Histories grow by one frame for each open scope that writes a variable.
Rolling back pops exactly the frames the innermost scope pushed; committing
flattens every written history down to its current frame and closes all
scopes at once.
"""

from __future__ import annotations

import structlog

from simple_db.core.history import ABSENT, Frame, top_value
from simple_db.core.index import ValueIndex
from simple_db.core.scope import TransactionScope

logger = structlog.get_logger()


class TransactionalStore:
  """In-memory key/value store supporting nested transactions.

  All state is owned by the instance:

  - ``_histories``: name → list of frames, most recent last
  - ``_index``: value → number of variables currently holding it
  - ``_scopes``: open transaction scopes, innermost last
  """

  def __init__(self) -> None:
    self._histories: dict[str, list[Frame]] = {}
    self._index = ValueIndex()
    self._scopes: list[TransactionScope] = []

  # ------------------------------------------------------------------
  # Data commands
  # ------------------------------------------------------------------

  def set(self, name: str, value: str) -> None:
    """Set the variable name to value."""
    self._write(name, Frame.of(value))

  def unset(self, name: str) -> None:
    """Clear the variable name, keeping a history slot to roll back to."""
    self._write(name, ABSENT)

  def get(self, name: str) -> str | None:
    """Return the current value of name, or None if it has no value."""
    return top_value(self._histories.get(name, []))

  def num_equal_to(self, value: str) -> int:
    """Return the number of variables currently set to value."""
    return self._index.count(value)

  # ------------------------------------------------------------------
  # Transaction commands
  # ------------------------------------------------------------------

  def begin(self) -> None:
    """Open a new transaction scope nested inside any open ones."""
    self._scopes.append(TransactionScope())
    logger.debug("transaction_begun", depth=len(self._scopes))

  def commit(self) -> bool:
    """Close all open scopes, permanently applying their writes.

    Returns:
        False if no transaction is open, True otherwise
    """
    if not self._scopes:
      logger.debug("commit_without_transaction")
      return False

    written: set[str] = set()
    for scope in self._scopes:
      written.update(scope.written)

    # The top frame is already indexed, so flattening leaves the index alone.
    for name in written:
      history = self._histories[name]
      del history[:-1]

    depth = len(self._scopes)
    self._scopes.clear()
    logger.debug("transaction_committed", depth=depth, variables=len(written))
    return True

  def rollback(self) -> bool:
    """Undo every write made in the innermost scope and close it.

    Returns:
        False if no transaction is open, True otherwise
    """
    if not self._scopes:
      logger.debug("rollback_without_transaction")
      return False

    scope = self._scopes.pop()
    for name in scope.written:
      self._pop_scope_frame(scope, name)

    logger.debug(
      "transaction_rolled_back", depth=len(self._scopes) + 1, variables=len(scope)
    )
    return True

  # ------------------------------------------------------------------
  # Introspection helpers
  # ------------------------------------------------------------------

  @property
  def transaction_depth(self) -> int:
    """Number of currently open transaction scopes."""
    return len(self._scopes)

  @property
  def in_transaction(self) -> bool:
    return bool(self._scopes)

  def snapshot(self) -> dict[str, str]:
    """Return a copy of every variable that currently has a value."""
    result: dict[str, str] = {}
    for name, history in self._histories.items():
      value = top_value(history)
      if value is not None:
        result[name] = value
    return result

  def __contains__(self, name: object) -> bool:
    return isinstance(name, str) and self.get(name) is not None

  def __len__(self) -> int:
    return sum(
      1 for history in self._histories.values() if top_value(history) is not None
    )

  # ------------------------------------------------------------------
  # History bookkeeping
  # ------------------------------------------------------------------

  def _write(self, name: str, frame: Frame) -> None:
    history = self._histories.setdefault(name, [])

    if self._scopes:
      scope = self._scopes[-1]
      if scope.has_written(name):
        # One frame per scope per variable: replace this scope's own frame.
        self._pop_scope_frame(scope, name)
      scope.record(name, frame)
    elif history:
      # Outside a transaction the base frame is simply replaced.
      self._pop(history)

    self._push(history, frame)

  def _push(self, history: list[Frame], frame: Frame) -> None:
    if history:
      self._index.retire(history[-1])
    history.append(frame)
    self._index.admit(frame)

  def _pop(self, history: list[Frame]) -> Frame:
    frame = history.pop()
    self._index.retire(frame)
    if history:
      self._index.admit(history[-1])
    return frame

  def _pop_scope_frame(self, scope: TransactionScope, name: str) -> Frame:
    """Pop the frame scope pushed for name.

    Raises:
        RuntimeError: If that frame is not on top of the history
    """
    history = self._histories[name]
    if not history or history[-1] is not scope.frame_for(name):
      raise RuntimeError(f"History of {name!r} does not end with its scope's frame")
    return self._pop(history)
