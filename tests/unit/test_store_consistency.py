"""Randomized consistency checks for TransactionalStore.

Drives the store with seeded random operation sequences and compares it
after every step against a reference model built from plain dict copies:
``begin`` pushes a copy, ``rollback`` drops the top copy, ``commit`` keeps
only the top copy.
"""

from __future__ import annotations

import random
from collections import Counter

import pytest

from simple_db.core.store import TransactionalStore

NAMES = ["a", "b", "c", "d", "e"]
VALUES = ["1", "2", "3", "UNSET", "NULL"]
OPERATIONS = ["set", "set", "set", "unset", "begin", "begin", "commit", "rollback"]


class ReferenceModel:
  """Naive copy-on-begin model of the expected visible state."""

  def __init__(self) -> None:
    self.layers: list[dict[str, str]] = [{}]

  @property
  def current(self) -> dict[str, str]:
    return self.layers[-1]

  def set(self, name: str, value: str) -> None:
    self.current[name] = value

  def unset(self, name: str) -> None:
    self.current.pop(name, None)

  def begin(self) -> None:
    self.layers.append(dict(self.current))

  def commit(self) -> bool:
    if len(self.layers) == 1:
      return False
    self.layers = [self.current]
    return True

  def rollback(self) -> bool:
    if len(self.layers) == 1:
      return False
    self.layers.pop()
    return True


def assert_consistent(store: TransactionalStore, model: ReferenceModel) -> None:
  expected = model.current
  assert store.snapshot() == expected
  assert store.transaction_depth == len(model.layers) - 1

  for name in NAMES:
    assert store.get(name) == expected.get(name)

  counts = Counter(expected.values())
  for value in VALUES:
    assert store.num_equal_to(value) == counts[value]
  assert store._index.as_dict() == dict(counts)


@pytest.mark.parametrize("seed", range(40))
def test_random_sequences_match_reference(seed: int) -> None:
  """Test index and values agree with the reference model at every step."""
  rng = random.Random(seed)
  store = TransactionalStore()
  model = ReferenceModel()

  for _ in range(200):
    op = rng.choice(OPERATIONS)
    if op == "set":
      name, value = rng.choice(NAMES), rng.choice(VALUES)
      store.set(name, value)
      model.set(name, value)
    elif op == "unset":
      name = rng.choice(NAMES)
      store.unset(name)
      model.unset(name)
    elif op == "begin":
      store.begin()
      model.begin()
    elif op == "commit":
      assert store.commit() is model.commit()
    else:
      assert store.rollback() is model.rollback()

    assert_consistent(store, model)


@pytest.mark.parametrize("seed", range(10))
def test_history_depth_tracks_writing_scopes(seed: int) -> None:
  """Test no history holds more than one frame per open scope plus the base."""
  rng = random.Random(seed)
  store = TransactionalStore()

  for _ in range(300):
    op = rng.choice(OPERATIONS)
    if op == "set":
      store.set(rng.choice(NAMES), rng.choice(VALUES))
    elif op == "unset":
      store.unset(rng.choice(NAMES))
    else:
      getattr(store, op)()

    for history in store._histories.values():
      assert len(history) <= store.transaction_depth + 1
