"""Core transactional state engine."""

from simple_db.core.history import ABSENT, Frame
from simple_db.core.index import ValueIndex
from simple_db.core.scope import TransactionScope
from simple_db.core.store import TransactionalStore

__all__ = ["ABSENT", "Frame", "TransactionScope", "TransactionalStore", "ValueIndex"]
