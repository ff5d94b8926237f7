from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import structlog

if TYPE_CHECKING:
  from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
  """Undo any logging configuration a test (or CLI invocation) applied."""
  yield
  structlog.reset_defaults()
