# tests/conftest.py

from __future__ import annotations

from datetime import datetime

import pytest

from helpers import CHICAGO_TZ

from .fakes import FakeGateway


@pytest.fixture()
def now() -> datetime:
    """Fixed afternoon instant in the reference zone (CDT, UTC-5)."""
    return datetime(2026, 10, 19, 15, 0, 0, tzinfo=CHICAGO_TZ)


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()
