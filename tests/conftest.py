"""
Pytest configuration: a controllable clock and an in-memory mutual pool.
"""

import pytest
from fastapi.testclient import TestClient

from mutualpool.core.clock import Clock
from mutualpool.core.config import Settings
from mutualpool.core.constants import SECONDS_PER_DAY
from mutualpool.core.dependencies import get_mutual_pool
from mutualpool.services.mutual_pool import MutualPool

START = 1_700_000_000
ADMIN = "admin"


class ManualClock(Clock):
    """Clock that only moves when a test moves it."""

    def __init__(self, start: int = START):
        self.current = start

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int = 0, days: int = 0):
        self.current += seconds + days * SECONDS_PER_DAY


@pytest.fixture
def settings():
    return Settings(ADMIN_IDENTITY=ADMIN, PERSIST_STATE=False, DEBUG=False)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def pool(settings, clock):
    """Fresh in-memory pool with no funds."""
    return MutualPool(settings, clock=clock)


@pytest.fixture
def funded_pool(pool):
    """Pool holding a 100000-coverage policy for alice (id 1) and 60000 from bob."""
    pool.purchase("alice", 100000, 30, 1000)
    pool.contribute("bob", 60000)
    return pool


@pytest.fixture
def client(pool):
    from mutualpool.main import app

    app.dependency_overrides[get_mutual_pool] = lambda: pool
    yield TestClient(app)
    app.dependency_overrides.clear()
