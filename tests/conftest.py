import pytest
from roster_cache.crypto import CipherService
from roster_cache.storage import InMemorySlotStore

NOW = 1_700_000_000_000


class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cipher():
    return CipherService("test-secret")


@pytest.fixture
def store():
    return InMemorySlotStore()
