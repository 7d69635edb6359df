import pytest

from anagram_server.managers.index import AnagramIndex
from anagram_server.stores.memory import MemoryStore


@pytest.fixture
def index() -> AnagramIndex:
    return AnagramIndex(MemoryStore())
