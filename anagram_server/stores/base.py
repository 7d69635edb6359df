from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Union

from ..schemas import SetOpResult
from ..words import has_word

# visit(words, key) is called once per key/set pair during a scan
Visitor = Callable[[List[str], str], None]


@dataclass(frozen=True)
class DeleteAll:
    """Drop the whole set for a key."""

    def survivors(self, values: List[str]) -> List[str]:
        return []


@dataclass(frozen=True)
class DeleteExact:
    """Drop one entry by exact string equality (no proper noun folding)."""
    word: str

    def survivors(self, values: List[str]) -> List[str]:
        return [v for v in values if v != self.word]


@dataclass(frozen=True)
class DeleteGroupIfMember:
    """Drop the whole set, but only when ``word`` is one of its members."""
    word: str

    def survivors(self, values: List[str]) -> List[str]:
        if has_word(values, self.word):
            return []
        return list(values)


DeleteMode = Union[DeleteAll, DeleteExact, DeleteGroupIfMember]


class KeyedSetStore(ABC):
    """
    Storage contract behind the anagram index.

    Maps a key to an ordered, duplicate-free list of values. Implementations
    must make the read-modify-write of ``add`` and ``delete`` atomic per key:
    the index derives its counters from the returned SetOpResult and does no
    locking of its own. Scans need only a consistent view of each set.
    """

    @abstractmethod
    async def get(self, key: str) -> List[str]:
        """Values for ``key`` in insertion order, empty if the key is unknown."""

    @abstractmethod
    async def add(self, key: str, value: str) -> SetOpResult:
        """Append ``value`` unless an equal value is already present."""

    @abstractmethod
    async def delete(self, key: str, mode: DeleteMode = DeleteAll()) -> SetOpResult:
        """Keep only ``mode.survivors(values)``; remove the key once it is empty."""

    @abstractmethod
    async def clear(self) -> None:
        ...

    @abstractmethod
    async def each(self, visit: Visitor) -> None:
        """Call ``visit(values, key)`` for every key, in a stable order."""
