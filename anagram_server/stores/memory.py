from __future__ import annotations
from typing import Dict, List

from ..schemas import SetOpResult
from .base import DeleteAll, DeleteMode, KeyedSetStore, Visitor

class MemoryStore(KeyedSetStore):
    """
    Dict backed store with no persistence.

    Nothing here awaits between reading and writing a key, so every
    operation is atomic on a single event loop. Keys enumerate in
    insertion order.
    """

    def __init__(self):
        self._sets: Dict[str, List[str]] = {}

    async def get(self, key: str) -> List[str]:
        return list(self._sets.get(key, []))

    async def add(self, key: str, value: str) -> SetOpResult:
        values = self._sets.get(key)
        if values is None:
            self._sets[key] = [value]
            return SetOpResult(affected=1, size=1)
        # avoid duplicates
        if value in values:
            return SetOpResult(affected=0, size=len(values))
        values.append(value)
        return SetOpResult(affected=1, size=len(values))

    async def delete(self, key: str, mode: DeleteMode = DeleteAll()) -> SetOpResult:
        values = self._sets.get(key, [])
        kept = mode.survivors(values)
        if kept:
            self._sets[key] = kept
        else:
            self._sets.pop(key, None)
        return SetOpResult(affected=len(values) - len(kept), size=len(kept))

    async def clear(self) -> None:
        self._sets.clear()

    async def each(self, visit: Visitor) -> None:
        for key, values in self._sets.items():
            visit(list(values), key)

    def __len__(self) -> int:
        return len(self._sets)
