from __future__ import annotations
import math
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..schemas import DictionaryStats
from ..words import InvalidWord, has_word

if TYPE_CHECKING:
    from .index import AnagramIndex

UNBOUNDED = math.inf


def to_bound(value) -> Optional[int]:
    """Coerce a range bound to an int; anything malformed counts as unspecified."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            try:
                value = float(value)
            except ValueError:
                return None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return int(value)
    if isinstance(value, int):
        return value
    return None


def clamp_range(low, high, floor: int):
    low = to_bound(low)
    high = to_bound(high)
    if not low or low < floor:
        low = floor
    if not high:
        high = UNBOUNDED
    elif high < low:
        high = low
    return low, high


def minimum(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    result = values[0]
    for value in values:
        if value < result:
            result = value
    return result


def maximum(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    result = values[0]
    for value in values:
        if result < value:
            result = value
    return result


def median(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    ordered = sorted(values)  # numeric order, not lexicographic
    middle = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[middle]
    mid = (ordered[middle - 1] + ordered[middle]) / 2
    return int(mid) if mid.is_integer() else mid


def average(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


class QueryEngine:
    """Read-only scans over the index's store. Every query is one full pass."""

    def __init__(self, index: AnagramIndex):
        self.index = index

    @property
    def store(self):
        return self.index.store

    async def anagrams_by_cardinality(self, low=None, high=None) -> List[List[str]]:
        # sets of one have no anagrams, so cardinality starts at 2
        low, high = clamp_range(low, high, floor=2)
        result: List[List[str]] = []

        def visit(words: List[str], key: str):
            if low <= len(words) <= high:
                result.append(words)

        await self.store.each(visit)
        return result

    async def anagrams_by_length(self, low=None, high=None) -> List[List[str]]:
        low, high = clamp_range(low, high, floor=1)
        result: List[List[str]] = []

        def visit(words: List[str], key: str):
            if len(words) > 1 and low <= len(key) <= high:
                result.append(words)

        await self.store.each(visit)
        return result

    async def max_cardinality_anagrams(self) -> List[List[str]]:
        best = 1
        result: List[List[str]] = []

        def visit(words: List[str], key: str):
            nonlocal best, result
            size = len(words)
            if size < 2:
                return
            if size > best:
                best = size
                result = [words]
            elif size == best:
                result.append(words)

        await self.store.each(visit)
        return result

    async def max_length_anagrams(self) -> List[List[str]]:
        best = 0
        result: List[List[str]] = []

        def visit(words: List[str], key: str):
            nonlocal best, result
            if len(words) < 2:
                return
            if len(key) > best:
                best = len(key)
                result = [words]
            elif len(key) == best:
                result.append(words)

        await self.store.each(visit)
        return result

    async def are_anagrams(self, words: Sequence[str]) -> bool:
        """
        True when every word is a known anagram of ``words[0]``.

        A word is not its own anagram: fewer than two words is False, and
        so is a list that repeats the first word, since the first word is
        never part of its own result set.
        """
        if not words or len(words) < 2:
            return False
        try:
            anagrams = await self.index.get(words[0])
        except InvalidWord:
            return False
        if not anagrams:
            return False
        for word in words[1:]:
            if not isinstance(word, str) or not has_word(anagrams, word.strip()):
                return False
        return True

    async def stats(self) -> DictionaryStats:
        word_lengths: List[int] = []
        cardinalities: List[int] = []

        def visit(words: List[str], key: str):
            if len(words) > 1:
                cardinalities.append(len(words))
            word_lengths.extend(len(word) for word in words)

        await self.store.each(visit)
        return DictionaryStats(
            wordCount=len(word_lengths),
            anagramCount=self.index.anagram_count(),
            minWordLength=minimum(word_lengths),
            maxWordLength=maximum(word_lengths),
            medianWordLength=median(word_lengths),
            averageWordLength=average(word_lengths),
            minCardinality=minimum(cardinalities),
            maxCardinality=maximum(cardinalities),
            medianCardinality=median(cardinalities),
            averageCardinality=average(cardinalities),
        )
