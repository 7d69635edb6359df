from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence

from ..schemas import DictionaryStats, WordCounts
from ..stores.base import DeleteExact, DeleteGroupIfMember, KeyedSetStore
from ..words import InvalidWord, has_word, is_proper_noun, is_valid_word, normalize
from .queries import QueryEngine

logger = logging.getLogger(__name__)


class AnagramIndex:
    """
    Anagram dictionary over a keyed-set store.

    Owns the running word and anagram counts and is the only writer of the
    store, so both stay in step. A group of n mutual anagrams contributes
    n-1 to the anagram count; words without anagrams contribute nothing.
    """

    def __init__(self, store: KeyedSetStore):
        if store is None:
            raise ValueError('A store is required')
        self.store = store
        self.queries = QueryEngine(self)
        self._word_count = 0
        self._anagram_count = 0

    def word_count(self) -> int:
        return self._word_count

    def anagram_count(self) -> int:
        return self._anagram_count

    async def add(self, word: str) -> WordCounts:
        """Add a word, returning the count increments (zero for a duplicate)."""
        if not is_valid_word(word):
            raise InvalidWord(word)
        word = word.strip()

        result = await self.store.add(normalize(word), word)
        counts = WordCounts()
        if result.affected:
            counts.word = result.affected
            # the first word of a set is not an anagram of anything
            counts.anagram = result.affected - (1 if result.size == result.affected else 0)
            self._word_count += counts.word
            self._anagram_count += counts.anagram
        return counts

    async def get(
        self,
        word: str,
        include_input: bool = False,
        exclude_proper_nouns: bool = False,
        limit: Optional[int] = None,
    ) -> List[str]:
        """
        Anagrams of a known word, in stored order.

        An unknown word matches nothing, even when anagrams of it are stored.
        Only the exact input string is left out by default, so 'canadas'
        still returns 'Canadas'. ``include_input`` wins over
        ``exclude_proper_nouns`` for the input itself. ``limit`` applies last
        and only when it is a positive int.
        """
        if not is_valid_word(word):
            raise InvalidWord(word)
        word = word.strip()

        anagrams = await self.store.get(normalize(word))
        if not anagrams or not has_word(anagrams, word):
            return []

        if not include_input:
            anagrams = [w for w in anagrams if w != word]
        if exclude_proper_nouns:
            anagrams = [w for w in anagrams if w == word or not is_proper_noun(w)]
        if isinstance(limit, int) and not isinstance(limit, bool) and limit > 0:
            anagrams = anagrams[:limit]
        return anagrams

    async def delete(self, word: str, include_anagrams: bool = False) -> int:
        """
        Delete a word, or with ``include_anagrams`` its whole group.

        The group is only removed when the word belongs to it, so anagrams of
        an unknown word survive. Returns the number of words removed.
        """
        if not is_valid_word(word):
            raise InvalidWord(word)
        word = word.strip()

        mode = DeleteGroupIfMember(word) if include_anagrams else DeleteExact(word)
        result = await self.store.delete(normalize(word), mode)
        if result.affected:
            self._word_count -= result.affected
            # emptying the set also removes its first word, which was never counted
            self._anagram_count -= result.affected - (0 if result.size else 1)
        return result.affected

    async def clear(self) -> None:
        await self.store.clear()
        self._word_count = self._anagram_count = 0

    async def load(self, lines: Iterable[str]) -> WordCounts:
        """
        Ingest whitespace-delimited words from a line source.

        Invalid tokens are skipped and reported in aggregate.
        """
        total = WordCounts()
        rejected = 0
        for line in lines:
            for token in line.split():
                try:
                    total += await self.add(token)
                except InvalidWord as e:
                    rejected += 1
                    logger.warning("Skipping token: %s", e)
        if rejected:
            logger.warning("Skipped %d invalid tokens", rejected)
        return total

    async def anagrams_by_cardinality(self, low=None, high=None) -> List[List[str]]:
        return await self.queries.anagrams_by_cardinality(low, high)

    async def anagrams_by_length(self, low=None, high=None) -> List[List[str]]:
        return await self.queries.anagrams_by_length(low, high)

    async def max_cardinality_anagrams(self) -> List[List[str]]:
        return await self.queries.max_cardinality_anagrams()

    async def max_length_anagrams(self) -> List[List[str]]:
        return await self.queries.max_length_anagrams()

    async def are_anagrams(self, words: Sequence[str]) -> bool:
        return await self.queries.are_anagrams(words)

    async def stats(self) -> DictionaryStats:
        return await self.queries.stats()
