from __future__ import annotations
from pydantic import BaseModel
from typing import Any, List, Optional, Union

class SetOpResult(BaseModel):
    # values added/removed by the store operation, and the set size afterwards
    affected: int = 0
    size: int = 0

class WordCounts(BaseModel):
    word: int = 0
    anagram: int = 0

    def __add__(self, other: WordCounts) -> WordCounts:
        return WordCounts(word=self.word + other.word, anagram=self.anagram + other.anagram)

class DictionaryStats(BaseModel):
    wordCount: int = 0
    anagramCount: int = 0
    minWordLength: Optional[int] = None
    maxWordLength: Optional[int] = None
    medianWordLength: Optional[Union[int, float]] = None
    averageWordLength: Optional[float] = None
    minCardinality: Optional[int] = None
    maxCardinality: Optional[int] = None
    medianCardinality: Optional[Union[int, float]] = None
    averageCardinality: Optional[float] = None

class AddWordsRequest(BaseModel):
    # items are validated one by one by the index, so anything goes here
    words: List[Any]
