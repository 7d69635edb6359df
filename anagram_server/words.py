from __future__ import annotations
import re
from typing import Iterable

# Words are ASCII letters with single internal hyphens.
VALID_WORD = re.compile(r'^[A-Za-z]+(-[A-Za-z]+)*$')
# First letter uppercase, rest lowercase; a letter after a hyphen may be either case.
PROPER_NOUN = re.compile(r'^[A-Z][a-z]*(-[A-Za-z][a-z]*)*$')


class InvalidWord(ValueError):
    def __init__(self, word):
        self.word = word
        super().__init__(f'Input word "{word}" is invalid')


def is_valid_word(s) -> bool:
    return isinstance(s, str) and VALID_WORD.match(s.strip()) is not None


def is_proper_noun(s: str) -> bool:
    return PROPER_NOUN.match(s) is not None


def normalize(s: str) -> str:
    """Canonical anagram key: lowercased characters in code point order."""
    return ''.join(sorted(s.lower()))


def same_word(candidate: str, target: str) -> bool:
    """
    Match ``candidate`` against ``target``, letting a lowercase word stand in
    for its proper noun form ('canadas' matches 'Canadas').

    Hyphenated targets are compared component by component, so
    'jean-luc' matches 'Jean-Luc'.
    """
    if len(candidate) != len(target):
        return False
    if not candidate or candidate == target:
        return True

    if '-' in target:
        if '-' not in candidate:
            return False
        target_parts = target.split('-')
        candidate_parts = candidate.split('-')
        if len(target_parts) != len(candidate_parts):
            return False
        return all(same_word(c, t) for c, t in zip(candidate_parts, target_parts))

    return candidate[0].upper() + candidate[1:] == target


def has_word(words: Iterable[str], word: str) -> bool:
    return any(same_word(word, entry) for entry in words)
