"""
Segmentation for fenci.

Splits an unspaced run of Chinese characters into dictionary words
with a Viterbi-style dynamic program over character positions.
Dictionary membership is the only scoring signal.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from fenci.characters import split_runs
from fenci.lookup import DictionaryService, DictionaryUnavailableError
from fenci.settings import (
    MAX_WORD_LENGTH, MULTI_CHAR_WORD_WEIGHT,
    SINGLE_CHAR_OOV_SCORE, SINGLE_CHAR_WORD_SCORE,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentedToken:
    """A token with [start, end) character offsets into the input."""
    text: str
    start: int
    end: int
    is_gap: bool = False

    @property
    def length(self) -> int:
        return self.end - self.start


def score_token(length: int, is_word: bool) -> float:
    """
    Edge score for a candidate token. Higher is better.

    Single characters are mildly penalized when they are words and
    heavily penalized when they are not; multi-character words (always
    dictionary words) are rewarded in proportion to their length.
    """
    if length == 1:
        return SINGLE_CHAR_WORD_SCORE if is_word else SINGLE_CHAR_OOV_SCORE
    return MULTI_CHAR_WORD_WEIGHT * length


def segment_text(
    dictionary: DictionaryService,
    text: str,
    max_word_length: int = MAX_WORD_LENGTH,
    cache: Optional[Dict[str, bool]] = None,
) -> List[SegmentedToken]:
    """
    Find the best segmentation of a run of Chinese text.

    Args:
        dictionary: Membership oracle.
        text: A run of Chinese characters with no punctuation or spaces.
        max_word_length: Longest candidate word, in characters.
        cache: Optional substring -> membership dict. Pass the same dict
               across calls to keep it warm; a fresh one is used otherwise.

    Returns:
        Tokens in order. They are contiguous, non-overlapping and cover
        the whole input. Empty input gives an empty list.
    """
    if not text:
        return []

    if cache is None:
        cache = {}

    def contains(word: str) -> bool:
        found = cache.get(word)
        if found is None:
            try:
                found = dictionary.contains(word)
            except DictionaryUnavailableError as e:
                # Treated as a non-word; the fallback still covers every character
                logger.warning(f"Membership query failed for {word!r}: {e}")
                return False
            cache[word] = found
        return found

    n = len(text)
    best_score = [-math.inf] * (n + 1)
    prev_index: List[Optional[int]] = [None] * (n + 1)
    best_score[0] = 0.0

    for i in range(n):
        base = best_score[i]
        if base == -math.inf:
            continue

        for j in range(i + 1, min(n, i + max_word_length) + 1):
            length = j - i
            is_word = contains(text[i:j])

            # Never propose a multi-character non-word
            if length > 1 and not is_word:
                continue

            total = base + score_token(length, is_word)
            if total > best_score[j]:
                best_score[j] = total
                prev_index[j] = i

    # Backtrack
    tokens = []
    end = n
    while end > 0:
        start = prev_index[end]
        if start is None:
            start = end - 1
        tokens.append(SegmentedToken(text[start:end], start, end))
        end = start

    tokens.reverse()
    return tokens


class Segmenter:
    """Segmenter bound to a dictionary and a maximum word length."""

    def __init__(self, dictionary: DictionaryService, max_word_length: int = MAX_WORD_LENGTH):
        if max_word_length < 1:
            raise ValueError("max_word_length must be at least 1")
        self.dictionary = dictionary
        self.max_word_length = max_word_length

    def segment(self, text: str, cache: Optional[Dict[str, bool]] = None) -> List[SegmentedToken]:
        return segment_text(self.dictionary, text, self.max_word_length, cache)

    def segment_words(self, text: str) -> List[str]:
        """Segment and return just the token strings."""
        return [t.text for t in self.segment(text)]

    async def segment_async(self, text: str, timeout: Optional[float] = None) -> List[SegmentedToken]:
        return await segment_text_async(self.dictionary, text, self.max_word_length, timeout)


async def segment_text_async(
    dictionary: DictionaryService,
    text: str,
    max_word_length: int = MAX_WORD_LENGTH,
    timeout: Optional[float] = None,
) -> List[SegmentedToken]:
    """
    Run segment_text in a worker thread.

    Args:
        timeout: Seconds to wait before giving up. Expiry means the
                 dictionary backend did not answer in time.

    Raises:
        DictionaryUnavailableError: On timeout.
    """
    work = asyncio.to_thread(segment_text, dictionary, text, max_word_length)
    try:
        return await asyncio.wait_for(work, timeout)
    except asyncio.TimeoutError as e:
        logger.warning(f"Segmentation of {len(text)} chars timed out after {timeout}s")
        raise DictionaryUnavailableError("Dictionary did not respond in time") from e


def tokenize(
    dictionary: DictionaryService,
    text: str,
    max_word_length: int = MAX_WORD_LENGTH,
    cache: Optional[Dict[str, bool]] = None,
) -> List[SegmentedToken]:
    """
    Segment raw text that may contain punctuation and other scripts.

    Han runs are segmented; everything in between is returned as a
    single gap token per span. Offsets refer to the full input.
    """
    if cache is None:
        cache = {}

    tokens = []
    for start, end, is_han in split_runs(text):
        if not is_han:
            tokens.append(SegmentedToken(text[start:end], start, end, is_gap=True))
            continue
        for token in segment_text(dictionary, text[start:end], max_word_length, cache):
            tokens.append(SegmentedToken(
                token.text, token.start + start, token.end + start,
            ))
    return tokens


def token_lengths(tokens: List[SegmentedToken]) -> List[int]:
    """Character lengths of the tokens, for span re-highlighting."""
    return [t.length for t in tokens]
