"""
fenci: offline Chinese word segmentation and CC-CEDICT lookup.
"""

import asyncio
import time
from typing import List, Optional, Tuple

# Submodules load here, before the functions below take their names.
from fenci.lookup import DictionaryUnavailableError, get_store
from fenci.segment import tokenize

__version__ = "0.1.0"


def warm_up(db_path=None, verbose: bool = False) -> Tuple[float, dict]:
    """
    Open the shared dictionary store ahead of the first lookup.

    Call this once at application startup to avoid cold-start latency.

    Args:
        db_path: Optional database path. Defaults to settings.DB_PATH.
        verbose: If True, print timing information.

    Returns:
        Tuple of (total_time_seconds, timing_details_dict)

    Raises:
        DictionaryUnavailableError: If the database cannot be opened.
    """
    timings = {}
    t0 = time.perf_counter()

    store = get_store(db_path)
    timings['store'] = (time.perf_counter() - t0) * 1000
    timings['headwords'] = len(store.headwords)

    total_time = time.perf_counter() - t0
    timings['total'] = total_time * 1000

    if verbose:
        print(f"Dictionary store: {timings['store']:>7.1f}ms ({timings['headwords']:,} headwords)")

    return total_time, timings


def segment(text: str, dictionary=None) -> list:
    """
    Segment text into words.

    Text may contain punctuation and non-Chinese spans; those come
    back as gap tokens.

    Example:
        >>> import fenci
        >>> [t.text for t in fenci.segment("我们今天很好")]
        ['我们', '今天', '很', '好']
    """
    if dictionary is None:
        dictionary = get_store()
    return tokenize(dictionary, text)


def lookup(word: str, dictionary=None):
    """Look up a word by exact traditional or simplified form."""
    if dictionary is None:
        dictionary = get_store()
    return dictionary.lookup(word)


def analyze(text: str, dictionary=None) -> List[Tuple[object, Optional[object]]]:
    """
    Segment text and look up every word.

    Returns:
        List of (SegmentedToken, DictionaryResult or None) pairs.
    """
    if dictionary is None:
        dictionary = get_store()

    output = []
    for token in segment(text, dictionary):
        result = None if token.is_gap else dictionary.lookup(token.text)
        output.append((token, result))
    return output


async def analyze_async(text: str, dictionary=None, timeout: Optional[float] = None):
    """
    Async version of analyze(), run in a worker thread.

    Raises:
        DictionaryUnavailableError: If timeout expires first.
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(analyze, text, dictionary), timeout
        )
    except asyncio.TimeoutError as e:
        raise DictionaryUnavailableError("Dictionary did not respond in time") from e
