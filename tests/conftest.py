"""
Shared fixtures for fenci tests.
"""

from typing import List, Optional

import pytest

from fenci.loading.cedict import load_cedict
from fenci.lookup import CedictStore, DictionaryResult, DictionaryService, InMemoryDictionary
from fenci.settings import SAMPLE_CEDICT_PATH


class CountingDictionary(DictionaryService):
    """Fake dictionary: a fixed word set that records every query."""

    def __init__(self, words):
        self.words = set(words)
        self.queries: List[str] = []

    def contains(self, word: str) -> bool:
        self.queries.append(word)
        return word in self.words

    def lookup(self, word: str) -> Optional[DictionaryResult]:
        return None


@pytest.fixture
def counting_dict():
    """Factory for CountingDictionary instances."""
    return CountingDictionary


@pytest.fixture(scope="session")
def sample_path():
    return SAMPLE_CEDICT_PATH


@pytest.fixture(scope="session")
def memory_dict(sample_path):
    """In-memory dictionary built from the bundled sample."""
    return InMemoryDictionary.from_file(sample_path)


@pytest.fixture(scope="session")
def db_path(tmp_path_factory, sample_path):
    """SQLite database built from the bundled sample."""
    path = tmp_path_factory.mktemp("db") / "cedict.sqlite"
    load_cedict(sample_path, path)
    return path


@pytest.fixture
def store(db_path):
    """CedictStore over the sample database."""
    s = CedictStore(db_path)
    yield s
    s.close()
