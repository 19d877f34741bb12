"""
Dictionary lookup for fenci.

Provides the DictionaryService interface used by the segmenter and
two implementations:

- InMemoryDictionary: fully materialized from CC-CEDICT records.
- CedictStore: backed by the SQLite database built by
  fenci.loading.cedict, with an in-memory headword index.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fenci.db.connection import dispose_engines, get_engine
from fenci.db.models import CedictEntry
from fenci.gloss import Sense, parse_senses
from fenci.loading.cedict import CedictRecord, iter_cedict_records
from fenci.pinyin import numbered_to_accented, split_pinyin
from fenci.settings import DB_PATH

logger = logging.getLogger(__name__)


class DictionaryUnavailableError(Exception):
    """The dictionary dataset is missing or unreadable."""


# ============================================================================
# Result Types
# ============================================================================

@dataclass(frozen=True)
class Reading:
    """One pronunciation of a written form, with its senses."""
    traditional: str
    simplified: str
    pinyin: Tuple[str, ...]
    senses: Tuple[Sense, ...]

    @property
    def accented_pinyin(self) -> List[str]:
        return [numbered_to_accented(s) for s in self.pinyin]

    @property
    def classifiers(self) -> List[Sense]:
        return [s for s in self.senses if s.is_classifier]


@dataclass(frozen=True)
class DictionaryResult:
    """All readings for a looked-up word, in dataset order."""
    word: str
    readings: Tuple[Reading, ...]

    @property
    def primary(self) -> Reading:
        """The first reading; used where a single sense set is shown."""
        return self.readings[0]


def reading_from_record(record: CedictRecord) -> Optional[Reading]:
    """
    Build a Reading from a raw record.

    Returns:
        None if the record has no parseable senses.
    """
    senses = parse_senses(record.senses_raw)
    if not senses:
        return None
    return Reading(
        traditional=record.traditional,
        simplified=record.simplified,
        pinyin=tuple(split_pinyin(record.pinyin)),
        senses=senses,
    )


def is_complete_row(trad, simp, pinyin, senses_raw) -> bool:
    """True if a stored row has both forms, a reading and at least one sense."""
    if not (trad and simp and pinyin and senses_raw):
        return False
    if not pinyin.strip():
        return False
    return any(part.strip() for part in senses_raw.split("/"))


# ============================================================================
# Dictionary Interface
# ============================================================================

class DictionaryService(ABC):
    """Capability interface: membership tests and exact-match lookups."""

    @abstractmethod
    def lookup(self, word: str) -> Optional[DictionaryResult]:
        """Return every reading whose traditional or simplified form is word."""

    @abstractmethod
    def contains(self, word: str) -> bool:
        """True iff lookup(word) would return a result."""

    async def lookup_async(self, word: str) -> Optional[DictionaryResult]:
        return await asyncio.to_thread(self.lookup, word)

    async def contains_async(self, word: str) -> bool:
        return await asyncio.to_thread(self.contains, word)


class InMemoryDictionary(DictionaryService):
    """
    Dictionary held entirely in memory.

    Every record is parsed once at construction; the instance is
    read-only afterwards and safe to share between threads.
    """

    def __init__(self, records: Iterable[CedictRecord]):
        index: Dict[str, List[Reading]] = {}
        count = 0
        for record in records:
            reading = reading_from_record(record)
            if reading is None:
                logger.debug(f"Skipping record without senses: {record.traditional}")
                continue
            count += 1
            index.setdefault(record.traditional, []).append(reading)
            if record.simplified != record.traditional:
                index.setdefault(record.simplified, []).append(reading)

        self._index: Dict[str, Tuple[Reading, ...]] = {
            word: tuple(readings) for word, readings in index.items()
        }
        self.size = count
        logger.debug(f"Built in-memory dictionary: {count} readings, {len(self._index)} headwords")

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "InMemoryDictionary":
        """
        Load a CC-CEDICT text file.

        Raises:
            DictionaryUnavailableError: If the file is missing or unreadable.
        """
        try:
            return cls(iter_cedict_records(path))
        except (OSError, UnicodeDecodeError) as e:
            raise DictionaryUnavailableError(f"Cannot read dictionary file {path}: {e}") from e

    @classmethod
    def from_words(cls, words: Iterable[str]) -> "InMemoryDictionary":
        """Build a placeholder dictionary containing just these headwords."""
        return cls(
            CedictRecord(word, word, "xx5", "(placeholder)")
            for word in words
        )

    @property
    def headwords(self) -> FrozenSet[str]:
        return frozenset(self._index)

    def lookup(self, word: str) -> Optional[DictionaryResult]:
        readings = self._index.get(word)
        if not readings:
            return None
        return DictionaryResult(word=word, readings=readings)

    def contains(self, word: str) -> bool:
        return word in self._index


class CedictStore(DictionaryService):
    """
    Dictionary backed by the SQLite database.

    The set of headwords is loaded at construction so contains() never
    touches the database. lookup() queries the database through a
    single connection guarded by a lock.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        self.db_path = Path(db_path or DB_PATH)
        if not self.db_path.is_file():
            raise DictionaryUnavailableError(
                f"Dictionary database not found: {self.db_path}. "
                "Run 'fenci init-db' to build it."
            )

        self._lock = threading.Lock()
        try:
            self._engine = get_engine(self.db_path, read_only=True)
            self._session = Session(self._engine)
            self._headwords = self._load_headwords()
        except SQLAlchemyError as e:
            raise DictionaryUnavailableError(
                f"Cannot read dictionary database {self.db_path}: {e}"
            ) from e

        if not self._headwords:
            logger.warning(f"Dictionary database {self.db_path} has no entries")
        logger.info(f"Opened dictionary {self.db_path} ({len(self._headwords)} headwords)")

    def _load_headwords(self) -> FrozenSet[str]:
        words = set()
        rows = self._session.execute(
            select(
                CedictEntry.trad, CedictEntry.simp,
                CedictEntry.pinyin, CedictEntry.senses_raw,
            )
        )
        for trad, simp, pinyin, senses_raw in rows:
            if is_complete_row(trad, simp, pinyin, senses_raw):
                words.add(trad)
                words.add(simp)
        return frozenset(words)

    @property
    def headwords(self) -> FrozenSet[str]:
        return self._headwords

    def contains(self, word: str) -> bool:
        return word in self._headwords

    def lookup(self, word: str) -> Optional[DictionaryResult]:
        if word not in self._headwords:
            return None

        stmt = (
            select(CedictEntry)
            .where(or_(CedictEntry.trad == word, CedictEntry.simp == word))
            .order_by(CedictEntry.id)
        )
        with self._lock:
            rows = self._session.execute(stmt).scalars().all()
            records = [
                CedictRecord(row.trad, row.simp, row.pinyin, row.senses_raw)
                for row in rows
                if is_complete_row(row.trad, row.simp, row.pinyin, row.senses_raw)
            ]

        readings = []
        for record in records:
            reading = reading_from_record(record)
            if reading is not None:
                readings.append(reading)

        if not readings:
            return None
        return DictionaryResult(word=word, readings=tuple(readings))

    def close(self):
        with self._lock:
            self._session.close()


# ============================================================================
# Shared Store
# ============================================================================

_STORE: Optional[CedictStore] = None
_STORE_LOCK = threading.Lock()


def get_store(db_path: Optional[Union[str, Path]] = None) -> CedictStore:
    """
    Get the shared CedictStore, opening it on first use.

    Raises:
        DictionaryUnavailableError: If the database cannot be opened.
    """
    global _STORE

    if _STORE is not None and (db_path is None or Path(db_path) == _STORE.db_path):
        return _STORE

    with _STORE_LOCK:
        if _STORE is None or (db_path is not None and Path(db_path) != _STORE.db_path):
            if _STORE is not None:
                _STORE.close()
            _STORE = CedictStore(db_path)
        return _STORE


def reset_store():
    """Close and forget the shared store."""
    global _STORE

    with _STORE_LOCK:
        if _STORE is not None:
            _STORE.close()
            dispose_engines(_STORE.db_path)
        _STORE = None
