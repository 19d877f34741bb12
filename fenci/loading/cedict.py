"""
CC-CEDICT loading for fenci.

Parses the CC-CEDICT text format::

    傳統 传统 [chuan2 tong3] /tradition; traditional/

and builds the SQLite database used by CedictStore.
"""

import gzip
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from sqlalchemy import insert

from fenci.db.connection import dispose_engines, get_engine, session_scope
from fenci.db.models import Base, CedictEntry

logger = logging.getLogger(__name__)

CEDICT_LINE_RE = re.compile(
    r"^(?P<trad>\S+)\s+(?P<simp>\S+)\s+\[(?P<pinyin>[^\]]*)\]\s+/(?P<senses>.*)/\s*$"
)


@dataclass(frozen=True)
class CedictRecord:
    """One raw dataset record."""
    traditional: str
    simplified: str
    pinyin: str
    senses_raw: str


def parse_cedict_line(line: str) -> Optional[CedictRecord]:
    """
    Parse one line of CC-CEDICT.

    Returns:
        The record, or None for comments, blank lines and malformed
        lines (including records with an empty pinyin or definition).
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    match = CEDICT_LINE_RE.match(line)
    if not match:
        return None

    pinyin = match.group("pinyin").strip()
    senses = match.group("senses").strip()
    if not pinyin or not senses.strip("/ "):
        return None

    return CedictRecord(
        traditional=match.group("trad"),
        simplified=match.group("simp"),
        pinyin=pinyin,
        senses_raw=senses,
    )


def _open_text(path: Path):
    if path.suffix == ".gz":
        return gzip.open(path, "rt", encoding="utf-8")
    return open(path, "r", encoding="utf-8")


def resolve_cedict_path(path: Union[str, Path]) -> Path:
    """
    Locate a CC-CEDICT file, falling back to path + '.gz'.

    Raises:
        FileNotFoundError: If neither file exists.
    """
    path = Path(path)
    if path.exists():
        return path

    # Also check for .gz version
    gz_path = path.with_name(path.name + ".gz")
    if gz_path.exists():
        return gz_path

    raise FileNotFoundError(f"CC-CEDICT not found at: {path}")


def iter_cedict_records(path: Union[str, Path]) -> Iterator[CedictRecord]:
    """
    Iterate over the records of a CC-CEDICT file (plain or gzipped).

    Malformed lines are skipped and counted. The path is resolved
    on the first iteration; call resolve_cedict_path() to fail early.
    """
    path = resolve_cedict_path(path)

    skipped = 0
    with _open_text(path) as f:
        for line_no, line in enumerate(f, 1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            record = parse_cedict_line(stripped)
            if record is None:
                skipped += 1
                logger.debug(f"Skipping malformed line {line_no}: {stripped[:60]}")
                continue
            yield record

    if skipped:
        logger.warning(f"Skipped {skipped} malformed records in {path}")


def create_schema(db_path: Union[str, Path]) -> None:
    """Create the dictionary tables if they don't exist."""
    Base.metadata.create_all(get_engine(db_path, read_only=False))


def _remove_database(db_path: Path) -> None:
    dispose_engines(db_path)
    db_path.unlink(missing_ok=True)


def _insert_records(
    records: Iterator[CedictRecord],
    db_path: Path,
    batch_size: int,
    progress_callback: Optional[Callable[[int], None]],
) -> int:
    total = 0
    batch: List[dict] = []

    with session_scope(db_path) as session:
        for record in records:
            batch.append({
                "trad": record.traditional,
                "simp": record.simplified,
                "pinyin": record.pinyin,
                "senses_raw": record.senses_raw,
            })
            if len(batch) >= batch_size:
                session.execute(insert(CedictEntry), batch)
                total += len(batch)
                batch = []
                if progress_callback:
                    progress_callback(total)

        if batch:
            session.execute(insert(CedictEntry), batch)
            total += len(batch)
            if progress_callback:
                progress_callback(total)

    return total


def load_cedict(
    cedict_path: Union[str, Path],
    db_path: Union[str, Path],
    batch_size: int = 5000,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> int:
    """
    Build the dictionary database from a CC-CEDICT file.

    The database is built beside db_path and moved into place once every
    record is in, so a failed load leaves an existing database untouched.

    Args:
        cedict_path: Path to the CC-CEDICT text file.
        db_path: Output SQLite database path.
        batch_size: Rows per INSERT batch.
        progress_callback: Optional callback(count) after each batch.

    Returns:
        Number of records loaded.
    """
    cedict_path = resolve_cedict_path(cedict_path)
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = db_path.with_name(db_path.name + ".tmp")
    _remove_database(tmp_path)

    try:
        create_schema(tmp_path)
        total = _insert_records(
            iter_cedict_records(cedict_path), tmp_path, batch_size, progress_callback
        )
    except Exception:
        _remove_database(tmp_path)
        raise

    dispose_engines(tmp_path)
    dispose_engines(db_path)
    tmp_path.replace(db_path)

    logger.info(f"Loaded {total} CC-CEDICT records into {db_path}")
    return total
