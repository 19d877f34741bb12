"""
Database connection management for fenci.

Engines are cached per (path, mode). Lookups open the database
read-only; the loader opens it read-write.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from fenci.settings import DB_PATH

PathLike = Union[str, Path]

_engines: Dict[Tuple[str, bool], Engine] = {}
_engines_lock = threading.Lock()


def get_db_path() -> Optional[str]:
    """Return the configured database path if the file exists."""
    if DB_PATH.exists():
        return str(DB_PATH)
    return None


def database_url(db_path: PathLike, read_only: bool = True) -> str:
    """Build an SQLite URL for a database file."""
    path = Path(db_path).resolve()
    if read_only:
        return f"sqlite:///file:{path.as_posix()}?mode=ro&uri=true"
    return f"sqlite:///{path.as_posix()}"


def get_engine(db_path: Optional[PathLike] = None, read_only: bool = True) -> Engine:
    """
    Get (or create) the engine for a database file.

    Args:
        db_path: Path to the SQLite file. Defaults to settings.DB_PATH.
        read_only: Open the file read-only.

    Returns:
        SQLAlchemy Engine.
    """
    path = str(Path(db_path or DB_PATH).resolve())
    key = (path, read_only)

    with _engines_lock:
        engine = _engines.get(key)
        if engine is None:
            engine = create_engine(
                database_url(path, read_only),
                connect_args={"check_same_thread": False},
            )
            _engines[key] = engine
        return engine


def get_session(db_path: Optional[PathLike] = None, read_only: bool = True) -> Session:
    """Create a new session bound to the database."""
    return Session(get_engine(db_path, read_only))


@contextmanager
def session_scope(db_path: Optional[PathLike] = None, read_only: bool = False):
    """
    Transactional session scope.

    Commits on success, rolls back on error.

    Yields:
        SQLAlchemy Session.
    """
    session = get_session(db_path, read_only)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engines(db_path: Optional[PathLike] = None):
    """
    Dispose cached engines, closing their pooled connections.

    Args:
        db_path: Only dispose engines for this file. Defaults to all.
    """
    path = str(Path(db_path).resolve()) if db_path is not None else None

    with _engines_lock:
        for key in list(_engines):
            if path is None or key[0] == path:
                _engines.pop(key).dispose()
