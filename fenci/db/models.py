"""
SQLAlchemy models for the fenci dictionary database.

One row per CC-CEDICT record. Senses are stored raw and parsed
at lookup time.
"""

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class CedictEntry(Base):
    """One (traditional, simplified, pinyin, senses) record."""

    __tablename__ = "cedict_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trad: Mapped[str] = mapped_column(Text, nullable=False)
    simp: Mapped[str] = mapped_column(Text, nullable=False)
    pinyin: Mapped[str] = mapped_column(Text, nullable=False)
    senses_raw: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("idx_cedict_trad", "trad"),
        Index("idx_cedict_simp", "simp"),
    )

    def __repr__(self) -> str:
        return f"<CedictEntry {self.trad} {self.simp} [{self.pinyin}]>"
