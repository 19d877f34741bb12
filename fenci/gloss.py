"""
Sense and gloss parsing for fenci.

A CC-CEDICT definition field looks like::

    /individual; this; that/CL:個|个[ge4],位[wei4]/

It is split into senses on "/", each sense into glosses on ";",
and each gloss into typed fragments: plain text, pinyin in
brackets, and cross-references to other headwords.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from fenci.characters import HAN_CLASS
from fenci.pinyin import convert_pinyin, split_pinyin
from fenci.settings import CLASSIFIER_PREFIX


# ============================================================================
# Fragment Types
# ============================================================================

@dataclass(frozen=True)
class TextFragment:
    """Literal translation text."""
    text: str

    kind = "text"


@dataclass(frozen=True)
class RomanizationFragment:
    """Pinyin annotation embedded in a gloss, already tone-marked."""
    syllables: Tuple[str, ...]

    kind = "pinyin"

    @property
    def text(self) -> str:
        return " ".join(self.syllables)


@dataclass(frozen=True)
class LinkFragment:
    """
    Cross-reference to another headword, e.g. 個|个[ge4].

    The pinyin of the bracket is also emitted as a separate
    RomanizationFragment; ``pinyin`` keeps the numbered syllables so
    the link can be resolved to a specific reading.
    """
    traditional: str
    simplified: str
    pinyin: Tuple[str, ...] = ()

    kind = "link"

    @property
    def text(self) -> str:
        if self.traditional == self.simplified:
            return self.simplified
        return f"{self.simplified}[{self.traditional}]"


GlossFragment = Union[TextFragment, RomanizationFragment, LinkFragment]


@dataclass(frozen=True)
class Gloss:
    """One phrasing of a sense, made up of fragments."""
    fragments: Tuple[GlossFragment, ...]

    @property
    def text(self) -> str:
        return " ".join(f.text for f in self.fragments)

    @property
    def links(self) -> List[LinkFragment]:
        return [f for f in self.fragments if isinstance(f, LinkFragment)]


@dataclass(frozen=True)
class Sense:
    """One logically distinct meaning."""
    glosses: Tuple[Gloss, ...]
    is_classifier: bool = False

    @property
    def text(self) -> str:
        return "; ".join(g.text for g in self.glosses)


# ============================================================================
# Gloss Parsing
# ============================================================================

_PINYIN_CLASS = r"[A-Za-z0-9: ]+"

# a) 件[jian4] or 樁|桩[zhuang1]   b) bare [fu4 qin5]
GLOSS_REGEX = re.compile(
    rf"([{HAN_CLASS}]+)(?:\|([{HAN_CLASS}]+))?\[({_PINYIN_CLASS})\]"
    rf"|\[({_PINYIN_CLASS})\]"
)


def _append_text(fragments: List[GlossFragment], raw: str) -> None:
    text = raw.strip()
    if text:
        fragments.append(TextFragment(text))


def _append_pinyin(fragments: List[GlossFragment], numbered: str) -> None:
    syllables = convert_pinyin(numbered)
    if syllables:
        fragments.append(RomanizationFragment(tuple(syllables)))


def parse_gloss(raw: str) -> Gloss:
    """
    Parse one gloss string into fragments.

    Matches are taken left to right; text between matches becomes
    trimmed text fragments. If nothing is recognized the whole
    (trimmed) gloss is a single text fragment.

    Examples:
        >>> parse_gloss("长[chang2]").fragments
        (LinkFragment(traditional='长', simplified='长', pinyin=('chang2',)), RomanizationFragment(syllables=('cháng',)))
    """
    text = raw.strip()
    if not text:
        return Gloss(())

    fragments: List[GlossFragment] = []
    pos = 0

    for match in GLOSS_REGEX.finditer(text):
        if match.start() > pos:
            _append_text(fragments, text[pos:match.start()])

        head1, head2, linked_pinyin, bare_pinyin = match.groups()
        if head1 is not None:
            # CC-CEDICT convention is trad|simp
            simplified = head2 if head2 is not None else head1
            fragments.append(LinkFragment(
                traditional=head1,
                simplified=simplified,
                pinyin=tuple(split_pinyin(linked_pinyin)),
            ))
            _append_pinyin(fragments, linked_pinyin)
        else:
            _append_pinyin(fragments, bare_pinyin)

        pos = match.end()

    if pos < len(text):
        _append_text(fragments, text[pos:])

    if not fragments:
        fragments = [TextFragment(text)]

    return Gloss(tuple(fragments))


def parse_sense(raw: str) -> Optional[Sense]:
    """
    Parse one sense string (the text between two slashes).

    Returns:
        The Sense, or None for an empty string.
    """
    text = raw.strip()
    if not text:
        return None

    is_classifier = text.startswith(CLASSIFIER_PREFIX)
    if is_classifier:
        text = text[len(CLASSIFIER_PREFIX):]

    glosses = tuple(
        parse_gloss(part)
        for part in text.split(";")
        if part.strip()
    )
    return Sense(glosses=glosses, is_classifier=is_classifier)


def parse_senses(raw: str) -> Tuple[Sense, ...]:
    """
    Parse a full slash-delimited definition field.

    Example:
        >>> [s.is_classifier for s in parse_senses("book; letter/CL:本[ben3]")]
        [False, True]
    """
    senses = []
    for part in raw.split("/"):
        sense = parse_sense(part)
        if sense is not None:
            senses.append(sense)
    return tuple(senses)
