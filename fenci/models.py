"""
Pydantic models for fenci JSON output.

These models provide:
- Type-safe response schemas
- Automatic JSON serialization
- A stable shape for UI layers that render links and pinyin

Usage:
    from fenci.models import LookupResult, SegmentationResult

    result = store.lookup("学生")
    print(LookupResult.from_result(result).model_dump_json())
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from fenci.gloss import Gloss, LinkFragment, RomanizationFragment
from fenci.lookup import DictionaryResult, DictionaryService, Reading
from fenci.output import SenseRow, number_senses
from fenci.segment import SegmentedToken


class FragmentResult(BaseModel):
    """One gloss fragment: plain text, pinyin, or a link to another headword."""
    kind: Literal["text", "pinyin", "link"] = Field(..., description="Fragment type")
    text: str = Field(..., description="Display text of the fragment")
    syllables: List[str] = Field(default_factory=list, description="Tone-marked pinyin (pinyin fragments)")
    traditional: Optional[str] = Field(None, description="Linked traditional form (link fragments)")
    simplified: Optional[str] = Field(None, description="Linked simplified form (link fragments)")

    @classmethod
    def from_fragment(cls, fragment) -> "FragmentResult":
        if isinstance(fragment, LinkFragment):
            return cls(
                kind="link",
                text=fragment.text,
                traditional=fragment.traditional,
                simplified=fragment.simplified,
            )
        if isinstance(fragment, RomanizationFragment):
            return cls(kind="pinyin", text=fragment.text, syllables=list(fragment.syllables))
        return cls(kind="text", text=fragment.text)


class SenseResult(BaseModel):
    """One numbered (or classifier) sense."""
    marker: str = Field(..., description="'1.', '2.', ... or 'CL:' for a global classifier")
    is_classifier: bool = Field(False, description="True for measure-word senses")
    attached: bool = Field(False, description="Classifier attached to the preceding sense")
    attached_to: Optional[int] = Field(None, description="Number of the sense this classifier belongs to")
    text: str = Field(..., description="Plain-text rendering of the sense")
    glosses: List[List[FragmentResult]] = Field(default_factory=list, description="Fragments per gloss")

    @classmethod
    def from_row(cls, row: SenseRow) -> "SenseResult":
        return cls(
            marker=row.marker,
            is_classifier=row.sense.is_classifier,
            attached=row.attached,
            attached_to=row.attached_to,
            text=row.sense.text,
            glosses=[_gloss_fragments(g) for g in row.sense.glosses],
        )


def _gloss_fragments(gloss: Gloss) -> List[FragmentResult]:
    return [FragmentResult.from_fragment(f) for f in gloss.fragments]


class ReadingResult(BaseModel):
    """One pronunciation of a headword."""
    traditional: str
    simplified: str
    pinyin: str = Field(..., description="Numbered pinyin as in the dataset")
    accented: str = Field(..., description="Tone-marked pinyin")
    senses: List[SenseResult] = Field(default_factory=list)

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingResult":
        return cls(
            traditional=reading.traditional,
            simplified=reading.simplified,
            pinyin=" ".join(reading.pinyin),
            accented=" ".join(reading.accented_pinyin),
            senses=[SenseResult.from_row(r) for r in number_senses(reading.senses)],
        )


class LookupResult(BaseModel):
    """All readings for a word."""
    word: str
    readings: List[ReadingResult] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: DictionaryResult) -> "LookupResult":
        return cls(
            word=result.word,
            readings=[ReadingResult.from_reading(r) for r in result.readings],
        )


class TokenResult(BaseModel):
    """A segmented token with character offsets."""
    text: str
    start: int = Field(..., description="Start index in original text")
    end: int = Field(..., description="End index in original text (exclusive)")
    is_gap: bool = Field(False, description="True for non-Chinese spans")
    entry: Optional[LookupResult] = Field(None, description="Dictionary entry, if requested and found")

    @classmethod
    def from_token(cls, token: SegmentedToken, result: Optional[DictionaryResult] = None) -> "TokenResult":
        return cls(
            text=token.text,
            start=token.start,
            end=token.end,
            is_gap=token.is_gap,
            entry=LookupResult.from_result(result) if result else None,
        )


class SegmentationResult(BaseModel):
    """Segmentation of a piece of text."""
    text: str
    tokens: List[TokenResult] = Field(default_factory=list)

    @property
    def words(self) -> List[str]:
        return [t.text for t in self.tokens if not t.is_gap]

    @classmethod
    def from_tokens(
        cls,
        text: str,
        tokens: List[SegmentedToken],
        dictionary: Optional[DictionaryService] = None,
    ) -> "SegmentationResult":
        """Build from segmenter tokens, attaching entries when a dictionary is given."""
        results = []
        for token in tokens:
            entry = None
            if dictionary is not None and not token.is_gap:
                entry = dictionary.lookup(token.text)
            results.append(TokenResult.from_token(token, entry))
        return cls(text=text, tokens=results)
