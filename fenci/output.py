"""
Output formatting for fenci.

Prepares dictionary results for display: numbering senses, placing
classifier annotations, and rendering entries as plain text.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from fenci.gloss import Sense
from fenci.lookup import DictionaryResult, Reading
from fenci.settings import CLASSIFIER_PREFIX


@dataclass(frozen=True)
class SenseRow:
    """
    One display row of a reading's sense list.

    marker is "1.", "2.", ... for ordinary senses, "CL:" for a global
    classifier and "" for a classifier attached to the sense above.
    """
    index: int
    sense: Sense
    marker: str
    attached: bool = False
    attached_to: Optional[int] = None


def number_senses(senses: Sequence[Sense]) -> List[SenseRow]:
    """
    Number senses for display.

    Classifier senses never take a number. A classifier in last
    position applies to the whole word; anywhere else it belongs to
    the numbered sense before it. This is a positional convention of
    CC-CEDICT rather than something the data guarantees, so two
    trailing classifiers simply yield one attached and one global row.
    """
    rows = []
    number = 0
    last = len(senses) - 1

    for i, sense in enumerate(senses):
        if sense.is_classifier:
            if i == last:
                rows.append(SenseRow(i, sense, CLASSIFIER_PREFIX))
            else:
                rows.append(SenseRow(
                    i, sense, "", attached=True,
                    attached_to=number or None,
                ))
        else:
            number += 1
            rows.append(SenseRow(i, sense, f"{number}."))

    return rows


# ============================================================================
# Plain Text
# ============================================================================

def headword_label(reading: Reading) -> str:
    """Simplified form, followed by [traditional] when it differs."""
    if reading.traditional == reading.simplified:
        return reading.simplified
    return f"{reading.simplified} [{reading.traditional}]"


def format_reading(reading: Reading, indent: str = "  ") -> str:
    """
    Render one reading.

    Example output::

        学生 [學生]  xuésheng
          1. student; schoolchild
          CL: 个[個] gè , 名 míng , 位 wèi
    """
    lines = [f"{headword_label(reading)}  {' '.join(reading.accented_pinyin)}"]
    for row in number_senses(reading.senses):
        text = row.sense.text
        if row.attached:
            lines.append(f"{indent}   {CLASSIFIER_PREFIX} {text}")
        else:
            lines.append(f"{indent}{row.marker} {text}")
    return "\n".join(lines)


def format_result(result: DictionaryResult) -> str:
    """Render all readings of a lookup, separated by blank lines."""
    return "\n\n".join(format_reading(r) for r in result.readings)
