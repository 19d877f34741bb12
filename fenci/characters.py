"""
Character handling for fenci.

Provides Han character classification and splitting of raw text
into runs of Chinese characters and the gaps between them.
"""

import re
from typing import List, Tuple

# ============================================================================
# Han Character Ranges
# ============================================================================

HAN_RANGES: List[Tuple[int, int]] = [
    (0x3400, 0x4DBF),    # Extension A
    (0x4E00, 0x9FFF),    # Unified Ideographs
    (0xF900, 0xFAFF),    # Compatibility Ideographs
    (0x20000, 0x2A6DF),  # Extension B
    (0x2A700, 0x2B73F),  # Extension C
    (0x2B740, 0x2B81F),  # Extension D
    (0x2B820, 0x2CEAF),  # Extension E
    (0x2CEB0, 0x2EBEF),  # Extension F
    (0x2F800, 0x2FA1F),  # Compatibility Supplement
]

# Ideographic number zero is not in the unified block but is used as a numeral
HAN_EXTRA = "〇"

HAN_CLASS = "".join(
    f"\\U{lo:08x}-\\U{hi:08x}" for lo, hi in HAN_RANGES
) + HAN_EXTRA

HAN_RUN_REGEX = re.compile(f"[{HAN_CLASS}]+")


def is_han(char: str) -> bool:
    """Check if a single character is a Chinese (Han) character."""
    if len(char) != 1:
        return False
    if char in HAN_EXTRA:
        return True
    code = ord(char)
    return any(lo <= code <= hi for lo, hi in HAN_RANGES)


def is_han_run(text: str) -> bool:
    """Check if text is non-empty and consists only of Han characters."""
    return bool(text) and all(is_han(char) for char in text)


def split_runs(text: str) -> List[Tuple[int, int, bool]]:
    """
    Split text into alternating Han runs and non-Han gaps.

    Args:
        text: Raw text, possibly containing punctuation, whitespace
              and other scripts.

    Returns:
        List of (start, end, is_han) spans in order. The spans are
        contiguous and cover the whole text.

    Examples:
        >>> split_runs("我们，今天")
        [(0, 2, True), (2, 3, False), (3, 5, True)]
    """
    spans = []
    pos = 0
    for match in HAN_RUN_REGEX.finditer(text):
        if match.start() > pos:
            spans.append((pos, match.start(), False))
        spans.append((match.start(), match.end(), True))
        pos = match.end()
    if pos < len(text):
        spans.append((pos, len(text), False))
    return spans
