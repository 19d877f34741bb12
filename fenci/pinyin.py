"""
Pinyin conversion for fenci.

Converts CC-CEDICT numbered-tone pinyin (e.g. "hao3") into
tone-marked pinyin (e.g. "hǎo").
"""

from typing import Dict, List, Optional

# ============================================================================
# Tone Tables
# ============================================================================

# Accented forms for tones 1-4, followed by the bare vowel for tone 5
TONE_MARKS: Dict[str, str] = {
    "a": "āáǎàa", "e": "ēéěèe", "i": "īíǐìi",
    "o": "ōóǒòo", "u": "ūúǔùu", "ü": "ǖǘǚǜü",
    "A": "ĀÁǍÀA", "E": "ĒÉĚÈE", "I": "ĪÍǏÌI",
    "O": "ŌÓǑÒO", "U": "ŪÚǓÙU", "Ü": "ǕǗǙǛÜ",
}

VOWELS = set(TONE_MARKS)

# ASCII spellings of ü used by CC-CEDICT and input methods
UMLAUT_SPELLINGS = (("u:", "ü"), ("U:", "Ü"), ("v", "ü"), ("V", "Ü"))


def split_tone(syllable: str) -> tuple:
    """
    Split a numbered syllable into its base and tone.

    Returns:
        (base, tone) where tone is None if the syllable has no
        trailing tone digit in the range 1-5.
    """
    if syllable and syllable[-1] in "12345":
        return syllable[:-1], int(syllable[-1])
    return syllable, None


def normalize_umlaut(text: str) -> str:
    """Replace the ASCII spellings of ü with the real character."""
    for spelling, umlaut in UMLAUT_SPELLINGS:
        text = text.replace(spelling, umlaut)
    return text


def tone_mark_position(base: str) -> Optional[int]:
    """
    Find the index of the vowel that carries the tone mark.

    Rule: a, then e, then the o of "ou", then the last vowel.
    """
    lowered = base.lower()
    for target in ("a", "e"):
        idx = lowered.find(target)
        if idx >= 0:
            return idx
    idx = lowered.find("ou")
    if idx >= 0:
        return idx
    for idx in range(len(base) - 1, -1, -1):
        if base[idx] in VOWELS:
            return idx
    return None


def numbered_to_accented(syllable: str) -> str:
    """
    Convert one numbered-tone syllable to tone-marked pinyin.

    Never raises: input without a trailing tone digit 1-5 (already
    accented or malformed) comes back unchanged, and a syllable with
    no vowel comes back normalized without its digit.

    Examples:
        >>> numbered_to_accented("ma3")
        'mǎ'
        >>> numbered_to_accented("lu:4")
        'lǜ'
        >>> numbered_to_accented("hao")
        'hao'
    """
    base, tone = split_tone(syllable)
    if tone is None:
        return syllable

    normalized = normalize_umlaut(base)
    idx = tone_mark_position(normalized)
    if idx is None:
        return normalized

    accented = TONE_MARKS[normalized[idx]][tone - 1]
    return normalized[:idx] + accented + normalized[idx + 1:]


def strip_tone(syllable: str) -> str:
    """Return the toneless, umlaut-normalized spelling of a syllable."""
    base, _ = split_tone(syllable)
    return normalize_umlaut(base)


def split_pinyin(text: str) -> List[str]:
    """Split a space-delimited pinyin string into syllables."""
    return text.split()


def convert_pinyin(text: str) -> List[str]:
    """
    Convert a space-delimited numbered pinyin string.

    Example:
        >>> convert_pinyin("ni3 hao3")
        ['nǐ', 'hǎo']
    """
    return [numbered_to_accented(s) for s in split_pinyin(text)]
