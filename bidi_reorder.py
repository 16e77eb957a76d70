"""
Bidi Reorder - simplified right-to-left run reversal

Not the Unicode Bidirectional Algorithm. Characters fall into two strong
classes (RTL, LTR) plus neutrals, which attach to a neighbouring run:

1. Split text into maximal runs of one strong direction
2. Neutrals between runs of the same direction join that run
3. At an LTR -> RTL boundary, quotes stay with the LTR run and other
   punctuation/space moves to the front of the RTL run
4. At any other boundary neutrals stay with the closing run
5. Emit runs last-to-first; RTL runs are reversed internally (with
   bracket mirroring), LTR runs keep their order

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from char_classes import is_arabic, is_number
from scope_protector import is_mask_char


class CharType(Enum):
    RTL = "rtl"
    LTR = "ltr"
    NEUTRAL = "neutral"
    NUMBER = "number"


BRACKET_MIRRORS = {
    '(': ')', ')': '(',
    '[': ']', ']': '[',
    '{': '}', '}': '{',
    '<': '>', '>': '<',
    '«': '»', '»': '«',
}

QUOTATION_MARKS = frozenset('"\'«»“”‘’')


@dataclass
class Segment:
    """One directional run; lives only for a single reorder call."""
    direction: CharType
    chars: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(self.chars)


def get_char_type(ch: str) -> CharType:
    # Brackets are mirror candidates, so they travel with RTL runs
    if ch in BRACKET_MIRRORS:
        return CharType.RTL

    # Placeholders stay atomic
    if is_mask_char(ch):
        return CharType.LTR

    if is_number(ch):
        return CharType.NUMBER

    if is_arabic(ch):
        return CharType.RTL

    if ch.isalpha():
        return CharType.LTR

    return CharType.NEUTRAL


def is_quotation_mark(ch: str) -> bool:
    return ch in QUOTATION_MARKS


def mirror_bracket(ch: str) -> str:
    return BRACKET_MIRRORS.get(ch, ch)


def split_weak_buffer(weak: List[str]) -> Tuple[List[str], List[str]]:
    """
    Split neutrals found at an LTR -> RTL boundary.

    Returns (ltr_suffix, rtl_prefix).
    """
    ltr_suffix: List[str] = []
    rtl_prefix: List[str] = []

    for ch in weak:
        if is_quotation_mark(ch):
            ltr_suffix.append(ch)
        elif ch.isspace() or unicodedata.category(ch)[0] in ("P", "S"):
            rtl_prefix.append(ch)
        else:
            ltr_suffix.append(ch)

    return ltr_suffix, rtl_prefix


def segment_text(text: str) -> List[Segment]:
    """Split text into directional runs with neutrals attached."""
    segments: List[Segment] = []
    current = Segment(CharType.NEUTRAL)
    weak: List[str] = []

    for ch in text:
        char_type = get_char_type(ch)

        # Numbers read left to right
        if char_type is CharType.NUMBER:
            char_type = CharType.LTR

        if char_type is CharType.NEUTRAL:
            weak.append(ch)
            continue

        if current.direction is CharType.NEUTRAL:
            # First strong character opens the first run
            current.direction = char_type
            current.chars.extend(weak)
        elif char_type is current.direction:
            current.chars.extend(weak)
        elif current.direction is CharType.LTR:
            ltr_suffix, rtl_prefix = split_weak_buffer(weak)
            current.chars.extend(ltr_suffix)
            segments.append(current)
            current = Segment(char_type, rtl_prefix)
        else:
            current.chars.extend(weak)
            segments.append(current)
            current = Segment(char_type)

        weak.clear()
        current.chars.append(ch)

    # Trailing neutrals close the last open run
    current.chars.extend(weak)
    if current.chars:
        segments.append(current)

    return segments


def build_reversed_text(segments: List[Segment], mirror_brackets: bool = True) -> str:
    """Emit runs last-to-first, reversing RTL runs internally."""
    out: List[str] = []

    for segment in reversed(segments):
        if segment.direction is CharType.RTL:
            for ch in reversed(segment.chars):
                out.append(mirror_bracket(ch) if mirror_brackets else ch)
        else:
            out.extend(segment.chars)

    return "".join(out)


def smart_reverse(text: str, mirror_brackets: bool = True) -> str:
    """Reorder logical-order text into left-to-right visual order."""
    if not text:
        return text
    return build_reversed_text(segment_text(text), mirror_brackets)
