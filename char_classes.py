"""
Character Classes - per-codepoint predicates for RTL processing

Script ranges are fixed; whether a letter counts as RTL also depends on
which languages are enabled in the configuration.

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

from typing import Optional

from rtl_config import DEFAULT_CONFIG, RTLConfig

# Letters outside standard Arabic usage
PERSIAN_SPECIFIC = frozenset('پچژگکی')
URDU_SPECIFIC = frozenset('ٹڈڑںےہ')

EASTERN_ZERO = 0x0660

# Byte order mark; sits at the end of Presentation Forms-B but is not a letter
ZERO_WIDTH_NO_BREAK_SPACE = 0xFEFF


def is_arabic(ch: str) -> bool:
    """Arabic script block, supplements and both presentation-form blocks."""
    c = ord(ch)
    return (
        0x0600 <= c <= 0x06FF or   # Arabic
        0x0750 <= c <= 0x077F or   # Arabic Supplement
        0x08A0 <= c <= 0x08FF or   # Arabic Extended-A
        0xFB50 <= c <= 0xFDFF or   # Presentation Forms-A
        0xFE70 <= c < ZERO_WIDTH_NO_BREAK_SPACE   # Presentation Forms-B
    )


def is_persian_specific(ch: str) -> bool:
    return ch in PERSIAN_SPECIFIC


def is_urdu_specific(ch: str) -> bool:
    return ch in URDU_SPECIFIC


def is_rtl(ch: str, config: Optional[RTLConfig] = None) -> bool:
    """
    Check if a character is an RTL letter for the enabled languages.

    Persian- and Urdu-specific letters only count when their language
    is enabled; the shared Arabic range counts when any language is.
    """
    config = config or DEFAULT_CONFIG

    if is_persian_specific(ch):
        return config.enable_persian
    if is_urdu_specific(ch):
        return config.enable_urdu

    if is_arabic(ch):
        return config.enable_arabic or config.enable_persian or config.enable_urdu

    return False


def has_rtl_letters(text: str, config: Optional[RTLConfig] = None) -> bool:
    if not text:
        return False
    config = config or DEFAULT_CONFIG
    return any(is_rtl(ch, config) for ch in text)


def has_rtl(text: str, config: Optional[RTLConfig] = None) -> bool:
    """
    Check if text needs RTL processing.

    With numeral conversion enabled, digits trigger processing too.
    """
    if not text:
        return False
    config = config or DEFAULT_CONFIG
    check_numbers = config.convert_to_eastern_arabic_numerals

    for ch in text:
        if is_rtl(ch, config):
            return True
        if check_numbers and is_number(ch):
            return True
    return False


def is_number(ch: str) -> bool:
    return '0' <= ch <= '9' or EASTERN_ZERO <= ord(ch) <= EASTERN_ZERO + 9


def is_diacritic(ch: str) -> bool:
    c = ord(ch)
    return (
        0x064B <= c <= 0x0652 or   # harakat, tanween, shadda, sukun
        0x0610 <= c <= 0x061A or   # Quranic marks
        c == 0x0670                # superscript alef
    )


def is_presentation_form(ch: str) -> bool:
    c = ord(ch)
    return 0xFE70 <= c < ZERO_WIDTH_NO_BREAK_SPACE or 0xFB50 <= c <= 0xFDFF


def already_fixed(text: str) -> bool:
    """Text carrying presentation forms has been shaped before."""
    return bool(text) and any(is_presentation_form(ch) for ch in text)
