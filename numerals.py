"""
Numerals - optional Western -> Eastern Arabic-Indic digit conversion

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

from typing import List

EASTERN_DIGITS = "٠١٢٣٤٥٦٧٨٩"


def is_ascii_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def is_convertible_digit(text: str, index: int) -> bool:
    """
    An ASCII digit converts unless it directly follows an identifier
    character (``_``, A-Z, a-z).
    """
    if not is_ascii_digit(text[index]):
        return False

    if index > 0:
        prev = text[index - 1]
        if prev == '_' or 'A' <= prev <= 'Z' or 'a' <= prev <= 'z':
            return False

    return True


def convert_to_eastern_arabic_numerals(text: str) -> str:
    """
    Replace 0-9 with ٠-٩ outside of <...> tags.

    The identifier guard is decided at the first digit of a run and holds
    for the whole run, so "item_2", "Level3", "abc123" keep their digits.
    """
    if not text:
        return text

    out: List[str] = []
    inside_tag = False
    run_guarded = False

    for i, ch in enumerate(text):
        # Not nesting-aware: any < opens, any > closes
        if ch == '<':
            inside_tag = True
        elif ch == '>':
            inside_tag = False

        if not is_ascii_digit(ch):
            out.append(ch)
            continue

        if i == 0 or not is_ascii_digit(text[i - 1]):
            run_guarded = not is_convertible_digit(text, i)

        if inside_tag or run_guarded:
            out.append(ch)
        else:
            out.append(EASTERN_DIGITS[ord(ch) - ord('0')])

    return "".join(out)
