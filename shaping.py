"""
Shaping Engine - contextual glyph selection for Arabic script

Picks the isolated/initial/medial/final presentation form of every
letter from its neighbours, and optionally fuses Lam + Alef into one
ligature glyph. Output stays in logical order; only glyphs change.

Joining rules (neighbours skip over diacritics):
- link_prev: previous letter is shapeable and connects forward
- link_next: next letter is shapeable
- can_link_next: current letter connects forward

    link_prev and link_next and can_link_next -> medial
    link_prev                                 -> final
    link_next and can_link_next               -> initial
    otherwise                                 -> isolated

Diacritics are copied in place right after the glyph they sit on.

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from char_classes import is_diacritic
from glyph_forms import ALEF_VARIANTS, GLYPH_FORMS, LAM, LAM_ALEF_LIGATURES, is_non_joining
from rtl_config import DEFAULT_KEEP_BASE


def _previous_non_diacritic(text: str, index: int) -> Optional[str]:
    for k in range(index - 1, -1, -1):
        if not is_diacritic(text[k]):
            return text[k]
    return None


def _next_non_diacritic_index(text: str, index: int) -> int:
    for k in range(index + 1, len(text)):
        if not is_diacritic(text[k]):
            return k
    return -1


def _links_forward(ch: Optional[str]) -> bool:
    return ch is not None and ch in GLYPH_FORMS and not is_non_joining(ch)


def get_shaped_form(text: str, index: int, keep_base: Iterable[str] = DEFAULT_KEEP_BASE) -> str:
    """Presentation form of the shapeable letter at ``index``."""
    curr = text[index]
    forms = GLYPH_FORMS[curr]

    link_prev = _links_forward(_previous_non_diacritic(text, index))
    next_idx = _next_non_diacritic_index(text, index)
    link_next = next_idx != -1 and text[next_idx] in GLYPH_FORMS
    can_link_next = not is_non_joining(curr)

    if link_prev and link_next and can_link_next:
        return forms.med
    if link_prev:
        return forms.fin
    if link_next and can_link_next:
        return forms.ini

    # Some fonts lack the isolated glyph of these letters
    if curr in keep_base:
        return curr
    return forms.iso


def get_lam_alef_ligature(alef: str, link_prev: bool) -> Optional[str]:
    ligature = LAM_ALEF_LIGATURES.get(alef)
    if ligature is None:
        return None
    if link_prev:
        return chr(ord(ligature) + 1)  # final form
    return ligature


def shape_arabic_text(
    text: str,
    use_ligatures: bool = True,
    keep_base_when_isolated: str = DEFAULT_KEEP_BASE,
) -> str:
    """
    Replace every shapeable letter with its contextual presentation form.

    Args:
        text: Logical-order text
        use_ligatures: Fuse Lam + Alef variants into ligature glyphs
        keep_base_when_isolated: Letters emitted as the base codepoint
            instead of their isolated glyph

    Returns:
        Shaped text, still in logical order
    """
    if not text:
        return text

    keep_base = frozenset(keep_base_when_isolated or "")
    out: List[str] = []
    i = 0
    n = len(text)

    while i < n:
        curr = text[i]

        if curr == LAM and use_ligatures:
            alef_idx = _next_non_diacritic_index(text, i)
            if alef_idx != -1 and text[alef_idx] in ALEF_VARIANTS:
                link_prev = _links_forward(_previous_non_diacritic(text, i))
                out.append(get_lam_alef_ligature(text[alef_idx], link_prev))
                # Marks on the lam follow the ligature
                out.extend(text[i + 1:alef_idx])
                i = alef_idx + 1
                continue

        if curr in GLYPH_FORMS:
            out.append(get_shaped_form(text, i, keep_base))
        else:
            # Diacritics and non-Arabic characters pass through in place
            out.append(curr)
        i += 1

    return "".join(out)
