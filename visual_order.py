"""
Visual Order Detector - spot text that was already shaped and reversed

Hosts sometimes feed our own output back in (a label reads its text,
appends to it, and assigns it again). Shaping that a second time would
reverse it back into the wrong order, so the pipeline first asks whether
the text looks like visual-order output.

Heuristic, not exact:
- a final form directly followed by a plain Arabic letter cannot occur in
  freshly shaped logical text (+5)
- an initial/medial form cannot end a correctly reversed string (+5)

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

from char_classes import already_fixed, is_arabic, is_presentation_form
from glyph_forms import FORM_TYPES, FormType

CONFLICT_WEIGHT = 5


def conflict_score(text: str) -> int:
    score = 0
    n = len(text)

    for i, ch in enumerate(text):
        if FORM_TYPES.get(ch) is FormType.FINAL and i + 1 < n:
            nxt = text[i + 1]
            if is_arabic(nxt) and not is_presentation_form(nxt):
                score += CONFLICT_WEIGHT

    if n and FORM_TYPES.get(text[-1]) in (FormType.INITIAL, FormType.MEDIAL):
        score += CONFLICT_WEIGHT

    return score


def is_likely_visual_order(text: str) -> bool:
    """True when text carries presentation forms in an impossible logical order."""
    return already_fixed(text) and conflict_score(text) > 0
