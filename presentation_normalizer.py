"""
Presentation Normalizer - fold shaped glyphs back to base letters

Text that already went through the fixer (or was pre-shaped elsewhere)
carries presentation-form codepoints. Shaping those again would stack
forms, so every glyph is rewritten to its base letter first:

1. Lam-Alef ligatures (ﻻ ﻼ ﻷ ﻸ ﻹ ﻺ ﻵ ﻶ) -> lam + alef variant
2. Other presentation forms -> base letter
3. Everything else unchanged

Normalizing twice gives the same result as normalizing once.

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

from typing import List

from char_classes import already_fixed
from glyph_forms import LAM_ALEF_EXPANSIONS, PRESENTATION_TO_BASE


def normalize_presentation_forms(text: str, visual_order: bool = False) -> str:
    """
    Rewrite presentation forms to base letters.

    With ``visual_order`` the text is known to be reversed, so ligatures
    expand alef-first; reversing it afterwards yields lam + alef again.
    """
    if not text:
        return text

    # Fast path: nothing shaped
    if not already_fixed(text):
        return text

    out: List[str] = []
    for ch in text:
        expansion = LAM_ALEF_EXPANSIONS.get(ch)
        if expansion is not None:
            lam, alef = expansion
            out.append(alef + lam if visual_order else lam + alef)
            continue
        out.append(PRESENTATION_TO_BASE.get(ch, ch))

    return "".join(out)
