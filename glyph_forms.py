"""
Glyph Forms - Arabic/Persian/Urdu presentation-form tables

Every shapeable base letter maps to its four contextual glyphs:
isolated, initial, medial and final. Letters that never connect to the
following letter repeat their isolated glyph for initial/medial.

Two reverse indices are derived once at import:
- presentation form -> base letter (used by the normalizer)
- presentation form -> form type (used by the visual-order detector)

All tables are read-only after import and shared by every caller.

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, NamedTuple, Optional, Tuple


class FormType(Enum):
    ISOLATED = "isolated"
    INITIAL = "initial"
    MEDIAL = "medial"
    FINAL = "final"


class GlyphForm(NamedTuple):
    """The four presentation glyphs of one base letter."""
    iso: str
    ini: str
    med: str
    fin: str


# =============================================================================
# LETTER FORMS
# =============================================================================

GLYPH_FORMS: Dict[str, GlyphForm] = {
    # Arabic base letters
    'ا': GlyphForm('ﺍ', 'ﺍ', 'ﺍ', 'ﺎ'),  # alef
    'ب': GlyphForm('ﺏ', 'ﺑ', 'ﺒ', 'ﺐ'),  # beh
    'ت': GlyphForm('ﺕ', 'ﺗ', 'ﺘ', 'ﺖ'),  # teh
    'ث': GlyphForm('ﺙ', 'ﺛ', 'ﺜ', 'ﺚ'),  # theh
    'ج': GlyphForm('ﺝ', 'ﺟ', 'ﺠ', 'ﺞ'),  # jeem
    'ح': GlyphForm('ﺡ', 'ﺣ', 'ﺤ', 'ﺢ'),  # hah
    'خ': GlyphForm('ﺥ', 'ﺧ', 'ﺨ', 'ﺦ'),  # khah
    'د': GlyphForm('ﺩ', 'ﺩ', 'ﺩ', 'ﺪ'),  # dal
    'ذ': GlyphForm('ﺫ', 'ﺫ', 'ﺫ', 'ﺬ'),  # thal
    'ر': GlyphForm('ﺭ', 'ﺭ', 'ﺭ', 'ﺮ'),  # reh
    'ز': GlyphForm('ﺯ', 'ﺯ', 'ﺯ', 'ﺰ'),  # zain
    'س': GlyphForm('ﺱ', 'ﺳ', 'ﺴ', 'ﺲ'),  # seen
    'ش': GlyphForm('ﺵ', 'ﺷ', 'ﺸ', 'ﺶ'),  # sheen
    'ص': GlyphForm('ﺹ', 'ﺻ', 'ﺼ', 'ﺺ'),  # sad
    'ض': GlyphForm('ﺽ', 'ﺿ', 'ﻀ', 'ﺾ'),  # dad
    'ط': GlyphForm('ﻁ', 'ﻃ', 'ﻄ', 'ﻂ'),  # tah
    'ظ': GlyphForm('ﻅ', 'ﻇ', 'ﻈ', 'ﻆ'),  # zah
    'ع': GlyphForm('ﻉ', 'ﻋ', 'ﻌ', 'ﻊ'),  # ain
    'غ': GlyphForm('ﻍ', 'ﻏ', 'ﻐ', 'ﻎ'),  # ghain
    'ف': GlyphForm('ﻑ', 'ﻓ', 'ﻔ', 'ﻒ'),  # feh
    'ق': GlyphForm('ﻕ', 'ﻗ', 'ﻘ', 'ﻖ'),  # qaf
    'ك': GlyphForm('ﻙ', 'ﻛ', 'ﻜ', 'ﻚ'),  # kaf
    'ل': GlyphForm('ﻝ', 'ﻟ', 'ﻠ', 'ﻞ'),  # lam
    'م': GlyphForm('ﻡ', 'ﻣ', 'ﻤ', 'ﻢ'),  # meem
    'ن': GlyphForm('ﻥ', 'ﻧ', 'ﻨ', 'ﻦ'),  # noon
    'ه': GlyphForm('ﻩ', 'ﻫ', 'ﻬ', 'ﻪ'),  # heh
    'و': GlyphForm('ﻭ', 'ﻭ', 'ﻭ', 'ﻮ'),  # waw
    'ي': GlyphForm('ﻱ', 'ﻳ', 'ﻴ', 'ﻲ'),  # yeh
    'ى': GlyphForm('ﻯ', 'ﻯ', 'ﻰ', 'ﻰ'),  # alef maksura
    'ئ': GlyphForm('ﺉ', 'ﺋ', 'ﺌ', 'ﺊ'),  # yeh with hamza
    'ؤ': GlyphForm('ﺅ', 'ﺅ', 'ﺆ', 'ﺆ'),  # waw with hamza
    'إ': GlyphForm('ﺇ', 'ﺇ', 'ﺈ', 'ﺈ'),  # alef hamza below
    'أ': GlyphForm('ﺃ', 'ﺃ', 'ﺄ', 'ﺄ'),  # alef hamza above
    'آ': GlyphForm('ﺁ', 'ﺁ', 'ﺂ', 'ﺂ'),  # alef madda
    'ة': GlyphForm('ﺓ', 'ﺓ', 'ﺓ', 'ﺔ'),  # teh marbuta

    # Persian
    'پ': GlyphForm('ﭖ', 'ﭘ', 'ﭙ', 'ﭗ'),  # peh
    'چ': GlyphForm('ﭺ', 'ﭼ', 'ﭽ', 'ﭻ'),  # tcheh
    'ژ': GlyphForm('ﮊ', 'ﮊ', 'ﮊ', 'ﮋ'),  # jeh
    'گ': GlyphForm('ﮒ', 'ﮔ', 'ﮕ', 'ﮓ'),  # gaf
    'ک': GlyphForm('ﮎ', 'ﮐ', 'ﮑ', 'ﮏ'),  # keheh
    'ی': GlyphForm('ﯼ', 'ﯾ', 'ﯿ', 'ﯽ'),  # farsi yeh

    # Urdu
    'ٹ': GlyphForm('ﭦ', 'ﭨ', 'ﭩ', 'ﭧ'),  # tteh
    'ڈ': GlyphForm('ﮈ', 'ﮈ', 'ﮈ', 'ﮉ'),  # ddal
    'ڑ': GlyphForm('ﮌ', 'ﮌ', 'ﮌ', 'ﮍ'),  # rreh
    'ں': GlyphForm('ﮞ', 'ﮞ', 'ﮞ', 'ﮟ'),  # noon ghunna
    'ے': GlyphForm('ﮮ', 'ﮮ', 'ﮯ', 'ﮯ'),  # yeh barree
    'ہ': GlyphForm('ﮦ', 'ﮨ', 'ﮩ', 'ﮧ'),  # heh goal
}

# Letters that never connect to the letter after them
NON_JOINING = frozenset({
    'ا', 'أ', 'إ', 'آ',  # alef variants
    'د', 'ذ', 'ر', 'ز',  # dal, thal, reh, zain
    'و', 'ؤ', 'ة', 'ى',  # waw, waw hamza, teh marbuta, alef maksura
    'ۀ', 'ۃ',  # heh with yeh, teh marbuta goal
    'ژ', 'ڈ', 'ڑ',  # jeh, ddal, rreh
    'ں', 'ے',  # noon ghunna, yeh barree
})


# =============================================================================
# LAM-ALEF LIGATURES
# =============================================================================

LAM = 'ل'

# alef variant -> isolated ligature; the final ligature is the next codepoint
LAM_ALEF_LIGATURES: Dict[str, str] = {
    'ا': 'ﻻ',  # lam + alef
    'أ': 'ﻷ',  # lam + alef hamza above
    'إ': 'ﻹ',  # lam + alef hamza below
    'آ': 'ﻵ',  # lam + alef madda
}

ALEF_VARIANTS = frozenset(LAM_ALEF_LIGATURES)

LAM_ALEF_EXPANSIONS: Dict[str, Tuple[str, str]] = {}
for _alef, _ligature in LAM_ALEF_LIGATURES.items():
    LAM_ALEF_EXPANSIONS[_ligature] = (LAM, _alef)
    LAM_ALEF_EXPANSIONS[chr(ord(_ligature) + 1)] = (LAM, _alef)


# =============================================================================
# DERIVED INDICES
# =============================================================================

def _build_presentation_to_base() -> Dict[str, str]:
    mapping: Dict[str, str] = {}
    for base, forms in GLYPH_FORMS.items():
        for glyph in forms:
            mapping.setdefault(glyph, base)
    return mapping


def _build_form_types() -> Dict[str, FormType]:
    # A glyph shared by several positions keeps the last one assigned,
    # e.g. alef's FE8D ends up typed as medial.
    mapping: Dict[str, FormType] = {}
    for forms in GLYPH_FORMS.values():
        mapping[forms.iso] = FormType.ISOLATED
        mapping[forms.ini] = FormType.INITIAL
        mapping[forms.med] = FormType.MEDIAL
        mapping[forms.fin] = FormType.FINAL

    for ligature in LAM_ALEF_LIGATURES.values():
        mapping[ligature] = FormType.ISOLATED
        mapping[chr(ord(ligature) + 1)] = FormType.FINAL

    return mapping


PRESENTATION_TO_BASE: Dict[str, str] = _build_presentation_to_base()
FORM_TYPES: Dict[str, FormType] = _build_form_types()


def is_shapeable(ch: str) -> bool:
    return ch in GLYPH_FORMS


def is_non_joining(ch: str) -> bool:
    return ch in NON_JOINING


def get_form_type(ch: str) -> Optional[FormType]:
    return FORM_TYPES.get(ch)


def get_base_letter(ch: str) -> Optional[str]:
    return PRESENTATION_TO_BASE.get(ch)
