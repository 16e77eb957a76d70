"""
Bidi Reorder Tests - run segmentation, reversal and bracket mirroring

Run with: pytest tests/test_bidi.py -v

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
import pytest
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bidi_reorder import (
    CharType,
    get_char_type,
    mirror_bracket,
    segment_text,
    smart_reverse,
    split_weak_buffer,
)
from scope_protector import MASK_MARKER, generate_placeholder


# =============================================================================
# CHARACTER CLASSIFICATION
# =============================================================================

class TestCharType:

    @pytest.mark.parametrize("ch,expected", [
        ('(', CharType.RTL),
        ('»', CharType.RTL),
        ('م', CharType.RTL),
        ('a', CharType.LTR),
        ('é', CharType.LTR),
        (MASK_MARKER, CharType.LTR),
        ('5', CharType.NUMBER),
        ('٥', CharType.NUMBER),
        (' ', CharType.NEUTRAL),
        (',', CharType.NEUTRAL),
    ])
    def test_classification(self, ch, expected):
        assert get_char_type(ch) is expected

    def test_mirror_pairs(self):
        assert mirror_bracket('(') == ')'
        assert mirror_bracket(']') == '['
        assert mirror_bracket('«') == '»'
        assert mirror_bracket('x') == 'x'


# =============================================================================
# WEAK BUFFER SPLIT
# =============================================================================

class TestWeakBuffer:

    def test_quotes_stay_with_ltr(self):
        ltr_suffix, rtl_prefix = split_weak_buffer([' ', '"', ',', ':'])
        assert ltr_suffix == ['"']
        assert rtl_prefix == [' ', ',', ':']

    def test_empty(self):
        assert split_weak_buffer([]) == ([], [])


# =============================================================================
# SEGMENTATION
# =============================================================================

class TestSegmentation:

    def test_space_moves_to_rtl_run(self):
        """Test that neutrals at an LTR -> RTL boundary open the RTL run"""
        segments = segment_text("abc مرحبا")

        assert [s.direction for s in segments] == [CharType.LTR, CharType.RTL]
        assert segments[0].text == "abc"
        assert segments[1].text == " مرحبا"

    def test_space_stays_with_closing_rtl_run(self):
        segments = segment_text("مرحبا 123")

        assert [s.direction for s in segments] == [CharType.RTL, CharType.LTR]
        assert segments[0].text == "مرحبا "
        assert segments[1].text == "123"

    def test_trailing_neutrals_join_last_run(self):
        segments = segment_text("مرحبا!")
        assert len(segments) == 1
        assert segments[0].text == "مرحبا!"

    def test_only_neutrals(self):
        segments = segment_text(" ,. ")
        assert len(segments) == 1
        assert segments[0].text == " ,. "


# =============================================================================
# REVERSAL
# =============================================================================

class TestSmartReverse:

    def test_pure_rtl_reversed(self):
        assert smart_reverse("مرحبا") == "ابحرم"

    def test_ltr_run_order_kept(self):
        assert smart_reverse("abc مرحبا") == "ابحرم abc"

    def test_number_after_rtl(self):
        assert smart_reverse("مرحبا 123") == "123 ابحرم"

    def test_brackets_mirrored(self):
        assert smart_reverse("(مرحبا)") == "(ابحرم)"

    def test_brackets_not_mirrored(self):
        assert smart_reverse("(مرحبا)", mirror_brackets=False) == ")ابحرم("

    def test_parenthesized_latin_next_to_rtl(self):
        """Test that parentheses swap while Latin order is preserved"""
        assert smart_reverse("مرحبا (Hello)") == "(Hello) ابحرم"

    def test_placeholder_stays_atomic(self):
        placeholder = generate_placeholder(0)
        assert smart_reverse("م" + placeholder + "ب") == "ب" + placeholder + "م"

    def test_ltr_only_unchanged(self):
        assert smart_reverse("Hello world") == "Hello world"

    def test_empty(self):
        assert smart_reverse("") == ""


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
