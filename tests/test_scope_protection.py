"""
Scope Protection Tests - masking of tags and placeholders

Tests the extraction and restoration of delimited regions that
must never be shaped or reordered.

Run with: pytest tests/test_scope_protection.py -v

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
import pytest
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rtl_config import RTLConfig
from scope_protector import (
    MASK_MARKER,
    MAX_PROTECTED_PARTS,
    ScopeDelimiterCache,
    effective_scopes,
    find_closing_scope,
    generate_placeholder,
    is_placeholder,
    protect_scopes,
    restore_scopes,
)

SCOPES = "<>{}[]"


# =============================================================================
# PLACEHOLDERS
# =============================================================================

class TestPlaceholders:

    def test_placeholder_format(self):
        placeholder = generate_placeholder(2)
        assert placeholder == MASK_MARKER + chr(0xE002) + MASK_MARKER
        assert is_placeholder(placeholder)

    def test_not_placeholder(self):
        assert not is_placeholder("abc")
        assert not is_placeholder(MASK_MARKER + "a" + MASK_MARKER)


# =============================================================================
# PROTECTION
# =============================================================================

class TestProtectScopes:

    def test_tags_masked(self):
        result = protect_scopes("Hi <b>x</b>", SCOPES)

        assert result.parts == ["<b>", "</b>"]
        assert result.text_with_placeholders == (
            "Hi " + generate_placeholder(0) + "x" + generate_placeholder(1)
        )

    def test_all_pair_types(self):
        result = protect_scopes("<a>{b}[c]", SCOPES)
        assert result.parts == ["<a>", "{b}", "[c]"]

    def test_nested_same_pair_captured_whole(self):
        result = protect_scopes("x {a{b}c} y", SCOPES)
        assert result.parts == ["{a{b}c}"]

    def test_unterminated_scope_literal(self):
        """Test that an open delimiter without a close is kept as text"""
        result = protect_scopes("a <b", SCOPES)

        assert result.parts == []
        assert result.text_with_placeholders == "a <b"

    def test_odd_scope_string_disables_protection(self):
        result = protect_scopes("<b>", "<>{")
        assert result.parts == []
        assert result.text_with_placeholders == "<b>"

    def test_empty_scope_string(self):
        assert protect_scopes("<b>", "").parts == []

    def test_parts_limit(self):
        text = "[]" * (MAX_PROTECTED_PARTS + 1)
        result = protect_scopes(text, SCOPES)

        assert len(result.parts) == MAX_PROTECTED_PARTS
        assert result.text_with_placeholders.endswith("[]")

    def test_find_closing_scope(self):
        assert find_closing_scope("{a{b}c}", 0, "{", "}") == 6
        assert find_closing_scope("{a{b}c", 0, "{", "}") == -1


# =============================================================================
# RESTORATION
# =============================================================================

class TestRestoreScopes:

    def test_round_trip(self):
        original = "مرحبا <color=red>{0}</color> [KEY]"
        result = protect_scopes(original, SCOPES)

        assert "<" not in result.text_with_placeholders
        assert result.restore(result.text_with_placeholders) == original

    def test_restore_after_reordering(self):
        result = protect_scopes("{a} {b}", SCOPES)
        swapped = generate_placeholder(1) + " " + generate_placeholder(0)

        assert result.restore(swapped) == "{b} {a}"

    def test_out_of_range_index_emitted_unchanged(self):
        orphan = MASK_MARKER + chr(0xE005) + MASK_MARKER
        assert restore_scopes(orphan, ["x"]) == orphan

    def test_non_placeholder_triple_left_alone(self):
        text = MASK_MARKER + "a" + MASK_MARKER
        assert restore_scopes(text, ["x"]) == text

    def test_no_parts(self):
        assert restore_scopes("abc", None) == "abc"
        assert restore_scopes("abc", []) == "abc"


# =============================================================================
# EFFECTIVE DELIMITERS
# =============================================================================

class TestEffectiveScopes:

    def test_defaults(self):
        assert effective_scopes(RTLConfig()) == SCOPES

    def test_toggle_removes_pair(self):
        config = RTLConfig(ignore_curly_brace_scopes=False)
        assert effective_scopes(config) == "<>[]"

    def test_all_toggles_off(self):
        config = RTLConfig(
            ignore_angle_bracket_tags=False,
            ignore_curly_brace_scopes=False,
            ignore_square_bracket_scopes=False,
        )
        assert effective_scopes(config) == ""

    def test_custom_pairs_kept(self):
        config = RTLConfig(ignored_scopes="<>%%")
        assert effective_scopes(config) == "<>%%"

    def test_cache_recomputes_only_on_change(self):
        cache = ScopeDelimiterCache()
        config = RTLConfig()

        assert cache.get(config) == SCOPES
        assert cache.get(RTLConfig()) == SCOPES
        assert cache.recomputations == 1

        assert cache.get(RTLConfig(ignore_angle_bracket_tags=False)) == "{}[]"
        assert cache.recomputations == 2

        cache.get(RTLConfig(ignore_angle_bracket_tags=False))
        assert cache.recomputations == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
