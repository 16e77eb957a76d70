"""
Scope Protector - keep tags and placeholders out of the RTL pipeline

Rich-text tags (<color=red>), format placeholders ({0}) and keys ([KEY])
must reach the renderer byte-for-byte. Shaping or reversing them breaks
the host UI, so they are masked before processing:

1. Find every balanced delimiter region (nesting of the same pair counts)
2. Replace it with a 3-character placeholder: U+FFFF, private-use index, U+FFFF
3. Run the pipeline on the masked text
4. Put the captured regions back by index

Placeholder characters classify as LTR in the reorder stage, so a
placeholder always survives as one atomic run.

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from rtl_config import DEFAULT_CONFIG, RTLConfig

logger = logging.getLogger("rtl_fix.scope_protector")


# =============================================================================
# PLACEHOLDER GENERATION
# =============================================================================

MASK_MARKER = chr(0xFFFF)
INDEX_BASE = 0xE000
INDEX_LIMIT = 0xF8FF
MAX_PROTECTED_PARTS = INDEX_LIMIT - INDEX_BASE + 1


def generate_placeholder(index: int) -> str:
    """
    Build the placeholder for the index-th protected region.

    Format: U+FFFF, chr(0xE000 + index), U+FFFF

    U+FFFF is a noncharacter and the index lives in the private use area,
    so neither can collide with real text.
    """
    return MASK_MARKER + chr(INDEX_BASE + index) + MASK_MARKER


def is_placeholder(text: str) -> bool:
    """Check if text is exactly one placeholder."""
    return (
        len(text) == 3
        and text[0] == MASK_MARKER
        and text[2] == MASK_MARKER
        and INDEX_BASE <= ord(text[1]) <= INDEX_LIMIT
    )


def is_mask_char(ch: str) -> bool:
    return ch == MASK_MARKER or INDEX_BASE <= ord(ch) <= INDEX_LIMIT


# =============================================================================
# DELIMITER CONFIGURATION
# =============================================================================

def effective_scopes(config: Optional[RTLConfig] = None) -> str:
    """
    Delimiter pairs that are actually protected.

    The three built-in pairs can be switched off individually even when
    they appear in ``ignored_scopes``.
    """
    config = config or DEFAULT_CONFIG
    scopes = config.ignored_scopes

    if not config.ignore_angle_bracket_tags:
        scopes = scopes.replace("<>", "")
    if not config.ignore_curly_brace_scopes:
        scopes = scopes.replace("{}", "")
    if not config.ignore_square_bracket_scopes:
        scopes = scopes.replace("[]", "")

    return scopes


class ScopeDelimiterCache:
    """
    Caches the effective delimiter string.

    Recomputed only when the inputs it depends on change; the key is a
    hash of the custom delimiter string and the three toggles.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._key: Optional[int] = None
        self._scopes: str = ""
        self.recomputations = 0

    @staticmethod
    def _key_for(config: RTLConfig) -> int:
        return hash((
            config.ignored_scopes,
            config.ignore_angle_bracket_tags,
            config.ignore_curly_brace_scopes,
            config.ignore_square_bracket_scopes,
        ))

    def get(self, config: Optional[RTLConfig] = None) -> str:
        config = config or DEFAULT_CONFIG
        key = self._key_for(config)

        with self._lock:
            if key != self._key:
                self._scopes = effective_scopes(config)
                self._key = key
                self.recomputations += 1
                logger.debug(f"Protected scopes recomputed: {self._scopes!r}")
            return self._scopes


# =============================================================================
# PROTECTION
# =============================================================================

@dataclass
class ProtectedText:
    """Result of scope protection."""
    text_with_placeholders: str
    parts: List[str] = field(default_factory=list)

    def restore(self, processed_text: str) -> str:
        """Put every captured region back into processed text."""
        return restore_scopes(processed_text, self.parts)


def find_closing_scope(text: str, start: int, open_char: str, close_char: str) -> int:
    """
    Index of the delimiter closing the region opened at ``start``.

    Nested opens of the same pair raise the depth. Returns -1 when the
    region is never closed.
    """
    depth = 1
    for k in range(start + 1, len(text)):
        ch = text[k]
        if ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return k
    return -1


def _scope_pairs(scopes: str) -> List[Tuple[str, str]]:
    return [(scopes[s], scopes[s + 1]) for s in range(0, len(scopes), 2)]


def protect_scopes(text: str, scopes: str) -> ProtectedText:
    """
    Mask every balanced delimiter region in text.

    ``scopes`` is a string of open/close pairs, e.g. "<>{}[]". An odd
    length or empty string disables protection. An open delimiter that
    is never closed is kept as a literal character.
    """
    if not text or not scopes or len(scopes) % 2 != 0:
        return ProtectedText(text_with_placeholders=text)

    pairs = _scope_pairs(scopes)
    openers = {open_char for open_char, _ in pairs}

    # Quick check: nothing to protect
    if not any(ch in openers for ch in text):
        return ProtectedText(text_with_placeholders=text)

    result = ProtectedText(text_with_placeholders=text)
    out: List[str] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        close_idx = -1

        if ch in openers and len(result.parts) < MAX_PROTECTED_PARTS:
            for open_char, close_char in pairs:
                if ch != open_char:
                    continue
                close_idx = find_closing_scope(text, i, open_char, close_char)
                if close_idx != -1:
                    break

        if close_idx == -1:
            out.append(ch)
            i += 1
            continue

        out.append(generate_placeholder(len(result.parts)))
        result.parts.append(text[i:close_idx + 1])
        i = close_idx + 1

    result.text_with_placeholders = "".join(out)

    if result.parts:
        logger.debug(f"Protected {len(result.parts)} scopes")
    return result


def restore_scopes(text: str, parts: Optional[List[str]]) -> str:
    """
    Replace placeholders with their captured regions.

    Triples whose index is out of range are emitted unchanged.
    """
    if not parts or not text:
        return text

    out: List[str] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if ch == MASK_MARKER and is_placeholder(text[i:i + 3]):
            index = ord(text[i + 1]) - INDEX_BASE
            if 0 <= index < len(parts):
                out.append(parts[index])
                i += 3
                continue
        out.append(ch)
        i += 1

    return "".join(out)
