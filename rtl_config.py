"""
RTL Configuration - immutable settings snapshot for the text fixer

Every option can be given either by its Python name or by the
option name used in the host configuration file, e.g.::

    RTLConfig(MirrorBrackets=False, CacheSize=500)
    RTLConfig(mirror_brackets=False, cache_size=500)

Snapshots are frozen: build a new one (``with_options(...)``)
to change settings.

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SCOPES = "<>{}[]"
DEFAULT_KEEP_BASE = "ه"  # heh


class RTLConfig(BaseModel):
    """Settings read by every stage of the RTL pipeline."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    # General
    convert_to_eastern_arabic_numerals: bool = Field(
        False,
        alias="ConvertToEasternArabicNumerals",
        description="Replace 0-9 with Eastern Arabic-Indic digits",
    )
    cache_size: int = Field(
        1000,
        ge=100,
        le=10000,
        alias="CacheSize",
        description="Maximum number of cached results",
    )

    # Languages
    enable_arabic: bool = Field(True, alias="EnableArabic")
    enable_persian: bool = Field(True, alias="EnablePersian")
    enable_urdu: bool = Field(True, alias="EnableUrdu")

    # Text processing
    mirror_brackets: bool = Field(
        True,
        alias="MirrorBrackets",
        description="Swap bracket glyphs inside reversed RTL runs",
    )
    process_multiline_text: bool = Field(
        True,
        alias="ProcessMultilineText",
        description="Fix each line of multi-line text independently",
    )
    ignore_angle_bracket_tags: bool = Field(True, alias="IgnoreAngleBracketTags")
    ignore_curly_brace_scopes: bool = Field(True, alias="IgnoreCurlyBraceScopes")
    ignore_square_bracket_scopes: bool = Field(True, alias="IgnoreSquareBracketScopes")
    ignored_scopes: str = Field(
        DEFAULT_SCOPES,
        alias="IgnoredScopes",
        description="Delimiter pairs whose content is never transformed, e.g. <>{}[]",
    )
    keep_base_when_isolated: str = Field(
        DEFAULT_KEEP_BASE,
        alias="KeepBaseWhenIsolated",
        description="Letters emitted as their base codepoint when isolated",
    )

    # Performance / debug
    enable_performance_metrics: bool = Field(False, alias="EnablePerformanceMetrics")
    enable_text_trace: bool = Field(False, alias="EnableTextTrace")
    text_trace_max_chars: int = Field(220, ge=0, le=10000, alias="TextTraceMaxChars")
    enable_diagnostics: bool = Field(True, alias="EnableDiagnostics")

    # Persistent cache
    enable_persistent_cache: bool = Field(False, alias="EnablePersistentCache")
    persistent_cache_file: str = Field("rtl_cache.txt", alias="PersistentCacheFile")

    def with_options(self, **options: Any) -> "RTLConfig":
        """
        Return a validated copy with some options replaced.

        Options may use either the field name or the host option name.
        Raises pydantic.ValidationError on invalid values.
        """
        aliases = {
            info.alias: name
            for name, info in RTLConfig.model_fields.items()
            if info.alias
        }
        data: Dict[str, Any] = self.model_dump()
        for key, value in options.items():
            data[aliases.get(key, key)] = value
        return RTLConfig.model_validate(data)


DEFAULT_CONFIG = RTLConfig()
