"""
RTL Processor - the public ``fix`` operation

Turns logical-order Arabic/Persian/Urdu text into shaped, visually
ordered text for renderers that only draw left-to-right.

Pipeline Flow:
Raw Input -> Cache lookup -> Scope protection -> [per line] ->
Visual-order detection -> Presentation normalization -> [un-reverse] ->
Numerals -> Shaping -> Bidi reversal -> Scope restore -> Cache insert

The transform never raises: on any failure the input comes back
unchanged and the error is logged.

Usage:
    from rtl_processor import fix
    label = fix("مرحبا بالعالم")

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

import logging
import re
import threading
import time
from pathlib import Path
from typing import Optional

from bidi_reorder import smart_reverse
from char_classes import has_rtl, has_rtl_letters
from logging_config import trace_preview
from numerals import convert_to_eastern_arabic_numerals
from performance_monitor import PerformanceMonitor
from presentation_normalizer import normalize_presentation_forms
from rtl_config import DEFAULT_CONFIG, RTLConfig
from scope_protector import ScopeDelimiterCache, protect_scopes
from shaping import shape_arabic_text
from text_cache import LoadResult, ProcessingCache, build_cache_key
from visual_order import is_likely_visual_order

logger = logging.getLogger("rtl_fix.processor")

LINE_BREAK_PATTERN = re.compile(r'\r\n|\n')


class RTLProcessor:
    """
    Shapes and reorders RTL text with a shared result cache.

    Safe to call from many threads at once. The configuration is read
    once per call, so swapping it mid-flight never mixes two snapshots.
    """

    def __init__(
        self,
        config: Optional[RTLConfig] = None,
        cache: Optional[ProcessingCache] = None,
        monitor: Optional[PerformanceMonitor] = None,
    ):
        self._config = config or DEFAULT_CONFIG
        self.cache = cache or ProcessingCache(max_size=self._config.cache_size)
        self.monitor = monitor or PerformanceMonitor()
        self._scopes = ScopeDelimiterCache()

    @property
    def config(self) -> RTLConfig:
        return self._config

    @config.setter
    def config(self, config: RTLConfig):
        self._config = config
        self.cache.max_size = config.cache_size

    # =========================================================================
    # PUBLIC ENTRY POINT
    # =========================================================================

    def fix(self, text: Optional[str], use_ligatures: bool = True) -> Optional[str]:
        """
        Fix text for left-to-right renderers.

        Args:
            text: Text in logical order (None and "" are returned as is)
            use_ligatures: Fuse Lam-Alef pairs; input fields usually turn
                this off so the caret stays in sync

        Returns:
            Visual-order text, or the unmodified input if anything failed
        """
        if not text:
            return text

        config = self._config
        trace = config.enable_text_trace and logger.isEnabledFor(logging.DEBUG)
        started = time.perf_counter() if config.enable_performance_metrics else None
        was_cached = False

        if trace:
            logger.debug(
                f"[RTLTrace] fix IN ligatures={use_ligatures} len={len(text)} "
                f"IN='{trace_preview(text, config.text_trace_max_chars)}'"
            )

        try:
            cache_key = build_cache_key(text, config, use_ligatures)
            cached = self.cache.get(cache_key)
            if cached is not None:
                was_cached = True
                if trace:
                    logger.debug(
                        f"[RTLTrace] fix CacheHit changed={cached != text} "
                        f"OUT='{trace_preview(cached, config.text_trace_max_chars)}'"
                    )
                return cached

            result = self.process_text(text, use_ligatures, config)

            if trace:
                logger.debug(
                    f"[RTLTrace] fix CacheMiss changed={result != text} "
                    f"OUT='{trace_preview(result, config.text_trace_max_chars)}'"
                )

            self.cache.put(cache_key, result)
            return result

        except Exception as e:
            logger.error(f"Error processing text: {e} (input: '{trace_preview(text)}')")
            return text

        finally:
            if started is not None:
                elapsed_ms = (time.perf_counter() - started) * 1000
                self.monitor.record(elapsed_ms, was_cached)

    # =========================================================================
    # PIPELINE
    # =========================================================================

    def process_text(
        self,
        text: str,
        use_ligatures: bool = True,
        config: Optional[RTLConfig] = None,
    ) -> str:
        """Run the uncached pipeline. Errors propagate to the caller."""
        config = config or self._config

        protected = protect_scopes(text, self._scopes.get(config))
        result = self._fix_internal(protected.text_with_placeholders, use_ligatures, config)
        return protected.restore(result)

    def _fix_internal(self, text: str, use_ligatures: bool, config: RTLConfig) -> str:
        if config.process_multiline_text and '\n' in text:
            return self._process_multiline(text, use_ligatures, config)
        return self._fix_line(text, use_ligatures, config)

    def _process_multiline(self, text: str, use_ligatures: bool, config: RTLConfig) -> str:
        lines = LINE_BREAK_PATTERN.split(text)
        fixed = [
            self._fix_line(line, use_ligatures, config) if has_rtl(line, config) else line
            for line in lines
        ]
        return "\n".join(fixed)

    def _fix_line(self, text: str, use_ligatures: bool, config: RTLConfig) -> str:
        # Our own output fed back in: restore logical order first
        visual_order = is_likely_visual_order(text)
        text = normalize_presentation_forms(text, visual_order=visual_order)
        if visual_order:
            text = smart_reverse(text, config.mirror_brackets)

        if config.convert_to_eastern_arabic_numerals:
            text = convert_to_eastern_arabic_numerals(text)

        if not has_rtl_letters(text, config):
            return text

        shaped = shape_arabic_text(text, use_ligatures, config.keep_base_when_isolated)
        return smart_reverse(shaped, config.mirror_brackets)

    # =========================================================================
    # CACHE MANAGEMENT
    # =========================================================================

    def clear_cache(self):
        self.cache.clear()

    def load_persistent_cache(self, directory: Path = Path(".")) -> LoadResult:
        if not self._config.enable_persistent_cache:
            return LoadResult()
        return self.cache.load_from_file(Path(directory) / self._config.persistent_cache_file)

    def save_persistent_cache(self, directory: Path = Path(".")) -> int:
        if not self._config.enable_persistent_cache:
            return 0
        path = Path(directory) / self._config.persistent_cache_file
        try:
            return self.cache.save_to_file(path)
        except OSError as e:
            logger.error(f"Failed to save persistent cache: {e}")
            return 0


# =============================================================================
# SHARED INSTANCE
# =============================================================================

_processor: Optional[RTLProcessor] = None
_processor_lock = threading.Lock()


def get_processor() -> RTLProcessor:
    """Get the global processor instance."""
    global _processor
    if _processor is None:
        with _processor_lock:
            if _processor is None:
                _processor = RTLProcessor()
    return _processor


def configure(config: RTLConfig) -> RTLProcessor:
    """Swap the configuration of the global processor."""
    processor = get_processor()
    processor.config = config
    return processor


def fix(text: Optional[str], use_ligatures: bool = True) -> Optional[str]:
    """Fix text with the global processor."""
    return get_processor().fix(text, use_ligatures)
