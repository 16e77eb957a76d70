"""
Text Cache - memoize fixed strings across calls

Game UIs assign the same labels over and over; shaping them each time is
wasted work. Results are cached under a fingerprint of the active
configuration plus the raw input, so a settings change never serves a
stale result.

Key format: 8 hex digits of the processing signature, U+001F, raw text.

When the cache outgrows its limit a single background thread trims it to
half size, oldest entries first. Callers never wait for a trim.

Persistent exchange format (one record per line):
    base64(utf-8 key) TAB base64(utf-8 value)
Keys without the U+001F separator come from an older format and are
skipped on load.

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

import base64
import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from rtl_config import RTLConfig

logger = logging.getLogger("rtl_fix.cache")


# =============================================================================
# CACHE CONFIGURATION
# =============================================================================

CACHE_KEY_SEPARATOR = chr(0x1F)
STALE_AFTER_SECONDS = 5 * 60
DEFAULT_MAX_SIZE = 1000

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
MASK_32 = 0xFFFFFFFF


@dataclass
class CacheStats:
    """Cache statistics."""
    entries: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    trims: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total * 100 if total > 0 else 0.0


@dataclass
class CacheEntry:
    value: str
    access_time: float


@dataclass
class LoadResult:
    loaded: int = 0
    skipped_legacy: int = 0
    skipped_corrupt: int = 0


# =============================================================================
# CACHE KEY GENERATION
# =============================================================================

def fnv1a_32(text: Optional[str]) -> int:
    h = FNV_OFFSET_BASIS
    for ch in text or "":
        h ^= ord(ch)
        h = (h * FNV_PRIME) & MASK_32
    return h


def processing_signature(config: RTLConfig, use_ligatures: bool) -> int:
    """
    32-bit signature of every setting that changes the output.

    Flags occupy the low bits; the delimiter and keep-base strings are
    mixed in through their FNV-1a hashes.
    """
    flags = (
        use_ligatures,
        config.convert_to_eastern_arabic_numerals,
        config.mirror_brackets,
        config.process_multiline_text,
        config.ignore_angle_bracket_tags,
        config.ignore_curly_brace_scopes,
        config.ignore_square_bracket_scopes,
        config.enable_arabic,
        config.enable_persian,
        config.enable_urdu,
    )

    sig = 0
    for bit, enabled in enumerate(flags):
        if enabled:
            sig |= 1 << bit

    sig ^= (fnv1a_32(config.ignored_scopes) * 2654435761) & MASK_32
    sig ^= (fnv1a_32(config.keep_base_when_isolated) * 40503) & MASK_32
    return sig & MASK_32


def build_cache_key(text: str, config: RTLConfig, use_ligatures: bool) -> str:
    """Fingerprint: signature as 8 hex digits, separator, raw input."""
    return f"{processing_signature(config, use_ligatures):08X}{CACHE_KEY_SEPARATOR}{text}"


# =============================================================================
# PERSISTENCE FORMAT
# =============================================================================

def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _unb64(field: str) -> str:
    return base64.b64decode(field, validate=True).decode("utf-8")


def encode_record(key: str, value: str) -> str:
    return f"{_b64(key)}\t{_b64(value)}"


def decode_record(line: str) -> Tuple[str, str]:
    """
    Parse one persisted line.

    Raises ValueError when the line is not two valid base64 fields.
    """
    parts = line.rstrip("\r\n").split("\t", 1)
    if len(parts) != 2:
        raise ValueError("Expected two tab-separated fields")
    return _unb64(parts[0]), _unb64(parts[1])


# =============================================================================
# IN-MEMORY CACHE
# =============================================================================

class ProcessingCache:
    """
    Thread-safe fingerprint -> result cache with background trimming.

    Every map access holds ``_lock`` briefly; the trim sweep copies a
    snapshot under the lock and decides what to drop without it.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        stale_after: float = STALE_AFTER_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.max_size = max_size
        self.stale_after = stale_after
        self._clock = clock

        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._trim_guard = threading.Lock()
        self._trim_thread: Optional[threading.Thread] = None
        self._stats = CacheStats()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> Optional[str]:
        """Return a cached result and refresh its access time."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats.misses += 1
                return None
            entry.access_time = self._clock()
            self._stats.hits += 1
            return entry.value

    def put(self, key: str, value: str):
        """Store a result; schedule a trim when over capacity."""
        with self._lock:
            self._entries[key] = CacheEntry(value=value, access_time=self._clock())
            size = len(self._entries)

        if size > self.max_size and not self.trim_in_progress:
            self._schedule_trim(self.max_size // 2)

    # -------------------------------------------------------------------------
    # Eviction
    # -------------------------------------------------------------------------

    @property
    def trim_in_progress(self) -> bool:
        return self._trim_guard.locked()

    def _schedule_trim(self, target_size: int) -> bool:
        # Only one trim at a time; later requests are dropped
        if not self._trim_guard.acquire(blocking=False):
            return False

        thread = threading.Thread(
            target=self._run_trim,
            args=(target_size,),
            name="rtl-cache-trim",
            daemon=True,
        )
        self._trim_thread = thread
        try:
            thread.start()
        except RuntimeError as e:
            self._trim_guard.release()
            logger.error(f"Could not start cache trim: {e}")
            return False
        return True

    def _run_trim(self, target_size: int):
        try:
            self.trim(target_size)
        except Exception as e:
            logger.error(f"Error in cache cleanup: {e}")
            return
        finally:
            self._trim_guard.release()

        # Inserts that arrived while the guard was held scheduled nothing
        if len(self) > self.max_size:
            self._schedule_trim(self.max_size // 2)

    def trim(self, target_size: int) -> int:
        """
        Shrink the cache to ``target_size`` entries.

        Entries idle longer than ``stale_after`` go first, then the least
        recently used of the rest. Returns the number removed.
        """
        with self._lock:
            snapshot = list(self._entries.items())

        to_remove = len(snapshot) - target_size
        if to_remove <= 0:
            return 0

        threshold = self._clock() - self.stale_after
        snapshot.sort(key=lambda item: item[1].access_time)
        victims = [key for key, _ in snapshot[:to_remove]]
        stale = sum(1 for _, entry in snapshot[:to_remove] if entry.access_time < threshold)

        removed = 0
        with self._lock:
            for key in victims:
                if self._entries.pop(key, None) is not None:
                    removed += 1
            self._stats.evictions += removed
            self._stats.trims += 1

        logger.debug(f"Cache cleaned: removed {removed} entries ({stale} stale)")
        return removed

    def wait_for_trim(self, timeout: Optional[float] = None) -> bool:
        """Block until trimming settles. Returns False on timeout."""
        while True:
            thread = self._trim_thread
            if thread is None:
                return True
            thread.join(timeout)
            if thread.is_alive():
                return False
            if thread is self._trim_thread:
                return True

    def clear(self):
        with self._lock:
            self._entries.clear()
        logger.info("Text cache cleared")

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                entries=len(self._entries),
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
                trims=self._stats.trims,
            )

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def dump_records(self) -> List[str]:
        with self._lock:
            items = [(key, entry.value) for key, entry in self._entries.items()]
        return [encode_record(key, value) for key, value in items]

    def load_records(self, lines: Iterable[str]) -> LoadResult:
        """Load persisted records; bad lines are skipped one by one."""
        result = LoadResult()
        loaded: Dict[str, str] = {}

        for line in lines:
            if not line.strip():
                continue
            try:
                key, value = decode_record(line)
            except ValueError:
                result.skipped_corrupt += 1
                continue

            if not key or CACHE_KEY_SEPARATOR not in key:
                result.skipped_legacy += 1
                continue

            loaded[key] = value

        now = self._clock()
        with self._lock:
            for key, value in loaded.items():
                self._entries[key] = CacheEntry(value=value, access_time=now)
            size = len(self._entries)
        result.loaded = len(loaded)

        if size > self.max_size:
            self.trim(self.max_size // 2)

        logger.info(
            f"Loaded {result.loaded} cache entries "
            f"(legacy={result.skipped_legacy}, corrupt={result.skipped_corrupt})"
        )
        return result

    def save_to_file(self, path) -> int:
        """Write all entries to ``path``. Returns the record count."""
        records = self.dump_records()
        text = "".join(record + "\n" for record in records)
        Path(path).write_text(text, encoding="utf-8")
        logger.info(f"Saved {len(records)} entries to {path}")
        return len(records)

    def load_from_file(self, path) -> LoadResult:
        path = Path(path)
        if not path.exists():
            return LoadResult()
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to load persistent cache: {e}")
            return LoadResult()
        return self.load_records(lines)
