"""
Cache Tests - fingerprints, eviction and persistence

Run with: pytest tests/test_cache.py -v

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
import itertools
import pytest
import sys
import threading
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rtl_config import RTLConfig
from text_cache import (
    CACHE_KEY_SEPARATOR,
    ProcessingCache,
    build_cache_key,
    decode_record,
    encode_record,
    fnv1a_32,
    processing_signature,
)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now


# =============================================================================
# FINGERPRINTS
# =============================================================================

class TestFingerprint:

    def test_fnv1a_known_values(self):
        assert fnv1a_32("") == 0x811C9DC5
        assert fnv1a_32("a") == 0xE40C292C
        assert fnv1a_32(None) == 0x811C9DC5

    def test_key_format(self):
        key = build_cache_key("مرحبا", RTLConfig(), True)

        signature, separator, text = key[:8], key[8], key[9:]
        int(signature, 16)
        assert signature == signature.upper()
        assert separator == CACHE_KEY_SEPARATOR
        assert text == "مرحبا"

    def test_same_settings_same_key(self):
        assert build_cache_key("x", RTLConfig(), True) == build_cache_key("x", RTLConfig(), True)

    @pytest.mark.parametrize("options", [
        {"convert_to_eastern_arabic_numerals": True},
        {"mirror_brackets": False},
        {"process_multiline_text": False},
        {"ignore_angle_bracket_tags": False},
        {"ignore_curly_brace_scopes": False},
        {"ignore_square_bracket_scopes": False},
        {"ignored_scopes": "<>"},
        {"keep_base_when_isolated": ""},
        {"enable_urdu": False},
    ])
    def test_output_affecting_settings_change_signature(self, options):
        base = processing_signature(RTLConfig(), True)
        assert processing_signature(RTLConfig(**options), True) != base

    def test_ligature_flag_changes_signature(self):
        config = RTLConfig()
        assert processing_signature(config, True) != processing_signature(config, False)

    def test_cache_size_does_not_change_signature(self):
        assert processing_signature(RTLConfig(cache_size=100), True) == \
            processing_signature(RTLConfig(), True)


# =============================================================================
# LOOKUP AND EVICTION
# =============================================================================

class TestProcessingCache:

    def test_get_put(self):
        cache = ProcessingCache()
        assert cache.get("k") is None

        cache.put("k", "v")
        assert cache.get("k") == "v"
        assert "k" in cache
        assert len(cache) == 1

        stats = cache.stats()
        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.hit_rate == pytest.approx(50.0)

    def test_overflow_trims_to_half(self):
        """Test that exceeding max size trims the oldest entries"""
        cache = ProcessingCache(max_size=10, clock=itertools.count().__next__)

        for i in range(11):
            cache.put(f"k{i}", str(i))

        assert cache.wait_for_trim(timeout=5)
        assert len(cache) == 5
        assert all(f"k{i}" in cache for i in range(6, 11))

        stats = cache.stats()
        assert stats.evictions == 6
        assert stats.trims == 1

    def test_recent_access_survives_trim(self):
        clock = FakeClock()
        cache = ProcessingCache(max_size=100, clock=clock)

        for i, key in enumerate(["a", "b", "c"]):
            clock.now = float(i)
            cache.put(key, key)

        clock.now = 1000.0
        cache.get("a")

        assert cache.trim(1) == 2
        assert "a" in cache
        assert "b" not in cache

    def test_no_new_trim_while_one_runs(self):
        cache = ProcessingCache(max_size=2)
        cache._trim_guard.acquire()
        try:
            assert cache.trim_in_progress
            for i in range(5):
                cache.put(f"k{i}", "v")
            assert cache._trim_thread is None
            assert len(cache) == 5
        finally:
            cache._trim_guard.release()

        assert not cache.trim_in_progress

    def test_trim_below_target_is_noop(self):
        cache = ProcessingCache(max_size=100)
        cache.put("a", "a")
        assert cache.trim(10) == 0

    def test_never_grows_unbounded(self):
        cache = ProcessingCache(max_size=100)

        for i in range(1000):
            cache.put(f"key-{i}", "v")

        assert cache.wait_for_trim(timeout=5)
        assert len(cache) <= 100

    def test_concurrent_puts(self):
        cache = ProcessingCache(max_size=100)

        def worker(offset):
            for i in range(300):
                cache.put(f"{offset}-{i}", "v")
                cache.get(f"{offset}-{i // 2}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert cache.wait_for_trim(timeout=5)
        assert len(cache) <= 100

    def test_clear(self):
        cache = ProcessingCache()
        cache.put("a", "b")
        cache.clear()
        assert len(cache) == 0


# =============================================================================
# PERSISTENCE
# =============================================================================

class TestPersistence:

    def test_record_format(self):
        record = encode_record("k", "v")
        assert record == "aw==\tdg=="
        assert decode_record(record) == ("k", "v")

    def test_decode_rejects_malformed(self):
        with pytest.raises(ValueError):
            decode_record("no-tab-here")
        with pytest.raises(ValueError):
            decode_record("!!!\t???")

    def test_load_skips_legacy_and_corrupt(self):
        key = build_cache_key("مرحبا", RTLConfig(), True)
        lines = [
            encode_record(key, "value"),
            encode_record("old-style-key", "value"),
            "not a record",
            "",
        ]

        cache = ProcessingCache()
        result = cache.load_records(lines)

        assert result.loaded == 1
        assert result.skipped_legacy == 1
        assert result.skipped_corrupt == 1
        assert cache.get(key) == "value"

    def test_file_round_trip(self, tmp_path):
        path = tmp_path / "rtl_cache.txt"
        key = build_cache_key("سلام", RTLConfig(), False)

        source = ProcessingCache()
        source.put(key, "fixed")
        assert source.save_to_file(path) == 1

        target = ProcessingCache()
        assert target.load_from_file(path).loaded == 1
        assert target.get(key) == "fixed"

    def test_missing_file(self, tmp_path):
        result = ProcessingCache().load_from_file(tmp_path / "missing.txt")
        assert result.loaded == 0

    def test_oversized_load_trimmed(self):
        cache = ProcessingCache(max_size=10)
        lines = [encode_record(f"0000000{CACHE_KEY_SEPARATOR}{i}", "v") for i in range(20)]

        cache.load_records(lines)
        assert len(cache) == 5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
