"""Tests for the TTL cache stores.

Created: 2026-10-13
"""

import json

from plugin_update_checker.cache import FileCache, MemoryCache, sanitize_key


class TestSanitizeKey:
    def test_lowercases_and_strips(self):
        assert sanitize_key("My Plugin!") == "myplugin"

    def test_keeps_dashes_and_underscores(self):
        assert sanitize_key("update_my-plugin_2") == "update_my-plugin_2"

    def test_path_characters_removed(self):
        assert sanitize_key("../../etc/passwd") == "etcpasswd"


class TestMemoryCache:
    def test_set_get_delete(self, clock):
        cache = MemoryCache(clock=clock)
        cache.set("k", "body", ttl=60)

        assert cache.get("k") == "body"
        cache.delete("k")
        assert cache.get("k") is None

    def test_expiry(self, clock):
        cache = MemoryCache(clock=clock)
        cache.set("k", "body", ttl=60)

        clock.advance(59)
        assert cache.get("k") == "body"
        clock.advance(1)
        assert cache.get("k") is None

    def test_delete_missing_key(self):
        MemoryCache().delete("missing")


class TestFileCache:
    def test_round_trip_persists_across_instances(self, tmp_path, clock):
        FileCache(tmp_path, clock=clock).set("update_x", '{"a": 1}', ttl=60)

        assert FileCache(tmp_path, clock=clock).get("update_x") == '{"a": 1}'

    def test_creates_directory(self, tmp_path, clock):
        cache_dir = tmp_path / "nested" / "cache"
        FileCache(cache_dir, clock=clock).set("k", "v", ttl=60)

        assert (cache_dir / "k.json").exists()

    def test_expired_entry_removed(self, tmp_path, clock):
        cache = FileCache(tmp_path, clock=clock)
        cache.set("k", "v", ttl=60)

        clock.advance(60)

        assert cache.get("k") is None
        assert not (tmp_path / "k.json").exists()

    def test_corrupt_file_reads_as_absent(self, tmp_path, clock):
        (tmp_path / "k.json").write_text("not json{{{")
        assert FileCache(tmp_path, clock=clock).get("k") is None

    def test_wrong_shape_reads_as_absent(self, tmp_path, clock):
        (tmp_path / "k.json").write_text(json.dumps({"expires": 99999999, "value": 42}))
        assert FileCache(tmp_path, clock=clock).get("k") is None

    def test_delete_missing_key(self, tmp_path):
        FileCache(tmp_path).delete("missing")

    def test_key_is_sanitized_on_disk(self, tmp_path, clock):
        FileCache(tmp_path, clock=clock).set("../Escape", "v", ttl=60)

        assert (tmp_path / "escape.json").exists()
