"""Tests for the directory artifact cache and archive packaging."""

import gc
import io
import os
import threading
import time
import zipfile

import pytest

from helpers import make_locator
from skypack_proxy.cache import DirectoryArtifactCache, cache_key, compute_checksum, make_archive_from_directory
from skypack_proxy.errors import ChecksumMismatch


@pytest.fixture
def cache(tmp_path):
    return DirectoryArtifactCache(str(tmp_path / "cache"))


class TestCacheKey:
    """Cache key derivation from locators."""

    def test_key_is_stable_and_readable(self):
        locator = make_locator("preact", "skypack:10.4.8")
        key = cache_key(locator)
        assert key == cache_key(make_locator("preact", "skypack:10.4.8"))
        assert key.startswith("preact-npm-10.4.8-")

    def test_scoped_key_has_no_path_separator(self):
        key = cache_key(make_locator("signals", "skypack:1.0.0", scope="preact"))
        assert "/" not in key
        assert key.startswith("@preact-signals-npm-1.0.0-")

    def test_distinct_versions_distinct_keys(self):
        assert cache_key(make_locator("p", "skypack:1.0.0")) != cache_key(make_locator("p", "skypack:1.0.1"))


class TestDirectoryArtifactCache:
    """Generation, hits, integrity and single-flight behavior."""

    def test_generates_once_then_hits(self, cache):
        calls = []
        hits = []
        misses = []

        def generate():
            calls.append(1)
            return b"artifact"

        first = cache.get_or_generate("k", None, generate, on_hit=lambda: hits.append(1), on_miss=lambda: misses.append(1))
        second = cache.get_or_generate("k", None, generate, on_hit=lambda: hits.append(1), on_miss=lambda: misses.append(1))

        assert first == second == (b"artifact", compute_checksum(b"artifact"))
        assert len(calls) == 1
        assert len(hits) == 1
        assert len(misses) == 1
        assert os.path.isfile(cache.archive_path("k"))

    def test_failed_generation_leaves_no_entry(self, cache):
        def generate():
            raise RuntimeError("upstream down")

        with pytest.raises(RuntimeError):
            cache.get_or_generate("k", None, generate)

        assert not os.path.exists(cache.archive_path("k"))
        assert cache.get_or_generate("k", None, lambda: b"ok")[0] == b"ok"

    def test_expected_checksum_mismatch_on_generation(self, cache):
        with pytest.raises(ChecksumMismatch):
            cache.get_or_generate("k", "deadbeef", lambda: b"artifact")
        assert not os.path.exists(cache.archive_path("k"))

    def test_expected_checksum_match(self, cache):
        expected = compute_checksum(b"artifact")
        data, checksum = cache.get_or_generate("k", expected, lambda: b"artifact")
        assert checksum == expected

    def test_expected_checksum_mismatch_on_hit(self, cache):
        cache.get_or_generate("k", None, lambda: b"artifact")
        with pytest.raises(ChecksumMismatch):
            cache.get_or_generate("k", "deadbeef", lambda: b"other")

    def test_skip_integrity_check(self, tmp_path):
        cache = DirectoryArtifactCache(str(tmp_path), skip_integrity_check=True)
        data, _ = cache.get_or_generate("k", "deadbeef", lambda: b"artifact")
        assert data == b"artifact"

    def test_corrupted_entry_is_regenerated(self, cache):
        cache.get_or_generate("k", None, lambda: b"artifact")
        with open(cache.archive_path("k"), "wb") as fh:
            fh.write(b"garbage")

        data, checksum = cache.get_or_generate("k", None, lambda: b"artifact")

        assert data == b"artifact"
        assert cache.generations == 2

    def test_single_flight_per_key(self, cache):
        calls = []
        results = []

        def generate():
            calls.append(1)
            time.sleep(0.05)
            return b"artifact"

        def worker():
            results.append(cache.get_or_generate("same", None, generate))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert len(results) == 8
        assert all(r == results[0] for r in results)

    def test_key_locks_are_released(self, cache):
        held = []

        def generate():
            held.append(sorted(cache._locks.keys()))
            return b"artifact"

        cache.get_or_generate("k", None, generate)
        cache.get_or_generate("k", None, generate)
        cache.get_or_generate("other", None, generate)
        gc.collect()

        assert held == [["k"], ["other"]]
        assert len(cache._locks) == 0


class TestArchive:
    """Zip packaging of a working directory."""

    def _write(self, root, rel, text):
        path = os.path.join(root, rel)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)

    def test_prefix_and_determinism(self, tmp_path):
        self._write(str(tmp_path), "index.mjs", "export * from 'x';\n")
        self._write(str(tmp_path), "package.json", "{}\n")

        first = make_archive_from_directory(str(tmp_path), prefix_path="node_modules/preact", compression_level=9)
        second = make_archive_from_directory(str(tmp_path), prefix_path="node_modules/preact", compression_level=9)

        assert first == second
        with zipfile.ZipFile(io.BytesIO(first)) as zf:
            assert zf.namelist() == ["node_modules/preact/index.mjs", "node_modules/preact/package.json"]
            assert zf.read("node_modules/preact/package.json") == b"{}\n"

    def test_rejects_bad_level(self, tmp_path):
        with pytest.raises(ValueError):
            make_archive_from_directory(str(tmp_path), prefix_path="x", compression_level=12)
