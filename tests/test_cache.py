from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fjsf import cache as cache_mod
from fjsf.cache import JsonCache, read_json_uncached


class ReadJsonUncachedTests(unittest.TestCase):
    def test_failures_return_none(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "bad.json").write_text("{", encoding="utf-8")
            (root / "latin.json").write_bytes(b'{"a": "\xff"}')

            self.assertIsNone(read_json_uncached(root / "missing.json"))
            self.assertIsNone(read_json_uncached(root / "bad.json"))
            self.assertIsNone(read_json_uncached(root / "latin.json"))

    def test_nesting_beyond_parser_limit_returns_none(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "deep.json"
            path.write_text("[" * 200_000 + "]" * 200_000, encoding="utf-8")

            self.assertIsNone(read_json_uncached(path))


class JsonCacheTests(unittest.TestCase):
    def test_reuses_entry_while_mtime_unchanged(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "data.json"
            path.write_text(json.dumps({"v": 1}), encoding="utf-8")
            cache = JsonCache()

            first = cache.read_json(path)
            with mock.patch.object(cache_mod, "read_json_uncached") as reader:
                second = cache.read_json(path)

            reader.assert_not_called()
            self.assertIs(first, second)
            self.assertEqual(len(cache), 1)

    def test_reloads_when_mtime_changes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "data.json"
            path.write_text(json.dumps({"v": 1}), encoding="utf-8")
            cache = JsonCache()
            self.assertEqual(cache.read_json(path), {"v": 1})

            path.write_text(json.dumps({"v": 2}), encoding="utf-8")
            stat = path.stat()
            os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 5_000_000_000))

            self.assertEqual(cache.read_json(path), {"v": 2})

    def test_failed_reload_evicts_entry(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "data.json"
            path.write_text("{}", encoding="utf-8")
            cache = JsonCache()
            cache.read_json(path)

            path.unlink()

            self.assertIsNone(cache.read_json(path))
            self.assertIsNone(cache.get(path))
            self.assertEqual(len(cache), 0)

    def test_set_and_clear(self) -> None:
        cache = JsonCache()
        cache.set("a.json", {"x": 1}, 123)

        entry = cache.get("a.json")
        self.assertIsNotNone(entry)
        self.assertEqual(entry.mtime, 123)
        cache.clear()
        self.assertEqual(len(cache), 0)


if __name__ == "__main__":
    unittest.main()
