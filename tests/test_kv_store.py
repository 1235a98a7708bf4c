import os
import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.store.kv import KVItem, SqliteKeyValueStore, job_match_key, job_match_prefix, resume_key


class SqliteKeyValueStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = SqliteKeyValueStore(os.path.join(self._tmp.name, "nested", "store.db"))

    def tearDown(self):
        self.store.close()
        self._tmp.cleanup()

    def test_key_layout(self):
        self.assertEqual(resume_key("abc"), "resume:abc")
        self.assertEqual(job_match_prefix("abc"), "jobmatch:abc:")
        self.assertEqual(job_match_key("abc", "7"), "jobmatch:abc:7")

    def test_set_get_and_overwrite(self):
        self.assertIsNone(self.store.get("resume:1"))
        self.assertTrue(self.store.set("resume:1", "first"))
        self.store.set("resume:1", "second")
        self.assertEqual(self.store.get("resume:1"), "second")

    def test_delete(self):
        self.store.set("resume:1", "x")
        self.assertTrue(self.store.delete("resume:1"))
        self.assertFalse(self.store.delete("resume:1"))
        self.assertIsNone(self.store.get("resume:1"))

    def test_prefix_listing_is_exact_and_ordered(self):
        for key in ["resume:b", "resume:a", "Resume:c", "resumes:d", "jobmatch:a:1"]:
            self.store.set(key, key.upper())
        self.assertEqual(self.store.list("resume:*"), ["resume:a", "resume:b"])
        self.assertEqual(
            self.store.list("resume:*", return_values=True),
            [KVItem(key="resume:a", value="RESUME:A"), KVItem(key="resume:b", value="RESUME:B")],
        )

    def test_wildcard_characters_in_prefix_are_literal(self):
        self.store.set("jobmatch:a_b:1", "hit")
        self.store.set("jobmatch:aXb:1", "miss")
        self.store.set("jobmatch:a%:1", "miss")
        self.assertEqual(self.store.list(f"{job_match_prefix('a_b')}*"), ["jobmatch:a_b:1"])

    def test_pattern_without_star_is_exact(self):
        self.store.set("resume:1", "x")
        self.store.set("resume:10", "y")
        self.assertEqual(self.store.list("resume:1"), ["resume:1"])

    def test_reopens_after_close(self):
        self.store.set("resume:1", "x")
        self.store.close()
        self.assertEqual(self.store.get("resume:1"), "x")


if __name__ == "__main__":
    unittest.main()
