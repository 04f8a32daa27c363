import json
import tempfile
import unittest
from pathlib import Path

from app.client.persistence import JsonStateFile


class TestJsonStateFile(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_loads_empty(self):
        self.assertEqual(JsonStateFile(self.dir / "nope.json").load(), {})

    def test_save_creates_parent_dirs_and_round_trips(self):
        state = JsonStateFile(self.dir / "nested" / "state.json")
        state.save({"relevant_notes": {"1": 100}})
        self.assertEqual(state.load(), {"relevant_notes": {"1": 100}})

    def test_save_leaves_no_temp_files(self):
        state = JsonStateFile(self.dir / "state.json")
        state.save({"a": 1})
        state.save({"a": 2})
        self.assertEqual([p.name for p in self.dir.iterdir()], ["state.json"])

    def test_non_object_content_loads_empty(self):
        path = self.dir / "state.json"
        path.write_text(json.dumps(["1", "2"]))
        with self.assertLogs("app.client.persistence", level="ERROR"):
            self.assertEqual(JsonStateFile(path).load(), {})

    def test_unserializable_data_raises_and_keeps_old_file(self):
        state = JsonStateFile(self.dir / "state.json")
        state.save({"a": 1})
        with self.assertRaises(TypeError):
            state.save({"a": object()})
        self.assertEqual(state.load(), {"a": 1})
        self.assertEqual([p.name for p in self.dir.iterdir()], ["state.json"])


if __name__ == "__main__":
    unittest.main()
