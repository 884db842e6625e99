"""Unit tests for settings persistence."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

from piecework.settings_persistence import SettingsPersistence, get_persistence


class TestSettingsPersistence(unittest.TestCase):

    def setUp(self):
        self.temp_dir = os.path.realpath(tempfile.mkdtemp())
        self.persistence = SettingsPersistence(Path(self.temp_dir) / "config")
        self.test_doc_path = os.path.join(self.temp_dir, "test_document.txt")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_save_and_load_settings(self):
        settings = {"encoding": "latin-1", "coalesce": False}
        self.assertTrue(self.persistence.save_settings(self.test_doc_path, settings))
        self.assertEqual(self.persistence.load_settings(self.test_doc_path), settings)

    def test_settings_survive_new_instance(self):
        self.persistence.save_settings(self.test_doc_path, {"encoding": "utf-8"})
        fresh = SettingsPersistence(Path(self.temp_dir) / "config")
        self.assertEqual(fresh.load_settings(self.test_doc_path), {"encoding": "utf-8"})

    def test_relative_and_absolute_paths_match(self):
        cwd = os.getcwd()
        os.chdir(self.temp_dir)
        try:
            self.persistence.save_settings("test_document.txt", {"coalesce": True})
        finally:
            os.chdir(cwd)
        self.assertEqual(self.persistence.load_settings(self.test_doc_path), {"coalesce": True})

    def test_load_nonexistent_document(self):
        self.assertEqual(self.persistence.load_settings("/nonexistent/document.txt"), {})

    def test_none_document_path(self):
        self.assertEqual(self.persistence.load_settings(None), {})
        self.assertFalse(self.persistence.save_settings(None, {"encoding": "utf-8"}))

    def test_invalid_values_dropped_on_load(self):
        config = Path(self.temp_dir) / "config"
        config.mkdir()
        data = {
            os.path.abspath(self.test_doc_path): {
                "encoding": "no-such-codec",
                "coalesce": True,
            }
        }
        (config / "settings.json").write_text(json.dumps(data), encoding="utf-8")
        self.assertEqual(self.persistence.load_settings(self.test_doc_path), {"coalesce": True})

    def test_corrupt_settings_file(self):
        config = Path(self.temp_dir) / "config"
        config.mkdir()
        (config / "settings.json").write_text("{not json", encoding="utf-8")
        self.assertEqual(self.persistence.load_settings(self.test_doc_path), {})

    def test_settings_file_not_a_dict(self):
        config = Path(self.temp_dir) / "config"
        config.mkdir()
        (config / "settings.json").write_text("[1, 2]", encoding="utf-8")
        self.assertEqual(self.persistence.load_settings(self.test_doc_path), {})
        self.assertTrue(self.persistence.save_settings(self.test_doc_path, {"coalesce": True}))

    def test_validate_setting(self):
        validate = self.persistence.validate_setting
        self.assertTrue(validate("encoding", "utf-8"))
        self.assertFalse(validate("encoding", "klingon"))
        self.assertFalse(validate("encoding", 8))
        self.assertFalse(validate("coalesce", 1))
        self.assertTrue(validate("coalesce", False))
        self.assertFalse(validate("coalesce", "yes"))
        self.assertTrue(validate("anything_else", [1]))
        self.assertTrue(validate("encoding", None))

    def test_get_persistence_is_singleton(self):
        self.assertIs(get_persistence(), get_persistence())


if __name__ == '__main__':
    unittest.main()
