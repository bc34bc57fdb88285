"""Unit tests for preset storage."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

from typespool.config import EraseStyle, TypewriterOptions
from typespool.errors import ConfigError
from typespool.presets import PresetStore, get_presets


class TestPresetStore(unittest.TestCase):
    """Test preset persistence."""

    def setUp(self):
        """Create a store in a temporary directory."""
        self.temp_dir = tempfile.mkdtemp()
        self.store = PresetStore(Path(self.temp_dir) / "config")

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_save_and_load(self):
        """Test saving options and loading them back."""
        options = TypewriterOptions(text=["one", "two"], repeat=2, erase_style="backspace", fade="2ws")
        self.assertTrue(self.store.save_preset("demo", options))
        self.assertTrue(self.store.path.exists())

        self.store.clear_cache()
        loaded = self.store.load_preset("demo")
        self.assertEqual(loaded, options)
        self.assertEqual(loaded.fade_specs, options.fade_specs)

    def test_overrides(self):
        """Test that keyword overrides replace stored options."""
        self.store.save_preset("demo", TypewriterOptions(text="stored", repeat=1))
        loaded = self.store.load_preset("demo", text=["override"], erase_style="clear")
        self.assertEqual(loaded.text, ("override",))
        self.assertEqual(loaded.repeat, 1)
        self.assertEqual(loaded.erase_style, EraseStyle.CLEAR)

    def test_unknown_preset(self):
        """Test loading a preset that doesn't exist."""
        with self.assertRaises(ConfigError):
            self.store.load_preset("missing")

    def test_list_and_delete(self):
        """Test listing presets in name order and deleting one."""
        self.store.save_preset("b", TypewriterOptions(text="b"))
        self.store.save_preset("a", TypewriterOptions(text="a"))
        self.assertEqual(self.store.list_presets(), ["a", "b"])

        self.assertTrue(self.store.delete_preset("a"))
        self.assertFalse(self.store.delete_preset("a"))
        self.store.clear_cache()
        self.assertEqual(self.store.list_presets(), ["b"])

    def test_empty_name_rejected(self):
        """Test that presets need a name."""
        with self.assertRaises(ConfigError):
            self.store.save_preset("", TypewriterOptions(text="a"))

    def test_file_is_plain_json(self):
        """Test the on-disk format."""
        self.store.save_preset("demo", TypewriterOptions(text="hi"))
        with open(self.store.path, encoding='utf-8') as f:
            data = json.load(f)
        self.assertEqual(data["demo"]["text"], ["hi"])
        self.assertEqual(data["demo"]["erase_style"], "select-all")
        self.assertFalse(self.store.path.with_suffix('.tmp').exists())

    def test_corrupt_file_is_ignored(self):
        """Test that an unreadable presets file behaves as empty."""
        self.store.path.parent.mkdir(parents=True)
        self.store.path.write_text("{not json", encoding='utf-8')
        self.assertEqual(self.store.list_presets(), [])

    def test_non_dict_file_is_ignored(self):
        """Test that a presets file holding a list behaves as empty."""
        self.store.path.parent.mkdir(parents=True)
        self.store.path.write_text("[1, 2]", encoding='utf-8')
        self.assertEqual(self.store.list_presets(), [])

    def test_invalid_stored_preset(self):
        """Test that broken preset entries raise ConfigError."""
        self.store.path.parent.mkdir(parents=True)
        self.store.path.write_text(json.dumps({
            "scalar": 3,
            "bad": {"text": "x", "erase_style": "shred"},
        }), encoding='utf-8')
        with self.assertRaises(ConfigError):
            self.store.load_preset("scalar")
        with self.assertRaises(ConfigError):
            self.store.load_preset("bad")

    def test_unwritable_directory(self):
        """Test that a failed save returns False instead of raising."""
        blocker = Path(self.temp_dir) / "file"
        blocker.write_text("x", encoding='utf-8')
        store = PresetStore(blocker / "config")
        self.assertFalse(store.save_preset("demo", TypewriterOptions(text="a")))


class TestGlobalStore(unittest.TestCase):
    """Test the global store accessor."""

    def test_singleton(self):
        self.assertIs(get_presets(), get_presets())


if __name__ == '__main__':
    unittest.main()
