"""Tests for catalog module"""

import json
from pathlib import Path
import tempfile
import unittest

import qt_support  # noqa: F401

from loguru import logger

from catalog import DEFAULT_CONFIG, CatalogEntry, catalog_names, load_catalog, load_config, save_config


class TestDefaultCatalog(unittest.TestCase):
    def setUp(self):
        self.catalog = load_catalog()

    def test_order_and_size(self):
        names = catalog_names(self.catalog)
        self.assertEqual(len(names), 14)
        self.assertEqual(names[0], "Dandadan")
        self.assertEqual(names[9], "Mob Psycho 100")
        self.assertEqual(names[-4:], ["Bad URL", "null URL", "URL to an HTML page", "Empty URL"])

    def test_error_path_fixtures(self):
        by_name = {entry.name: entry.url for entry in self.catalog}
        self.assertEqual(by_name["Bad URL"], "badURL")
        self.assertIsNone(by_name["null URL"])
        self.assertEqual(by_name["URL to an HTML page"], "https://www.google.com")
        self.assertEqual(by_name["Empty URL"], "")

    def test_entries_are_immutable(self):
        entry = self.catalog[0]
        self.assertIsInstance(entry, CatalogEntry)
        with self.assertRaises(AttributeError):
            entry.url = "https://example.com/other.jpg"


class TestCatalogFromConfig(unittest.TestCase):
    def test_posters_override_builtin_catalog(self):
        config = {
            "posters": [
                {"name": "One", "url": "https://example.com/one.png"},
                {"name": " Two ", "url": None},
            ]
        }
        catalog = load_catalog(config)
        self.assertEqual(
            catalog,
            (CatalogEntry("One", "https://example.com/one.png"), CatalogEntry("Two", None)),
        )

    def test_invalid_entries_are_skipped(self):
        config = {
            "posters": [
                "not-an-object",
                {"url": "https://example.com/nameless.png"},
                {"name": "   ", "url": "https://example.com/blank.png"},
                {"name": "Kept", "url": "https://example.com/kept.png"},
            ]
        }
        self.assertEqual(catalog_names(load_catalog(config)), ["Kept"])

    def test_empty_override_falls_back_to_builtin(self):
        self.assertEqual(len(load_catalog({"posters": []})), 14)

    def test_non_string_url_is_converted_with_warning(self):
        messages = []
        handler_id = logger.add(messages.append, level="WARNING", format="{message}")
        self.addCleanup(logger.remove, handler_id)
        catalog = load_catalog({"posters": [{"name": "Numeric", "url": 123}]})
        self.assertEqual(catalog, (CatalogEntry("Numeric", "123"),))
        self.assertTrue(any("Numeric" in message and "123" in message for message in messages))


class TestConfig(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "nested" / "config.json"

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_file_gives_defaults(self):
        config = load_config(self.config_path)
        self.assertEqual(config["window"], DEFAULT_CONFIG["window"])
        self.assertTrue(config["debug"])
        self.assertEqual(config["log_level"], "INFO")
        self.assertIsNone(config["posters"])

    def test_saved_values_are_merged_over_defaults(self):
        save_config(self.config_path, {"window": {"width": 1024}, "log_level": "debug", "debug": False})
        config = load_config(self.config_path)
        self.assertEqual(config["window"], {"width": 1024, "height": 400})
        self.assertEqual(config["log_level"], "DEBUG")
        self.assertFalse(config["debug"])

    def test_unreadable_file_gives_defaults(self):
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text("{not json", encoding="utf-8")
        config = load_config(self.config_path)
        self.assertEqual(config["window"], DEFAULT_CONFIG["window"])

    def test_debug_accepts_only_booleans(self):
        for value, expected in ((False, False), (True, True), ("false", True), (0, True), (None, True)):
            with self.subTest(value=value):
                save_config(self.config_path, {"debug": value})
                self.assertIs(load_config(self.config_path)["debug"], expected)

    def test_bad_values_are_ignored(self):
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text(
            json.dumps({"window": {"width": -5, "height": "tall"}, "posters": "nope"}),
            encoding="utf-8",
        )
        config = load_config(self.config_path)
        self.assertEqual(config["window"], {"width": 800, "height": 400})
        self.assertIsNone(config["posters"])


if __name__ == "__main__":
    unittest.main()
