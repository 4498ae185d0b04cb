from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from twinpane.runtime import config


class ViewerConfigTests(unittest.TestCase):
    def test_missing_file_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("twinpane.runtime.config.CONFIG_PATH", Path(tmp) / "config.json"):
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.load_viewer_config(), config.ViewerConfig())

    def test_valid_keys_load_alongside_unrelated_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps({"theme_note": "ignored", "fold_threshold": 12, "keep_context": 1, "style": " native "}),
                encoding="utf-8",
            )
            with mock.patch("twinpane.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config()["theme_note"], "ignored")
                self.assertEqual(
                    config.load_viewer_config(),
                    config.ViewerConfig(fold_threshold=12, keep_context=1, style="native"),
                )

    def test_invalid_values_fall_back_per_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps({"fold_threshold": 0, "keep_context": True, "style": "  "}),
                encoding="utf-8",
            )
            with mock.patch("twinpane.runtime.config.CONFIG_PATH", config_path):
                loaded = config.load_viewer_config()

        self.assertEqual(loaded.fold_threshold, 8)
        self.assertEqual(loaded.keep_context, 3)
        self.assertEqual(loaded.style, "monokai")

    def test_malformed_json_is_ignored_with_warning(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("{not json", encoding="utf-8")
            with mock.patch("twinpane.runtime.config.CONFIG_PATH", config_path):
                with self.assertLogs("twinpane.runtime.config", level="WARNING"):
                    self.assertEqual(config.load_config(), {})

    def test_non_object_json_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("[1, 2]", encoding="utf-8")
            with mock.patch("twinpane.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})


if __name__ == "__main__":
    unittest.main()
