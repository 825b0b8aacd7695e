import json
import os
import shutil
import sys
import tempfile
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from git_graph_layout import BRANCH_COLORS
from settings import Settings


class TestSettings(unittest.TestCase):
    def setUp(self):
        self.config_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.config_dir)

    def test_defaults(self):
        app_settings = Settings(config_dir=self.config_dir)
        self.assertEqual(app_settings.get_branch_colors(), BRANCH_COLORS)
        self.assertEqual(app_settings.get_history_limit(), 500)
        self.assertEqual(app_settings.get_graph_setting("row_height"), 56)

    def test_saved_values_are_loaded(self):
        Settings(config_dir=self.config_dir).set_branch_colors(["#111111", "#222222"])
        Settings(config_dir=self.config_dir).set_history_limit(50)

        reloaded = Settings(config_dir=self.config_dir)
        self.assertEqual(reloaded.get_branch_colors(), ["#111111", "#222222"])
        self.assertEqual(reloaded.get_history_limit(), 50)

    def test_invalid_palette_falls_back(self):
        app_settings = Settings(config_dir=self.config_dir)
        for bad in ([], "red", [1, 2], None):
            app_settings.settings["branch_colors"] = bad
            self.assertEqual(app_settings.get_branch_colors(), BRANCH_COLORS)

    def test_partial_graph_settings_keep_defaults(self):
        with open(os.path.join(self.config_dir, "settings.json"), "w", encoding="utf-8") as f:
            json.dump({"graph": {"column_width": 24}}, f)

        graph = Settings(config_dir=self.config_dir).get_graph_settings()
        self.assertEqual(graph["column_width"], 24)
        self.assertEqual(graph["margin_top"], 20)

    def test_corrupt_file_keeps_defaults(self):
        with open(os.path.join(self.config_dir, "settings.json"), "w", encoding="utf-8") as f:
            f.write("{not json")

        with self.assertLogs(level="WARNING"):
            app_settings = Settings(config_dir=self.config_dir)
        self.assertEqual(app_settings.get_history_limit(), 500)

    def test_non_object_file_keeps_defaults(self):
        for content in ("[1, 2]", "42"):
            with open(os.path.join(self.config_dir, "settings.json"), "w", encoding="utf-8") as f:
                f.write(content)

            with self.assertLogs(level="WARNING"):
                app_settings = Settings(config_dir=self.config_dir)
            self.assertEqual(app_settings.get_history_limit(), 500)
            self.assertEqual(app_settings.get_branch_colors(), BRANCH_COLORS)

    def test_env_override(self):
        nested = os.path.join(self.config_dir, "nested")
        os.environ["COMMIT_LANES_CONFIG_DIR"] = nested
        try:
            app_settings = Settings()
        finally:
            del os.environ["COMMIT_LANES_CONFIG_DIR"]
        self.assertEqual(app_settings.config_file, os.path.join(nested, "settings.json"))
        self.assertTrue(os.path.isdir(nested))


if __name__ == "__main__":
    unittest.main()
