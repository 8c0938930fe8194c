from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from terrax.defaults import DEFAULT_COMMANDS
from terrax.runtime import config


class ConfigBehaviorTests(unittest.TestCase):
    def _write(self, path: Path, data: object) -> None:
        path.write_text(json.dumps(data), encoding="utf-8")

    def test_missing_config_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("terrax.runtime.config.CONFIG_PATH", Path(tmp) / "config.json"):
                settings = config.load_settings(Path(tmp))

        self.assertEqual(settings, config.TerraxSettings())
        self.assertEqual(settings.commands, DEFAULT_COMMANDS)
        self.assertEqual(settings.max_navigation_columns, 3)
        self.assertEqual(settings.history_max_entries, 500)
        self.assertEqual(settings.root_config_file, "root.hcl")
        self.assertEqual(settings.log_format, "pretty")

    def test_project_config_wins_over_user_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            user_config = root / "user.json"
            self._write(user_config, {"commands": ["init"]})
            self._write(root / ".terrax.json", {"commands": ["plan", "apply"], "max_navigation_columns": 4})

            with mock.patch("terrax.runtime.config.CONFIG_PATH", user_config):
                settings = config.load_settings(root)
                self.assertEqual(config.config_path(root / "elsewhere"), user_config)

        self.assertEqual(settings.commands, ("plan", "apply"))
        self.assertEqual(settings.max_navigation_columns, 4)

    def test_user_config_is_used_without_project_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            user_config = root / "user.json"
            self._write(user_config, {"history": {"max_entries": 50}, "log_level": "debug"})

            with mock.patch("terrax.runtime.config.CONFIG_PATH", user_config):
                settings = config.load_settings(root)

        self.assertEqual(settings.history_max_entries, 50)
        self.assertEqual(settings.log_level, "debug")

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        settings = config.settings_from_config(
            {
                "commands": [],
                "max_navigation_columns": 0,
                "history": {"max_entries": 5},
                "root_config_file": "  ",
                "log_format": 3,
                "terragrunt": {"parallelism": True, "no_color": "yes", "extra_flags": ["--a", 7, " "]},
            }
        )

        self.assertEqual(settings.commands, DEFAULT_COMMANDS)
        self.assertEqual(settings.max_navigation_columns, 3)
        self.assertEqual(settings.history_max_entries, 500)
        self.assertEqual(settings.root_config_file, "root.hcl")
        self.assertEqual(settings.log_format, "pretty")
        self.assertEqual(settings.terragrunt.parallelism, 0)
        self.assertFalse(settings.terragrunt.no_color)
        self.assertEqual(settings.terragrunt.extra_flags, ("--a",))

    def test_terragrunt_options_are_parsed(self) -> None:
        settings = config.settings_from_config(
            {
                "terragrunt": {
                    "parallelism": 4,
                    "no_color": True,
                    "non_interactive": True,
                    "ignore_dependency_errors": True,
                    "ignore_external_dependencies": True,
                    "include_external_dependencies": True,
                    "extra_flags": ["--queue-include-dir", "x"],
                }
            }
        )

        self.assertEqual(
            settings.terragrunt,
            config.TerragruntOptions(
                parallelism=4,
                no_color=True,
                non_interactive=True,
                ignore_dependency_errors=True,
                ignore_external_dependencies=True,
                include_external_dependencies=True,
                extra_flags=("--queue-include-dir", "x"),
            ),
        )

    def test_malformed_or_non_object_config_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".terrax.json").write_text("{not json", encoding="utf-8")
            self.assertEqual(config.load_config(root), {})

            self._write(root / ".terrax.json", ["plan"])
            self.assertEqual(config.load_config(root), {})


if __name__ == "__main__":
    unittest.main()
