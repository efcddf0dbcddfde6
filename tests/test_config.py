from __future__ import annotations

import io
import tempfile
import unittest
from contextlib import redirect_stderr
from pathlib import Path

from whattodo.config import AppConfig, load_app_config


class AppConfigTests(unittest.TestCase):
    def write_env(self, text: str) -> str:
        tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(tmp_dir.cleanup)
        path = Path(tmp_dir.name) / ".env"
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_missing_env_file_gives_defaults(self) -> None:
        config = load_app_config("/nonexistent/whattodo.env")
        self.assertEqual(config, AppConfig(env_file="/nonexistent/whattodo.env"))

    def test_reads_values(self) -> None:
        env_file = self.write_env(
            "\n".join(
                [
                    "# reminder settings",
                    "export WHATTODO_DATA_DIR='~/todo'",
                    "WHATTODO_POLL_MINUTES=2.5",
                    "WHATTODO_ENABLE_TIMERS=off",
                    'WHATTODO_BELL="yes"',
                    "WHATTODO_SEED=99",
                ]
            )
        )
        config = load_app_config(env_file)

        self.assertEqual(config.data_dir, "~/todo")
        self.assertEqual(config.poll_interval_minutes, 2.5)
        self.assertFalse(config.enable_timers)
        self.assertTrue(config.enable_bell)
        self.assertEqual(config.seed, 99)

    def test_timezone_defaults_to_host_zone(self) -> None:
        self.assertIsNone(load_app_config(self.write_env("WHATTODO_SEED=1")).timezone)

        config = load_app_config(self.write_env("WHATTODO_TIMEZONE= Europe/Berlin "))
        self.assertEqual(config.timezone, "Europe/Berlin")

    def test_invalid_values_fall_back_with_warnings(self) -> None:
        env_file = self.write_env(
            "\n".join(
                [
                    "WHATTODO_POLL_MINUTES=-1",
                    "WHATTODO_BELL=maybe",
                    "WHATTODO_SEED=abc",
                    "not a setting",
                ]
            )
        )
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            config = load_app_config(env_file)

        self.assertEqual(config.poll_interval_minutes, 5.0)
        self.assertFalse(config.enable_bell)
        self.assertIsNone(config.seed)
        self.assertEqual(stderr.getvalue().count("Warning:"), 4)


if __name__ == "__main__":
    unittest.main()
