# tests/test_settings.py

"""Tests for the Settings configuration class."""

import importlib
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pricescout.config.settings import Settings, _logs_dir


class TestLogsDir(unittest.TestCase):
    """Where per-run log files go."""

    def test_env_override_wins(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with patch.dict(os.environ, {"LOGS_DIR": tmp}):
                self.assertEqual(_logs_dir(Path(tmp) / "x"), Path(tmp))

    def test_source_checkout_uses_repo_logs(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)
            (base / "pyproject.toml").write_text("", encoding="utf-8")
            with patch.dict(os.environ, {"LOGS_DIR": ""}):
                self.assertEqual(_logs_dir(base), base / "logs")

    def test_installed_package_uses_cwd(self) -> None:
        """Outside a checkout (site-packages) logs go under the cwd."""
        with tempfile.TemporaryDirectory() as tmp:
            site_packages = Path(tmp) / "site-packages"
            site_packages.mkdir()
            with patch.dict(os.environ, {"LOGS_DIR": ""}), patch(
                "pricescout.config.settings.Path.cwd",
                return_value=Path(tmp) / "work",
            ):
                self.assertEqual(
                    _logs_dir(site_packages), Path(tmp) / "work" / "logs"
                )


class TestSettings(unittest.TestCase):
    """Verify Settings constants and platform registry."""

    def test_env_is_known(self) -> None:
        """ENV is either development or production."""
        self.assertIn(Settings.ENV, ("development", "production"))

    def test_cache_ttl_matches_env(self) -> None:
        """Production keeps results twice as long as development."""
        expected = 7200.0 if Settings.ENV == "production" else 3600.0
        self.assertEqual(Settings.CACHE_TTL, expected)

    def test_port_is_positive_int(self) -> None:
        """PORT must be a positive integer."""
        self.assertIsInstance(Settings.PORT, int)
        self.assertGreater(Settings.PORT, 0)

    def test_allowed_origins_non_empty(self) -> None:
        """At least one CORS origin is configured."""
        self.assertTrue(Settings.ALLOWED_ORIGINS)

    def test_placeholder_image_is_absolute(self) -> None:
        """The placeholder image is an absolute URL."""
        self.assertRegex(Settings.PLACEHOLDER_IMAGE, r"^https?://")
        self.assertTrue(
            Settings.PLACEHOLDER_IMAGE.endswith("/placeholder/60/60")
        )

    def test_user_agent_is_desktop_chrome(self) -> None:
        """USER_AGENT is a fixed desktop Chrome string."""
        self.assertIn("Windows NT", Settings.USER_AGENT)
        self.assertIn("Chrome/", Settings.USER_AGENT)

    def test_browser_args_include_no_sandbox(self) -> None:
        """Chromium launches without the sandbox (container friendly)."""
        self.assertIn("--no-sandbox", Settings.BROWSER_ARGS)

    def test_available_sources_has_five(self) -> None:
        """Registry contains the five supported platforms."""
        self.assertEqual(
            [s["id"] for s in Settings.AVAILABLE_SOURCES],
            ["amazon", "jiomart", "myntra", "ajio", "flipkart"],
        )

    def test_each_source_has_required_keys(self) -> None:
        """Every source must have id, label, and extractor keys."""
        for src in Settings.AVAILABLE_SOURCES:
            with self.subTest(src=src.get("id", "?")):
                self.assertIn("id", src)
                self.assertIn("label", src)
                self.assertIn("extractor", src)

    def test_extractor_paths_resolve(self) -> None:
        """Every dotted extractor path imports to a class."""
        for src in Settings.AVAILABLE_SOURCES:
            with self.subTest(src=src["id"]):
                module_path, class_name = src["extractor"].rsplit(".", 1)
                module = importlib.import_module(module_path)
                cls = getattr(module, class_name)
                self.assertEqual(cls.PLATFORM_ID, src["id"])

    def test_path_constants_are_paths(self) -> None:
        """Path-typed settings are Path instances."""
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.SELECTORS_PATH, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)

    def test_selectors_path_exists(self) -> None:
        """The selectors.json file must exist on disk."""
        self.assertTrue(Settings.SELECTORS_PATH.exists())

    def test_selectors_path_sits_beside_settings_module(self) -> None:
        """selectors.json is found inside the installed package."""
        self.assertEqual(Settings.SELECTORS_PATH.parent.name, "config")
        self.assertEqual(
            Settings.SELECTORS_PATH.parent.parent.name, "pricescout"
        )

    def test_impersonate_browser_is_string(self) -> None:
        """IMPERSONATE_BROWSER must be a non-empty string."""
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(len(Settings.IMPERSONATE_BROWSER) > 0)


if __name__ == "__main__":
    unittest.main()
