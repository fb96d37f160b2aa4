import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from pydantic import ValidationError

from picoli_mcp.core.config import (
    ConfigError,
    build_config,
    format_config_error,
    get_settings,
    load_config,
)


class TestBuildConfig(unittest.TestCase):

    def test_defaults_to_picoli_site(self):
        config = build_config({"PICOLI_API_KEY": "key-123"})
        self.assertEqual(config.api_key, "key-123")
        self.assertEqual(config.base_url, "https://picoli.site")

    def test_base_url_from_environment(self):
        config = build_config({"PICOLI_API_KEY": "k", "PICOLI_BASE_URL": "http://localhost:8787"})
        self.assertEqual(config.base_url, "http://localhost:8787")

    def test_trailing_slash_is_stripped(self):
        config = build_config({"PICOLI_API_KEY": "k", "PICOLI_BASE_URL": "https://short.example/"})
        self.assertEqual(config.base_url, "https://short.example")

    def test_missing_api_key(self):
        with self.assertRaises(ConfigError) as cm:
            build_config({})
        self.assertEqual(len(cm.exception.issues), 1)
        self.assertIn("PICOLI_API_KEY is required", cm.exception.issues[0])
        self.assertIn("https://picoli.site", cm.exception.issues[0])

    def test_empty_api_key(self):
        with self.assertRaises(ConfigError) as cm:
            build_config({"PICOLI_API_KEY": ""})
        self.assertIn("PICOLI_API_KEY", cm.exception.issues[0])

    def test_invalid_base_url(self):
        with self.assertRaises(ConfigError) as cm:
            build_config({"PICOLI_API_KEY": "k", "PICOLI_BASE_URL": "picoli.site"})
        self.assertIn("PICOLI_BASE_URL", cm.exception.issues[0])

    def test_empty_base_url_is_invalid(self):
        with self.assertRaises(ConfigError):
            build_config({"PICOLI_API_KEY": "k", "PICOLI_BASE_URL": ""})

    def test_reports_every_issue(self):
        with self.assertRaises(ConfigError) as cm:
            build_config({"PICOLI_BASE_URL": "nope"})
        self.assertEqual(len(cm.exception.issues), 2)

    def test_yaml_settings_are_merged(self):
        settings = {
            "base_url": "https://from-yaml.example",
            "request_timeout": 5,
            "log_dir": None,
            "api_paths": {"links": "/v2/links"},
        }
        config = build_config({"PICOLI_API_KEY": "k"}, settings)
        self.assertEqual(config.base_url, "https://from-yaml.example")
        self.assertEqual(config.request_timeout, 5.0)
        self.assertIsNone(config.log_dir)
        self.assertEqual(config.api_paths.links, "/v2/links")
        self.assertEqual(config.api_paths.links_bulk, "/api/links/bulk")

    def test_environment_wins_over_yaml(self):
        config = build_config(
            {"PICOLI_API_KEY": "k", "PICOLI_BASE_URL": "https://env.example"},
            {"base_url": "https://from-yaml.example"},
        )
        self.assertEqual(config.base_url, "https://env.example")

    def test_non_positive_timeout_is_rejected(self):
        with self.assertRaises(ConfigError) as cm:
            build_config({"PICOLI_API_KEY": "k"}, {"request_timeout": 0})
        self.assertIn("request_timeout", cm.exception.issues[0])

    def test_config_is_immutable(self):
        config = build_config({"PICOLI_API_KEY": "k"})
        with self.assertRaises(ValidationError):
            config.api_key = "other"


class TestSettingsFile(unittest.TestCase):

    def setUp(self):
        get_settings.cache_clear()

    def tearDown(self):
        get_settings.cache_clear()

    def test_packaged_settings(self):
        settings = get_settings()
        self.assertEqual(settings["server_name"], "picoli-mcp")
        self.assertEqual(settings["api_paths"]["stats_batch"], "/api/stats/batch")

    def test_custom_settings_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "picoli.yaml"
            path.write_text("request_timeout: 12.5\nserver_name: links\n", encoding="utf-8")
            settings = get_settings(str(path))
        self.assertEqual(settings, {"request_timeout": 12.5, "server_name": "links"})

    def test_missing_file_means_defaults(self):
        self.assertEqual(get_settings("/nonexistent/picoli.yaml"), {})

    def test_malformed_yaml_is_a_config_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "broken.yaml"
            path.write_text("api_paths: [unclosed\n", encoding="utf-8")
            with self.assertRaises(ConfigError) as cm:
                get_settings(str(path))
        self.assertIn("invalid YAML", cm.exception.issues[0])
        self.assertIn("broken.yaml", cm.exception.issues[0])


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        get_settings.cache_clear()

    def test_exits_with_diagnostic_on_stderr(self):
        stderr, stdout = io.StringIO(), io.StringIO()
        with redirect_stderr(stderr), redirect_stdout(stdout):
            with self.assertRaises(SystemExit) as cm:
                load_config({})
        self.assertEqual(cm.exception.code, 1)
        self.assertEqual(stdout.getvalue(), "")
        message = stderr.getvalue()
        self.assertIn("picoli-mcp: Configuration error:", message)
        self.assertIn("  - PICOLI_API_KEY is required", message)
        self.assertIn("Set PICOLI_API_KEY in your MCP server configuration.", message)

    def test_malformed_settings_file_exits_with_diagnostic(self):
        stderr = io.StringIO()
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "broken.yaml"
            path.write_text("server_name: [picoli\n", encoding="utf-8")
            with redirect_stderr(stderr):
                with self.assertRaises(SystemExit) as cm:
                    load_config({"PICOLI_API_KEY": "k", "PICOLI_CONFIG_FILE": str(path)})
        self.assertEqual(cm.exception.code, 1)
        self.assertIn("picoli-mcp: Configuration error:", stderr.getvalue())
        self.assertIn("invalid YAML", stderr.getvalue())

    def test_returns_config(self):
        config = load_config({"PICOLI_API_KEY": "abc"})
        self.assertEqual(config.api_key, "abc")
        self.assertEqual(config.request_timeout, 30.0)
        self.assertEqual(config.server_name, "picoli-mcp")

    def test_format_lists_each_issue(self):
        text = format_config_error(ConfigError(["first", "second"]))
        self.assertIn("  - first\n  - second\n", text)
        self.assertTrue(text.endswith("Get your API key at https://picoli.site"))


if __name__ == "__main__":
    unittest.main()
