"""Tests for config file loading and priority."""

import os
import tempfile
from pathlib import Path
import unittest

from otel_cli import config
from otel_cli.errors import ConfigError


def _write_toml(content):
    f = tempfile.NamedTemporaryFile(mode='w', suffix='.toml', delete=False)
    f.write(content)
    f.close()
    return f.name


class TestConfigFileLoading(unittest.TestCase):
    """Test TOML config file loading."""

    def test_load_toml_config_basic(self):
        """Test loading a basic TOML config file."""
        path = _write_toml("""
service_name = "deploy"
kind = "server"
print_span = true

[attributes]
env = "ci"
""")
        try:
            loaded = config.load_toml_config(path)

            self.assertEqual(loaded["service_name"], "deploy")
            self.assertEqual(loaded["kind"], "server")
            self.assertTrue(loaded["print_span"])
            self.assertEqual(loaded["attributes"], {"env": "ci"})
        finally:
            os.unlink(path)

    def test_load_toml_config_missing_file(self):
        """Test that loading a missing optional file returns empty dict."""
        loaded = config.load_toml_config("/nonexistent/file.toml")
        self.assertEqual(loaded, {})

    def test_load_toml_config_missing_required_file(self):
        """Test that a missing file that was named explicitly raises ConfigError."""
        with self.assertRaises(ConfigError):
            config.load_toml_config("/nonexistent/file.toml", required=True)

    def test_load_toml_config_invalid_toml(self):
        """Test that invalid TOML raises ConfigError."""
        path = _write_toml("invalid [toml content")
        try:
            with self.assertRaises(ConfigError):
                config.load_toml_config(path)
        finally:
            os.unlink(path)

    def test_load_toml_config_not_utf8(self):
        """Test that a file that is not UTF-8 raises ConfigError."""
        f = tempfile.NamedTemporaryFile(mode='wb', suffix='.toml', delete=False)
        f.write(b'service_name = "\xff\xfe"')
        f.close()
        try:
            with self.assertRaises(ConfigError):
                config.load_toml_config(f.name)
            with self.assertRaises(ConfigError):
                config.load_config_with_priority(flags={"config_file": f.name}, environ={})
        finally:
            os.unlink(f.name)

    def test_find_config_file_home_directory(self):
        """Test finding the dotfile in the home directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / ".otel-cli.toml").write_text('service_name = "x"\n')

            found = config.find_config_file(home=tmpdir)
            self.assertIsNotNone(found)
            self.assertEqual(Path(found).name, ".otel-cli.toml")

    def test_find_config_file_absent(self):
        """Test that no dotfile means no config file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            self.assertIsNone(config.find_config_file(home=tmpdir))

    def test_file_settings_ignores_unknown_keys(self):
        """Unknown keys are skipped, hyphenated keys are accepted."""
        values = config.file_settings({
            "service-name": "svc",
            "future_setting": 42,
            "attributes": {"n": 1, "flag": True},
        })

        self.assertEqual(values["service_name"], "svc")
        self.assertNotIn("future_setting", values)
        self.assertEqual(values["attributes"], {"n": "1", "flag": "true"})

    def test_file_settings_cannot_name_another_file(self):
        values = config.file_settings({"config_file": "/elsewhere.toml"})
        self.assertEqual(values, {})


class TestConfigPriority(unittest.TestCase):
    """Test configuration loading priority."""

    def setUp(self):
        self.home = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.home.cleanup()

    def test_defaults_when_nothing_supplied(self):
        merged = config.load_config_with_priority(environ={}, home=self.home.name)

        self.assertEqual(merged.service_name, "otel-cli")
        self.assertEqual(merged.span_name, config.DEFAULT_SPAN_NAME)
        self.assertEqual(merged.kind, "client")
        self.assertEqual(merged.attributes, {})
        self.assertFalse(merged.ignore_tp_env)
        self.assertFalse(merged.strict_traceparent)
        self.assertIsNone(merged.endpoint)
        self.assertIsNone(merged.config_file)

    def test_explicit_flags_override_env(self):
        """Test that explicit flags override environment variables."""
        merged = config.load_config_with_priority(
            flags={"service_name": "flag-svc"},
            environ={"OTEL_CLI_SERVICE_NAME": "env-svc"},
            home=self.home.name,
        )

        self.assertEqual(merged.service_name, "flag-svc")

    def test_unset_flags_fall_through(self):
        """Flags left at None do not hide lower sources."""
        merged = config.load_config_with_priority(
            flags={"service_name": None, "ignore_tp_env": None},
            environ={"OTEL_CLI_SERVICE_NAME": "env-svc", "OTEL_CLI_IGNORE_TP_ENV": "true"},
            home=self.home.name,
        )

        self.assertEqual(merged.service_name, "env-svc")
        self.assertTrue(merged.ignore_tp_env)

    def test_env_overrides_config_file(self):
        """Test that environment variables override the config file."""
        path = _write_toml('service_name = "file-svc"\nkind = "server"\n')
        try:
            merged = config.load_config_with_priority(
                flags={"config_file": path},
                environ={"OTEL_CLI_SERVICE_NAME": "env-svc"},
            )

            self.assertEqual(merged.service_name, "env-svc")
            self.assertEqual(merged.kind, "server")
            self.assertEqual(merged.config_file, path)
        finally:
            os.unlink(path)

    def test_attributes_merge_key_wise(self):
        """Flag attributes override matching file keys and keep the rest."""
        path = _write_toml('[attributes]\nbaz = "old"\nqux = "keep"\n')
        try:
            merged = config.load_config_with_priority(
                flags={
                    "config_file": path,
                    "attributes": config.parse_attributes("foo=bar,baz=inga"),
                },
                environ={},
            )

            self.assertEqual(merged.attributes, {"foo": "bar", "baz": "inga", "qux": "keep"})
        finally:
            os.unlink(path)

    def test_env_attributes_sit_between_file_and_flags(self):
        path = _write_toml('[attributes]\na = "file"\nb = "file"\nc = "file"\n')
        try:
            merged = config.load_config_with_priority(
                flags={"config_file": path, "attributes": {"a": "flag"}},
                environ={"OTEL_CLI_ATTRIBUTES": "a=env,b=env"},
            )

            self.assertEqual(merged.attributes, {"a": "flag", "b": "env", "c": "file"})
        finally:
            os.unlink(path)

    def test_default_config_file_loaded_from_home(self):
        path = Path(self.home.name) / ".otel-cli.toml"
        path.write_text('span_name = "from-home"\n')

        merged = config.load_config_with_priority(environ={}, home=self.home.name)

        self.assertEqual(merged.span_name, "from-home")
        self.assertEqual(merged.config_file, str(path))

    def test_config_file_named_in_env(self):
        path = _write_toml('span_name = "from-env-file"\n')
        try:
            merged = config.load_config_with_priority(
                environ={"OTEL_CLI_CONFIG_FILE": path}, home=self.home.name
            )
            self.assertEqual(merged.span_name, "from-env-file")
        finally:
            os.unlink(path)

    def test_explicit_missing_config_file_is_fatal(self):
        with self.assertRaises(ConfigError):
            config.load_config_with_priority(
                flags={"config_file": "/nonexistent/otel-cli.toml"},
                environ={},
                home=self.home.name,
            )

    def test_explicit_unparseable_config_file_is_fatal(self):
        path = _write_toml("service_name = ")
        try:
            with self.assertRaises(ConfigError):
                config.load_config_with_priority(flags={"config_file": path}, environ={})
        finally:
            os.unlink(path)

    def test_numeric_kind_in_config_file(self):
        path = _write_toml("kind = 7\n")
        try:
            merged = config.load_config_with_priority(flags={"config_file": path}, environ={})
            self.assertEqual(merged.kind, "7")
        finally:
            os.unlink(path)

    def test_invalid_value_raises_config_error(self):
        path = _write_toml("timeout = -3\n")
        try:
            with self.assertRaises(ConfigError):
                config.load_config_with_priority(flags={"config_file": path}, environ={})
        finally:
            os.unlink(path)


class TestResolve(unittest.TestCase):

    def test_resolve_does_not_mutate_sources(self):
        file_values = {"attributes": {"a": "1"}}
        flag_values = {"attributes": {"b": "2"}}

        resolved = config.resolve(config.DEFAULTS, file_values, None, flag_values)

        self.assertEqual(resolved.attributes, {"a": "1", "b": "2"})
        self.assertEqual(file_values, {"attributes": {"a": "1"}})
        self.assertEqual(flag_values, {"attributes": {"b": "2"}})
        self.assertEqual(config.DEFAULTS["attributes"], {})

    def test_resolved_config_is_frozen(self):
        resolved = config.resolve(config.DEFAULTS)
        with self.assertRaises(Exception):
            resolved.service_name = "changed"


class TestConfigFromEnv(unittest.TestCase):
    """Test loading configuration from environment variables."""

    def test_load_config_from_env_all_vars(self):
        env_config = config.load_config_from_env({
            "OTEL_CLI_SERVICE_NAME": "svc",
            "OTEL_CLI_SPAN_NAME": "build",
            "OTEL_CLI_KIND": "producer",
            "OTEL_CLI_ATTRIBUTES": "a=1,b=2",
            "OTEL_CLI_IGNORE_TP_ENV": "yes",
            "OTEL_CLI_PRINT_SPAN": "1",
            "OTEL_CLI_STRICT_TRACEPARENT": "on",
            "OTEL_CLI_SAMPLED": "false",
            "OTEL_CLI_ENDPOINT": "http://collector:4318",
            "OTEL_CLI_TIMEOUT": "2.5",
        })

        self.assertEqual(env_config["service_name"], "svc")
        self.assertEqual(env_config["span_name"], "build")
        self.assertEqual(env_config["kind"], "producer")
        self.assertEqual(env_config["attributes"], {"a": "1", "b": "2"})
        self.assertTrue(env_config["ignore_tp_env"])
        self.assertTrue(env_config["print_span"])
        self.assertTrue(env_config["strict_traceparent"])
        self.assertFalse(env_config["sampled"])
        self.assertEqual(env_config["endpoint"], "http://collector:4318")
        self.assertEqual(env_config["timeout"], 2.5)

    def test_load_config_from_env_missing_vars(self):
        """Missing and empty variables don't appear in the result."""
        env_config = config.load_config_from_env({"OTEL_CLI_ENDPOINT": "", "PATH": "/bin"})
        self.assertEqual(env_config, {})

    def test_invalid_boolean_raises(self):
        with self.assertRaises(ConfigError):
            config.load_config_from_env({"OTEL_CLI_PRINT_SPAN": "maybe"})

    def test_invalid_timeout_raises(self):
        with self.assertRaises(ConfigError):
            config.load_config_from_env({"OTEL_CLI_TIMEOUT": "soon"})


class TestParseAttributes(unittest.TestCase):

    def test_pairs(self):
        self.assertEqual(
            config.parse_attributes("foo=bar,baz=inga"), {"foo": "bar", "baz": "inga"}
        )

    def test_value_may_contain_equals(self):
        self.assertEqual(config.parse_attributes("q=a=b"), {"q": "a=b"})

    def test_empty_items_skipped(self):
        self.assertEqual(config.parse_attributes("a=1,,"), {"a": "1"})
        self.assertEqual(config.parse_attributes(""), {})

    def test_missing_equals_raises(self):
        with self.assertRaises(ConfigError):
            config.parse_attributes("foo")

    def test_whitespace_kept_verbatim(self):
        self.assertEqual(
            config.parse_attributes("a= 1, b =2"), {"a": " 1", " b ": "2"}
        )

    def test_empty_key_raises(self):
        with self.assertRaises(ConfigError):
            config.parse_attributes("=bar")


if __name__ == "__main__":
    unittest.main()
