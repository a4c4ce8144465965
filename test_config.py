"""
Configuration Tests
===================
Defaults, YAML overrides and validation.
"""

import tempfile
import unittest
from pathlib import Path

from core.errors import ConfigError
from utils.config_loader import Config, ConfigLoader, DEFAULTS


class TestConfig(unittest.TestCase):
    """Test class for the configuration loader."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        Config.reset()
        self._tmp.cleanup()

    def _write(self, text: str) -> Path:
        path = self.dir / "runner.yaml"
        path.write_text(text)
        return path

    def test_defaults_without_file(self):
        loader = ConfigLoader(self.dir / "missing.yaml")
        loader.load_all()

        self.assertIsNone(loader.loaded_from)
        self.assertEqual(loader.get('manifest'), "Cargo.toml")
        self.assertEqual(loader.get('command'), ["cargo", "test"])
        self.assertTrue(loader.get('fail_fast'))
        self.assertIsNone(loader.get('name_pattern'))
        self.assertIsNone(loader.get('log_dir'))

    def test_missing_required_file_raises(self):
        loader = ConfigLoader(self.dir / "missing.yaml")
        with self.assertRaises(ConfigError):
            loader.load_all(required=True)

    def test_yaml_overrides_defaults(self):
        path = self._write(
            "manifest: pyproject.toml\n"
            "command: python -m pytest -q\n"
            "fail_fast: false\n"
        )
        loader = ConfigLoader(path)
        loader.load_all()

        self.assertEqual(loader.loaded_from, path)
        self.assertEqual(loader.get('manifest'), "pyproject.toml")
        self.assertEqual(loader.get('command'), ["python", "-m", "pytest", "-q"])
        self.assertFalse(loader.get('fail_fast'))
        self.assertEqual(loader.get('log_dir'), DEFAULTS['log_dir'])

    def test_empty_file_keeps_defaults(self):
        loader = ConfigLoader(self._write(""))
        loader.load_all()

        self.assertEqual(loader.get('manifest'), "Cargo.toml")

    def test_invalid_values_rejected(self):
        bad_files = [
            "manifest: ''\n",
            "manifest: sub/Cargo.toml\n",
            "command: []\n",
            "command: 42\n",
            "name_pattern: '('\n",
            "fail_fast: maybe\n",
            "log_dir: 5\n",
            "log_dir: ''\n",
            "log_dir: [logs]\n",
            "unknown_key: 1\n",
            "- just\n- a list\n",
            "manifest: [unclosed\n",
        ]
        for text in bad_files:
            with self.subTest(text=text):
                loader = ConfigLoader(self._write(text))
                with self.assertRaises(ConfigError):
                    loader.load_all()

    def test_update_ignores_none(self):
        loader = ConfigLoader(self.dir / "missing.yaml")
        loader.load_all()
        loader.update(manifest=None, command="make check", fail_fast=False)

        self.assertEqual(loader.get('manifest'), "Cargo.toml")
        self.assertEqual(loader.get('command'), ["make", "check"])
        self.assertFalse(loader.get('fail_fast'))

    def test_config_error_is_value_error(self):
        self.assertTrue(issubclass(ConfigError, ValueError))

    def test_singleton(self):
        with self.assertRaises(RuntimeError):
            Config.get('manifest')

        path = self._write("manifest: package.json\n")
        Config.initialize(path)
        self.assertEqual(Config.get('manifest'), "package.json")
        self.assertEqual(Config.get('nope', default="x"), "x")


if __name__ == '__main__':
    unittest.main()
