import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pydantic import ValidationError

from clutchlib.conf import (
    CONFIG_YAML_ENV_VAR,
    DEFAULT_SETTINGS_FILEPATH,
    LOCALNET_SETTINGS_FILEPATH,
    UNITTESTS_SETTINGS_FILEPATH,
    get_global_settings,
    load_settings,
)
from clutchlib.conf.get_settings import _reset_global_settings
from clutchlib.utils.yaml import read_extended_yaml_dict


class SettingsFilesTestCase(unittest.TestCase):
    def test_default(self) -> None:
        settings = load_settings(DEFAULT_SETTINGS_FILEPATH)
        self.assertEqual(settings.NETWORK_NAME, 'default')
        self.assertEqual(settings.graphql_url, 'http://localhost:3000/graphql')
        self.assertEqual(settings.send_transaction_url, 'http://localhost:3000/send-transaction')
        self.assertEqual(settings.TOKEN_REFRESH_MARGIN, 60)

    def test_localnet_extends_default(self) -> None:
        settings = load_settings(LOCALNET_SETTINGS_FILEPATH)
        self.assertEqual(settings.NETWORK_NAME, 'localnet')
        self.assertEqual(settings.REQUEST_TIMEOUT, 10)
        self.assertEqual(settings.GRAPHQL_PATH, '/graphql')
        self.assertEqual(settings.TOKEN_REFRESH_MARGIN, 60)

    def test_unittests_extends_localnet(self) -> None:
        settings = load_settings(UNITTESTS_SETTINGS_FILEPATH)
        self.assertEqual(settings.NETWORK_NAME, 'unittests')
        self.assertEqual(settings.API_URL, 'http://clutch.test')
        self.assertEqual(settings.REQUEST_TIMEOUT, 10)
        self.assertEqual(settings.TOKEN_REFRESH_MARGIN, 30)


class CustomSettingsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_dir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, contents: str) -> str:
        path = self.tmp_dir / name
        path.write_text(contents)
        return str(path)

    def test_extends_bundled_file(self) -> None:
        filepath = self._write('custom.yml', 'extends: unittests.yml\nAPI_URL: https://api.example.com/\n'
                                             'SEND_TRANSACTION_PATH: tx\n')
        settings = load_settings(filepath)
        self.assertEqual(settings.NETWORK_NAME, 'unittests')
        self.assertEqual(settings.API_URL, 'https://api.example.com')
        self.assertEqual(settings.send_transaction_url, 'https://api.example.com/tx')

    def test_extends_sibling_file(self) -> None:
        self._write('base.yml', 'NETWORK_NAME: base\nAPI_URL: http://base\nREQUEST_TIMEOUT: 5\n')
        filepath = self._write('child.yml', 'extends: base.yml\nNETWORK_NAME: child\n')
        settings = load_settings(filepath)
        self.assertEqual(settings.NETWORK_NAME, 'child')
        self.assertEqual(settings.API_URL, 'http://base')
        self.assertEqual(settings.REQUEST_TIMEOUT, 5)

    def test_recursive_extends(self) -> None:
        self._write('a.yml', 'extends: b.yml\n')
        self._write('b.yml', 'extends: a.yml\n')
        with self.assertRaises(ValueError):
            read_extended_yaml_dict(self.tmp_dir / 'a.yml')

    def test_not_a_mapping(self) -> None:
        with self.assertRaises(ValueError):
            read_extended_yaml_dict(self._write('list.yml', '- 1\n- 2\n'))
        with self.assertRaises(ValueError):
            read_extended_yaml_dict(self.tmp_dir / 'missing.yml')

    def test_empty_file(self) -> None:
        self.assertEqual(read_extended_yaml_dict(self._write('empty.yml', '')), {})

    def test_unknown_and_invalid_keys(self) -> None:
        with self.assertRaises(ValidationError):
            load_settings(self._write('extra.yml', 'extends: unittests.yml\nAPI_KEY: secret\n'))
        with self.assertRaises(ValidationError):
            load_settings(self._write('timeout.yml', 'extends: unittests.yml\nREQUEST_TIMEOUT: 0\n'))


class GlobalSettingsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        _reset_global_settings()

    def tearDown(self) -> None:
        _reset_global_settings()

    def test_loaded_from_env(self) -> None:
        with patch.dict(os.environ, {CONFIG_YAML_ENV_VAR: UNITTESTS_SETTINGS_FILEPATH}):
            settings = get_global_settings()
            self.assertEqual(settings.NETWORK_NAME, 'unittests')
            self.assertIs(get_global_settings(), settings)

    def test_default_file(self) -> None:
        env = {k: v for k, v in os.environ.items() if k != CONFIG_YAML_ENV_VAR}
        with patch.dict(os.environ, env, clear=True):
            self.assertEqual(get_global_settings().NETWORK_NAME, 'default')

    def test_cannot_switch_file(self) -> None:
        with patch.dict(os.environ, {CONFIG_YAML_ENV_VAR: UNITTESTS_SETTINGS_FILEPATH}):
            get_global_settings()
        with patch.dict(os.environ, {CONFIG_YAML_ENV_VAR: LOCALNET_SETTINGS_FILEPATH}):
            with self.assertRaises(Exception):
                get_global_settings()
