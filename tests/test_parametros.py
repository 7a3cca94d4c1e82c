"""Tests de configuracion desde el entorno."""

from __future__ import annotations

import os
import unittest
from pathlib import Path
from unittest import mock

import parametros
from parametros import (
    BACKEND_DATA_DIR,
    DEFAULT_POLL_INTERVAL_MS,
    get_app_id,
    get_initial_auth_token,
    load_backend_config,
)


class BackendConfigTests(unittest.TestCase):
    """Descriptor del backend: ausente, invalido o completo."""

    def test_missing_or_empty_config_means_no_backend(self) -> None:
        self.assertIsNone(load_backend_config(""))
        self.assertIsNone(load_backend_config("{}"))
        self.assertIsNone(load_backend_config("[1, 2]"))

    def test_invalid_json_is_logged_and_ignored(self) -> None:
        with self.assertLogs("parametros", level="WARNING"):
            self.assertIsNone(load_backend_config("{no json"))

    def test_full_config(self) -> None:
        config = load_backend_config(
            '{"data_dir": "/tmp/taller", "token_secret": "abc", "poll_interval_ms": 250}'
        )
        assert config is not None
        self.assertEqual(config.data_dir, Path("/tmp/taller"))
        self.assertEqual(config.token_secret, "abc")
        self.assertEqual(config.poll_interval_ms, 250)

    def test_defaults_and_minimum_poll_interval(self) -> None:
        config = load_backend_config('{"token_secret": "abc", "poll_interval_ms": 5}')
        assert config is not None
        self.assertEqual(config.data_dir, BACKEND_DATA_DIR)
        self.assertEqual(config.poll_interval_ms, 100)

        config = load_backend_config('{"token_secret": "abc", "poll_interval_ms": "rapido"}')
        assert config is not None
        self.assertEqual(config.poll_interval_ms, DEFAULT_POLL_INTERVAL_MS)

    def test_config_is_read_from_environment(self) -> None:
        with mock.patch.dict(
            os.environ,
            {parametros.BACKEND_CONFIG_ENV: '{"data_dir": "datos"}'},
        ):
            config = load_backend_config()
        assert config is not None
        self.assertEqual(config.data_dir, Path("datos"))


class EnvironmentValuesTests(unittest.TestCase):
    def test_app_id_defaults_when_missing(self) -> None:
        with mock.patch.dict(os.environ, {parametros.APP_ID_ENV: "  "}):
            self.assertEqual(get_app_id(), "default-app-id")
        with mock.patch.dict(os.environ, {parametros.APP_ID_ENV: "taller-centro"}):
            self.assertEqual(get_app_id(), "taller-centro")

    def test_initial_token_is_stripped(self) -> None:
        with mock.patch.dict(os.environ, {parametros.INITIAL_AUTH_TOKEN_ENV: " uid.sig "}):
            self.assertEqual(get_initial_auth_token(), "uid.sig")


if __name__ == "__main__":
    unittest.main()
