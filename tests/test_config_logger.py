"""Tests de la configuration INI et de la mise en place du logging."""

import logging
import logging.handlers

import pytest

from sysinfo_lite.core.config import CONFIG_ENV_VAR, InfoConfig, create_default_config
from sysinfo_lite.core.logger import LOGGER_NAME, InfoLogger, get_logger
from sysinfo_lite.exceptions import ConfigError


class TestInfoConfig:
    def test_defaults_when_file_missing(self, tmp_path):
        config = InfoConfig(str(tmp_path / "absent.ini"))

        assert not config.loaded
        assert config.get_logging_config() == {
            'log_level': 'WARNING',
            'log_file': '',
            'max_log_size': 10485760,
            'backup_count': 5,
            'console': False,
        }
        assert config.get_probe_config() == {'command_timeout': 10}
        assert config.validate() == []

    def test_file_overrides_defaults(self, tmp_path):
        config_file = tmp_path / "config.ini"
        config_file.write_text("[logging]\nlog_level = DEBUG\nconsole = yes\n[probes]\ncommand_timeout = 2\n")

        config = InfoConfig(str(config_file))

        assert config.loaded
        assert config.get('logging', 'log_level') == 'DEBUG'
        assert config.getboolean('logging', 'console') is True
        assert config.getint('probes', 'command_timeout') == 2
        assert config.get('logging', 'backup_count') == '5'

    def test_env_var(self, tmp_path, monkeypatch):
        config_file = tmp_path / "env.ini"
        config_file.write_text("[probes]\ncommand_timeout = 7\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))

        assert InfoConfig().get_probe_config()['command_timeout'] == 7

    def test_malformed_file_keeps_defaults(self, tmp_path):
        config_file = tmp_path / "broken.ini"
        config_file.write_text("this is not an ini file\n")

        config = InfoConfig(str(config_file))

        assert config.get('logging', 'log_level') == 'WARNING'

    def test_invalid_values(self, tmp_path):
        config_file = tmp_path / "config.ini"
        config_file.write_text("[logging]\nlog_level = LOUD\nconsole = maybe\n[probes]\ncommand_timeout = soon\n")

        config = InfoConfig(str(config_file))
        errors = config.validate()

        assert len(errors) == 3
        assert config.getint('probes', 'command_timeout', 10) == 10
        assert config.getboolean('logging', 'console', False) is False
        with pytest.raises(ConfigError):
            config.validate(strict=True)

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "config.ini"

        config = create_default_config(str(path))
        config.set('probes', 'command_timeout', 4)
        config.save()

        assert path.exists()
        assert InfoConfig(str(path)).getint('probes', 'command_timeout') == 4


class TestInfoLogger:
    def test_library_default_is_silent(self):
        package_logger = get_logger()

        assert package_logger.name == LOGGER_NAME
        assert any(isinstance(handler, logging.NullHandler) for handler in package_logger.handlers)

    def test_file_and_console_handlers(self, tmp_path):
        config = InfoConfig(str(tmp_path / "absent.ini"))
        config.set('logging', 'log_file', str(tmp_path / "logs" / "sysinfo.log"))
        config.set('logging', 'console', 'true')
        config.set('logging', 'log_level', 'DEBUG')

        info_logger = InfoLogger(config)
        info_logger.get_logger().info("collecte")

        handlers = info_logger.get_logger().handlers
        assert any(isinstance(handler, logging.handlers.RotatingFileHandler) for handler in handlers)
        assert any(type(handler) is logging.StreamHandler for handler in handlers)
        assert info_logger.get_logger().level == logging.DEBUG
        assert (tmp_path / "logs" / "sysinfo.log").exists()

    def test_configured_once(self, tmp_path):
        config = InfoConfig(str(tmp_path / "absent.ini"))
        config.set('logging', 'console', 'true')

        InfoLogger(config)
        count = len(get_logger().handlers)
        InfoLogger(config)

        assert len(get_logger().handlers) == count

    def test_reset(self, tmp_path):
        config = InfoConfig(str(tmp_path / "absent.ini"))
        config.set('logging', 'console', 'true')

        info_logger = InfoLogger(config)
        info_logger.reset()

        assert all(isinstance(handler, logging.NullHandler) for handler in get_logger().handlers)
