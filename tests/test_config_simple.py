"""Simplified test for configuration reading."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from clientaddr.configs.config import (
    AppConfig,
    get_app_config,
    get_logging_config,
    get_proxy_config,
)
from clientaddr.configs.system import ProxyConfig


class TestConfigSimple:
    """Test basic configuration functionality."""

    def test_defaults(self):
        config = AppConfig()

        assert config.proxy.trusted_proxies == []
        assert config.proxy.trusted_proxy_header == ""
        assert config.proxy.forwarded_header == "X-Forwarded-For"
        assert config.proxy.trust_forwarded_header is False
        assert config.logging.json_output is True

    def test_config_env_vars_work(self):
        """Test that environment variables work for configuration."""

        env_vars = {
            "CLIENTADDR_PROXY__TRUSTED_PROXIES": '["10.0.0.5", "192.168.0.0/16"]',
            "CLIENTADDR_PROXY__TRUSTED_PROXY_HEADER": "Client-IP",
            "CLIENTADDR_PROXY__TRUST_FORWARDED_HEADER": "true",
            "CLIENTADDR_LOGGING__LEVEL": "DEBUG",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            config = AppConfig()

            assert config.proxy.trusted_proxies == ["10.0.0.5", "192.168.0.0/16"]
            assert config.proxy.trusted_proxy_header == "Client-IP"
            assert config.proxy.trust_forwarded_header is True
            assert config.logging.level == "DEBUG"

    def test_init_kwargs_take_priority(self):
        env_vars = {"CLIENTADDR_PROXY__TRUST_FORWARDED_HEADER": "false"}

        with patch.dict(os.environ, env_vars, clear=False):
            config = AppConfig(proxy=ProxyConfig(trust_forwarded_header=True))

            assert config.proxy.trust_forwarded_header is True

    def test_invalid_value_raises(self):
        env_vars = {"CLIENTADDR_PROXY__TRUST_FORWARDED_HEADER": "sometimes"}

        with patch.dict(os.environ, env_vars, clear=False):
            with pytest.raises(ValidationError):
                AppConfig()

    def test_get_app_config_rereads(self):
        """get_app_config() is not cached, so env changes are visible."""

        assert get_app_config() is not get_app_config()

        with patch.dict(
            os.environ, {"CLIENTADDR_PROXY__FORWARDED_HEADER": "X-Chain"}, clear=False
        ):
            assert get_proxy_config().forwarded_header == "X-Chain"

    def test_get_logging_config(self):
        with patch.dict(
            os.environ, {"CLIENTADDR_LOGGING__JSON_OUTPUT": "false"}, clear=False
        ):
            assert get_logging_config().json_output is False
