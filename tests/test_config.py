"""Tests for switchyard.config: RouterConfig defaults and immutability."""

import dataclasses

import pytest

from switchyard.config import DEFAULT_CONFIG, RouterConfig


class TestRouterConfig:
    def test_defaults(self) -> None:
        config = RouterConfig()
        assert config.not_found_body == "Not found"
        assert config.not_found_status == 404
        assert config.internal_error_body == "Internal Server Error"
        assert config.internal_error_status == 500
        assert config.content_type.startswith("text/plain")

    def test_default_config_is_default_instance(self) -> None:
        assert DEFAULT_CONFIG == RouterConfig()

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.not_found_status = 410  # type: ignore[misc]

    def test_override(self) -> None:
        config = RouterConfig(not_found_body="Gone", not_found_status=410)
        assert config.not_found_body == "Gone"
        assert config.not_found_status == 410
        assert config.internal_error_status == 500
