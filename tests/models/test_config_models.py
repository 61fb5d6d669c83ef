"""Tests for configuration models."""

import pytest
from pydantic import ValidationError

from studyplan_cli.models.config_models import AppConfig, RemoteConfig


def test_defaults():
    config = AppConfig()
    assert config.remote.url == ""
    assert not config.remote.is_configured
    assert config.remote.timeout == 30
    assert config.remote.retry == 3
    assert config.local.db_path is None
    assert config.sync.on_login is True
    assert config.output.color is True


def test_remote_url_trailing_slash_is_stripped():
    remote = RemoteConfig(url=" https://planner.example.test/ ")
    assert remote.url == "https://planner.example.test"
    assert remote.is_configured


def test_negative_retry_rejected():
    with pytest.raises(ValidationError):
        RemoteConfig(retry=-1)
