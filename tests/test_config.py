"""
Encoder Configuration Tests
===========================
"""

import logging

import pytest

from gnw_sdk.config import EncoderConfig


class TestEncoderConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GNW_BUILD_REVISION", raising=False)
        monkeypatch.delenv("GNW_ENTRIES_PER_ROW", raising=False)
        config = EncoderConfig.from_env()
        assert config.build_revision is None
        assert config.entries_per_row == 52

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("GNW_BUILD_REVISION", " 4f2a9c1e \n")
        monkeypatch.setenv("GNW_ENTRIES_PER_ROW", "60")
        config = EncoderConfig.from_env()
        assert config.build_revision == "4f2a9c1e"
        assert config.entries_per_row == 60

    @pytest.mark.parametrize("value", ["many", "0", "-3"])
    def test_invalid_entries_per_row(self, monkeypatch, caplog, value):
        monkeypatch.setenv("GNW_ENTRIES_PER_ROW", value)
        with caplog.at_level(logging.WARNING):
            config = EncoderConfig.from_env()
        assert config.entries_per_row == 52
        assert "GNW_ENTRIES_PER_ROW" in caplog.text
