"""
Tests for environment-driven configuration.
"""

import logging

import pytest

from did_jwt.config import _read_number


class TestReadNumber:
    """Tests for numeric environment overrides."""

    def test_unset_uses_default(self, monkeypatch):
        """An unset variable yields the default."""
        monkeypatch.delenv("DIDJWT_DEFAULT_VALIDITY_SECONDS", raising=False)
        assert _read_number("DIDJWT_DEFAULT_VALIDITY_SECONDS", 300, int) == 300

    def test_valid_override(self, monkeypatch):
        """A well-formed value overrides the default."""
        monkeypatch.setenv("DIDJWT_HTTP_TIMEOUT", "2.5")
        assert _read_number("DIDJWT_HTTP_TIMEOUT", 10.0, float) == 2.5

    @pytest.mark.parametrize("raw", ["soon", "", "1.5", "0", "-60"])
    def test_invalid_validity_falls_back(self, monkeypatch, caplog, raw):
        """Unparsable or non-positive lifetimes log a warning and use the default."""
        monkeypatch.setenv("DIDJWT_DEFAULT_VALIDITY_SECONDS", raw)
        with caplog.at_level(logging.WARNING, logger="did_jwt.config"):
            assert _read_number("DIDJWT_DEFAULT_VALIDITY_SECONDS", 300, int) == 300
        assert "DIDJWT_DEFAULT_VALIDITY_SECONDS" in caplog.text

    @pytest.mark.parametrize("raw", ["fast", "nan", "inf"])
    def test_invalid_timeout_falls_back(self, monkeypatch, caplog, raw):
        """Unparsable or non-finite timeouts log a warning and use the default."""
        monkeypatch.setenv("DIDJWT_HTTP_TIMEOUT", raw)
        with caplog.at_level(logging.WARNING, logger="did_jwt.config"):
            assert _read_number("DIDJWT_HTTP_TIMEOUT", 10.0, float) == 10.0
        assert "DIDJWT_HTTP_TIMEOUT" in caplog.text
