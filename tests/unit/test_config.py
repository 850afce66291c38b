"""
Unit Tests for Settings parsing of environment values.
"""

import pytest
from pydantic import ValidationError

from src.core.config import Settings


class TestBooleanFlags:

    @pytest.mark.parametrize("value", ["false", "FALSE", "0", "no", "off"])
    def test_falsy_values_disable_manual_settle(self, monkeypatch, value):
        monkeypatch.setenv("DEMO_MANUAL_SETTLE_ENABLED", value)

        assert Settings(_env_file=None).demo_manual_settle_enabled is False

    @pytest.mark.parametrize("value", ["true", "1", "yes", "on"])
    def test_truthy_values_enable_ipv4_fallback(self, monkeypatch, value):
        monkeypatch.setenv("BAKONG_IPV4_FALLBACK", value)

        assert Settings(_env_file=None).bakong_ipv4_fallback is True

    def test_unrecognized_value_is_rejected(self, monkeypatch):
        monkeypatch.setenv("DEMO_MANUAL_SETTLE_ENABLED", "off-ish")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestOptionalText:

    def test_blank_account_id_is_unset(self, monkeypatch):
        monkeypatch.setenv("BAKONG_ACCOUNT_ID", "   ")

        assert Settings(_env_file=None).bakong_account_id is None
