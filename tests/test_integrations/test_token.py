"""Tests for the rolling auth token (callprep/integrations/token.py)."""

import hashlib
import hmac

from callprep.core.config import Config
from callprep.integrations.token import AuthToken, TokenManager


def _config(**kwargs) -> Config:
    defaults = {
        "mightycall_api_key": "test-api-key",
        "mightycall_secret_key": "test-secret",
        "mightycall_account_id": "acct",
    }
    defaults.update(kwargs)
    return Config(**defaults)


class TestTokenCaching:
    """Token is reused inside its window and re-derived after it."""

    def test_same_value_within_window(self, fake_clock):
        tokens = TokenManager(_config(), clock=fake_clock)
        first = tokens.ensure_valid_token()
        fake_clock.advance(1800)
        second = tokens.ensure_valid_token()
        assert second.value == first.value
        assert second is first

    def test_new_value_after_expiry(self, fake_clock):
        tokens = TokenManager(_config(), clock=fake_clock)
        first = tokens.ensure_valid_token()
        fake_clock.advance(3600)
        second = tokens.ensure_valid_token()
        assert second.value != first.value
        assert second.issued_at == fake_clock.now

    def test_refreshes_at_safety_margin_not_nominal_lifetime(self, fake_clock):
        """A token is replaced once lifetime minus margin has elapsed."""
        tokens = TokenManager(_config(token_lifetime=3600, token_margin=60), clock=fake_clock)
        first = tokens.ensure_valid_token()
        assert first.expires_at == first.issued_at + 3540

        fake_clock.advance(3539)
        assert tokens.ensure_valid_token() is first

        fake_clock.advance(1)
        assert tokens.ensure_valid_token() is not first

    def test_margin_larger_than_lifetime_clamped(self, fake_clock):
        tokens = TokenManager(_config(token_lifetime=30, token_margin=60), clock=fake_clock)
        assert tokens.effective_lifetime == 1
        token = tokens.ensure_valid_token()
        assert token.expires_at == fake_clock.now + 1

    def test_invalidate_forces_rederive(self, fake_clock):
        tokens = TokenManager(_config(), clock=fake_clock)
        first = tokens.ensure_valid_token()
        tokens.invalidate()
        second = tokens.ensure_valid_token()
        assert second is not first
        # Same second, same inputs: same value.
        assert second.value == first.value


class TestTokenDerivation:
    """Token value is an HMAC of api key and coarse timestamp."""

    def test_value_is_hmac_of_key_and_seconds(self, fake_clock):
        fake_clock.now = 1_760_000_000.75
        tokens = TokenManager(_config(), clock=fake_clock)
        expected = hmac.new(
            b"test-secret", b"test-api-key:1760000000", hashlib.sha256
        ).hexdigest()
        assert tokens.ensure_valid_token().value == expected

    def test_two_managers_same_second_agree(self, fake_clock):
        """Racing refreshes derive the identical value."""
        a = TokenManager(_config(), clock=fake_clock).ensure_valid_token()
        b = TokenManager(_config(), clock=fake_clock).ensure_valid_token()
        assert a.value == b.value

    def test_missing_secret_still_returns_token(self, fake_clock):
        tokens = TokenManager(_config(mightycall_secret_key=None), clock=fake_clock)
        token = tokens.ensure_valid_token()
        assert isinstance(token, AuthToken)
        assert len(token.value) == 64
        assert tokens.has_secret is False

    def test_missing_everything_still_returns_token(self, fake_clock):
        tokens = TokenManager(Config(), clock=fake_clock)
        assert tokens.ensure_valid_token().value

    def test_sign_joins_parts_with_colon(self):
        tokens = TokenManager(_config())
        expected = hmac.new(b"test-secret", b"acct:18778406250:123", hashlib.sha256).hexdigest()
        assert tokens.sign("acct", "18778406250", "123") == expected

    def test_different_secret_different_token(self, fake_clock):
        a = TokenManager(_config(), clock=fake_clock).ensure_valid_token()
        b = TokenManager(_config(mightycall_secret_key="other"), clock=fake_clock).ensure_valid_token()
        assert a.value != b.value


class TestAuthToken:
    def test_is_valid_strictly_before_expiry(self):
        token = AuthToken(value="v", issued_at=0, expires_at=10)
        assert token.is_valid(9.999)
        assert not token.is_valid(10)
