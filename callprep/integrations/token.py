"""Rolling auth token for the MightyCall integration.

The token is an HMAC-SHA256 of ``"{api_key}:{timestamp}"`` keyed by the
account's shared secret. It is derived locally, cached, and re-derived a
safety margin before its nominal lifetime runs out.

Usage:
    from callprep.integrations.token import TokenManager

    tokens = TokenManager(config)
    token = tokens.ensure_valid_token()
    headers = {"X-API-Key": config.mightycall_api_key, "X-Auth-Token": token.value}
"""

import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import Callable, Optional

from callprep.core.config import Config
from callprep.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthToken:
    """A derived auth token.

    Attributes:
        value: Hex digest sent as X-Auth-Token
        issued_at: Epoch seconds when the token was derived
        expires_at: Epoch seconds after which the token must be re-derived
    """

    value: str
    issued_at: float
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TokenManager:
    """Derives and caches the integration auth token.

    No locking: two threads racing through a refresh in the same second
    derive the same value, so the second write is harmless.
    """

    def __init__(self, config: Config, clock: Callable[[], float] = time.time) -> None:
        """Initialize token manager.

        Args:
            config: Configuration holding the API key, secret and lifetime
            clock: Source of epoch seconds (injectable for tests)
        """
        self._config = config
        self._clock = clock
        self._token: Optional[AuthToken] = None

    @property
    def effective_lifetime(self) -> float:
        """Nominal lifetime minus the safety margin, never below one second."""
        return max(self._config.token_lifetime - self._config.token_margin, 1)

    @property
    def has_secret(self) -> bool:
        return bool(self._config.mightycall_secret_key)

    def ensure_valid_token(self) -> AuthToken:
        """Return the cached token, deriving a new one if it has expired.

        Never raises. Without a shared secret the token is derived with an
        empty key; the status reporter is what tells the user about it.

        Returns:
            A token valid at the current clock reading
        """
        now = self._clock()
        token = self._token
        if token is not None and token.is_valid(now):
            return token

        if not self.has_secret:
            logger.warning("Deriving auth token without a shared secret")

        coarse = int(now)
        token = AuthToken(
            value=self.sign(self._config.mightycall_api_key or "", str(coarse)),
            issued_at=now,
            expires_at=now + self.effective_lifetime,
        )
        self._token = token
        logger.debug(
            "Auth token refreshed",
            extra={"context": {"issued_at": coarse, "expires_at": int(token.expires_at)}},
        )
        return token

    def invalidate(self) -> None:
        """Drop the cached token so the next call re-derives it."""
        self._token = None

    def sign(self, *parts: str) -> str:
        """Keyed hash over ``":"``-joined parts using the shared secret.

        Args:
            *parts: Message components

        Returns:
            Hex HMAC-SHA256 digest
        """
        key = (self._config.mightycall_secret_key or "").encode("utf-8")
        message = ":".join(parts).encode("utf-8")
        return hmac.new(key, message, hashlib.sha256).hexdigest()
