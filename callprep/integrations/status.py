"""MightyCall connectivity and capability reporting.

Every status query is computed fresh. Nothing is cached between calls
because connectivity changes between user actions; callers poll on page
load or just before dialing.

Per-invocation flow:
    Unconfigured --(credentials present?)--> Probing --> Connected | Offline

Usage:
    from callprep.integrations.status import StatusReporter

    reporter = StatusReporter(config, tokens)
    status = reporter.get_status()
    if status.capability_level is CapabilityLevel.OFFLINE:
        print(status.message)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import requests  # type: ignore[import-untyped]

from callprep.core.config import Config
from callprep.core.exceptions import ProviderUnavailableError
from callprep.core.logging import get_logger
from callprep.core.phone import normalize_phone
from callprep.integrations.base import IntegrationBase
from callprep.integrations.token import TokenManager

logger = get_logger(__name__)


class CapabilityLevel(Enum):
    """Coarse connectivity tier reported to callers."""

    FULL = "Full"
    LIMITED = "Limited"
    OFFLINE = "Offline"


@dataclass
class IntegrationStatus:
    """Result of a single status query.

    Attributes:
        connected: Whether the provider answered the liveness probe
        capability_level: Full, Limited or Offline
        account_id: Configured account id (empty if none)
        message: Human-readable diagnostic, never empty
    """

    connected: bool
    capability_level: CapabilityLevel
    account_id: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Wire shape for JSON responses."""
        return {
            "connected": self.connected,
            "capabilityLevel": self.capability_level.value,
            "accountId": self.account_id,
            "message": self.message,
        }


class StatusReporter(IntegrationBase):
    """Probes the provider and classifies the integration tier.

    Never raises to its caller and never retries.
    """

    display_name = "MightyCall"

    def __init__(
        self,
        config: Config,
        tokens: Optional[TokenManager] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize status reporter.

        Args:
            config: Configuration with credentials, URLs and probe timeout
            tokens: Token source for the authenticated API probe
            session: HTTP session (defaults to module-level requests)
        """
        self._config = config
        self._tokens = tokens or TokenManager(config)
        self._http = session or requests

    @property
    def _account_id(self) -> str:
        return self._config.mightycall_account_id or ""

    def is_configured(self) -> bool:
        """Check if API key, secret and account id are all present."""
        return self._config.has_credentials

    def health_check(self) -> bool:
        """True only when the integration reports Full capability."""
        return self.get_status().capability_level is CapabilityLevel.FULL

    def get_status(self) -> IntegrationStatus:
        """Probe the provider and report connectivity.

        Returns:
            Fresh IntegrationStatus. Offline when credentials are missing,
            the probe fails, or anything unexpected happens.
        """
        if not self.is_configured():
            missing = self._config.missing_credentials
            self.log_unconfigured(missing)
            return self._offline(
                f"MightyCall credentials not configured: {', '.join(missing)}"
            )

        try:
            self._probe_health()
        except ProviderUnavailableError as e:
            logger.warning(
                f"MightyCall offline: {e}",
                extra={"context": {"url": self._config.mightycall_health_url}},
            )
            return self._offline(str(e))
        except Exception as e:
            logger.error(f"Unexpected status probe failure: {e}", exc_info=True)
            return self._offline(f"Connection error: {e}")

        if self._config.verify_api_access:
            try:
                return self._check_api_access()
            except Exception as e:
                logger.error(f"Unexpected API access probe failure: {e}", exc_info=True)
                return self._limited(f"API access check failed: {e}")

        return IntegrationStatus(
            connected=True,
            capability_level=CapabilityLevel.FULL,
            account_id=self._account_id,
            message="MightyCall integration active",
        )

    def _probe_health(self) -> None:
        """Single bounded GET against the health endpoint.

        Raises:
            ProviderUnavailableError: On timeout, connection failure or non-2xx
        """
        url = self._config.mightycall_health_url
        timeout = self._config.probe_timeout

        try:
            response = self._http.get(url, timeout=timeout)
        except requests.Timeout as e:
            raise ProviderUnavailableError(
                f"Connection timed out after {timeout}s: {e}"
            ) from e
        except requests.RequestException as e:
            raise ProviderUnavailableError(f"Connection error: {e}") from e

        if not 200 <= response.status_code < 300:
            raise ProviderUnavailableError(
                f"MightyCall service unavailable (HTTP {response.status_code})"
            )

    def _check_api_access(self) -> IntegrationStatus:
        """Probe the authenticated calls endpoint to tell Full from Limited.

        The liveness probe has already passed, so every outcome here is
        connected=True.
        """
        token = self._tokens.ensure_valid_token()
        url = f"{self._config.mightycall_api_url.rstrip('/')}/calls"
        headers = {
            "Content-Type": "application/json",
            "X-API-Key": self._config.mightycall_api_key or "",
            "X-Auth-Token": token.value,
        }

        try:
            response = self._http.get(
                url, headers=headers, timeout=self._config.probe_timeout
            )
        except requests.RequestException as e:
            return self._limited(f"API access check failed: {e}")

        if 200 <= response.status_code < 300:
            return IntegrationStatus(
                connected=True,
                capability_level=CapabilityLevel.FULL,
                account_id=self._account_id,
                message="Full API access available",
            )
        if response.status_code == 401:
            return self._limited("Account plan limits API access")
        return self._limited(
            f"Authentication issue detected (HTTP {response.status_code})"
        )

    def _offline(self, message: str) -> IntegrationStatus:
        return IntegrationStatus(
            connected=False,
            capability_level=CapabilityLevel.OFFLINE,
            account_id=self._account_id,
            message=message,
        )

    def _limited(self, message: str) -> IntegrationStatus:
        logger.info(f"MightyCall limited: {message}")
        return IntegrationStatus(
            connected=True,
            capability_level=CapabilityLevel.LIMITED,
            account_id=self._account_id,
            message=message,
        )

    def instructions_for(self, status: IntegrationStatus) -> list[str]:
        """Guidance lines for the user at the given capability tier.

        Args:
            status: Result of get_status()

        Returns:
            Lines suitable for a status panel or CLI output
        """
        lines: list[str] = []
        if status.capability_level is CapabilityLevel.FULL:
            lines.append(f"Status: {status.capability_level.value}")
            lines.append("Click-to-call opens the MightyCall web dialer")
            lines.append("SIP clients can dial the account domain directly")
        elif status.capability_level is CapabilityLevel.LIMITED:
            lines.append(f"Status: {status.capability_level.value} ({status.message})")
            lines.append("Use the MightyCall softphone or mobile app to complete calls")
            lines.append("Direct tel: links remain available")
        else:
            lines.append(f"Status: Offline ({status.message})")
            lines.append("Fallback: direct dial using tel: links")
            lines.append("Or enter the number manually in the MightyCall app")

        if status.account_id:
            lines.append(f"Account: {status.account_id}")
        if self._config.mightycall_main_number:
            support = normalize_phone(self._config.mightycall_main_number)
            lines.append(f"Support: {support.display}")
        return lines
