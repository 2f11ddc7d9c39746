"""Base classes for external integrations.

All integrations inherit from IntegrationBase, which provides:
    - Health check interface
    - Configuration check
    - A display name for logs and status messages

Integration calls are single attempts; callers report failure as-is.
"""

from abc import ABC, abstractmethod

from callprep.core.logging import get_logger

logger = get_logger(__name__)


class IntegrationBase(ABC):
    """Abstract base class for all external integrations.

    Subclasses must implement:
        - health_check(): Check if service is available
        - is_configured(): Check if credentials are present
    """

    #: Human-readable name used in log lines and status messages
    display_name: str = "integration"

    @abstractmethod
    def health_check(self) -> bool:
        """Check if integration is healthy and available.

        Must not raise.

        Returns:
            True if service is reachable and functioning
        """
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """Check if required credentials/configuration are present.

        Returns:
            True if all required config is present
        """
        pass

    def log_unconfigured(self, missing: list[str]) -> None:
        """Log a missing-credential condition once per call site."""
        logger.info(
            f"{self.display_name} not configured",
            extra={"context": {"missing": missing}},
        )
