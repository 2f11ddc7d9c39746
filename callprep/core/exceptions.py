"""CallPrep Exception Hierarchy.

All custom exceptions inherit from CallPrepError.

Most failure conditions inside call preparation are NOT raised: missing
credentials, provider outages and malformed phone input all degrade to a
lower capability tier and surface through a ``message`` field. These classes
exist for the few places that do raise (config parsing, call log recording)
and for classifying failures in logs.

Exception Hierarchy:
    CallPrepError (base)
    ├── ConfigurationError
    ├── ValidationError
    ├── IntegrationError
    │   └── ProviderUnavailableError
    └── CallLogError
"""


class CallPrepError(Exception):
    """Base exception for all CallPrep errors."""

    pass


class ConfigurationError(CallPrepError):
    """Configuration is invalid.

    Raised when:
        - A numeric setting cannot be parsed
        - The .env file cannot be read

    Missing credentials are not a ConfigurationError. They reduce the
    dial strategies to the tel: fallback instead.
    """

    pass


class ValidationError(CallPrepError):
    """Data validation failed.

    Raised when:
        - A call request body has a non-integer userId
        - A call log query has an inverted date range
    """

    pass


class IntegrationError(CallPrepError):
    """External integration failed.

    Base class for integration-specific errors.
    """

    pass


class ProviderUnavailableError(IntegrationError):
    """Telephony provider could not be reached.

    Raised when:
        - Health probe times out
        - Health probe returns a non-2xx status
        - Connection is refused or DNS fails

    The status reporter converts this into an Offline status.
    """

    pass


class CallLogError(CallPrepError):
    """Recording a call attempt failed.

    Raised from CallService.record_attempt, which runs after the call has
    already been prepared, so callers may log and ignore it.
    """

    pass
