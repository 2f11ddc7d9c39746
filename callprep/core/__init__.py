"""Core package - Configuration, logging, exceptions, phone formatting.

This package provides foundational infrastructure used by all other layers.

Modules:
    - config: Environment and configuration management
    - logging: Structured JSON logging
    - exceptions: Custom exception hierarchy
    - phone: Phone number normalization
"""

from callprep.core.exceptions import (
    CallLogError,
    CallPrepError,
    ConfigurationError,
    IntegrationError,
    ProviderUnavailableError,
    ValidationError,
)

__all__ = [
    "CallPrepError",
    "ConfigurationError",
    "ValidationError",
    "IntegrationError",
    "ProviderUnavailableError",
    "CallLogError",
]
