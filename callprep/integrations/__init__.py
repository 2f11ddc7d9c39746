"""Integrations package - External service connections.

This package handles all communication outside the process:
    - MightyCall (token derivation, status probes)
    - The local device (opening tel:/sip:/https: URIs)

Modules:
    - base: Abstract base class for integrations
    - token: Rolling auth token
    - status: Provider connectivity and capability reporting
    - device: Browser/dialer launcher with clipboard fallback
"""

from callprep.integrations.base import IntegrationBase

__all__ = [
    "IntegrationBase",
]
