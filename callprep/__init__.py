"""CallPrep Source Package.

Outbound call preparation for the MightyCall telephony integration.

Layers:
    - core: Configuration, logging, exceptions, phone normalization
    - integrations: Token derivation, provider status, device launcher
    - engine: Strategy resolution and the call service
"""

__version__ = "0.1.0"
