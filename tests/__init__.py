"""CallPrep Test Suite.

Test organization mirrors callprep/ structure:
    tests/
    ├── conftest.py          # Shared fixtures
    ├── test_core/           # Config, logging, exceptions, phone
    ├── test_integrations/   # Token, status, device launcher
    └── test_engine/         # Strategies, call service, call log

Markers:
    - @pytest.mark.integration: Tests requiring external services
"""
