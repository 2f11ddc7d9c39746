"""Configuration management for CallPrep.

Loads configuration from environment variables and .env file.
Provides validation and sensible defaults.

Every credential is optional. With nothing configured the dialer still
produces a tel: link, and the status reporter reports Offline.

Usage:
    from callprep.core.config import get_config, validate_config

    config = get_config()
    issues = validate_config(config)
    if issues:
        for issue in issues:
            print(f"Config issue: {issue}")
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from callprep.core.exceptions import ConfigurationError


@dataclass
class Config:
    """Application configuration.

    Attributes:
        log_path: Directory for log files
        mightycall_api_key: Provider API key
        mightycall_secret_key: Shared secret used to sign tokens and dialer links
        mightycall_account_id: Provider account identifier
        mightycall_main_number: Business line shown as caller id / support number
        mightycall_provider_domain: Provider's base domain
        mightycall_domain: Account SIP domain (derived from account id when unset)
        mightycall_health_url: Liveness probe endpoint
        mightycall_api_url: Authenticated API base URL
        probe_timeout: Seconds before a status probe gives up
        token_lifetime: Nominal auth token lifetime in seconds
        token_margin: Seconds before nominal expiry at which the token is refreshed
        verify_api_access: Also probe the authenticated API during status checks
        debug: Enable debug mode
    """

    log_path: Path = field(default_factory=lambda: Path.home() / ".callprep" / "logs")

    # Provider credentials
    mightycall_api_key: Optional[str] = None
    mightycall_secret_key: Optional[str] = None
    mightycall_account_id: Optional[str] = None
    mightycall_main_number: Optional[str] = None

    # Provider endpoints
    mightycall_provider_domain: str = "mightycall.com"
    mightycall_domain: Optional[str] = None
    mightycall_health_url: str = "https://api.mightycall.com/health"
    mightycall_api_url: str = "https://api.mightycall.com/v4/api"

    # Tuning
    probe_timeout: float = 5.0
    token_lifetime: int = 3600
    token_margin: int = 60

    # Feature flags
    verify_api_access: bool = False
    debug: bool = False

    @property
    def credentials(self) -> dict[str, Optional[str]]:
        """Credential env var names mapped to their configured values."""
        return {
            "MIGHTYCALL_API_KEY": self.mightycall_api_key,
            "MIGHTYCALL_SECRET_KEY": self.mightycall_secret_key,
            "MIGHTYCALL_ACCOUNT_ID": self.mightycall_account_id,
        }

    @property
    def missing_credentials(self) -> list[str]:
        """Names of credential variables that are unset or empty."""
        return [k for k, v in self.credentials.items() if not v]

    @property
    def has_credentials(self) -> bool:
        """True when API key, secret and account id are all present."""
        return not self.missing_credentials

    @property
    def sip_domain(self) -> Optional[str]:
        """SIP domain for the account, or None when no account is configured."""
        if self.mightycall_domain:
            return self.mightycall_domain
        if self.mightycall_account_id:
            return f"{self.mightycall_account_id}.{self.mightycall_provider_domain}"
        return None

    @property
    def web_dialer_host(self) -> str:
        """Host serving the provider's browser dialer."""
        return f"app.{self.mightycall_provider_domain}"


def load_env_file(path: Path) -> dict[str, str]:
    """Parse .env file.

    Handles:
        - KEY=VALUE format
        - Comments (lines starting with #)
        - Blank lines
        - Quoted values

    Args:
        path: Path to .env file

    Returns:
        Dictionary of environment variables

    Raises:
        ConfigurationError: If the file exists but cannot be read
    """
    env_vars: dict[str, str] = {}

    if not path.exists():
        return env_vars

    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except OSError as e:
        raise ConfigurationError(f"Cannot read env file {path}: {e}") from e

    for line in lines:
        line = line.strip()

        if not line or line.startswith("#"):
            continue

        if "=" in line:
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if value and value[0] in ('"', "'") and value[-1] == value[0]:
                value = value[1:-1]

            if key:
                env_vars[key] = value

    return env_vars


def _get_path(key: str, default: Path, env_vars: dict[str, str]) -> Path:
    """Get path from environment, expanding ~ and resolving."""
    value = os.environ.get(key) or env_vars.get(key)
    if value:
        return Path(value).expanduser().resolve()
    return default


def _get_str(key: str, env_vars: dict[str, str]) -> Optional[str]:
    """Get string from environment."""
    return os.environ.get(key) or env_vars.get(key) or None


def _get_str_default(key: str, default: str, env_vars: dict[str, str]) -> str:
    return _get_str(key, env_vars) or default


def _get_bool(key: str, default: bool, env_vars: dict[str, str]) -> bool:
    """Get boolean from environment."""
    value = os.environ.get(key) or env_vars.get(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _get_float(key: str, default: float, env_vars: dict[str, str]) -> float:
    """Get float from environment.

    Raises:
        ConfigurationError: If the value is not a number
    """
    value = os.environ.get(key) or env_vars.get(key)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from e


def _get_int(key: str, default: int, env_vars: dict[str, str]) -> int:
    """Get integer from environment.

    Raises:
        ConfigurationError: If the value is not an integer
    """
    value = os.environ.get(key) or env_vars.get(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e


DEFAULT_LOG_PATH = Path.home() / ".callprep" / "logs"


def load_config(env_file: Optional[Path] = None) -> Config:
    """Load configuration from environment and .env file.

    Priority:
        1. Environment variables (highest)
        2. .env file
        3. Default values (lowest)

    Args:
        env_file: Path to .env file. Defaults to .env in current directory.

    Returns:
        Loaded configuration

    Raises:
        ConfigurationError: If a numeric setting is malformed
    """
    if env_file is None:
        env_file = Path.cwd() / ".env"

    env_vars = load_env_file(Path(env_file))
    defaults = Config()

    return Config(
        log_path=_get_path("CALLPREP_LOG_PATH", DEFAULT_LOG_PATH, env_vars),
        mightycall_api_key=_get_str("MIGHTYCALL_API_KEY", env_vars),
        mightycall_secret_key=_get_str("MIGHTYCALL_SECRET_KEY", env_vars),
        mightycall_account_id=_get_str("MIGHTYCALL_ACCOUNT_ID", env_vars),
        mightycall_main_number=_get_str("MIGHTYCALL_MAIN_NUMBER", env_vars),
        mightycall_provider_domain=_get_str_default(
            "MIGHTYCALL_PROVIDER_DOMAIN", defaults.mightycall_provider_domain, env_vars
        ),
        mightycall_domain=_get_str("MIGHTYCALL_DOMAIN", env_vars),
        mightycall_health_url=_get_str_default(
            "MIGHTYCALL_HEALTH_URL", defaults.mightycall_health_url, env_vars
        ),
        mightycall_api_url=_get_str_default(
            "MIGHTYCALL_API_URL", defaults.mightycall_api_url, env_vars
        ),
        probe_timeout=_get_float("MIGHTYCALL_PROBE_TIMEOUT", defaults.probe_timeout, env_vars),
        token_lifetime=_get_int("MIGHTYCALL_TOKEN_LIFETIME", defaults.token_lifetime, env_vars),
        token_margin=_get_int("MIGHTYCALL_TOKEN_MARGIN", defaults.token_margin, env_vars),
        verify_api_access=_get_bool("MIGHTYCALL_VERIFY_API_ACCESS", False, env_vars),
        debug=_get_bool("CALLPREP_DEBUG", False, env_vars),
    )


def validate_config(config: Config) -> list[str]:
    """Validate configuration.

    Checks:
        - Log directory exists or can be created
        - Credential set is complete or entirely absent
        - Timeout and token lifetime values are usable

    Args:
        config: Configuration to validate

    Returns:
        List of issues (empty if valid)
    """
    issues: list[str] = []

    try:
        config.log_path.mkdir(parents=True, exist_ok=True)
        if not os.access(config.log_path, os.W_OK):
            issues.append(f"Log directory not writable: {config.log_path}")
    except OSError as e:
        issues.append(f"Cannot create log directory {config.log_path}: {e}")

    # All or none. A partial set silently drops to tel: only, which is
    # almost always a typo in the env file.
    present = [k for k, v in config.credentials.items() if v]
    missing = config.missing_credentials
    if present and missing:
        issues.append(
            f"Partial MightyCall credentials: dialing will fall back to tel: links. "
            f"Have: {', '.join(present)}. Missing: {', '.join(missing)}."
        )

    if config.probe_timeout <= 0:
        issues.append(f"MIGHTYCALL_PROBE_TIMEOUT must be positive, got {config.probe_timeout}")

    if config.token_lifetime <= 0:
        issues.append(f"MIGHTYCALL_TOKEN_LIFETIME must be positive, got {config.token_lifetime}")
    elif config.token_margin >= config.token_lifetime:
        issues.append(
            f"MIGHTYCALL_TOKEN_MARGIN ({config.token_margin}s) is not smaller than "
            f"MIGHTYCALL_TOKEN_LIFETIME ({config.token_lifetime}s); tokens will refresh every second"
        )

    return issues


# Cached config for the composition root
_config: Optional[Config] = None


def get_config() -> Config:
    """Return cached configuration.

    Loads configuration on first call, returns cached version thereafter.
    Services take a Config in their constructor; only the entry point
    should call this.

    Returns:
        Application configuration
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset cached configuration.

    Used primarily for testing.
    """
    global _config
    _config = None
