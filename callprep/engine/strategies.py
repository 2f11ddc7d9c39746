"""Dial strategy resolution.

Turns a normalized phone number into an ordered list of ways to place the
call, most automatable first:

    1. web-dialer  - signed MightyCall browser dialer link
    2. sip         - sip:<number>@<account domain> for VoIP softphones
    3. direct-tel  - tel:+<number>[,,<ext>] for the device's own dialer

Every strategy ends in a human action (a click in a browser tab, a
softphone dial, a device dialer), so there is no server-side retry loop.
The caller offers the list in order and the user falls back as needed.

Without credentials the list is the tel: link alone. The resolver never
raises.

Usage:
    from callprep.core.phone import normalize_phone
    from callprep.engine.strategies import StrategyResolver

    resolver = StrategyResolver(config, tokens)
    strategies = resolver.resolve(normalize_phone("(877) 840-6250"), "Jane Doe")
    first_uri = strategies[0].uri
"""

import secrets
import string
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional
from urllib.parse import urlencode

from callprep.core.config import Config
from callprep.core.logging import get_logger
from callprep.core.phone import NormalizedPhone, digits_only, to_e164
from callprep.integrations.token import TokenManager

logger = get_logger(__name__)

DEFAULT_CONTACT_NAME = "Contact"

_CALL_ID_ALPHABET = string.digits + string.ascii_lowercase
_CALL_ID_SUFFIX_LENGTH = 9


class StrategyKind(Enum):
    """How a strategy reaches a dialer."""

    WEB_DIALER = "web-dialer"
    SIP = "sip"
    DIRECT_TEL = "direct-tel"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    StrategyKind.WEB_DIALER: "MightyCall web dialer",
    StrategyKind.SIP: "SIP client",
    StrategyKind.DIRECT_TEL: "Direct phone",
}


@dataclass(frozen=True)
class DialStrategy:
    """One concrete way to place a call.

    Attributes:
        kind: Strategy variant
        uri: https:, sip: or tel: URI handed to the browser/device
        priority: 1 is tried first
    """

    kind: StrategyKind
    uri: str
    priority: int

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "uri": self.uri, "priority": self.priority}


def generate_call_id(prefix: str = "call", clock: Callable[[], float] = time.time) -> str:
    """Process-unique id correlating a prepared call with its logged outcome.

    Millisecond timestamp plus nine random base36 characters. A collision
    only makes a log entry ambiguous; it never changes what gets dialed.

    Args:
        prefix: Leading tag
        clock: Source of epoch seconds

    Returns:
        Id like ``call_1760700000000_k3j9x0q2a``
    """
    suffix = "".join(secrets.choice(_CALL_ID_ALPHABET) for _ in range(_CALL_ID_SUFFIX_LENGTH))
    return f"{prefix}_{int(clock() * 1000)}_{suffix}"


class StrategyResolver:
    """Builds the ordered dial strategy list for a number."""

    def __init__(
        self,
        config: Config,
        tokens: Optional[TokenManager] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize resolver.

        Args:
            config: Account id, domains and fallback business number
            tokens: Signer for web dialer links (shares the config's secret)
            clock: Source of epoch seconds for link timestamps
        """
        self._config = config
        self._tokens = tokens or TokenManager(config, clock=clock)
        self._clock = clock

    @property
    def provider_enabled(self) -> bool:
        """Whether provider-backed strategies can be built."""
        return self._config.has_credentials

    def resolve(
        self,
        phone: NormalizedPhone,
        contact_name: Optional[str] = None,
        extension: Optional[str] = None,
    ) -> list[DialStrategy]:
        """Build strategies for a number, most automatable first.

        Args:
            phone: Normalized number
            contact_name: Shown in the web dialer
            extension: Dialed after a pause on the tel: link

        Returns:
            At least one strategy; the last is always direct-tel
        """
        uris: list[tuple[StrategyKind, str]] = []

        if self.provider_enabled and phone.canonical:
            try:
                uris.append((StrategyKind.WEB_DIALER, self.web_dialer_url(phone, contact_name)))
                sip = self.sip_uri(phone)
                if sip:
                    uris.append((StrategyKind.SIP, sip))
            except Exception as e:
                # Drop to tel: only.
                logger.error(f"Provider link generation failed: {e}", exc_info=True)
                uris = []

        uris.append((StrategyKind.DIRECT_TEL, self.tel_uri(phone, extension)))

        return [
            DialStrategy(kind=kind, uri=uri, priority=i)
            for i, (kind, uri) in enumerate(uris, start=1)
        ]

    def web_dialer_url(self, phone: NormalizedPhone, contact_name: Optional[str] = None) -> str:
        """Signed click-through link to the provider's browser dialer.

        The signature is a keyed hash over ``account:number:timestamp``.
        """
        account_id = self._config.mightycall_account_id or ""
        timestamp = str(int(self._clock() * 1000))
        signature = self._tokens.sign(account_id, phone.canonical, timestamp)

        params = {"to": phone.canonical}
        if self._config.mightycall_main_number:
            params["from"] = digits_only(self._config.mightycall_main_number)
        params["contact"] = contact_name or DEFAULT_CONTACT_NAME
        params["account"] = account_id
        params["sig"] = signature
        params["ts"] = timestamp

        return f"https://{self._config.web_dialer_host}/call?{urlencode(params)}"

    def sip_uri(self, phone: NormalizedPhone) -> Optional[str]:
        """SIP URI on the account domain, or None without an account."""
        domain = self._config.sip_domain
        if not domain or not phone.canonical:
            return None
        return f"sip:{phone.canonical}@{domain}"

    @staticmethod
    def tel_uri(phone: NormalizedPhone, extension: Optional[str] = None) -> str:
        """tel: URI for the device dialer. Always constructible."""
        uri = f"tel:{to_e164(phone.canonical)}"
        extension = (extension or "").strip()
        if extension:
            uri += f",,{extension}"
        return uri
