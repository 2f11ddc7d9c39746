"""Hands prepared dial URIs to the local browser or phone dialer.

Opens tel:, sip: and https: URIs through the OS URI handler.
Falls back to copying the number to the clipboard when no handler
accepts the URI.

Usage:
    from callprep.integrations.device import DeviceLauncher

    launcher = DeviceLauncher()
    if launcher.open("tel:+18778406250"):
        print("Dialing...")
    else:
        print("Copied to clipboard")
"""

import platform
import shutil
import webbrowser
from urllib.parse import parse_qs, urlsplit

from callprep.core.logging import get_logger, mask_phone
from callprep.integrations.base import IntegrationBase

logger = get_logger(__name__)

# Known softphone executables by platform; any of these registers tel:/sip:
_SOFTPHONE_EXECUTABLES = {
    "Windows": ["MightyCall.exe", "Bria.exe", "BriaSolo.exe"],
    "Darwin": ["MightyCall", "Bria"],
    "Linux": ["mightycall", "bria", "linphone"],
}


class DeviceLauncher(IntegrationBase):
    """Opens dial URIs on this machine.

    Only ever hands a URI to the OS. Placing the call is up to whatever
    application the user has registered for the scheme.
    """

    display_name = "Device dialer"

    def __init__(self) -> None:
        self._softphone: bool | None = None

    def is_configured(self) -> bool:
        """Device launching requires no configuration - always returns True."""
        return True

    def health_check(self) -> bool:
        """True when a known softphone is installed."""
        return self.has_softphone()

    def has_softphone(self) -> bool:
        """Check whether a known softphone is on PATH.

        Result is cached after first check.
        """
        if self._softphone is not None:
            return self._softphone

        for exe in _SOFTPHONE_EXECUTABLES.get(platform.system(), []):
            if shutil.which(exe):
                logger.info(f"Softphone found: {exe}")
                self._softphone = True
                return True

        logger.info("No softphone found on system")
        self._softphone = False
        return False

    def open(self, uri: str) -> bool:
        """Open a dial URI via the OS handler.

        https: links always go to the browser. tel:/sip: links go to the
        registered handler; if that fails, the number is copied to the
        clipboard instead.

        Args:
            uri: A tel:, sip: or https: URI

        Returns:
            True if the URI was handed off, False if the clipboard
            fallback was used (or nothing could be done)
        """
        if not uri:
            logger.warning("Empty dial URI")
            return False

        number = dialable_payload(uri)
        try:
            if webbrowser.open(uri):
                logger.info(
                    "Dial URI opened",
                    extra={"context": {"scheme": uri.split(":", 1)[0], "phone": mask_phone(number)}},
                )
                return True
            logger.warning("No handler accepted dial URI")
        except Exception as e:
            logger.warning(f"Opening dial URI failed, falling back to clipboard: {e}")

        if number and self._copy_to_clipboard(number):
            logger.info(
                "Copied to clipboard (no URI handler)",
                extra={"context": {"phone": mask_phone(number), "fallback": True}},
            )
        return False

    def _copy_to_clipboard(self, text: str) -> bool:
        """Copy text to clipboard using tkinter."""
        try:
            import tkinter as tk

            root = tk.Tk()
            root.withdraw()
            root.clipboard_clear()
            root.clipboard_append(text)
            root.update()
            root.destroy()
            return True
        except Exception as e:
            logger.error(f"Failed to copy to clipboard: {e}")
            return False


def dialable_payload(uri: str) -> str:
    """Extract the number a human would dial from a dial URI.

    Examples:
        >>> dialable_payload("tel:+18778406250,,501")
        '+18778406250,,501'
        >>> dialable_payload("sip:18778406250@acct.mightycall.com")
        '18778406250'
        >>> dialable_payload("https://app.mightycall.com/call?to=18778406250")
        '18778406250'
    """
    scheme, _, rest = uri.partition(":")
    scheme = scheme.lower()
    if scheme == "tel":
        return rest
    if scheme == "sip":
        return rest.split("@", 1)[0]
    if scheme in ("http", "https"):
        query = parse_qs(urlsplit(uri).query)
        return query.get("to", [""])[0]
    return ""
