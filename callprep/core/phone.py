"""Phone number normalization utility.

Single source of truth for phone formatting used by the strategy resolver,
the call service, and the device launcher.

Canonical form is digit-only and country-code-prefixed for North American
numbers. Anything that is not recognisably North American passes through as
its stripped digits; normalization never rejects input.
"""

from dataclasses import dataclass

NANP_COUNTRY_CODE = "1"


@dataclass(frozen=True)
class NormalizedPhone:
    """A phone number in canonical and display form.

    Attributes:
        canonical: Digits only, "1"-prefixed for 10-digit US numbers
        display: "(AAA) EEE-NNNN" for North American numbers, else the raw input
    """

    canonical: str
    display: str

    @property
    def e164(self) -> str:
        """Canonical number with a leading '+', or empty if there are no digits."""
        return to_e164(self.canonical)

    @property
    def is_north_american(self) -> bool:
        return _is_nanp(self.canonical)


def digits_only(phone: str) -> str:
    """Strip every non-digit character."""
    return "".join(c for c in phone if c.isdigit())


def _is_nanp(digits: str) -> bool:
    return len(digits) == 11 and digits.startswith(NANP_COUNTRY_CODE)


def canonicalize(phone: str) -> str:
    """Return the canonical digit string for a raw phone number.

    Rules, applied in order to the stripped digits:
        1. Exactly 10 digits: prepend country code "1"
        2. Exactly 11 digits starting with "1": use as-is
        3. Anything else: the stripped digits unchanged

    Examples:
        >>> canonicalize("(877) 840-6250")
        '18778406250'
        >>> canonicalize("+1 877.840.6250")
        '18778406250'
        >>> canonicalize("44 20 7946 0958")
        '442079460958'
    """
    digits = digits_only(phone)
    if len(digits) == 10:
        return NANP_COUNTRY_CODE + digits
    return digits


def format_display(canonical: str, fallback: str = "") -> str:
    """Format a canonical number as (AAA) EEE-NNNN.

    Args:
        canonical: Canonical digit string
        fallback: Returned when the number is not North American

    Returns:
        Formatted number, or fallback
    """
    if not _is_nanp(canonical):
        return fallback
    local = canonical[-10:]
    return f"({local[:3]}) {local[3:6]}-{local[6:]}"


def to_e164(canonical: str) -> str:
    """Prefix a canonical number with '+'."""
    return f"+{canonical}" if canonical else ""


def normalize_phone(phone: str) -> NormalizedPhone:
    """Normalize raw phone input into canonical and display forms.

    Pure and idempotent: normalizing a canonical value returns it unchanged.

    Args:
        phone: Phone number in any format (may be empty)

    Returns:
        NormalizedPhone. Display falls back to the raw input when the
        number cannot be formatted.

    Examples:
        >>> normalize_phone("(877) 840-6250")
        NormalizedPhone(canonical='18778406250', display='(877) 840-6250')
        >>> normalize_phone("12345")
        NormalizedPhone(canonical='12345', display='12345')
    """
    phone = phone or ""
    canonical = canonicalize(phone)
    return NormalizedPhone(
        canonical=canonical,
        display=format_display(canonical, fallback=phone),
    )
