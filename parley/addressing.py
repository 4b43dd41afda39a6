"""Counterparty address helpers.

Addresses arrive from the transport as ``<digits>@c.us`` and from callers in
looser forms such as ``+91 98765 43210``. Everything inside the engine keys on
the digits-only form, so every spelling of one number maps to one thread, one
contact and one in-flight slot.
"""

import re

TRANSPORT_SUFFIX = "@c.us"

_NON_DIGITS = re.compile(r"\D")


def normalize_address(address: str) -> str:
    """Reduce an address to its digits.

    Identifiers without any digits fall back to the trimmed, suffix-free text.
    """
    bare = address.strip().replace(TRANSPORT_SUFFIX, "")
    return _NON_DIGITS.sub("", bare) or bare


def thread_id_for(address: str) -> str:
    """Derive the deterministic thread id for an address."""
    return f"thread_{normalize_address(address)}"


def format_transport_address(address: str, default_country_code: str = "91") -> str:
    """Format an address for sending through the transport.

    Leading ``0`` trunk prefixes are replaced by the default country code and
    bare ten-digit local numbers get it prepended.
    """
    cleaned = _NON_DIGITS.sub("", address)

    if cleaned.startswith("0"):
        cleaned = default_country_code + cleaned[1:]

    if not cleaned.startswith(default_country_code) and len(cleaned) == 10:
        cleaned = default_country_code + cleaned

    return cleaned + TRANSPORT_SUFFIX
