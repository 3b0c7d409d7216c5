"""Shape checks for emails and chain addresses.

The ``is_valid_*`` predicates are pure; the ``require_*`` helpers raise
``ValidationError`` naming the field that failed.
"""

import re
from typing import Optional

from tempt_api.services.errors import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_ETH_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
# Base58 alphabet: no 0, O, I or l
_SOL_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


def is_valid_email(email: Optional[str]) -> bool:
    """Return True for a ``local@domain.tld`` shaped string."""
    return bool(email) and _EMAIL_RE.fullmatch(email) is not None


def is_valid_eth_address(address: Optional[str]) -> bool:
    """Return True for ``0x`` followed by exactly 40 hex digits, any case."""
    return bool(address) and _ETH_ADDRESS_RE.fullmatch(address) is not None


def is_valid_sol_address(address: Optional[str]) -> bool:
    """Return True for a 32-44 character base58 string."""
    return bool(address) and _SOL_ADDRESS_RE.fullmatch(address) is not None


def normalize_email(raw: Optional[str]) -> str:
    """Trim and lower-case an email for use as a dedup key."""
    return (raw or "").strip().lower()


def require_email(raw: Optional[str], field: str = "email") -> str:
    """Normalize *raw* and raise ``ValidationError`` unless it is a valid email."""
    email = normalize_email(raw)
    if not is_valid_email(email):
        raise ValidationError(field, "Invalid email address.")
    return email


def optional_email(raw: Optional[str], field: str = "email") -> Optional[str]:
    """Like ``require_email`` but an absent or blank value yields None."""
    if not normalize_email(raw):
        return None
    return require_email(raw, field)


def require_eth_address(raw: Optional[str], field: str = "ethAddress") -> str:
    address = (raw or "").strip()
    if not is_valid_eth_address(address):
        raise ValidationError(field, "Invalid Ethereum address.")
    return address


def require_sol_address(raw: Optional[str], field: str = "solAddress") -> str:
    address = (raw or "").strip()
    if not is_valid_sol_address(address):
        raise ValidationError(field, "Invalid Solana address.")
    return address
