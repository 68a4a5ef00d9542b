"""
Address helpers

Members, owner, admin and collaborator endpoints are EVM-style 20-byte hex
addresses. They are stored in EIP-55 checksum form so that the same account
always maps to the same ledger key regardless of the caller's casing.
"""

from typing import Optional

from eth_utils import is_hex_address, to_checksum_address

from .exceptions import InvalidAddressError


def normalize_address(address: str) -> str:
    """
    Return the checksum form of ``address``.

    Raises InvalidAddressError if it is not a 0x-prefixed 40-hex-char string.
    """
    if not isinstance(address, str) or not is_hex_address(address):
        raise InvalidAddressError(f"Invalid address: {address!r}")
    return to_checksum_address(address)


def is_zero_address(address: Optional[str]) -> bool:
    """True for None, the empty string and 0x000…000."""
    if not address:
        return True
    return is_hex_address(address) and int(address, 16) == 0

