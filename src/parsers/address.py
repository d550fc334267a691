"""Mint address sanity checks shared by providers and the scan endpoint."""

from src.parsers.exceptions import InvalidAddressError

# Solana addresses are base58-encoded 32-byte keys: 32-44 characters
MIN_MINT_ADDRESS_LEN = 32
MAX_MINT_ADDRESS_LEN = 44


def is_valid_mint_length(address: str) -> bool:
    return MIN_MINT_ADDRESS_LEN <= len(address) <= MAX_MINT_ADDRESS_LEN


def ensure_mint_address(address: str) -> str:
    """Reject empty or too-short identifiers before hitting any upstream."""
    if not address or len(address) < MIN_MINT_ADDRESS_LEN:
        raise InvalidAddressError("Invalid mint address format")
    return address
