"""Base58 codec for Solana key material."""

import base58


def encode(data) -> str:
    """Encode raw bytes as a base58 string."""
    return base58.b58encode(bytes(data)).decode()


def decode(value: str) -> bytes:
    """Decode a base58 string to raw bytes."""
    return base58.b58decode(value)
