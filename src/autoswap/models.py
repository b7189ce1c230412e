"""Data model for swap requests and results."""

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from autoswap.errors import CredentialError

# Native SOL: symbol reported in results, and the wrapped SOL mint used by Jupiter
NATIVE_SYMBOL = "SOL"
NATIVE_MINT = "So11111111111111111111111111111111111111112"


@dataclass(frozen=True, repr=False)
class WalletCredential:
    """Public address plus raw secret key bytes of the trading wallet.

    The secret key lives in a mutable buffer so the orchestrator can zero
    it once the request is finished.
    """

    public_address: str
    secret_key: bytearray

    def __post_init__(self):
        if not isinstance(self.secret_key, bytearray):
            object.__setattr__(self, "secret_key", bytearray(self.secret_key))

    def __repr__(self) -> str:
        return f"WalletCredential(public_address={self.public_address!r})"

    def wipe(self) -> None:
        """Overwrite the secret key buffer with zeros."""
        for i in range(len(self.secret_key)):
            self.secret_key[i] = 0

    @classmethod
    def from_dict(cls, data: dict) -> "WalletCredential":
        """Build a credential from ``{publicKey, secretKey}``.

        ``secretKey`` is either a mapping of index to byte value (ordered by
        integer index) or a plain list of byte values.
        """
        if not isinstance(data, dict):
            raise CredentialError("Credential must be a JSON object")

        public_key = data.get("publicKey")
        if not public_key or not isinstance(public_key, str):
            raise CredentialError("Credential is missing publicKey")

        raw_secret = data.get("secretKey")
        if isinstance(raw_secret, dict):
            try:
                ordered = sorted(raw_secret.items(), key=lambda item: int(item[0]))
            except (TypeError, ValueError):
                raise CredentialError("secretKey indexes must be integers")
            values = [value for _, value in ordered]
        elif isinstance(raw_secret, list):
            values = raw_secret
        else:
            raise CredentialError("Credential is missing secretKey")

        if not values:
            raise CredentialError("secretKey is empty")

        for value in values:
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise CredentialError("secretKey values must be bytes (0-255)")

        return cls(public_address=public_key.strip(), secret_key=bytearray(values))

    @classmethod
    def from_json(cls, document: str) -> "WalletCredential":
        """Parse the JSON credential document handed over by the host."""
        try:
            data = json.loads(document)
        except (TypeError, ValueError) as e:
            raise CredentialError(f"Invalid credential JSON: {e}")
        return cls.from_dict(data)


@dataclass(frozen=True)
class SwapRequest:
    """A single swap of native SOL into ``destination_asset``."""

    credential: WalletCredential
    destination_asset: str
    result_channel: Any


@dataclass(frozen=True)
class SwapResult:
    """Outcome of a swap request: either a signature or an error."""

    success: bool
    signature: Optional[str] = None
    amount: Optional[Decimal] = None
    source_asset: str = NATIVE_SYMBOL
    destination_asset: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def succeeded(cls, signature: str, amount: Decimal, destination_asset: str) -> "SwapResult":
        return cls(
            success=True,
            signature=signature,
            amount=amount,
            destination_asset=destination_asset,
        )

    @classmethod
    def failed(cls, reason: str) -> "SwapResult":
        return cls(success=False, error=reason)

    def to_dict(self) -> dict:
        """Convert to the JSON shape delivered to result channels."""
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "signature": self.signature,
            "amount": float(self.amount),
            "inputMint": self.source_asset,
            "outputMint": self.destination_asset,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
