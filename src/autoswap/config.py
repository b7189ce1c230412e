"""Application configuration using pydantic-settings.

All swap policy constants (sizing fraction, reserve, slippage, fees) live
here so a deployment can tune them through environment variables.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Solana RPC
    # ======================
    sol_rpc_url: str = Field(
        default="https://api.mainnet-beta.solana.com", description="Solana RPC URL"
    )
    rpc_commitment: str = Field(default="confirmed", description="RPC commitment level")
    health_check_timeout: float = Field(
        default=10.0, description="Timeout for the getHealth probe (seconds)"
    )

    # ======================
    # Jupiter
    # ======================
    jupiter_api_url: str = Field(
        default="https://quote-api.jup.ag/v6", description="Jupiter swap API URL"
    )
    jupiter_timeout: float = Field(default=30.0, description="Jupiter HTTP timeout (seconds)")
    jupiter_fee_bps: int = Field(default=0, description="Platform fee in basis points")

    # ======================
    # Swap Policy
    # ======================
    swap_fraction: Decimal = Field(
        default=Decimal("0.05"), description="Share of the native balance traded per swap (5%)"
    )
    sol_reserve: Decimal = Field(
        default=Decimal("0.005"), description="SOL always left in the wallet for fees"
    )
    slippage_bps: int = Field(default=50, description="Slippage tolerance (0.5%)")

    def get_safe_dict(self) -> dict:
        """Return the effective settings for diagnostics."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "rpc": {
                "url": self.sol_rpc_url,
                "commitment": self.rpc_commitment,
                "health_check_timeout": self.health_check_timeout,
            },
            "jupiter": {
                "url": self.jupiter_api_url,
                "timeout": self.jupiter_timeout,
                "fee_bps": self.jupiter_fee_bps,
            },
            "policy": {
                "swap_fraction": str(self.swap_fraction),
                "sol_reserve": str(self.sol_reserve),
                "slippage_bps": self.slippage_bps,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
