"""
Configuration management using Pydantic settings.
Loads from environment variables with validation.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # RPC Endpoints
    ethereum_rpc_url: str = "https://eth.llamarpc.com"
    sepolia_rpc_url: str = "https://ethereum-sepolia-rpc.publicnode.com"
    base_rpc_url: str = "https://mainnet.base.org"
    polygon_rpc_url: str = "https://polygon-rpc.com/"
    rpc_timeout_seconds: float = 10.0

    # Listings are deployed on Sepolia by default
    default_chain: str = "sepolia"

    # App settings
    app_name: str = "Listing Lifecycle Decision Engine"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_rpc_url(self, chain: str) -> str:
        """Get RPC endpoint for a chain."""
        mapping = {
            "ethereum": self.ethereum_rpc_url,
            "sepolia": self.sepolia_rpc_url,
            "base": self.base_rpc_url,
            "polygon": self.polygon_rpc_url,
        }
        return mapping.get(chain.lower(), "")


settings = Settings()
