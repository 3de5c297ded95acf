"""Application settings.

Centralizes configuration (output naming, fill colours, station text) so the
rest of the package can depend on a single settings object rather than
scattered env reads.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables and .env."""

    # Output naming
    output_prefix: str = "processed_"

    # Fill colours (ARGB hex)
    highlight_color: str = "FFFF0000"  # red: changed cells, reshape banner
    header_color: str = "FFFF9900"  # orange: reshape header block

    # Station description written into A2 of the reshape export
    proton_config_path: Path = Path("proton_config.txt")

    log_level: str = "INFO"

    # Load variables from a local .env file when present.
    model_config = SettingsConfigDict(
        env_prefix="DTTOOLS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Singleton settings instance used throughout the application.
settings = Settings()
