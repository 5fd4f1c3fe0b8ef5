"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """QR tickets application settings."""

    # App
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 5000
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"

    # SQLite
    database_path: str = "./tickets.db"
    database_timeout: float = 5.0  # seconds to wait on a locked database

    # HTTP
    api_prefix: str = ""  # "/api" for the bundled client layout
    cors_origins: str = "*"  # Comma-separated origins; "*" for dev only
    client_build_dir: str = "client/build"

    # QR rendering
    qr_box_size: int = 10
    qr_border: int = 4

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_testing(self) -> bool:
        return self.app_env == "testing"

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def normalized_api_prefix(self) -> str:
        """API prefix with a leading slash and no trailing slash ("" for root)."""
        prefix = self.api_prefix.strip().rstrip("/")
        if prefix and not prefix.startswith("/"):
            prefix = "/" + prefix
        return prefix


def get_settings() -> Settings:
    """Return a fresh settings instance."""
    return Settings()
