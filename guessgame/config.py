"""Application configuration using Pydantic Settings."""

from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from guessgame.constants import MAX_GUESSES, VALUE_UPPER_BOUND


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    # Game Configuration
    max_guesses: int = MAX_GUESSES
    value_upper_bound: int = VALUE_UPPER_BOUND

    # Proving
    proving_backend: Literal["mock", "attestation"] = "attestation"
    prover_secret: str = "change-this-prover-secret"

    # Player tokens
    jwt_secret: str = "your-secret-key-change-this-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24

    # Storage
    state_file: str = ""  # empty keeps the round state in memory
    rounds_log_dir: str = "round_logs"

    # Application
    log_level: str = "INFO"
    app_env: str = "dev"
    app_version: str = "1"

    # CORS
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


# Global settings instance
settings = Settings()
