"""
Configuration management.

Loads settings from environment variables and .env file.
Prefix: ECHOSYNC_ (provider keys use their conventional unprefixed names).
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ECHOSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    # Provider credentials (immediate-environment source for the vault)
    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    claude_api_key: str = Field(default="", validation_alias="CLAUDE_API_KEY")
    gemini_api_key: str = Field(default="", validation_alias="GEMINI_API_KEY")
    perplexity_api_key: str = Field(default="", validation_alias="PERPLEXITY_API_KEY")

    # OpenAI
    openai_model: str = Field(default="gpt-3.5-turbo", description="OpenAI chat model")
    openai_endpoint: str = Field(default="https://api.openai.com/v1")
    openai_timeout: float = Field(default=20.0, description="Seconds before the call fails")

    # Claude
    claude_model: str = Field(default="claude-3-haiku-20240307", description="Claude model")
    claude_endpoint: str = Field(default="https://api.anthropic.com")
    claude_timeout: float = Field(default=25.0)
    claude_max_tokens: int = Field(default=1024)
    claude_temperature: float = Field(default=0.7)

    # Gemini
    gemini_model: str = Field(default="gemini-1.5-flash", description="Gemini model")
    gemini_endpoint: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    gemini_timeout: float = Field(default=20.0)

    # Perplexity
    perplexity_model: str = Field(default="llama-3.1-sonar-small-128k-online")
    perplexity_endpoint: str = Field(default="https://api.perplexity.ai")
    perplexity_timeout: float = Field(default=25.0)

    # Storage
    data_dir: Path = Field(default=Path("data"), description="Data storage directory")
    credentials_file: str = Field(default="encrypted_credentials.json")
    encryption_key_file: str = Field(default=".encryption_key")

    # Runtime
    environment: str = Field(default="development", description="development | production")
    history_limit: int = Field(default=100, ge=1, description="Max dispatches kept in memory")
    log_to_file: bool = Field(default=True, description="Also write logs under data_dir")

    @property
    def credentials_path(self) -> Path:
        return self.data_dir / self.credentials_file

    @property
    def encryption_key_path(self) -> Path:
        return self.data_dir / self.encryption_key_file

    @property
    def log_path(self) -> Path:
        return self.data_dir / "echosync.log"

    def env_credentials(self) -> dict[str, str]:
        """Provider keys supplied through the environment, keyed by provider id."""
        return {
            "openai": self.openai_api_key,
            "claude": self.claude_api_key,
            "gemini": self.gemini_api_key,
            "perplexity": self.perplexity_api_key,
        }


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
