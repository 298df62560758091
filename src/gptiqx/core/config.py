"""Configuration management for GPTIQX."""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings."""

    # LLM gateway (OpenAI-compatible chat completions)
    gateway_api_key: str = Field("", description="Gateway API key")
    LOVABLE_API_KEY: str = Field("", description="Gateway API key (hosted function naming)")
    gateway_base_url: str = Field("https://ai.gateway.lovable.dev/v1", description="Gateway base URL")
    scoring_model: str = Field("google/gemini-2.5-flash", description="Model used for scoring")
    scoring_temperature: float = Field(0.7, description="Sampling temperature for scoring")

    @property
    def effective_gateway_key(self) -> str:
        """Get the effective gateway API key from either field."""
        return self.gateway_api_key or self.LOVABLE_API_KEY

    # Logging
    log_level: str = Field("INFO", description="Logging level")

    # Request settings
    request_timeout: float = Field(60.0, description="Gateway request timeout in seconds")
    max_retries: int = Field(3, description="Maximum retry attempts")
    retry_delay: float = Field(1.0, description="Base retry delay in seconds")
    retry_backoff: float = Field(2.0, description="Retry backoff multiplier")

    # Storage
    cache_dir: str = Field("cache/scoring_cache", description="Scoring response cache directory")
    cache_ttl_hours: int = Field(24, description="Scoring cache time-to-live in hours")
    history_file: str = Field("data/conversations.json", description="Local conversation history")

    # Capability flags
    pro_features: bool = Field(False, description="Show Pro insight cards")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
