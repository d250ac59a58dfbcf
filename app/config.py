"""Coastal Chat configuration — loaded from environment / .env file."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.errors import ConfigError


class RelayConfig(BaseModel):
    """Everything the relay needs to talk to the assistants API."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    assistant_id: str
    base_url: str = "https://api.openai.com/v1"
    beta_header: str = "assistants=v2"
    http_timeout: float = 30.0
    poll_interval: float = 1.0
    max_poll_attempts: int = 60
    fallback_message: str = "Hello, I need help with babysitting services"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="COASTALCHAT_", extra="ignore", populate_by_name=True
    )

    env: str = "development"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8501"]

    # Assistants API credentials keep their conventional names
    openai_api_key: str = Field(
        "", validation_alias=AliasChoices("OPENAI_API_KEY", "COASTALCHAT_OPENAI_API_KEY")
    )
    openai_assistant_id: str = Field(
        "", validation_alias=AliasChoices("OPENAI_ASSISTANT_ID", "COASTALCHAT_OPENAI_ASSISTANT_ID")
    )
    openai_base_url: str = "https://api.openai.com/v1"
    openai_beta: str = "assistants=v2"
    http_timeout: float = 30.0

    # Run polling
    poll_interval: float = 1.0
    max_poll_attempts: int = 60
    fallback_message: str = "Hello, I need help with babysitting services"

    # Chat surface
    relay_url: str = "http://127.0.0.1:8000/api/chat"
    typing_delay: float = 1.0

    @property
    def assistant_configured(self) -> bool:
        return bool(self.openai_api_key and self.openai_assistant_id)

    def relay_config(self) -> RelayConfig:
        """Build the relay configuration, failing fast on missing credentials."""
        if not self.openai_assistant_id:
            raise ConfigError("Assistant ID not configured")
        if not self.openai_api_key:
            raise ConfigError("OpenAI API key not configured")
        return RelayConfig(
            api_key=self.openai_api_key,
            assistant_id=self.openai_assistant_id,
            base_url=self.openai_base_url,
            beta_header=self.openai_beta,
            http_timeout=self.http_timeout,
            poll_interval=self.poll_interval,
            max_poll_attempts=self.max_poll_attempts,
            fallback_message=self.fallback_message,
        )


settings = Settings()
