from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HF_MODEL_URL = (
    "https://api-inference.huggingface.co/models/bhadresh-savani/distilbert-base-uncased-emotion"
)
DEV_JWT_SECRET = "dev-secret-change-me"


@dataclass(frozen=True)
class HuggingFaceCredentials:
    """Everything the emotion classifier needs to call the inference API."""

    api_key: str
    model_url: str = DEFAULT_HF_MODEL_URL
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class GroqCredentials:
    """Everything the suggestion generator needs to call Groq."""

    api_key: str
    model: str = "llama-3.3-70b-versatile"
    timeout_seconds: float = 10.0
    max_tokens: int = 150
    temperature: float = 0.7


class Settings(BaseSettings):
    # App environment
    env: str = Field(default="development", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    cors_origins: List[str] = Field(default=["*"], alias="CORS_ORIGINS")

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./dev.db", alias="DATABASE_URL")

    # Auth
    jwt_secret_key: str = Field(default=DEV_JWT_SECRET, alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expire_minutes: int = Field(default=60 * 24 * 7, alias="JWT_EXPIRE_MINUTES")  # 7 days

    # Emotion classification (Hugging Face inference API)
    hf_api_key: Optional[str] = Field(default=None, alias="HF_API_KEY")
    hf_model_url: str = Field(default=DEFAULT_HF_MODEL_URL, alias="HF_MODEL_URL")

    # Coping suggestions (Groq)
    groq_api_key: Optional[str] = Field(default=None, alias="GROQ_API_KEY")
    groq_model: str = Field(default="llama-3.3-70b-versatile", alias="GROQ_MODEL")
    suggestion_max_tokens: int = Field(default=150, alias="SUGGESTION_MAX_TOKENS")
    suggestion_temperature: float = Field(default=0.7, alias="SUGGESTION_TEMPERATURE")

    # Shared upper bound for each outbound AI call
    ai_timeout_seconds: float = Field(default=10.0, alias="AI_TIMEOUT_SECONDS")

    # Logging configuration used by mindjournal.logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    console_log_level: str = Field(default="INFO", alias="CONSOLE_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def classifier_credentials(self) -> Optional[HuggingFaceCredentials]:
        key = (self.hf_api_key or "").strip()
        if not key:
            return None
        return HuggingFaceCredentials(
            api_key=key,
            model_url=self.hf_model_url,
            timeout_seconds=self.ai_timeout_seconds,
        )

    def generator_credentials(self) -> Optional[GroqCredentials]:
        key = (self.groq_api_key or "").strip()
        if not key:
            return None
        return GroqCredentials(
            api_key=key,
            model=self.groq_model,
            timeout_seconds=self.ai_timeout_seconds,
            max_tokens=self.suggestion_max_tokens,
            temperature=self.suggestion_temperature,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
