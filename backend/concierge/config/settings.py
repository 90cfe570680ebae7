# /concierge/config/settings.py

import sys
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "move_concierge"
    max_pool_size: int = 10
    min_pool_size: int = 1
    mongo_transactions: bool = False  # needs a replica set

    # Redis
    redis_url: str = "redis://localhost:6379"

    # LLM provider
    openai_api_key: str | None = None
    llm_model: str = "gpt-4o"
    llm_max_tokens: int = 1024
    llm_temperature: float = 0.7
    llm_timeout_seconds: float = 25.0

    # Chat turn behaviour
    chat_rate_limit_max: int = 10
    chat_rate_limit_window_seconds: int = 60
    rate_limit_backend: str = Field(default="memory", pattern="^(memory|redis)$")
    pitch_match_threshold: int = 2
    max_message_length: int = 2000
    max_history_messages: int = 10

    # Persistence
    task_batch_size: int = 500

    # Outbound hooks
    notification_webhook_url: str | None = None
    alerting_webhook_url: str | None = None

    # Security
    api_key: str | None = None

    # Deployment
    environment: str = "development"
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    workers: int = 2
    cors_allowed_origins: str = "*"

    # App Metadata & Limits
    api_version: str = "v1"
    ip_rate_limit_per_minute: int = 120
    request_deadline_seconds: float = 30.0

    # ---------------- Validators ---------------- #

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def normalise_cors_allowed_origins(cls, v):
        """Accepts either a list or a comma-separated string and stores the comma form."""
        if isinstance(v, (list, tuple)):
            return ",".join(str(origin).strip() for origin in v if str(origin).strip())
        if isinstance(v, str):
            return ",".join(origin.strip() for origin in v.split(",") if origin.strip())
        return v

    @field_validator("pitch_match_threshold")
    @classmethod
    def pitch_threshold_must_be_positive(cls, v):
        if v < 1:
            raise ValueError("PITCH_MATCH_THRESHOLD must be at least 1")
        return v

    @field_validator("task_batch_size")
    @classmethod
    def batch_size_within_store_limit(cls, v):
        if not 1 <= v <= 500:
            raise ValueError("TASK_BATCH_SIZE must be between 1 and 500")
        return v

    @property
    def cors_origins(self) -> list[str]:
        return [origin for origin in self.cors_allowed_origins.split(",") if origin]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def validate_environment(settings_obj: Settings):
    try:
        if settings_obj.environment == "production":
            if not settings_obj.openai_api_key:
                raise ValueError("OPENAI_API_KEY is required in production")
            if settings_obj.rate_limit_backend == "memory" and settings_obj.workers > 1:
                print("--- [WARNING] In-memory chat rate limiting is per worker; set RATE_LIMIT_BACKEND=redis to share counters")
        elif not settings_obj.openai_api_key:
            print("--- [WARNING] OPENAI_API_KEY is not set; chat turns will return a non-retryable error")

        return settings_obj

    except Exception as e:
        print(f"--- [ERROR] Environment validation failed: {e}")
        sys.exit(1)


settings = Settings()
validate_environment(settings)
