"""Application settings loaded from environment variables and .env."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime configuration for the Component Playground API.

    A single instance is created at process start and handed to create_app();
    nothing else reads the environment directly.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    DATABASE_URL: str = "sqlite:///./playground.db"

    # Identity tokens
    JWT_SECRET: str = "dev-secret"
    JWT_ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_DAYS: int = 7
    AUTH_COOKIE_NAME: str = "auth-token"
    BCRYPT_ROUNDS: int = 12

    # "production" turns on the secure cookie flag
    ENVIRONMENT: str = "development"

    # Completion service
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_TIMEOUT: float = 30.0
    GENERATION_MAX_SECONDS: float = 30.0
    CHAT_HISTORY_LIMIT: int = 10

    # Component versions
    VERSION_SAVE_ATTEMPTS: int = 3

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cookie_max_age(self) -> int:
        """Cookie lifetime in seconds, matching the token expiry."""
        return self.TOKEN_EXPIRE_DAYS * 24 * 60 * 60


@lru_cache
def get_settings() -> Settings:
    """Build settings once per process."""
    return Settings()
