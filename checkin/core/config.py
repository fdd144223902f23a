# checkin/core/config.py

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Values come from the environment; docker compose passes the root .env.
    model_config = SettingsConfigDict(extra="ignore")

    # The environment mode: 'local' or 'prod'
    ENV: str = "local"

    # --- Production URLs (for inside Docker) ---
    DATABASE_URL_PROD: str = "postgresql://checkin:checkin@db:5432/checkin"
    REDIS_URL_PROD: str = "redis://redis:6379/0"

    # --- Local Development URLs (for running locally) ---
    DATABASE_URL_LOCAL: str = "sqlite:///./checkin.db"
    REDIS_URL_LOCAL: str = "redis://localhost:6379/0"

    # --- Upstream registration service ---
    REGISTRATION_GRAPHQL: str = "https://registration.dev.hack.gt/graphql"
    REGISTRATION_KEY: str
    REGISTRATION_TIMEOUT: float = 30.0

    # --- Change notifications ---
    # 'memory' keeps subscribers in this process, 'redis' shares the topic
    NOTIFIER_BACKEND: str = "memory"
    NOTIFIER_QUEUE_SIZE: int = 100

    # Other secrets
    JWT_SECRET: str

    CORS_ORIGINS: str = "http://localhost:3000"

    # --- Dynamic Properties ---
    @property
    def DATABASE_URL(self) -> str:
        return (
            self.DATABASE_URL_LOCAL if self.ENV == "local" else self.DATABASE_URL_PROD
        )

    @property
    def REDIS_URL(self) -> str:
        return self.REDIS_URL_LOCAL if self.ENV == "local" else self.REDIS_URL_PROD

    def get_cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from a comma-separated string."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Create a single instance of the settings
settings = Settings()
