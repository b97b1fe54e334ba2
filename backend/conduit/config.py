"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - Every field can be overridden by an environment variable of the same name
    - database_url always names an async driver (postgresql:// is upgraded to asyncpg)
    - 1 <= default_page_size <= max_page_size
    - get_settings() is cached (lru_cache): one instance per process

Design Decisions:
    - Defaults target the docker-compose stack; jwt_secret's default is for local use only
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://conduit:conduit@db:5432/conduit"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    # HTTP
    cors_origins: list[str] = ["http://localhost:3000"]
    enable_dev_endpoints: bool = False

    # Listings
    default_page_size: int = 20
    max_page_size: int = 100

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v):
        if isinstance(v, str) and v.startswith("postgresql://"):
            return "postgresql+asyncpg://" + v[len("postgresql://"):]
        return v

    @model_validator(mode="after")
    def check_page_sizes(self):
        if not 1 <= self.default_page_size <= self.max_page_size:
            raise ValueError(
                "default_page_size must be between 1 and max_page_size",
            )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
