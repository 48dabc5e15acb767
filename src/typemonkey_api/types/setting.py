from __future__ import annotations

from datetime import timedelta
from logging import getLogger
from os import getenv
from pathlib import Path
from typing import Any, Literal, Self

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

logger = getLogger(__name__)


def default_logger() -> dict:
    return {
        "disable_existing_loggers": False,
        "version": 1,
        "handlers": {
            "default": {"class": "logging.StreamHandler", "formatter": "default"}
        },
        "formatters": {
            "default": {
                "format": "%(levelname)s %(name)s:%(funcName)s:%(lineno)d :: %(message)s"
            }
        },
        "root": {"level": "INFO", "handlers": ["default"]},
        "loggers": {"typemonkey_api": {"level": LOG_LEVEL}},
    }


class DBSetting(BaseModel):
    """
    - driver: 'postgresql' for deployments, 'sqlite' for local runs and tests
    - sqlite_path: database file, only used by the sqlite driver
    """

    driver: Literal["postgresql", "sqlite"] = "postgresql"
    username: str = "user"
    password: str = "password"
    host: str = "localhost"
    port: int = 5432
    db: str = "typemonkey"
    sqlite_path: str = "./typemonkey.db"
    pool_size: int = 5
    echo: bool = False
    migration_location: str = "migration"

    @property
    def dsn(self) -> str:
        if self.driver == "sqlite":
            return f"sqlite:///{self.sqlite_path}"
        return f"postgresql://{self.username}:{self.password}@{self.host}:{self.port}/{self.db}"

    @property
    def async_dsn(self) -> str:
        if self.driver == "sqlite":
            return f"sqlite+aiosqlite:///{self.sqlite_path}"
        return f"postgresql+asyncpg://{self.username}:{self.password}@{self.host}:{self.port}/{self.db}"

    @property
    def engine_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {
            "echo": self.echo,
            "pool_pre_ping": True,
        }
        if self.driver == "postgresql":
            options.update(
                pool_size=self.pool_size,
                pool_recycle=3600,
                isolation_level="READ COMMITTED",
            )
        return options


class RedisSetting(BaseModel):
    host: str = "localhost"
    port: int = 6379
    db: int = 0


class CORSSetting(BaseModel):
    allow_origins: list[str] = Field(default_factory=list)


class ServerSetting(BaseModel):
    port: int = 8080


class TokenSetting(BaseModel):
    """
    JWT bearer token
    - secret: signing secret, set it with TM_TOKEN__SECRET
    - access_duration: (seconds)
    """

    secret: str = ""
    algorithm: str = "HS256"
    access_duration: int = int(timedelta(days=7).total_seconds())


class AuthSetting(BaseModel):
    bcrypt_rounds: int = 12


class SessionSetting(BaseModel):
    """
    - sample_every: keystrokes between two wpm / accuracy samples
    """

    sample_every: int = 5


class LeaderboardSetting(BaseModel):
    """
    - cache_expire_time: (seconds)
    """

    cache_expire_time: int = 60
    default_limit: int = 50


class TextSetting(BaseModel):
    """
    - word_file: optional newline separated word list used for generated passages
    """

    word_file: str | None = None


class AdminSetting(BaseModel):
    """
    - api_key: value expected in the 'X-Admin-Key' header, admin routes are
      disabled while it is empty
    """

    api_key: str = ""


class Setting(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TM_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    db: DBSetting = Field(default_factory=DBSetting)
    redis: RedisSetting = Field(default_factory=RedisSetting)
    cors: CORSSetting = Field(default_factory=CORSSetting)
    server: ServerSetting = Field(default_factory=ServerSetting)
    logger: dict = Field(default_factory=default_logger)
    token: TokenSetting = Field(default_factory=TokenSetting)
    auth: AuthSetting = Field(default_factory=AuthSetting)
    session: SessionSetting = Field(default_factory=SessionSetting)
    leaderboard: LeaderboardSetting = Field(default_factory=LeaderboardSetting)
    text: TextSetting = Field(default_factory=TextSetting)
    admin: AdminSetting = Field(default_factory=AdminSetting)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # environment wins over values loaded from the yaml file
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @classmethod
    def from_file(cls, base: str = "setting.yaml") -> Self:
        base_file = Path(base)
        if base_file.exists():
            with base_file.open("r") as f:
                loaded = yaml.safe_load(f) or {}
                base_setting = cls(**loaded)
        else:
            logger.warning("base setting file not found at: %s, using default.", base)
            base_setting = cls()

        return base_setting


if __name__ == "__main__":
    print(yaml.safe_dump(Setting().model_dump()))
