"""Runtime configuration and logger factory for the review engine.

Values come from process environment variables first and then from the
dotenv files listed in ``Settings.model_config``. Everything is read once
through :func:`load_settings`; tests that tweak the environment call
``load_settings.cache_clear()`` to pick the changes up.

Environment variables
---------------------
REVIEWKIT_ENV            dev | test | prod
LOG_LEVEL                DEBUG .. CRITICAL (case-insensitive)
REVIEWKIT_EDITOR_ROLES   comma-separated roles allowed to edit reviews
REVIEWKIT_PAGE_SIZE      default page size for review-log queries
REVIEWKIT_STORE_DIR      directory of the JSON file store
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_EDITOR_ROLES = "admin,project-manager,project-executive"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def split_roles(raw: str) -> frozenset[str]:
    """Parse a comma-separated role list, dropping blanks."""
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


class Settings(BaseSettings):
    """Engine configuration.

    ``editor_roles_raw`` keeps the string form so it can be set from a single
    environment variable; consumers read the parsed :attr:`editor_roles`.
    """

    environment: EnvName = Field(default="dev", alias="REVIEWKIT_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    editor_roles_raw: str = Field(default=DEFAULT_EDITOR_ROLES, alias="REVIEWKIT_EDITOR_ROLES")
    default_page_size: int = Field(default=10, gt=0, alias="REVIEWKIT_PAGE_SIZE")
    store_dir: Path = Field(default=Path("artifacts") / "store", alias="REVIEWKIT_STORE_DIR")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @property
    def editor_roles(self) -> frozenset[str]:
        return split_roles(self.editor_roles_raw)

    @property
    def is_test(self) -> bool:
        return self.environment == "test"

    def log_level_numeric(self) -> int:
        """Map :attr:`log_level` onto the ``logging`` module constant."""
        return logging.getLevelName(self.log_level)  # type: ignore[no-any-return]


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Build the settings once per process (or per ``cache_clear()``)."""
    return Settings()


settings: Settings = load_settings()


def get_logger(name: str = "reviewkit") -> logging.Logger:
    """Return a non-propagating logger with one stream handler.

    The level is re-read from :func:`load_settings` on every call so a
    changed ``LOG_LEVEL`` applies to loggers fetched afterwards.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(stream)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger


__all__ = [
    "DEFAULT_EDITOR_ROLES",
    "LOG_FORMAT",
    "EnvName",
    "LogLevelName",
    "Settings",
    "get_logger",
    "load_settings",
    "settings",
    "split_roles",
]
