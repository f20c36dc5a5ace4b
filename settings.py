import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    config_dir: Path = Path("./config")
    max_concurrent_fetches: int = 4
    # None keeps aiohttp's own client timeout
    asset_fetch_timeout_s: float | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DKC_",
        env_file_encoding="utf-8",
    )

    @field_validator("max_concurrent_fetches")
    @classmethod
    def fetches_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_concurrent_fetches must be at least 1")
        return v

    @field_validator("asset_fetch_timeout_s")
    @classmethod
    def timeout_must_be_positive(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("asset_fetch_timeout_s must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level: {v}")
        return level

    @property
    def labels_yaml_path(self) -> Path:
        return self.config_dir / "labels.yaml"

    @property
    def design_yaml_path(self) -> Path:
        return self.config_dir / "design.yaml"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format=_LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
