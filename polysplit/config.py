"""Application configuration from environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    polysplit_eps: float = 1e-9
    polysplit_probe_fraction: float = 1.0 / 2048
    polysplit_fill_rule: str = "nonzero"
    polysplit_log_level: str = "warning"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Install a root handler for applications embedding the engine."""
    name = (level or settings.polysplit_log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
