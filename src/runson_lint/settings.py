"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the runs-on config linter.

    Values are read from ``RUNSON_LINT_*`` environment variables and from a
    ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="RUNSON_LINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Schema source override; the packaged schema is used when unset
    schema_path: Path | None = None

    # Loader safety limits
    max_document_size: int = 5_000_000  # characters
    max_node_count: int = 50_000  # after alias expansion
    max_depth: int = 64
