"""
Configuration for docmodel.

Uses pydantic-settings for environment variable loading. Settings only
describe how to build a document client and which collection to bind to;
facades themselves take explicit arguments.

Environment variables (prefix DOCMODEL_):
    DOCMODEL_BACKEND: memory | sqlite
    DOCMODEL_DATA_DIR: directory for SQLite files
    DOCMODEL_WAL_MODE: SQLite WAL mode
    DOCMODEL_BUSY_TIMEOUT_MS: SQLite busy timeout
    DOCMODEL_DATABASE_ID / DOCMODEL_COLLECTION_ID: default collection binding
    DOCMODEL_LOG_LEVEL: log level used by the command line tools
    DOCMODEL_LOG_FORMAT: text | json
"""

from __future__ import annotations

import logging
from typing import Literal

import json_log_formatter
from pydantic import Field
from pydantic_settings import BaseSettings

from .collection import Database, DocumentCollection, collection_link


class Settings(BaseSettings):
    """docmodel configuration loaded from environment."""

    # Store backend
    backend: Literal["memory", "sqlite"] = Field(default="memory", description="Document store backend")
    data_dir: str = Field(default="./data", description="Directory for SQLite database files")
    wal_mode: bool = Field(default=True, description="Enable SQLite WAL mode")
    busy_timeout_ms: int = Field(default=5000, ge=0, description="SQLite busy timeout")

    # Default collection binding
    database_id: str = Field(default="default", min_length=1, description="Database id")
    collection_id: str = Field(default="documents", min_length=1, description="Collection id")

    # Logging
    log_level: str = Field(default="INFO", description="Log level for command line tools")
    log_format: Literal["text", "json"] = Field(default="text", description="Log output format")

    model_config = {"env_prefix": "DOCMODEL_"}

    @property
    def database(self) -> Database:
        """Descriptor of the configured database."""
        return Database(id=self.database_id)

    @property
    def collection(self) -> DocumentCollection:
        """Descriptor of the configured collection (never partitioned)."""
        return DocumentCollection(id=self.collection_id)

    @property
    def collection_link(self) -> str:
        """Link of the configured collection."""
        return collection_link(self.database_id, self.collection_id)


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """Configure root logging for command line tools.

    JSON output carries the structured ``extra`` fields of each record.

    Args:
        level: Logging level name
        log_format: "text" or "json"
    """
    formatter: logging.Formatter
    if log_format == "json":
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = [handler]
