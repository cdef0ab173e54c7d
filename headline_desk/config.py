"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- StorageConfig: Store file location and durable-write retries
- LoggingConfig: Logging behavior
- ExportConfig: Export defaults
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml


@dataclass
class StorageConfig:
    """Configuration for the persisted store.

    Attributes:
        path: JSON file holding categories, headlines and id counters
        retries: Extra attempts after a failed durable write
        retry_backoff_seconds: Base delay between attempts (linear backoff)
    """

    path: str = "data/headlines.json"
    retries: int = 2
    retry_backoff_seconds: float = 0.1


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        directory: Directory for the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "headline_desk.jsonl"
    directory: str = "logs"


@dataclass
class ExportConfig:
    """Configuration for exports.

    Attributes:
        default_states: States exported when neither ids nor states are given
        directory: Where the CLI writes export files
    """

    default_states: list[str] = field(default_factory=lambda: ["Approved"])
    directory: str = "exports"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update({k: v for k, v in value.items() if k in data[key]})
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "storage": {
            "path": cfg.storage.path,
            "retries": cfg.storage.retries,
            "retry_backoff_seconds": cfg.storage.retry_backoff_seconds,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
            "directory": cfg.logging.directory,
        },
        "export": {
            "default_states": list(cfg.export.default_states),
            "directory": cfg.export.directory,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        storage=StorageConfig(**data["storage"]),
        logging=LoggingConfig(**data["logging"]),
        export=ExportConfig(**data["export"]),
    )


def get_store_path(cfg: StorageConfig) -> str:
    """Get the store path from the environment or inline config."""
    return os.getenv("HEADLINE_DESK_STORE") or cfg.path
