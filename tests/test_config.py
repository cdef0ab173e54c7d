"""Tests for configuration loading and logging setup."""

import json
import logging
from pathlib import Path

from headline_desk.config import AppConfig, LoggingConfig, StorageConfig, get_store_path, load_config
from headline_desk.logging_utils import log_event, setup_logging


def test_load_config_without_path_returns_defaults():
    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.storage.retries == 2
    assert cfg.export.default_states == ["Approved"]


def test_load_config_merges_yaml_over_defaults(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "storage:\n"
        "  path: /srv/headlines.json\n"
        "logging:\n"
        "  level: DEBUG\n"
        "  unknown_key: ignored\n"
        "export:\n"
        "  default_states: [Approved, In Review]\n"
        "extra_section: {a: 1}\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.storage.path == "/srv/headlines.json"
    assert cfg.storage.retries == 2
    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.console is True
    assert cfg.export.default_states == ["Approved", "In Review"]


def test_default_config_is_not_shared_between_loads():
    first = load_config(None)
    first.storage.path = "elsewhere.json"

    assert load_config(None).storage.path == "data/headlines.json"


def test_store_path_env_override(monkeypatch):
    monkeypatch.setenv("HEADLINE_DESK_STORE", "/tmp/override.json")

    assert get_store_path(StorageConfig()) == "/tmp/override.json"


def test_store_path_falls_back_to_config(monkeypatch):
    monkeypatch.delenv("HEADLINE_DESK_STORE", raising=False)

    assert get_store_path(StorageConfig(path="mine.json")) == "mine.json"


def test_setup_logging_writes_jsonl(tmp_path: Path):
    cfg = LoggingConfig(level="INFO", console=False, file=True, format="jsonl", filename="run.jsonl")
    logger = setup_logging(cfg, tmp_path)

    log_event(logging.getLogger("headline_desk.repository"), "Mutation committed", action="create_category")
    for handler in logger.handlers:
        handler.flush()
        handler.close()
    logger.handlers = []

    lines = (tmp_path / "run.jsonl").read_text(encoding="utf-8").strip().split("\n")
    entry = json.loads(lines[-1])
    assert entry["message"] == "Mutation committed"
    assert entry["action"] == "create_category"
    assert entry["logger"] == "headline_desk.repository"
    assert entry["level"] == "INFO"


def test_setup_logging_console_only_has_no_file(tmp_path: Path):
    logger = setup_logging(LoggingConfig(console=True, file=False), tmp_path)

    assert len(logger.handlers) == 1
    assert logger.propagate is False
    assert list(tmp_path.iterdir()) == []


def test_log_event_ignores_missing_logger():
    log_event(None, "nothing happens", key="value")
