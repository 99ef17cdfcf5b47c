from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Dict

import yaml

DEFAULT_CONFIG: Dict[str, object] = {
    "store": {
        "backend": "sqlite",
        "db_path": "smartbudget.db",
    },
    "store_backends": {
        "memory": "budget_tracker.stores.memory.MemoryStore",
        "sqlite": "budget_tracker.stores.sqlite.SQLiteStore",
    },
    "default_owner_id": 1,
    "recent_limit": 5,
    "seed_demo_data": False,
    "categories": {
        "expense": [
            "Food & Dining",
            "Transportation",
            "Entertainment",
            "Shopping",
            "Bills & Utilities",
            "Health & Fitness",
            "Travel",
            "Education",
            "Personal Care",
            "Other",
        ],
        "income": [
            "Salary",
            "Freelance",
            "Investment",
            "Gift",
            "Refund",
            "Other",
        ],
    },
    "server": {
        "host": "127.0.0.1",
        "port": 8000,
    },
}

CONFIG_ENV = "BUDGET_TRACKER_CONFIG"
DB_ENV = "BUDGET_TRACKER_DB"
LOG_LEVEL_ENV = "BUDGET_TRACKER_LOG_LEVEL"
DEFAULT_CONFIG_PATH = Path("config.yaml")


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path: Path | str | None = None) -> Dict[str, object]:
    """
    Load the YAML config at *path* (or $BUDGET_TRACKER_CONFIG, or ./config.yaml)
    with defaults filled in. A missing file yields the defaults.
    """
    target = Path(path or os.environ.get(CONFIG_ENV) or DEFAULT_CONFIG_PATH)
    data: Dict[str, object] = {}
    if target.exists():
        with target.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {target} must contain a mapping")
    config = _merge_defaults(data, DEFAULT_CONFIG)

    db_override = os.environ.get(DB_ENV)
    if db_override:
        config["store"]["backend"] = "sqlite"
        config["store"]["db_path"] = db_override
    return config


def save_config(config: Dict[str, object], path: Path | str) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(config, fp, sort_keys=False)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv(LOG_LEVEL_ENV, "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
