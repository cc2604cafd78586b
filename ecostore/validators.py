"""Validation utilities for EcoStore configuration and storage files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .config import EcoStoreConfig
from .domain.checks import is_number
from .domain.cooldowns import COOLDOWN_NAMES

GUILD_SCOPED_LISTS = ("shop", "currencies")
MEMBER_NUMBERS = ("money", "bank")
MEMBER_LISTS = ("inventory", "history")


def validate_config(config: EcoStoreConfig) -> list[str]:
    """Return list of problems discovered in ``config``."""
    errors: list[str] = []
    storage = config.storage
    if storage.backend not in ("json", "sqlalchemy"):
        errors.append(f"Unsupported storage backend '{storage.backend}'.")
    if storage.backend == "json":
        if not storage.path:
            errors.append("JSON storage requires a file path.")
        elif Path(storage.path).suffix != ".json":
            errors.append(f"Storage file '{storage.path}' should have a .json extension.")
    if storage.backend == "sqlalchemy" and not storage.resolve_dsn():
        errors.append("SQLAlchemy storage requires a DSN.")

    if config.cache.max_age < 0:
        errors.append("Cache 'max_age' cannot be negative.")
    if config.cache.remote_timeout <= 0:
        errors.append("Cache 'remote_timeout' must be positive.")
    return errors


def validate_storage_file(path: str | Path) -> list[str]:
    """Validate a storage JSON file and return a list of errors."""
    path = Path(path)
    if not path.exists():
        return [f"Storage file '{path}' does not exist."]
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        return [f"Storage file '{path}' is not valid JSON: {exc.msg} (line {exc.lineno})."]
    return validate_storage_dict(data)


def validate_storage_dict(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return ["Storage root must be a JSON object."]

    errors: list[str] = []
    for guild_id, guild in data.items():
        if not isinstance(guild, dict):
            errors.append(f"Guild '{guild_id}' must be an object.")
            continue
        for key, value in guild.items():
            if key in GUILD_SCOPED_LISTS:
                if not isinstance(value, list):
                    errors.append(f"Guild '{guild_id}' {key} must be an array.")
                continue
            if key == "settings":
                if not isinstance(value, dict):
                    errors.append(f"Guild '{guild_id}' settings must be an object.")
                continue
            errors.extend(_validate_member(f"{guild_id}.{key}", value))
    return errors


def _validate_member(where: str, record: Any) -> list[str]:
    if not isinstance(record, dict):
        return [f"Member '{where}' must be an object."]

    errors: list[str] = []
    for name in MEMBER_NUMBERS:
        if name in record and record[name] is not None and not is_number(record[name]):
            errors.append(f"'{where}.{name}' must be a number, found {type(record[name]).__name__}.")

    for name in MEMBER_LISTS:
        items = record.get(name)
        if items is None:
            continue
        if not isinstance(items, list):
            errors.append(f"'{where}.{name}' must be an array.")
            continue
        for idx, entry in enumerate(items, start=1):
            if not isinstance(entry, dict):
                errors.append(f"'{where}.{name}' entry #{idx} must be an object.")
                continue
            if not isinstance(entry.get("id"), int) or isinstance(entry.get("id"), bool):
                errors.append(f"'{where}.{name}' entry #{idx} must define an integer 'id'.")
            if not isinstance(entry.get("name"), str):
                errors.append(f"'{where}.{name}' entry #{idx} must define a 'name'.")

    cooldowns = record.get("cooldowns")
    if cooldowns is not None:
        if not isinstance(cooldowns, dict):
            errors.append(f"'{where}.cooldowns' must be an object.")
        else:
            for name, value in cooldowns.items():
                if name not in COOLDOWN_NAMES:
                    errors.append(f"'{where}.cooldowns' has unknown cooldown '{name}'.")
                elif not is_number(value):
                    errors.append(f"'{where}.cooldowns.{name}' must be a timestamp.")
    return errors


__all__ = ["validate_config", "validate_storage_dict", "validate_storage_file"]
