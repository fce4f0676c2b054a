"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "BLOGPUB_"


class Settings(BaseModel):
    app_name:              str   = "blogpub"
    db_url:                str   = "sqlite:///blogpub.db"
    autosave_delay:        float = Field(default=15.0, gt=0, description="Seconds of editor inactivity before an autosave")
    probe_fail_open:       bool  = Field(default=False, description="Treat slug lookup failures as 'no conflict'")
    slug_conflict_retries: int   = Field(default=3,  ge=0, description="Re-negotiations after the store rejects a slug")
    storage_dir:           str   = Field(default="storage", description="Base directory for uploaded objects")
    cdn_domain:            str   = Field(default="",        description="Domain of the CDN serving public/ objects")
    page_size:             int   = Field(default=20, ge=1,  description="Blogs per page in published listings")
    log_level:             str   = Field(default="INFO",    description="Root log level")
    log_format:            str   = Field(default="console", pattern="^(console|json)$", description="console or json")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        return yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {path.name}: {e}") from e


def _env_values() -> dict[str, str]:
    """Non-empty BLOGPUB_<FIELD> variables; pydantic coerces them (e.g. "true", "2.5")."""
    values = {}
    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            values[name] = val
    return values


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Build Settings from config.yaml, then BLOGPUB_<FIELD> env vars, then non-None overrides.

    Later sources win. Out-of-range values (autosave_delay <= 0, an unknown
    log_format, ...) fail Settings validation, which is also a ValueError.
    """
    path = Path(CONFIG_FILE)
    data = _read_yaml(path) if path.exists() else {}
    data.update(_env_values())
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
