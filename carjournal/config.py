"""Settings loaded from an optional YAML file and the environment."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from jsonschema import ValidationError as SchemaValidationError
from jsonschema import validate

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV = "CAR_JOURNAL_CONFIG"
DATABASE_ENV = "CAR_JOURNAL_DB"

DEFAULTS: Dict[str, Any] = {
    "database": "car_journal.db",
    "due_soon_km": 1000,
    "due_soon_days": 30,
    "log_level": "WARNING",
}

SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "database": {"type": "string", "minLength": 1},
        "due_soon_km": {"type": "number", "minimum": 0},
        "due_soon_days": {"type": "integer", "minimum": 0},
        "log_level": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        },
    },
}


class Settings:
    """Resolved configuration for one run."""

    def __init__(
        self,
        database: str,
        due_soon_km: float = 1000,
        due_soon_days: int = 30,
        log_level: str = "WARNING",
    ):
        self.database = database
        self.due_soon_km = due_soon_km
        self.due_soon_days = due_soon_days
        self.log_level = log_level


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load and validate a YAML config file. An empty file is an empty config."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error in {path}: {e}") from e

    if data is None:
        return {}
    try:
        validate(instance=data, schema=SCHEMA)
    except SchemaValidationError as e:
        where = ".".join(str(p) for p in e.path)
        suffix = f" (at {where})" if where else ""
        raise ConfigError(f"Invalid config {path}: {e.message}{suffix}") from e
    return data


def load_settings(
    path: Optional[Union[str, Path]] = None, environ: Optional[Dict[str, str]] = None
) -> Settings:
    """
    Resolve settings: defaults, then the config file, then the environment.

    The config file comes from `path`, else $CAR_JOURNAL_CONFIG; without
    either, defaults are used. $CAR_JOURNAL_DB overrides the database path.
    """
    env = os.environ if environ is None else environ
    values = dict(DEFAULTS)

    config_path = path or env.get(CONFIG_ENV)
    if config_path:
        values.update(read_config_file(config_path))
        logger.debug("Loaded config from %s", config_path)

    if env.get(DATABASE_ENV):
        values["database"] = env[DATABASE_ENV]
    values["database"] = os.path.expanduser(values["database"])

    return Settings(**values)
