"""
Configuration for bashfs.

Settings live in a YAML file, either under a top-level ``bashfs:`` key or at
the document root. A missing or unreadable file falls back to defaults.
"""

import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


DEFAULT_CONFIG_PATH = "bashfs.yaml"

logger = logging.getLogger(__name__)


@dataclass
class BashfsConfig:
    """Library and CLI settings."""
    encoding: str = "utf-8"              # Text encoding for write/read helpers
    audit_log: Optional[str] = None      # JSONL audit trail, disabled when None
    log_level: str = "WARNING"           # Only applied by the CLI

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BashfsConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> BashfsConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        The loaded BashfsConfig, or defaults if the file is missing or broken
    """
    path = Path(config_path)
    if not path.exists():
        return BashfsConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Cannot load config %s, using defaults: %s", path, e)
        return BashfsConfig()

    if not isinstance(data, dict):
        logger.warning("Config %s is not a mapping, using defaults", path)
        return BashfsConfig()

    section = data.get("bashfs", data)
    if not isinstance(section, dict):
        logger.warning("Config %s has a malformed 'bashfs' section, using defaults", path)
        return BashfsConfig()

    config = BashfsConfig.from_dict(section)
    if not isinstance(logging.getLevelName(str(config.log_level).upper()), int):
        logger.warning("Unknown log_level %r in %s, using WARNING", config.log_level, path)
        config.log_level = "WARNING"

    return config


def save_config(config: BashfsConfig, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> None:
    """
    Save configuration under the ``bashfs:`` key.

    Other top-level keys of an existing file are preserved.
    """
    path = Path(config_path)
    document: Dict[str, Any] = {}

    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                existing = yaml.safe_load(f) or {}
            if isinstance(existing, dict):
                document = existing
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Overwriting unreadable config %s: %s", path, e)

    document["bashfs"] = config.to_dict()

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(document, f, default_flow_style=False)
