"""
Checker configuration.

Loaded from an optional JSON file, e.g.::

    {
      "enabled": true,
      "extensions": {".java": "java", ".c": "c", ".h": "c"},
      "skip_dirs": [".git", "build"],
      "honor_preprocessor": true,
      "include_dirs": ["include"],
      "defines": {"DEBUG": "0"}
    }

Any problem reading the file is logged and the defaults are used.
"""

import json
import logging
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ValidationError

from .frontend import DEFAULT_EXTENSIONS

logger = logging.getLogger(__name__)

_DEFAULT_SKIP_DIRS = [
    ".git", "build", "target", "out", "node_modules",
    "__pycache__", ".idea", ".vscode", "venv",
]


class LintConfig(BaseModel):
    enabled: bool = True
    extensions: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_EXTENSIONS))
    skip_dirs: List[str] = Field(default_factory=lambda: list(_DEFAULT_SKIP_DIRS))
    honor_preprocessor: bool = True     # C only: ignore compiled-out lines
    include_dirs: List[str] = Field(default_factory=list)
    defines: Dict[str, str] = Field(default_factory=dict)
    max_file_bytes: int = 2_000_000


def load_config(config_path: Optional[str] = None) -> LintConfig:
    if not config_path:
        return LintConfig()
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.error("Config file not found: %s", config_path)
        return LintConfig()
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in %s: %s", config_path, e)
        return LintConfig()
    except UnicodeDecodeError:
        logger.error("Cannot read %s — file may be binary", config_path)
        return LintConfig()

    if not isinstance(data, dict):
        logger.error("Config %s must be a JSON object, got %s", config_path, type(data).__name__)
        return LintConfig()

    try:
        config = LintConfig(**data)
    except ValidationError as e:
        logger.error("Invalid config in %s: %s", config_path, e)
        return LintConfig()

    # extensions are matched lower-case
    config.extensions = {k.lower(): v for k, v in config.extensions.items()}
    logger.info("Loaded config from %s (enabled=%s)", config_path, config.enabled)
    return config
