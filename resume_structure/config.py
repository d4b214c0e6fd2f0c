"""Parser settings: defaults, YAML loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

CONFIG_ENV_VAR = "RESUME_STRUCTURE_CONFIG"
DEFAULT_CONFIG_PATH = "config/config.yaml"


@dataclass
class ParserConfig:
    """Tunable heuristics shared by the parser and the renderer."""

    generic_skill_category: str = "General"
    contact_scan_lines: int = 5
    education_lookahead: int = 2
    contact_separator: str = " • "
    catch_all_title: str = "ADDITIONAL INFORMATION"
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


DEFAULT_CONFIG = ParserConfig()


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class ConfigError:
    """A single configuration issue."""
    field: str
    message: str
    severity: Severity


class ConfigValidationError(ValueError):
    """Raised by :func:`load_config` when the file holds invalid settings."""

    def __init__(self, issues: List[ConfigError]):
        self.issues = issues
        details = "; ".join(f"{i.field}: {i.message}" for i in issues if i.severity == Severity.ERROR)
        super().__init__(f"Invalid parser configuration: {details}")


def validate_config(raw_config: Dict[str, Any]) -> List[ConfigError]:
    """Validate raw configuration and return a list of issues.

    Args:
        raw_config: Raw config dict from YAML (the ``parser`` mapping)

    Returns:
        List of ConfigError (empty = valid)
    """
    errors: List[ConfigError] = []

    # --- Integer windows ---
    for name, default in (("contact_scan_lines", 5), ("education_lookahead", 2)):
        value = raw_config.get(name, default)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            errors.append(ConfigError(
                field=name,
                message=f"{name} must be a positive integer, got {value!r}",
                severity=Severity.ERROR,
            ))

    # --- Labels ---
    for name in ("generic_skill_category", "catch_all_title"):
        value = raw_config.get(name, "x")
        if not isinstance(value, str) or not value.strip():
            errors.append(ConfigError(
                field=name,
                message=f"{name} must be a non-empty string",
                severity=Severity.ERROR,
            ))

    catch_all = raw_config.get("catch_all_title")
    if isinstance(catch_all, str) and catch_all.strip() and catch_all != catch_all.upper():
        errors.append(ConfigError(
            field="catch_all_title",
            message="catch_all_title is not upper-case; rendered markup will not parse back under the same title",
            severity=Severity.WARNING,
        ))

    separator = raw_config.get("contact_separator", " • ")
    if not isinstance(separator, str) or not separator:
        errors.append(ConfigError(
            field="contact_separator",
            message="contact_separator must be a non-empty string",
            severity=Severity.ERROR,
        ))

    # --- Logging ---
    level = raw_config.get("log_level", "WARNING")
    if not isinstance(level, str) or level.upper() not in _LOG_LEVELS:
        errors.append(ConfigError(
            field="log_level",
            message=f"log_level must be one of {sorted(_LOG_LEVELS)}, got {level!r}",
            severity=Severity.ERROR,
        ))

    unknown = sorted(set(raw_config) - {f.name for f in fields(ParserConfig)})
    for name in unknown:
        errors.append(ConfigError(
            field=name,
            message=f"Unknown setting {name!r} is ignored",
            severity=Severity.WARNING,
        ))

    return errors


def has_errors(issues: List[ConfigError]) -> bool:
    """Check if any issues are errors (not just warnings)."""
    return any(e.severity == Severity.ERROR for e in issues)


def load_config(config_path: Optional[str] = None) -> ParserConfig:
    """Load parser configuration from a YAML file.

    *config_path* defaults to ``$RESUME_STRUCTURE_CONFIG`` and then
    ``config/config.yaml``. The file may hold the settings at the top level
    or under a ``parser`` key. Relative paths that do not exist are retried
    relative to the project root.
    """
    import yaml

    config_path = config_path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    path = Path(config_path)
    if not path.exists():
        path = Path(__file__).parent.parent / config_path

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    raw = data.get("parser", data) if isinstance(data, dict) else {}
    issues = validate_config(raw)
    if has_errors(issues):
        raise ConfigValidationError(issues)

    config = ParserConfig.from_dict(raw)
    config.log_level = config.log_level.upper()
    return config
