"""Configuration loader for JuicyURLs.

This module parses the comma-separated category and exclusion flags, Go-style
duration strings, and optional YAML scan configuration files.
"""

import re
from pathlib import Path
from typing import Any

import yaml

from juicyurls.core.constants import CHUNK_SIZE, Category
from juicyurls.core.exceptions import ConfigError, InvalidCategoryError
from juicyurls.core.models import PatternSet, ScanConfig


_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")

_DURATION_UNITS = {
    "ms": 0.001,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


# ============================================================================
# Flag Parsers
# ============================================================================

def parse_categories(value: str | list[str] | None) -> frozenset[Category]:
    """Parse enabled categories.

    Args:
        value: Comma-separated names or a list of names. Empty or None
            enables every category.

    Returns:
        Set of enabled categories

    Raises:
        InvalidCategoryError: If a name is not a known category
    """
    if not value:
        return frozenset(Category)

    names = value.split(",") if isinstance(value, str) else value

    categories = set()
    for name in names:
        name = str(name).strip().lower()
        if not name:
            continue
        try:
            categories.add(Category(name))
        except ValueError:
            valid = ", ".join(c.value for c in Category)
            raise InvalidCategoryError(
                f"Invalid category: {name}. Valid categories: {valid}"
            ) from None

    if not categories:
        return frozenset(Category)
    return frozenset(categories)


def parse_excludes(value: str | list[str] | None) -> list[str]:
    """Parse exclusion patterns from a comma-separated string or list."""
    if not value:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [str(item).strip() for item in items if str(item).strip()]


def parse_duration(value: str | int | float | None) -> float:
    """Parse a duration into seconds.

    Accepts bare numbers (seconds) and Go-style strings such as "300s",
    "5m", "1m30s", "500ms" or "1h".

    Args:
        value: Duration to parse

    Returns:
        Duration in seconds (0 means no timeout)

    Raises:
        ConfigError: If the value is malformed or negative
    """
    if value is None:
        return 0.0

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = float(value)
    else:
        text = str(value).strip().lower()
        if not text:
            return 0.0
        try:
            seconds = float(text)
        except ValueError:
            position = 0
            seconds = 0.0
            for match in _DURATION_PART.finditer(text):
                if match.start() != position:
                    break
                seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
                position = match.end()
            if position != len(text) or position == 0:
                raise ConfigError(f"Invalid timeout format: {value}")

    if seconds < 0:
        raise ConfigError(f"Timeout must not be negative: {value}")
    return seconds


# ============================================================================
# Scan Configuration Loader
# ============================================================================

def load_scan_config(config_file: Path | str) -> ScanConfig:
    """Load scan configuration from a YAML file.

    Recognised keys: categories, excludes, validate, workers, timeout,
    verbose, max_url_length, chunk_size and a patterns mapping with
    keywords/extensions/paths/hidden lists.

    Args:
        config_file: Path to YAML configuration file

    Returns:
        ScanConfig with file values applied over the defaults

    Raises:
        ConfigError: If file not found, YAML parsing fails or a value is invalid
    """
    config_path = Path(config_file)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config YAML: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Scan configuration must be a mapping")

    return scan_config_from_dict(data)


def scan_config_from_dict(data: dict[str, Any]) -> ScanConfig:
    """Build a ScanConfig from an already-parsed mapping.

    Raises:
        ConfigError: If a value has the wrong type
    """
    config = ScanConfig()

    if "categories" in data:
        config.categories = parse_categories(data["categories"])

    if "excludes" in data:
        config.excludes = parse_excludes(data["excludes"])

    if "validate" in data:
        config.validate_urls = bool(data["validate"])

    if "verbose" in data:
        config.verbose = bool(data["verbose"])

    if "timeout" in data:
        config.timeout = parse_duration(data["timeout"])

    config.workers = _get_int(data, "workers", config.workers, minimum=0)
    config.max_url_length = _get_int(data, "max_url_length", config.max_url_length, minimum=1)

    if "chunk_size" in data and data["chunk_size"] is not None:
        config.chunk_size = _get_int(data, "chunk_size", CHUNK_SIZE, minimum=1)

    patterns = data.get("patterns")
    if patterns:
        config.patterns = _load_patterns(patterns, config.patterns)

    return config


def _get_int(data: dict[str, Any], key: str, default: int, *, minimum: int) -> int:
    if key not in data:
        return default
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{key}' must be an integer")
    if value < minimum:
        raise ConfigError(f"'{key}' must be >= {minimum}")
    return value


def _load_patterns(data: Any, base: PatternSet) -> PatternSet:
    if not isinstance(data, dict):
        raise ConfigError("'patterns' must be a mapping")

    tables: dict[str, list[str]] = {}
    for name, patterns in data.items():
        try:
            Category(name)
        except ValueError:
            raise ConfigError(f"Unknown pattern table: {name}") from None
        if not isinstance(patterns, list):
            raise ConfigError(f"'patterns.{name}' must be a list")
        tables[name] = [str(p) for p in patterns if str(p)]

    return base.replace(**tables)
