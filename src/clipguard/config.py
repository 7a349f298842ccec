"""YAML/dict config loader for clipguard.

Supports loading from a YAML file or a plain dict (for embedding in a
larger application config).

Example YAML:

    clipguard:
      classifier:
        max_length: 1048576
        truncate: false
        skip_patterns:
          - hexColor
      security:
        min_length: 10
        max_length: 1048576
        require_luhn: true
        detect_high_entropy: true
        entropy_min_length: 20
        entropy_max_length: 500
      transformer:
        min_length: 3
        max_length: 1048576
        indent: 2
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any

import yaml

from .classifier import Classifier, ClassifierConfig
from .security import DEFAULT_MAX_LENGTH, GateConfig, SecurityGate
from .transformer import ContentTransformer, TransformerConfig
from .types import PatternId

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised for malformed or out-of-range configuration values."""


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


def _length(
    section: dict[str, Any], key: str, default: int | None, *, optional: bool = False,
) -> int | None:
    value = section.get(key, default)
    if value is None and optional:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"'{key}' must be a non-negative integer, got {value!r}")
    return value


def _pattern_ids(values: Any) -> set[PatternId]:
    if values is None:
        return set()
    if isinstance(values, str) or not isinstance(values, (list, tuple, set)):
        raise ConfigError("'skip_patterns' must be a list of pattern ids")
    out: set[PatternId] = set()
    for v in values:
        try:
            out.add(PatternId(v))
        except ValueError:
            known = ", ".join(p.value for p in PatternId)
            raise ConfigError(f"unknown pattern id {v!r} (expected one of: {known})") from None
    return out


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline).

    Idempotent: the output of load_config is itself a valid input.
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")
    # Support nested under "clipguard" key or flat
    if "clipguard" in data:
        data = data["clipguard"] or {}
        if not isinstance(data, dict):
            raise ConfigError("'clipguard' must be a mapping")

    classifier = _section(data, "classifier")
    security = _section(data, "security")
    transformer = _section(data, "transformer")

    return {
        "classifier": {
            "skip_patterns": _pattern_ids(classifier.get("skip_patterns")),
            "max_length": _length(classifier, "max_length", None, optional=True),
            "truncate": bool(classifier.get("truncate", False)),
        },
        "security": {
            "min_length": _length(security, "min_length", 10),
            "max_length": _length(security, "max_length", DEFAULT_MAX_LENGTH),
            "require_luhn": bool(security.get("require_luhn", True)),
            "detect_high_entropy": bool(security.get("detect_high_entropy", True)),
            "entropy_min_length": _length(security, "entropy_min_length", 20),
            "entropy_max_length": _length(security, "entropy_max_length", 500),
        },
        "transformer": {
            "min_length": _length(transformer, "min_length", 3),
            "max_length": _length(transformer, "max_length", DEFAULT_MAX_LENGTH),
            "indent": _length(transformer, "indent", 2),
        },
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    path = Path(path).expanduser()
    logger.debug("loading config from %s", path)
    with open(path) as f:
        return load_config(yaml.safe_load(f))


def create_classifier(config: dict[str, Any] | None = None) -> Classifier:
    """Create a configured Classifier from a config dict."""
    cfg = load_config(config)["classifier"]
    return Classifier(ClassifierConfig(
        skip_patterns=set(cfg["skip_patterns"]),
        max_length=cfg["max_length"],
        truncate=cfg["truncate"],
    ))


def create_gate(config: dict[str, Any] | None = None) -> SecurityGate:
    """Create a configured SecurityGate from a config dict."""
    return SecurityGate(GateConfig(**load_config(config)["security"]))


def create_transformer(config: dict[str, Any] | None = None) -> ContentTransformer:
    """Create a configured ContentTransformer from a config dict."""
    return ContentTransformer(TransformerConfig(**load_config(config)["transformer"]))
