"""CLI interface for clipguard — classify clipboard text from a shell or hook.

Usage:
    # Full classification report (stdin: text, stdout: JSON)
    pbpaste | python -m clipguard.cli classify

    # Sensitive-data verdict; exit status 1 when the text should not auto-send
    pbpaste | python -m clipguard.cli check

    # Content type detection / transformation
    echo '{"a":1}' | python -m clipguard.cli detect
    echo '{"a":1}' | python -m clipguard.cli transform --type json

    # Pattern table
    python -m clipguard.cli patterns

Config is read from --config, or from $CLIPGUARD_CONFIG when set.
"""

from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from typing import Any

import yaml

from .config import (
    ConfigError,
    create_classifier,
    create_gate,
    create_transformer,
    load_config,
    load_from_yaml,
)
from .patterns import PATTERNS
from .transformer import ContentType

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = os.environ.get("CLIPGUARD_CONFIG", "")

EXIT_SENSITIVE = 1
EXIT_CONFIG_ERROR = 2


def _emit(data: Any) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_classify(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Classify text on stdin against every enabled pattern."""
    report = create_classifier(config).classify(sys.stdin.read())
    _emit(report.to_dict())
    return 0


def cmd_check(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Run the security gate over text on stdin."""
    verdict = create_gate(config).check(sys.stdin.read())
    _emit(verdict.to_dict())
    return EXIT_SENSITIVE if verdict.is_sensitive else 0


def cmd_detect(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Detect the transformable content type of text on stdin."""
    detection = create_transformer(config).detect(sys.stdin.read())
    _emit(detection.to_dict())
    return 0


def cmd_transform(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Transform text on stdin (detected type unless --type is given)."""
    transformer = create_transformer(config)
    text = sys.stdin.read()
    if args.type:
        content_type = ContentType(args.type)
    else:
        content_type = transformer.detect(text).type
    result = transformer.transform(text, content_type)
    _emit({"type": content_type.value, **result.to_dict()})
    return 0


def cmd_patterns(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """List the built-in patterns."""
    _emit([
        {
            "id": p.id.value,
            "category": p.category.value,
            "categories": sorted(c.value for c in p.categories),
            "description": p.description,
        }
        for p in PATTERNS
    ])
    return 0


def _load(path: str) -> dict[str, Any]:
    if path:
        return load_from_yaml(path)
    return load_config({})


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="clipguard",
        description="Classify clipboard text: sensitive data and transformable content",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="YAML config path")
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (logs go to stderr)",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("classify", help="Full classification report (stdin)")
    sub.add_parser("check", help="Sensitive-data verdict (stdin); exit 1 if sensitive")
    sub.add_parser("detect", help="Detect content type (stdin)")
    p_transform = sub.add_parser("transform", help="Transform content (stdin)")
    p_transform.add_argument(
        "--type", choices=[t.value for t in ContentType], default=None,
        help="Content type to transform as (default: detect)",
    )
    sub.add_parser("patterns", help="List built-in patterns")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _load(args.config)
    except (ConfigError, OSError, yaml.YAMLError) as e:
        sys.stderr.write(f"clipguard: config error: {e}\n")
        return EXIT_CONFIG_ERROR

    logger.debug("running %s", args.command)
    cmds = {
        "classify": cmd_classify,
        "check": cmd_check,
        "detect": cmd_detect,
        "transform": cmd_transform,
        "patterns": cmd_patterns,
    }
    return cmds[args.command](args, config)


if __name__ == "__main__":
    sys.exit(main())
