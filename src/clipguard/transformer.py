"""Content transformer — detects enhanceable content and performs the transform.

Detection order is most-specific first: JWT, then JSON (shape match *and*
a successful parse), then hex colors.  Anything else is plain text.

Transforms never raise: failures come back as ``TransformationResult.error``
so the UI can just hide the affordance.
"""

from __future__ import annotations
import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from . import patterns

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 1_048_576  # 1 MiB


class ContentType(Enum):
    PLAIN_TEXT = "plainText"
    JSON = "json"
    JWT = "jwt"
    HEX_COLOR = "hexColor"


@dataclass(frozen=True, slots=True)
class ContentDetection:
    type: ContentType
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_transformable(self) -> bool:
        return self.type is not ContentType.PLAIN_TEXT

    def to_dict(self) -> dict:
        return {"type": self.type.value, "metadata": dict(self.metadata)}


PLAIN_TEXT = ContentDetection(type=ContentType.PLAIN_TEXT)


@dataclass(frozen=True, slots=True)
class TransformationResult:
    transformed: str | None = None   # replacement text, if the transform rewrites content
    preview: str | None = None       # human-readable display text
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {"transformed": self.transformed, "preview": self.preview, "error": self.error}


@dataclass(frozen=True, slots=True)
class JwtPayload:
    claims: dict[str, Any]
    expiration: datetime | None = None
    user_id: str | None = None


@dataclass(frozen=True, slots=True)
class HexColor:
    red: int
    green: int
    blue: int
    alpha: int = 255

    def hex(self) -> str:
        out = f"#{self.red:02x}{self.green:02x}{self.blue:02x}"
        return out if self.alpha == 255 else f"{out}{self.alpha:02x}"

    def css(self) -> str:
        return f"rgba({self.red}, {self.green}, {self.blue}, {round(self.alpha / 255, 3):g})"


@dataclass
class TransformerConfig:
    """Configuration for the ContentTransformer."""
    min_length: int = 3
    max_length: int = DEFAULT_MAX_LENGTH
    indent: int = 2


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContentTransformer:
    """Stateless detector + transformer for JSON, JWT and hex colors."""

    def __init__(
        self,
        config: TransformerConfig | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config = config or TransformerConfig()
        self._clock = clock

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def detect(self, text: str) -> ContentDetection:
        if not isinstance(text, str) or len(text) < self.config.min_length:
            return PLAIN_TEXT
        if len(text) > self.config.max_length:
            logger.debug("skipping detection for oversized input (%d chars)", len(text))
            return PLAIN_TEXT

        if patterns.matches_jwt(text):
            return ContentDetection(ContentType.JWT, {"format": "JWT"})

        if _is_json(text):
            return ContentDetection(ContentType.JSON, {"valid": True})

        colors = patterns.extract_hex_colors(text)
        if colors:
            color = colors[0]
            return ContentDetection(
                ContentType.HEX_COLOR, {"color": color, "length": len(color) - 1},
            )

        return PLAIN_TEXT

    # ------------------------------------------------------------------
    # Transformation
    # ------------------------------------------------------------------

    def transform(self, text: str, content_type: ContentType) -> TransformationResult:
        if not isinstance(text, str):
            return TransformationResult(error="Content is not text")
        if content_type is ContentType.JSON:
            return self._transform_json(text)
        if content_type is ContentType.JWT:
            return self._transform_jwt(text)
        if content_type is ContentType.HEX_COLOR:
            return self._transform_hex(text)
        return TransformationResult(error="No transformation available for plain text")

    def detect_and_transform(self, text: str) -> tuple[ContentDetection, TransformationResult | None]:
        detection = self.detect(text)
        if not detection.is_transformable:
            return detection, None
        return detection, self.transform(text, detection.type)

    def _transform_json(self, text: str) -> TransformationResult:
        try:
            pretty = prettify_json(text, indent=self.config.indent)
        except ValueError as e:
            return TransformationResult(error=f"Invalid JSON: {e}")
        return TransformationResult(
            transformed=pretty,
            preview=f"Formatted JSON with {self.config.indent}-space indentation",
        )

    def _transform_jwt(self, text: str) -> TransformationResult:
        segments = patterns.extract_jwt(text)
        if segments is None:
            return TransformationResult(
                error="Invalid JWT format: expected header.payload.signature",
            )
        claims, err = _decode_segment(segments.payload)
        if err:
            return TransformationResult(error=f"Invalid JWT: {err}")

        payload = _payload_from_claims(claims)
        pretty = json.dumps(claims, indent=self.config.indent, ensure_ascii=False)
        preview = "\n".join([
            pretty,
            "",
            self._expiration_line(claims, payload.expiration),
            _user_line(payload.user_id),
        ])
        # The token itself is left untouched; only a decoded view is offered
        return TransformationResult(preview=preview)

    def _transform_hex(self, text: str) -> TransformationResult:
        colors = patterns.extract_hex_colors(text)
        color = parse_hex_color(colors[0]) if colors else None
        if color is None:
            return TransformationResult(error="No hex color found")
        return TransformationResult(preview=color.css())

    def _expiration_line(self, claims: dict[str, Any], expiration: datetime | None) -> str:
        if "exp" not in claims or claims["exp"] is None:
            return "No expiration (exp claim not set)"
        if expiration is None:
            return "Invalid expiration timestamp"
        now = self._clock()
        expired = expiration < now
        delta = now - expiration if expired else expiration - now
        status = "EXPIRED" if expired else "VALID"
        when = "ago" if expired else "from now"
        stamp = expiration.strftime("%Y-%m-%d %H:%M:%S")
        return f"Expires: {stamp} UTC {status} ({_format_duration(delta.total_seconds())} {when})"


def _is_json(text: str) -> bool:
    """Shape check first (cheap), then a real parse."""
    span = patterns.extract_json(text)
    if span is None:
        return False
    try:
        json.loads(span)
    except (ValueError, RecursionError):
        return False
    return True


def prettify_json(text: str, *, indent: int = 2) -> str:
    """Re-encode JSON with indentation.  Raises ``ValueError`` on bad input."""
    try:
        parsed = json.loads(text)
    except RecursionError:
        raise ValueError("nesting too deep") from None
    return json.dumps(parsed, indent=indent, ensure_ascii=False)


def _decode_segment(segment: str) -> tuple[dict[str, Any] | None, str | None]:
    """Decode one base64url JWT segment into a JSON object."""
    if not segment:
        return None, "payload segment is empty"
    padded = segment + "=" * (-len(segment) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError):
        return None, "payload is not valid base64url"
    try:
        parsed = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError:
        return None, "payload is not UTF-8"
    except (ValueError, RecursionError):
        return None, "payload is not JSON"
    if not isinstance(parsed, dict):
        return None, "payload is not a JSON object"
    return parsed, None


def _payload_from_claims(claims: dict[str, Any]) -> JwtPayload:
    expiration = None
    exp = claims.get("exp")
    if exp is not None and not isinstance(exp, bool):
        try:
            seconds = int(exp) if isinstance(exp, (int, float)) else int(str(exp))
            if seconds > 0:
                expiration = datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            expiration = None

    user = None
    for key in ("sub", "user_id", "user"):
        if claims.get(key) is not None:
            user = str(claims[key])
            break
    return JwtPayload(claims=claims, expiration=expiration, user_id=user)


def decode_jwt(token: str) -> JwtPayload | None:
    """Decode (not verify) the payload of the first JWT in ``token``."""
    segments = patterns.extract_jwt(token)
    if segments is None:
        return None
    claims, err = _decode_segment(segments.payload)
    if err:
        logger.debug("JWT payload decode failed: %s", err)
        return None
    return _payload_from_claims(claims)


def parse_hex_color(text: str) -> HexColor | None:
    """Parse ``#RGB``, ``#RRGGBB`` or ``#RRGGBBAA`` (surrounding whitespace allowed)."""
    if not isinstance(text, str):
        return None
    colors = patterns.extract_hex_colors(text.strip())
    if len(colors) != 1 or colors[0] != text.strip():
        return None
    digits = colors[0][1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    values = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
    return HexColor(*values)


def _user_line(user_id: str | None) -> str:
    if user_id is None:
        return "No user info in token"
    return f"User ID: {user_id}"


def _format_duration(seconds: float) -> str:
    seconds = int(seconds)
    if seconds >= 86400:
        return f"{seconds // 86400}d"
    if seconds >= 3600:
        return f"{seconds // 3600}h"
    if seconds >= 60:
        return f"{seconds // 60}m"
    return f"{seconds}s"
