"""Security gate — decides whether clipboard text may be sent automatically.

Checks run cheapest-first and stop at the first hit:

  1. empty / very short text        → safe
  2. oversized text                 → sensitive
  3. API key prefixes               → sensitive
  4. JWT-shaped token               → sensitive
  5. card-shaped number (+ Luhn)    → sensitive
  6. high-entropy single token      → sensitive

A hit only suppresses auto-send; the caller can still send manually.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum

from . import patterns

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 1_048_576  # 1 MiB


class SensitiveDataType(Enum):
    API_KEY = "API Key"
    JWT_TOKEN = "JWT Token"
    CREDIT_CARD = "Credit Card"
    HIGH_ENTROPY = "High-Entropy Secret"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SecurityVerdict:
    """Result of a sensitive-data check."""
    is_sensitive: bool
    type: SensitiveDataType | None = None
    reason: str | None = None

    def to_dict(self) -> dict:
        return {
            "sensitive": self.is_sensitive,
            "type": self.type.name.lower() if self.type else None,
            "label": self.type.label if self.type else None,
            "reason": self.reason,
        }


SAFE = SecurityVerdict(is_sensitive=False)


@dataclass
class GateConfig:
    """Configuration for the SecurityGate."""
    min_length: int = 10                   # shorter text is always safe
    max_length: int = DEFAULT_MAX_LENGTH   # longer text is always blocked
    require_luhn: bool = True              # card shapes must pass the checksum
    detect_high_entropy: bool = True
    entropy_min_length: int = 20
    entropy_max_length: int = 500


class SecurityGate:
    """Stateless sensitive-data detector; safe to share across threads."""

    def __init__(self, config: GateConfig | None = None) -> None:
        self.config = config or GateConfig()

    def check(self, text: str) -> SecurityVerdict:
        if not isinstance(text, str) or len(text) < self.config.min_length:
            return SAFE

        cfg = self.config
        if len(text) > cfg.max_length:
            logger.debug("blocking oversized input (%d chars)", len(text))
            return SecurityVerdict(
                is_sensitive=True,
                type=SensitiveDataType.HIGH_ENTROPY,
                reason=f"Content too large for safety analysis (>{cfg.max_length} chars)",
            )

        if patterns.matches_api_key(text):
            return _hit(SensitiveDataType.API_KEY, "Detected API key pattern")

        if patterns.matches_jwt(text):
            return _hit(SensitiveDataType.JWT_TOKEN, "Detected JWT token")

        cards = patterns.extract_credit_cards(text)
        if cards:
            # Only the first candidate is checksummed
            digits = "".join(ch for ch in cards[0] if ch.isdigit())
            if not cfg.require_luhn or luhn_valid(digits):
                return _hit(SensitiveDataType.CREDIT_CARD, "Detected credit card number")
            logger.debug("card-shaped number failed Luhn check")

        if (
            cfg.detect_high_entropy
            and cfg.entropy_min_length <= len(text) <= cfg.entropy_max_length
            and has_high_entropy(text)
        ):
            return _hit(
                SensitiveDataType.HIGH_ENTROPY,
                "Detected high-entropy secret (possible password/key)",
            )

        return SAFE

    def is_sensitive(self, text: str) -> bool:
        return self.check(text).is_sensitive


def _hit(kind: SensitiveDataType, reason: str) -> SecurityVerdict:
    logger.debug("sensitive content: %s", kind.name)
    return SecurityVerdict(is_sensitive=True, type=kind, reason=reason)


def luhn_valid(digits: str) -> bool:
    """Luhn checksum over a 13–19 digit string."""
    if not 13 <= len(digits) <= 19 or not digits.isascii() or not digits.isdigit():
        return False
    total = 0
    for i, ch in enumerate(reversed(digits)):
        d = int(ch)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10 == 0


def has_high_entropy(text: str, *, scan_limit: int = 100) -> bool:
    """Cheap randomness heuristic for passwords and opaque keys.

    Text with a space is treated as prose.  Otherwise at least three of
    upper / lower / digit / printable-symbol must appear within the first
    ``scan_limit`` characters.
    """
    if " " in text:
        return False
    upper = lower = digit = symbol = False
    for ch in text[:scan_limit]:
        code = ord(ch)
        if 65 <= code <= 90:
            upper = True
        elif 97 <= code <= 122:
            lower = True
        elif 48 <= code <= 57:
            digit = True
        elif 32 < code < 127:
            symbol = True
        if upper and lower and digit and symbol:
            return True
    return upper + lower + digit + symbol >= 3
