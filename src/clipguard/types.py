"""Core types."""

from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """What a consumer should do with a match."""
    SENSITIVE = "sensitive"           # withhold from automatic transmission
    TRANSFORMABLE = "transformable"   # offer a preview / decode / prettify


class PatternId(str, Enum):
    JWT = "jwt"
    JSON = "json"
    HEX_COLOR = "hexColor"
    API_KEY = "apiKey"
    CREDIT_CARD = "creditCard"


@dataclass(frozen=True, slots=True)
class Pattern:
    """A named, compiled-once matching rule."""
    id: PatternId
    regex: re.Pattern
    categories: frozenset[Category]
    description: str = ""

    @property
    def category(self) -> Category:
        # A pattern that is both sensitive and transformable is reported as sensitive
        if Category.SENSITIVE in self.categories:
            return Category.SENSITIVE
        return Category.TRANSFORMABLE

    @property
    def is_sensitive(self) -> bool:
        return Category.SENSITIVE in self.categories

    @property
    def is_transformable(self) -> bool:
        return Category.TRANSFORMABLE in self.categories

    def matches(self, text: object) -> bool:
        if not isinstance(text, str) or not text:
            return False
        return self.regex.search(text) is not None


@dataclass(frozen=True, slots=True)
class JwtSegments:
    """The three dot-separated parts of a JWT-shaped token (not decoded)."""
    header: str
    payload: str
    signature: str

    @property
    def token(self) -> str:
        return f"{self.header}.{self.payload}.{self.signature}"


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Outcome of evaluating one pattern against one input."""
    pattern_id: PatternId
    matched: bool
    matches: tuple[str, ...] = ()        # matched substrings, left to right
    jwt: JwtSegments | None = None       # only for PatternId.JWT

    def __bool__(self) -> bool:
        return self.matched

    def to_dict(self) -> dict:
        out: dict = {
            "pattern": self.pattern_id.value,
            "matched": self.matched,
            "matches": list(self.matches),
        }
        if self.jwt is not None:
            out["jwt"] = {
                "header": self.jwt.header,
                "payload": self.jwt.payload,
                "signature": self.jwt.signature,
            }
        return out
