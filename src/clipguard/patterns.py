"""Pattern matcher — fast regex shape detectors for clipboard text.

Every rule is compiled once at import and never mutated.  Matchers are
pure functions: they never raise, never retain the input, and return a
no-match for anything that isn't a non-empty ``str``.

These are *shape* detectors, not validators.  A JSON-shaped string may
still fail to parse, and a card-shaped number may fail a Luhn check; the
consumers (``security``, ``transformer``) decide what to do about that.
"""

from __future__ import annotations
import re
from typing import Callable, Iterable

from .types import Category, ClassificationResult, JwtSegments, Pattern, PatternId

_B64URL = r"[A-Za-z0-9_-]"

# JWT — header.payload.signature; header is base64url of '{"' so starts with eyJ.
# The lookbehind stops a match from starting mid-run, which keeps the scan linear.
_JWT_RE = re.compile(
    rf"(?<!{_B64URL})"
    rf"(eyJ{_B64URL}*)\.({_B64URL}+)\.({_B64URL}+)"
)

# JSON — object or array shape; non-greedy span so nested brackets can't blow up
_JSON_RE = re.compile(
    r"\A\s*([\{\[].*?[\}\]])\s*\Z",
    re.DOTALL,
)

# Hex color — #RGB, #RRGGBB, #RRGGBBAA
_HEX_COLOR_RE = re.compile(
    r"#(?:[A-Fa-f0-9]{3}|[A-Fa-f0-9]{6}|[A-Fa-f0-9]{8})\b",
    re.ASCII,
)

# API keys — provider prefixes, AWS access key ids, Google API keys
_API_KEY_RE = re.compile(
    r"(?:sk_live_|pk_live_|sk_test_|pk_test_|ghp_|gho_"
    r"|AKIA[A-Z0-9]{16}"
    rf"|AIza{_B64URL}{{35}})"
    r"\w*",
    re.ASCII,
)

# Credit card — 13–19 digits, bare or with one uniform space/dash separator
_CREDIT_CARD_RE = re.compile(
    r"(?<![0-9])"
    r"[0-9]{4}([ \-]?)[0-9]{4}\1[0-9]{4}\1[0-9]{1,7}"
    r"(?![0-9])"
)

_SENSITIVE = frozenset({Category.SENSITIVE})
_TRANSFORMABLE = frozenset({Category.TRANSFORMABLE})

PATTERNS: tuple[Pattern, ...] = (
    Pattern(PatternId.JWT, _JWT_RE, _SENSITIVE | _TRANSFORMABLE,
            "JSON Web Token (header.payload.signature)"),
    Pattern(PatternId.API_KEY, _API_KEY_RE, _SENSITIVE,
            "Provider API key (Stripe, GitHub, AWS, Google)"),
    Pattern(PatternId.CREDIT_CARD, _CREDIT_CARD_RE, _SENSITIVE,
            "Credit-card-shaped digit run"),
    Pattern(PatternId.JSON, _JSON_RE, _TRANSFORMABLE,
            "JSON object or array shape"),
    Pattern(PatternId.HEX_COLOR, _HEX_COLOR_RE, _TRANSFORMABLE,
            "Hex color (#RGB, #RRGGBB, #RRGGBBAA)"),
)

_BY_ID: dict[PatternId, Pattern] = {p.id: p for p in PATTERNS}


def get_pattern(pattern_id: PatternId | str) -> Pattern:
    """Look up a pattern by id.  Raises ``ValueError`` for unknown ids."""
    return _BY_ID[PatternId(pattern_id)]


def _usable(text: object) -> bool:
    return isinstance(text, str) and bool(text)


# ── JWT ──────────────────────────────────────────────────────────────

def matches_jwt(text: str) -> bool:
    return _usable(text) and _JWT_RE.search(text) is not None


def extract_jwt(text: str) -> JwtSegments | None:
    """Return the first JWT-shaped token split into its three segments."""
    if not _usable(text):
        return None
    m = _JWT_RE.search(text)
    if m is None:
        return None
    return JwtSegments(header=m.group(1), payload=m.group(2), signature=m.group(3))


# ── JSON ─────────────────────────────────────────────────────────────

def matches_json(text: str) -> bool:
    return _usable(text) and _JSON_RE.match(text) is not None


def extract_json(text: str) -> str | None:
    """Return the bracketed span with surrounding whitespace trimmed."""
    if not _usable(text):
        return None
    m = _JSON_RE.match(text)
    return m.group(1) if m else None


# ── Hex color ────────────────────────────────────────────────────────

def matches_hex_color(text: str) -> bool:
    return _usable(text) and _HEX_COLOR_RE.search(text) is not None


def extract_hex_colors(text: str) -> list[str]:
    if not _usable(text):
        return []
    return [m.group() for m in _HEX_COLOR_RE.finditer(text)]


# ── API key ──────────────────────────────────────────────────────────

def matches_api_key(text: str) -> bool:
    return _usable(text) and _API_KEY_RE.search(text) is not None


def extract_api_keys(text: str) -> list[str]:
    if not _usable(text):
        return []
    return [m.group() for m in _API_KEY_RE.finditer(text)]


# ── Credit card ──────────────────────────────────────────────────────

def matches_credit_card(text: str) -> bool:
    return _usable(text) and _CREDIT_CARD_RE.search(text) is not None


def extract_credit_cards(text: str) -> list[str]:
    if not _usable(text):
        return []
    return [m.group() for m in _CREDIT_CARD_RE.finditer(text)]


# ── Generic evaluation ───────────────────────────────────────────────

def _evaluate_jwt(text: str) -> ClassificationResult:
    segments = extract_jwt(text)
    if segments is None:
        return ClassificationResult(PatternId.JWT, matched=False)
    return ClassificationResult(
        PatternId.JWT, matched=True, matches=(segments.token,), jwt=segments,
    )


def _evaluate_json(text: str) -> ClassificationResult:
    span = extract_json(text)
    if span is None:
        return ClassificationResult(PatternId.JSON, matched=False)
    return ClassificationResult(PatternId.JSON, matched=True, matches=(span,))


def _evaluate_all(pattern_id: PatternId, extract: Callable[[str], list[str]]):
    def evaluate(text: str) -> ClassificationResult:
        found = tuple(extract(text))
        return ClassificationResult(pattern_id, matched=bool(found), matches=found)
    return evaluate


_EVALUATORS: dict[PatternId, Callable[[str], ClassificationResult]] = {
    PatternId.JWT: _evaluate_jwt,
    PatternId.JSON: _evaluate_json,
    PatternId.HEX_COLOR: _evaluate_all(PatternId.HEX_COLOR, extract_hex_colors),
    PatternId.API_KEY: _evaluate_all(PatternId.API_KEY, extract_api_keys),
    PatternId.CREDIT_CARD: _evaluate_all(PatternId.CREDIT_CARD, extract_credit_cards),
}


def evaluate(pattern_id: PatternId | str, text: str) -> ClassificationResult:
    """Evaluate a single pattern, always returning a result (matched or not)."""
    return _EVALUATORS[PatternId(pattern_id)](text)


def scan(
    text: str,
    categories: Iterable[Category] | None = None,
) -> list[ClassificationResult]:
    """Run every pattern against text.  Returns only the matched results.

    If ``categories`` is given, patterns outside those categories are skipped.
    """
    wanted = frozenset(categories) if categories is not None else None
    results: list[ClassificationResult] = []
    for pattern in PATTERNS:
        if wanted is not None and not (pattern.categories & wanted):
            continue
        result = _EVALUATORS[pattern.id](text)
        if result.matched:
            results.append(result)
    return results
