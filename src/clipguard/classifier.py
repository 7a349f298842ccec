"""Classifier — the main API.  Runs every enabled pattern over a piece of text.

Usage:
    from clipguard import Classifier

    classifier = Classifier()          # reusable, thread-safe
    report = classifier.classify("token: sk_live_abc123")
    report.is_sensitive                # True
    [r.pattern_id for r in report.sensitive]   # [PatternId.API_KEY]

Consumers decide what to do with the report; the classifier only says
which shapes are present and hands back the substrings they need.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable

from .patterns import PATTERNS, evaluate, get_pattern
from .types import ClassificationResult, PatternId

logger = logging.getLogger(__name__)


@dataclass
class ClassifierConfig:
    """Configuration for the Classifier."""
    # Pattern ids to never evaluate
    skip_patterns: set[PatternId] = field(default_factory=set)
    # Optional input cap; None = no limit
    max_length: int | None = None
    # Over the cap: truncate and classify the head (True) or reject outright (False)
    truncate: bool = False


@dataclass(frozen=True, slots=True)
class ClassificationReport:
    """All matched patterns for one input."""
    results: tuple[ClassificationResult, ...] = ()
    oversized: bool = False
    truncated: bool = False

    @property
    def sensitive(self) -> list[ClassificationResult]:
        return [r for r in self.results if get_pattern(r.pattern_id).is_sensitive]

    @property
    def transformable(self) -> list[ClassificationResult]:
        return [r for r in self.results if get_pattern(r.pattern_id).is_transformable]

    @property
    def is_sensitive(self) -> bool:
        return bool(self.sensitive)

    @property
    def pattern_ids(self) -> list[PatternId]:
        return [r.pattern_id for r in self.results]

    def get(self, pattern_id: PatternId | str) -> ClassificationResult | None:
        pid = PatternId(pattern_id)
        for r in self.results:
            if r.pattern_id is pid:
                return r
        return None

    def to_dict(self) -> dict:
        return {
            "oversized": self.oversized,
            "truncated": self.truncated,
            "sensitive": [r.pattern_id.value for r in self.sensitive],
            "transformable": [r.pattern_id.value for r in self.transformable],
            "results": [r.to_dict() for r in self.results],
        }


class Classifier:
    """Evaluates all enabled patterns and collects the matches."""

    def __init__(self, config: ClassifierConfig | None = None) -> None:
        self.config = config or ClassifierConfig()
        self._enabled = tuple(
            p.id for p in PATTERNS if p.id not in self.config.skip_patterns
        )

    @property
    def enabled_patterns(self) -> tuple[PatternId, ...]:
        return self._enabled

    def classify(self, text: str) -> ClassificationReport:
        """Classify text.  Never raises; non-str input yields an empty report."""
        if not isinstance(text, str) or not text:
            return ClassificationReport()

        truncated = False
        limit = self.config.max_length
        if limit is not None and len(text) > limit:
            if not self.config.truncate:
                logger.debug("rejecting oversized input (%d > %d chars)", len(text), limit)
                return ClassificationReport(oversized=True)
            logger.debug("truncating oversized input (%d > %d chars)", len(text), limit)
            text = text[:limit]
            truncated = True

        results = []
        for pattern_id in self._enabled:
            result = evaluate(pattern_id, text)
            if result.matched:
                results.append(result)

        if results:
            logger.debug("matched patterns: %s", ", ".join(r.pattern_id.value for r in results))
        return ClassificationReport(
            results=tuple(results),
            truncated=truncated,
        )

    def classify_many(self, texts: Iterable[str]) -> list[ClassificationReport]:
        """Classify each input independently."""
        return [self.classify(t) for t in texts]
