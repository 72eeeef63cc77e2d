"""Content filtering for comments.

Banned-word scanning, length and shape validation, spam heuristics and a
quality score. Every function here is pure: identical input always yields
identical output.
"""

from __future__ import annotations

import json
import logging
import re
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from manga_guard.core.settings import settings

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Moderation severity, ordered from harmless to blocking."""

    CLEAN = "clean"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

    @property
    def weight(self) -> int:
        return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER: tuple[Severity, ...] = tuple(Severity)
_REVIEW_SEVERITIES = frozenset({Severity.MODERATE, Severity.SEVERE})


@dataclass(frozen=True)
class BannedWord:
    """A configured banned term.

    Only ``mild`` entries with a ``replacement`` are rewritten; the rest are
    flagged for human review.
    """

    word: str
    severity: Severity
    replacement: str | None = None


DEFAULT_BANNED_WORDS: tuple[BannedWord, ...] = (
    BannedWord("غبي", Severity.MILD, "***"),
    BannedWord("أحمق", Severity.MILD, "***"),
    BannedWord("لعين", Severity.MODERATE),
    BannedWord("قبيح", Severity.MODERATE),
    BannedWord("نص محظور شديد", Severity.SEVERE),
)


@dataclass(frozen=True)
class ModerationVerdict:
    """Outcome of scanning one piece of text."""

    severity: Severity
    filtered_content: str
    detected_words: list[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return self.severity is Severity.CLEAN

    @property
    def needs_manual_review(self) -> bool:
        return self.severity in _REVIEW_SEVERITIES


@dataclass(frozen=True)
class ContentValidation:
    """Hard errors block submission; warnings are advisory only."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class WordMatcher(Protocol):
    """Strategy used to find and rewrite banned terms."""

    def contains(self, text: str, term: str) -> bool: ...

    def replace(self, text: str, term: str, replacement: str) -> str: ...


class SubstringMatcher:
    """Case-insensitive substring matching."""

    def contains(self, text: str, term: str) -> bool:
        return term.lower() in text.lower()

    def replace(self, text: str, term: str, replacement: str) -> str:
        pattern = re.compile(re.escape(term), re.IGNORECASE)
        return pattern.sub(lambda _match: replacement, text)


class ContentModerator:
    """Applies an ordered banned-word list to text."""

    def __init__(
        self,
        banned_words: Iterable[BannedWord] = DEFAULT_BANNED_WORDS,
        matcher: WordMatcher | None = None,
    ) -> None:
        self.banned_words: tuple[BannedWord, ...] = tuple(banned_words)
        self.matcher: WordMatcher = matcher or SubstringMatcher()

    def moderate(self, text: str) -> ModerationVerdict:
        """Scan ``text`` and return the verdict with mild terms substituted."""
        detected: list[str] = []
        filtered = text
        max_severity = Severity.CLEAN

        for entry in self.banned_words:
            if not self.matcher.contains(text, entry.word):
                continue
            detected.append(entry.word)
            if entry.severity.weight > max_severity.weight:
                max_severity = entry.severity
            if entry.severity is Severity.MILD and entry.replacement:
                filtered = self.matcher.replace(filtered, entry.word, entry.replacement)

        return ModerationVerdict(
            severity=max_severity,
            filtered_content=filtered,
            detected_words=detected,
        )


def load_banned_words(path: str | Path) -> list[BannedWord]:
    """Read a banned-word list from a JSON array of objects.

    Each object needs ``word`` and ``severity`` keys and may carry a
    ``replacement``.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    words = []
    for item in raw:
        words.append(
            BannedWord(
                word=item["word"],
                severity=Severity(item["severity"]),
                replacement=item.get("replacement"),
            )
        )
    return words


@lru_cache(maxsize=1)
def get_content_moderator() -> ContentModerator:
    """Return the shared moderator configured from settings."""
    if settings.banned_words_file:
        words = load_banned_words(settings.banned_words_file)
        logger.info("Loaded %d banned words from %s", len(words), settings.banned_words_file)
        return ContentModerator(words)
    return ContentModerator()


def moderate(text: str) -> ModerationVerdict:
    """Moderate ``text`` with the shared moderator."""
    return get_content_moderator().moderate(text)


def has_prohibited_content(text: str) -> bool:
    """Return True when ``text`` contains a severe term."""
    return moderate(text).severity is Severity.SEVERE


def clean_content(text: str) -> str:
    """Return ``text`` with mild terms substituted."""
    return moderate(text).filtered_content


_REPEATED_CHARS = re.compile(r"(.)\1{10,}")
_DIGITS_ONLY = re.compile(r"\d+")
_EXCESSIVE_SPACES = re.compile(r"\s{5,}")
_ARABIC = re.compile(r"[\u0600-\u06FF]")
_LATIN_ONLY = re.compile(r"[a-zA-Z0-9\s.,!?]*")
_TERMINAL_PUNCTUATION = re.compile(r"[.!?]$")
_URL_SHORTENERS = re.compile(r"(bit\.ly|tinyurl|t\.co)", re.IGNORECASE)
_REPEATED_PATTERN = re.compile(r"(.{3,})\1{3,}", re.IGNORECASE)


def validate_comment_content(
    text: str,
    max_length: int = 2000,
    min_length: int = 2,
) -> ContentValidation:
    """Check length and shape rules for a comment."""
    errors: list[str] = []
    warnings: list[str] = []

    if len(text) < min_length:
        errors.append(f"التعليق قصير جداً (الحد الأدنى {min_length} أحرف)")
    if len(text) > max_length:
        errors.append(f"التعليق طويل جداً (الحد الأقصى {max_length} حرف)")

    if _REPEATED_CHARS.search(text):
        warnings.append("يحتوي التعليق على تكرار مفرط للأحرف")

    if _DIGITS_ONLY.fullmatch(text.strip()):
        errors.append("لا يمكن أن يحتوي التعليق على أرقام فقط")

    if _EXCESSIVE_SPACES.search(text):
        warnings.append("يحتوي التعليق على مسافات زائدة")

    has_arabic = _ARABIC.search(text) is not None
    latin_only = _LATIN_ONLY.fullmatch(text) is not None
    if not has_arabic and latin_only and len(text) > 50:
        warnings.append("يُفضل كتابة التعليقات باللغة العربية")

    return ContentValidation(errors=errors, warnings=warnings)


def levenshtein_distance(first: str, second: str, max_distance: int | None = None) -> int:
    """Return the edit distance between two strings.

    With ``max_distance`` only the diagonal band of that width is computed and
    the scan stops as soon as a whole row exceeds it; any distance above the
    cap is reported as ``max_distance + 1``.
    """
    if len(first) < len(second):
        first, second = second, first
    longest, shortest = len(first), len(second)
    cap = longest if max_distance is None else max_distance
    over = cap + 1
    if longest - shortest > cap:
        return over

    previous = [j if j <= cap else over for j in range(shortest + 1)]
    for i in range(1, longest + 1):
        low = max(1, i - cap)
        high = min(shortest, i + cap)
        current = [over] * (shortest + 1)
        if i <= cap:
            current[0] = i
        char_a = first[i - 1]
        for j in range(low, high + 1):
            cost = 0 if char_a == second[j - 1] else 1
            current[j] = min(previous[j - 1] + cost, current[j - 1] + 1, previous[j] + 1)
        if min(current[low - 1 : high + 1]) > cap:
            return over
        previous = current
    return min(previous[shortest], over)


def similarity(first: str, second: str) -> float:
    """Return ``(maxLen - distance) / maxLen``; two empty strings score 1.0."""
    longest = max(len(first), len(second))
    if longest == 0:
        return 1.0
    return (longest - levenshtein_distance(first, second)) / longest


def detect_spam(
    text: str,
    history: Sequence[str] = (),
    threshold: float = 0.8,
) -> bool:
    """Return True when ``text`` looks like spam.

    Spam is a near-duplicate of something in ``history``, a link through a
    URL shortener, or a chunk of three or more characters repeated four or
    more times in a row.
    """
    if any(_is_near_duplicate(text, previous, threshold) for previous in history):
        return True
    if _URL_SHORTENERS.search(text):
        return True
    return _REPEATED_PATTERN.search(text) is not None


def _is_near_duplicate(text: str, previous: str, threshold: float) -> bool:
    """Return ``similarity(text, previous) > threshold`` without a full scan.

    The edit distance is at least the length difference and at least the
    number of characters one text has in excess of the other, so pairs that
    fail either bound are rejected before the banded distance runs.
    """
    longest = max(len(text), len(previous))
    if longest == 0:
        return 1.0 > threshold
    if min(len(text), len(previous)) / longest <= threshold:
        return False
    budget = int(longest * (1 - threshold)) + 1
    text_chars, previous_chars = Counter(text), Counter(previous)
    excess = max(
        sum((text_chars - previous_chars).values()),
        sum((previous_chars - text_chars).values()),
    )
    if excess > budget:
        return False
    distance = levenshtein_distance(text, previous, max_distance=budget)
    return (longest - distance) / longest > threshold


_SEVERITY_PENALTY = {
    Severity.CLEAN: 0,
    Severity.MILD: 10,
    Severity.MODERATE: 30,
    Severity.SEVERE: 100,
}


def score_comment_quality(text: str) -> int:
    """Score a comment from 0 to 100."""
    score = 100
    score -= _SEVERITY_PENALTY[moderate(text).severity]

    validation = validate_comment_content(text)
    score -= len(validation.errors) * 20
    score -= len(validation.warnings) * 5

    if 20 < len(text) < 500:
        score += 10
    if _TERMINAL_PUNCTUATION.search(text.strip()):
        score += 5
    if _ARABIC.search(text):
        score += 10

    return max(0, min(100, score))
