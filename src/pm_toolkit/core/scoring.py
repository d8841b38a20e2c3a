"""RICE / ICE prioritization scoring and display ordering.

Scores are derived on every pass and never written back to the stored
records. Confidence is clamped and effort floored here, at computation
time, so that any finite input yields a finite score.
"""

from __future__ import annotations

import logging
import math
import sys
import unicodedata
from typing import Any, Iterable, Mapping

from .models import ScoredItem, ScoreMode, SortKey

logger = logging.getLogger(__name__)

# Keeps the division finite; invisible at two decimals for any effort >= 0.1.
EFFORT_FLOOR = 1e-4


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def _fields(record: Any) -> Mapping[str, Any]:
    # Imported lists are trusted as-is and may hold non-objects.
    return record if isinstance(record, Mapping) else {}


def _bounded(x: float) -> float:
    if math.isinf(x):
        return math.copysign(sys.float_info.max, x)
    return x


def _number(record: Mapping[str, Any], field: str) -> float:
    value = _fields(record).get(field)
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def rice_score(reach: float, impact: float, confidence: float, effort: float) -> float:
    """Reach x Impact x Confidence / Effort."""
    c = clamp01(confidence / 100)
    if not (reach and impact and c):
        return 0.0
    return _bounded(reach * impact * c / max(effort, EFFORT_FLOOR))


def ice_score(impact: float, confidence: float, effort: float) -> float:
    """Impact x Confidence / Effort. Reach plays no part."""
    c = clamp01(confidence / 100)
    if not (impact and c):
        return 0.0
    return _bounded(impact * c / max(effort, EFFORT_FLOOR))


def score_item(record: Mapping[str, Any], mode: ScoreMode | str) -> float:
    """Score one stored record under the given mode.

    Negative reach, impact or effort are accepted and still produce a finite
    number. Missing or non-numeric fields read as 0.
    """
    mode = ScoreMode.parse(mode)
    impact = _number(record, "impact")
    confidence = _number(record, "confidence")
    effort = _number(record, "effort")

    if mode is ScoreMode.RICE:
        return rice_score(_number(record, "reach"), impact, confidence, effort)
    return ice_score(impact, confidence, effort)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def collation_key(text: str) -> tuple[str, str, str]:
    """Approximate locale-aware ordering without depending on the process locale.

    Primary: letters with accents stripped, case folded.
    Secondary: accents. Tertiary: lower case before upper case.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), decomposed.casefold(), text.swapcase()


def sort_scored(scored: list[ScoredItem], sort_key: SortKey | str = SortKey.SCORE) -> list[ScoredItem]:
    """Return a new list in display order. Ties keep their original relative order."""
    sort_key = SortKey.parse(sort_key)
    if sort_key is SortKey.TITLE:
        return sorted(scored, key=lambda s: collation_key(s.title))
    if sort_key is SortKey.OWNER:
        return sorted(scored, key=lambda s: collation_key(s.owner))
    return sorted(scored, key=lambda s: s.score, reverse=True)


def score_items(
    records: Iterable[Mapping[str, Any]],
    mode: ScoreMode | str = ScoreMode.RICE,
    sort_key: SortKey | str = SortKey.SCORE,
) -> list[ScoredItem]:
    """Annotate every record with its score and return them in display order.

    The input sequence is not modified.
    """
    mode = ScoreMode.parse(mode)
    scored = []
    for record in records:
        record = _fields(record)
        scored.append(ScoredItem(
            id=_text(record.get("id")),
            title=_text(record.get("title")),
            owner=_text(record.get("owner")),
            reach=_number(record, "reach"),
            impact=_number(record, "impact"),
            confidence=_number(record, "confidence"),
            effort=_number(record, "effort"),
            score=score_item(record, mode),
        ))
    logger.debug("Scored %d items (%s)", len(scored), mode.value)
    return sort_scored(scored, sort_key)
