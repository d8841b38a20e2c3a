"""Markdown, CSV and JSON exports, and JSON import.

Markdown and CSV take an already scored, already sorted list. JSON works on
the raw stored records: it is a backup format, not a display format.
"""

from __future__ import annotations

import json
import logging
import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Mapping, Optional, Sequence

from .collection import ItemCollection
from .models import ExportArtifact, ExportFormat, ScoredItem, ScoreMode, SortKey
from .scoring import score_items

logger = logging.getLogger(__name__)

MARKDOWN_CONTENT_TYPE = "text/markdown;charset=utf-8"
CSV_CONTENT_TYPE = "text/csv;charset=utf-8"
JSON_CONTENT_TYPE = "application/json"

CSV_COLUMNS = ["Title", "Owner", "Reach", "Impact", "Confidence", "Effort"]
MARKDOWN_SEPARATOR = "|---:|---|---|---:|---:|---:|---:|---:|"

# Enough digits to quantize any finite float.
_WIDE = Context(prec=400)


def format_fixed(value: float, places: int = 2) -> str:
    """Fixed-point string, halves rounded away from zero on the exact binary value."""
    if not math.isfinite(value):
        return "NaN" if math.isnan(value) else ("Infinity" if value > 0 else "-Infinity")
    # Negative zero prints unsigned.
    value = value + 0.0
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=_WIDE))


def format_number(value: float) -> str:
    """Render a number the way it was entered: 200 not 200.0, 0.25 as is."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def csv_field(text: str) -> str:
    if "," in text or "\n" in text or '"' in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def to_markdown(scored: Sequence[ScoredItem], mode: ScoreMode | str) -> str:
    mode = ScoreMode.parse(mode)
    lines = [
        f"# Prioritization ({mode.value})",
        f"| # | Title | Owner | Reach | Impact | Confidence | Effort | {mode.value} |",
        MARKDOWN_SEPARATOR,
    ]
    for idx, item in enumerate(scored, start=1):
        lines.append(
            f"| {idx} | {item.title or '-'} | {item.owner or '-'} "
            f"| {format_number(item.reach)} | {format_number(item.impact)} "
            f"| {format_number(item.confidence)}% | {format_number(item.effort)} "
            f"| {format_fixed(item.score)} |"
        )
    return "\n".join(lines)


def to_csv(scored: Sequence[ScoredItem], mode: ScoreMode | str) -> str:
    mode = ScoreMode.parse(mode)
    rows = [",".join(CSV_COLUMNS + [mode.value])]
    for item in scored:
        rows.append(",".join([
            csv_field(item.title),
            csv_field(item.owner),
            format_number(item.reach),
            format_number(item.impact),
            format_number(item.confidence),
            format_number(item.effort),
            format_fixed(item.score),
        ]))
    return "\n".join(rows)


def to_json(records: Sequence[Mapping[str, Any]]) -> str:
    """Pretty-print the stored records exactly as held, field order included.

    Non-finite numbers are written as null so the output stays valid JSON.
    """
    return json.dumps(_json_safe(list(records)), indent=2, ensure_ascii=False, allow_nan=False)


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _json_safe(v) for key, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    return value


def _reject_constant(name: str):
    raise ValueError(f"Unsupported JSON constant: {name}")


def parse_import(text: str) -> Optional[list]:
    """Parse backup JSON. Returns None unless the text is a well-formed JSON array."""
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except (TypeError, ValueError) as exc:
        logger.info("Ignoring malformed import: %s", exc)
        return None
    if not isinstance(data, list):
        logger.info("Ignoring import: expected a JSON array, got %s", type(data).__name__)
        return None
    return data


def import_json(collection: ItemCollection, text: str) -> bool:
    """Replace the collection with the imported records.

    Records are taken as-is: no validation, no new ids, no clamping. On any
    parse failure the collection is left untouched.
    """
    data = parse_import(text)
    if data is None:
        return False
    collection.replace(data)
    logger.info("Imported %d items", len(data))
    return True


def export_filename(fmt: ExportFormat, mode: ScoreMode) -> str:
    if fmt is ExportFormat.JSON:
        return "prioritization.json"
    extension = "md" if fmt is ExportFormat.MARKDOWN else "csv"
    return f"prioritization-{mode.value.lower()}.{extension}"


def export_items(
    collection: ItemCollection,
    fmt: ExportFormat | str = ExportFormat.MARKDOWN,
    mode: ScoreMode | str = ScoreMode.RICE,
    sort_key: SortKey | str = SortKey.SCORE,
) -> ExportArtifact:
    """Build the downloadable artifact for one export format."""
    fmt = ExportFormat.parse(fmt)
    mode = ScoreMode.parse(mode)

    if fmt is ExportFormat.JSON:
        content = to_json(collection.records)
        content_type = JSON_CONTENT_TYPE
    else:
        scored = score_items(collection.records, mode, sort_key)
        if fmt is ExportFormat.MARKDOWN:
            content = to_markdown(scored, mode)
            content_type = MARKDOWN_CONTENT_TYPE
        else:
            content = to_csv(scored, mode)
            content_type = CSV_CONTENT_TYPE

    return ExportArtifact(
        filename=export_filename(fmt, mode),
        content_type=content_type,
        content=content,
    )
