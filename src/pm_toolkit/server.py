"""PM Toolkit MCP App Server.

FastMCP server exposing RICE/ICE prioritization, exports, and a PRD generator,
with an MCP Apps interactive UI.
Run: pm-toolkit-mcp
"""

from __future__ import annotations

import logging
import math
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from . import get_app_html
from .core.collection import ItemCollection
from .core.export import export_items, format_fixed, import_json
from .core.models import IMPACT_SCALE, PRDDocument, ScoreMode, SortKey
from .core.prd import export_prd
from .core.scoring import score_items
from .db import close_db, init_db
from .storage import load_items, save_items

logger = logging.getLogger(__name__)

MCP_APP_MIME = "text/html;profile=mcp-app"

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)
EDITS = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=False)
DESTRUCTIVE = ToolAnnotations(readOnlyHint=False, destructiveHint=True, idempotentHint=False, openWorldHint=False)

EDITABLE_FIELDS = ("title", "owner", "reach", "impact", "confidence", "effort")
NUMERIC_FIELDS = ("reach", "impact", "confidence", "effort")


class Workspace:
    """Holds the live item collection for the server process."""

    def __init__(self):
        self.items = ItemCollection()

    async def load(self):
        self.items = await load_items()

    async def commit(self):
        await save_items(self.items)


workspace = Workspace()


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Initialize database and load the stored prioritization list."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    await init_db()
    await workspace.load()
    try:
        yield
    finally:
        await close_db()


mcp = FastMCP(
    "PM Toolkit",
    instructions="Prioritize a backlog with RICE or ICE scoring, export it as Markdown, CSV or JSON, and draft PRDs as Markdown.",
    lifespan=lifespan,
)


def _table(items: ItemCollection, mode: ScoreMode, sort_key: SortKey) -> list[dict]:
    scored = score_items(items.records, mode, sort_key)
    return [
        {**s.model_dump(), "rank": idx, "score_display": format_fixed(s.score)}
        for idx, s in enumerate(scored, start=1)
    ]


def _table_summary(rows: list[dict], mode: ScoreMode) -> str:
    if not rows:
        return "No items yet. Add one with pm_add_item."
    top = rows[0]
    return f"{len(rows)} item(s) scored with {mode.value}. Top: {top['title'] or '-'} ({top['score_display']})."


# ─── MCP Apps UI Resource ─────────────────────────────────────────────────────

APP_RESOURCE_URI = "ui://pm-toolkit/app"


@mcp.resource(
    APP_RESOURCE_URI,
    mime_type=MCP_APP_MIME,
)
def app_ui() -> str:
    """PM Toolkit — prioritization table, exports, and PRD generator."""
    return get_app_html()


# ─── Tool 1: Open MCP App (Interactive UI) ──────────────────────────────────


@mcp.tool(annotations=READ_ONLY, meta={"ui": {"resourceUri": APP_RESOURCE_URI}})
async def open_pm_app() -> dict:
    """Open the PM Toolkit app — the RICE-scored prioritization table."""
    mode = ScoreMode.RICE
    rows = _table(workspace.items, mode, SortKey.SCORE)
    return {
        "title": "Prioritization",
        "mode": mode.value,
        "items": rows,
        "impact_scale": list(IMPACT_SCALE),
        "summary": _table_summary(rows, mode),
    }


# ─── Tool 2: Prioritize ─────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def pm_prioritize(mode: str = "RICE", sort_key: str = "score") -> dict:
    """Score every backlog item and return them in display order.

    Args:
        mode: 'RICE' (Reach x Impact x Confidence / Effort) or 'ICE' (Impact x Confidence / Effort).
        sort_key: 'score' (highest first), 'title' or 'owner' (A to Z).
    """
    score_mode = ScoreMode.parse(mode)
    rows = _table(workspace.items, score_mode, SortKey.parse(sort_key))
    return {
        "title": f"Prioritization ({score_mode.value})",
        "mode": score_mode.value,
        "sort_key": SortKey.parse(sort_key).value,
        "items": rows,
        "summary": _table_summary(rows, score_mode),
    }


# ─── Tool 3-5: Edit items ───────────────────────────────────────────────────


@mcp.tool(annotations=EDITS)
async def pm_add_item(
    title: str = "",
    owner: str = "",
    reach: int | float = 100,
    impact: int | float = 1,
    confidence: int | float = 80,
    effort: int | float = 1,
) -> dict:
    """Add a backlog item.

    Args:
        title: Feature name.
        owner: Who owns it.
        reach: Users or events affected per period.
        impact: 0.25 (minimal), 0.5 (low), 1 (medium), 2 (high), 3 (massive).
        confidence: Percent certainty, 0-100.
        effort: Person-months or story points.
    """
    item = workspace.items.add(
        title=title, owner=owner, reach=reach, impact=impact, confidence=confidence, effort=effort,
    )
    await workspace.commit()
    return {"item": item, "count": len(workspace.items), "summary": f"Added item {item['id']}."}


@mcp.tool(annotations=EDITS)
async def pm_update_item(item_id: str, field: str, value: str) -> dict:
    """Change one field of a backlog item.

    Args:
        item_id: The item's id.
        field: One of title, owner, reach, impact, confidence, effort.
        value: New value. Numeric fields are parsed as numbers.
    """
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"Invalid field: {field}. Use one of {', '.join(EDITABLE_FIELDS)}.")

    new_value: object = value
    if field in NUMERIC_FIELDS:
        try:
            new_value = float(value) if value.strip() else 0.0
        except ValueError:
            raise ValueError(f"{field} must be a number, got {value!r}") from None
        if not math.isfinite(new_value):
            raise ValueError(f"{field} must be a finite number, got {value!r}")
        if new_value.is_integer():
            new_value = int(new_value)

    item = workspace.items.update(item_id, **{field: new_value})
    if item is None:
        return {"item": None, "updated": False, "summary": f"No item with id {item_id}."}

    await workspace.commit()
    return {"item": item, "updated": True, "summary": f"Set {field} on {item_id}."}


@mcp.tool(annotations=DESTRUCTIVE)
async def pm_remove_item(item_id: str) -> dict:
    """Delete a backlog item.

    Args:
        item_id: The item's id.
    """
    removed = workspace.items.remove(item_id)
    if removed:
        await workspace.commit()
    return {
        "removed": removed,
        "count": len(workspace.items),
        "summary": f"Removed {item_id}." if removed else f"No item with id {item_id}.",
    }


# ─── Tool 6: Export ─────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def pm_export(fmt: str = "markdown", mode: str = "RICE", sort_key: str = "score") -> dict:
    """Export the backlog as a downloadable file.

    Args:
        fmt: 'markdown', 'csv', or 'json' (a raw backup that pm_import_json can restore).
        mode: Scoring mode for markdown and csv. Default 'RICE'.
        sort_key: 'score', 'title' or 'owner'. Default 'score'.
    """
    artifact = export_items(workspace.items, fmt, mode, sort_key)
    return {
        **artifact.model_dump(),
        "summary": f"Exported {len(workspace.items)} item(s) to {artifact.filename}.",
    }


# ─── Tool 7: Import ─────────────────────────────────────────────────────────


@mcp.tool(annotations=DESTRUCTIVE)
async def pm_import_json(content: str) -> dict:
    """Replace the backlog with a JSON backup produced by pm_export(fmt='json').

    Anything other than a JSON array is ignored and the backlog is left as it was.

    Args:
        content: Text of the backup file.
    """
    imported = import_json(workspace.items, content)
    if imported:
        await workspace.commit()
    return {
        "imported": imported,
        "count": len(workspace.items),
        "summary": f"Backlog now has {len(workspace.items)} item(s).",
    }


# ─── Tool 8: PRD Generator ──────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def pm_generate_prd(
    title: str = "",
    context: str = "",
    problem: str = "",
    goals: Optional[list[str]] = None,
    non_goals: Optional[list[str]] = None,
    users: Optional[list[str]] = None,
    assumptions: Optional[list[str]] = None,
    metrics: Optional[list[str]] = None,
    requirements: Optional[list[str]] = None,
    risks: Optional[list[str]] = None,
) -> dict:
    """Draft a Product Requirements Document as Markdown.

    List sections left out use starter entries; pass an empty list to drop a section.

    Args:
        title: Project title.
        context: One or two lines — why now, who benefits.
        problem: What problem are we solving?
        goals: Clear, measurable outcomes.
        non_goals: Explicitly out of scope.
        users: Target users and personas.
        assumptions: What must be true?
        metrics: Success metrics.
        requirements: 'As a <user>, I can…' statements.
        risks: What could go wrong, and mitigations.
    """
    sections = {
        "goals": goals,
        "non_goals": non_goals,
        "users": users,
        "assumptions": assumptions,
        "metrics": metrics,
        "requirements": requirements,
        "risks": risks,
    }
    doc = PRDDocument(
        title=title,
        context=context,
        problem=problem,
        **{name: entries for name, entries in sections.items() if entries is not None},
    )
    artifact = export_prd(doc)
    return {
        **artifact.model_dump(),
        "summary": f"PRD '{doc.title or 'Untitled PRD'}' ready as {artifact.filename}.",
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
