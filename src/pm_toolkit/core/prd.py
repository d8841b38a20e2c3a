"""Product Requirements Document rendering."""

from __future__ import annotations

import re

from .models import ExportArtifact, PRDDocument

PRD_CONTENT_TYPE = "text/markdown;charset=utf-8"

_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def _section(name: str, entries: list[str]) -> str:
    if not entries:
        return ""
    return f"\n## {name}\n" + "\n".join(f"- {entry}" for entry in entries) + "\n"


def render_prd(doc: PRDDocument) -> str:
    """Render the PRD as Markdown.

    The problem statement heading is always present; list sections appear
    only when they have at least one entry.
    """
    parts = [
        f"# {doc.title or 'Untitled PRD'}",
        f"\n> {doc.context}\n" if doc.context else "",
        "\n## Problem Statement\n" + doc.problem,
        _section("Goals", doc.goals),
        _section("Non-Goals", doc.non_goals),
        _section("Target Users & Personas", doc.users),
        _section("Assumptions", doc.assumptions),
        _section("Success Metrics", doc.metrics),
        _section("Requirements", doc.requirements),
        _section("Risks & Mitigations", doc.risks),
    ]
    return "\n".join(parts)


def prd_filename(title: str) -> str:
    slug = _SLUG_RUN.sub("-", (title or "untitled").lower())
    return f"{slug}.md"


def export_prd(doc: PRDDocument) -> ExportArtifact:
    return ExportArtifact(
        filename=prd_filename(doc.title),
        content_type=PRD_CONTENT_TYPE,
        content=render_prd(doc),
    )
