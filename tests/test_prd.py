from pm_toolkit.core.models import PRDDocument
from pm_toolkit.core.prd import export_prd, prd_filename, render_prd


def test_untitled_document_has_problem_statement():
    md = render_prd(PRDDocument(goals=[], non_goals=[], users=[], assumptions=[], metrics=[], requirements=[], risks=[]))
    assert md.startswith("# Untitled PRD\n")
    assert "## Problem Statement" in md
    assert "## Goals" not in md


def test_sections_in_order_with_bullets():
    doc = PRDDocument(
        title="Webhooks",
        context="Partners keep polling",
        problem="Polling is slow.",
        goals=["Cut latency"],
        risks=["Retries storm"],
    )
    md = render_prd(doc)
    assert md.startswith("# Webhooks\n\n> Partners keep polling\n")
    assert "\n## Problem Statement\nPolling is slow." in md
    assert "\n## Goals\n- Cut latency\n" in md
    assert "\n## Risks & Mitigations\n- Retries storm\n" in md

    headings = [line for line in md.split("\n") if line.startswith("## ")]
    assert headings == [
        "## Problem Statement",
        "## Goals",
        "## Non-Goals",
        "## Target Users & Personas",
        "## Assumptions",
        "## Success Metrics",
        "## Requirements",
        "## Risks & Mitigations",
    ]


def test_empty_section_omitted():
    md = render_prd(PRDDocument(title="X", assumptions=[]))
    assert "## Assumptions" not in md
    assert "## Success Metrics\n- Activation rate\n- Retention D30\n" in md


def test_defaults():
    doc = PRDDocument()
    assert doc.goals == ["Increase adoption", "Reduce time-to-first-value"]
    doc.goals.append("more")
    assert PRDDocument().goals == ["Increase adoption", "Reduce time-to-first-value"]


def test_filename_slug():
    assert prd_filename("My  New—Feature!") == "my-new-feature-.md"
    assert prd_filename("") == "untitled.md"
    assert prd_filename("API v2") == "api-v2.md"


def test_export_artifact():
    artifact = export_prd(PRDDocument(title="Search"))
    assert artifact.filename == "search.md"
    assert artifact.content_type == "text/markdown;charset=utf-8"
    assert artifact.content.startswith("# Search")
