"""PM Toolkit MCP App — pure Python config, no custom JS/CSS."""

from mcpbundles_app_ui import App, Card, DarkTheme


class PMToolkitApp(App):
    """Prioritization and PRD tabs — tabbed engine and views from library."""

    name = "PM Toolkit"
    subtitle = "RICE/ICE prioritization, exports & PRD drafts"
    theme = DarkTheme(
        accent="#8b5cf6",
        bg_page="#0f172a",
        bg_card="#1e293b",
        bg_hover="#253048",
        text_primary="#f1f5f9",
        text_secondary="#e2e8f0",
        text_muted="#94a3b8",
        border="#334155",
        success="#10b981",
        warning="#f59e0b",
        error="#ef4444",
    )

    layout = [Card(title="")]

    tool_name = "open_pm_app"
    tabs = [
        {"id": "prioritize", "label": "Prioritize", "tool": "open_pm_app", "type": "dashboard"},
        {"id": "tools", "label": "Tools", "tool": None, "type": "tools"},
    ]
    footer_text = "Local-first · RICE · ICE · PRD"

    tool_catalog_intro = (
        "This server provides <strong>8 tools</strong> your AI can call directly. "
        "One opens this interactive app, four read or edit the backlog, and the rest export it, "
        "restore it from a backup, or draft a PRD. "
        "The backlog is stored locally and saved after every change."
    )
    tool_catalog = [
        {"name": "open_pm_app", "label": "Open PM Toolkit", "icon": "\U0001f4ca", "desc": "Opens this app with the RICE-scored backlog.", "usage": "No arguments needed — just call it.", "source": "Local"},
        {"name": "pm_prioritize", "label": "Prioritize", "icon": "\U0001f3af", "desc": "Scores every item with RICE or ICE and sorts by score, title or owner.", "usage": 'pm_prioritize(mode="ICE", sort_key="score")', "source": "Local"},
        {"name": "pm_add_item", "label": "Add Item", "icon": "➕", "desc": "Adds a backlog item. Impact scale: 0.25, 0.5, 1, 2, 3.", "usage": 'pm_add_item(title="Dark mode", reach=200, impact=2, confidence=80, effort=2)', "source": "Local", "stateful": True},
        {"name": "pm_update_item", "label": "Update Item", "icon": "✏️", "desc": "Changes one field of an item.", "usage": 'pm_update_item(item_id="1a2b3c4d", field="effort", value="3")', "source": "Local", "stateful": True},
        {"name": "pm_remove_item", "label": "Remove Item", "icon": "\U0001f5d1️", "desc": "Deletes an item by id.", "usage": 'pm_remove_item(item_id="1a2b3c4d")', "source": "Local", "stateful": True},
        {"name": "pm_export", "label": "Export", "icon": "\U0001f4e4", "desc": "Markdown table, CSV, or a JSON backup.", "usage": 'pm_export(fmt="csv", mode="RICE")', "source": "Local"},
        {"name": "pm_import_json", "label": "Import Backup", "icon": "\U0001f4e5", "desc": "Replaces the backlog with a JSON backup. Anything but a JSON array is ignored.", "usage": "pm_import_json(content=\"[...]\")", "source": "Local", "stateful": True},
        {"name": "pm_generate_prd", "label": "PRD Generator", "icon": "\U0001f4dd", "desc": "Drafts a Product Requirements Document as Markdown.", "usage": 'pm_generate_prd(title="Webhooks", problem="...")', "source": "Local"},
    ]
