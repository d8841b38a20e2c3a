"""PM Toolkit MCP App Server.

Prioritize a backlog with RICE or ICE scoring, export it as Markdown, CSV or
JSON, and draft PRDs. Local-first: the backlog lives in a SQLite file.
"""

__version__ = "0.1.0"

from .app_definition import PMToolkitApp


def get_app_html() -> str:
    """Return the MCP App HTML content. Re-renders each call for hot reload."""
    return PMToolkitApp().render()
