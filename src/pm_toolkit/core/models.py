"""Pydantic data models — the shared business objects.

Records are stored as plain JSON objects so that imports and backups keep
every field exactly as written. These models give them a typed shape where
one is needed: defaults for new items, scored rows for display and export,
and the PRD form.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


IMPACT_SCALE: tuple[float, ...] = (0.25, 0.5, 1, 2, 3)


class ScoreMode(str, Enum):
    """Prioritization scoring formula."""

    RICE = "RICE"
    ICE = "ICE"

    @classmethod
    def parse(cls, value: str | ScoreMode) -> ScoreMode:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Invalid scoring mode: {value}. Use 'RICE' or 'ICE'.") from None


class SortKey(str, Enum):
    """Display ordering for the prioritization table."""

    SCORE = "score"
    TITLE = "title"
    OWNER = "owner"

    @classmethod
    def parse(cls, value: str | SortKey) -> SortKey:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Invalid sort key: {value}. Use 'score', 'title' or 'owner'.") from None


class ExportFormat(str, Enum):
    """Downloadable export formats."""

    MARKDOWN = "markdown"
    CSV = "csv"
    JSON = "json"

    @classmethod
    def parse(cls, value: str | ExportFormat) -> ExportFormat:
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized == "md":
            return cls.MARKDOWN
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Invalid export format: {value}. Use 'markdown', 'csv' or 'json'.") from None


class Item(BaseModel):
    """A prioritization candidate with the defaults used for new rows."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Opaque identifier, stable for the item's lifetime")
    title: str = ""
    owner: str = ""
    reach: int | float = Field(100, description="Users or events affected per period")
    impact: int | float = Field(1, description="One of 0.25, 0.5, 1, 2, 3")
    confidence: int | float = Field(80, description="Percent certainty, clamped to 0..100 when scored")
    effort: int | float = Field(1, description="Person-months or story points")


class ScoredItem(BaseModel):
    """A stored record annotated with its score for one render pass."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    title: str = ""
    owner: str = ""
    reach: float = 0
    impact: float = 0
    confidence: float = 0
    effort: float = 0
    score: float


class ExportArtifact(BaseModel):
    """A downloadable file produced by an export."""

    filename: str
    content_type: str
    content: str


DEFAULT_PRD_GOALS = ["Increase adoption", "Reduce time-to-first-value"]
DEFAULT_PRD_NON_GOALS = ["Rewrite of existing systems"]
DEFAULT_PRD_USERS = ["API Producer", "Integration Developer"]
DEFAULT_PRD_ASSUMPTIONS = ["Single-tenant beta first"]
DEFAULT_PRD_METRICS = ["Activation rate", "Retention D30"]
DEFAULT_PRD_REQUIREMENTS = ["As a dev, I can provision …", "As an admin, I can configure …"]
DEFAULT_PRD_RISKS = ["Scope creep", "Timeline risk due to dependencies"]


class PRDDocument(BaseModel):
    """Product Requirements Document form contents."""

    title: str = ""
    context: str = Field("", description="One or two lines: why now, who benefits")
    problem: str = ""
    goals: list[str] = Field(default_factory=lambda: list(DEFAULT_PRD_GOALS))
    non_goals: list[str] = Field(default_factory=lambda: list(DEFAULT_PRD_NON_GOALS))
    users: list[str] = Field(default_factory=lambda: list(DEFAULT_PRD_USERS))
    assumptions: list[str] = Field(default_factory=lambda: list(DEFAULT_PRD_ASSUMPTIONS))
    metrics: list[str] = Field(default_factory=lambda: list(DEFAULT_PRD_METRICS))
    requirements: list[str] = Field(default_factory=lambda: list(DEFAULT_PRD_REQUIREMENTS))
    risks: list[str] = Field(default_factory=lambda: list(DEFAULT_PRD_RISKS))
