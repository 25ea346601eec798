"""Pydantic models for API request/response."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from launcher_search.core.action import Action, ActionSpec, Priority
from launcher_search.core.usage import UsageRecord

# ============ Request Models ============


class ActionModel(BaseModel):
    """Declaration of one action."""

    id: str = Field(..., min_length=1, max_length=512, description="Unique action id")
    name: str = Field(..., max_length=1000, description="Display name")
    keywords: str | list[str] | None = Field(
        None, description='Keywords as a list or a comma-separated string ("calc, math")'
    )
    parent_id: str | None = Field(None, description="Id of the parent action")
    stable_bias: float | None = Field(None, description="Constant ranking offset")
    section: str | None = Field(None, description="Group label, searchable")
    subtitle: str | None = Field(None, description="Secondary label, searchable")
    priority: int = Field(Priority.NORMAL, description="Ordering when the query is empty")

    def to_spec(self) -> ActionSpec:
        return ActionSpec.create(
            self.id,
            self.name,
            self.keywords,
            parent_id=self.parent_id,
            stable_bias=self.stable_bias,
            section=self.section,
            subtitle=self.subtitle,
            priority=self.priority,
        )


class RegisterActionsRequest(BaseModel):
    """Request to register a batch of actions (parents before children)."""

    actions: list[ActionModel] = Field(..., description="Actions to register, in order")


class UnregisterActionsRequest(BaseModel):
    """Request to remove actions and their descendants."""

    ids: list[str] = Field(..., description="Ids of the actions to remove")


class SearchRequest(BaseModel):
    """Request to search the catalog."""

    query: str = Field(..., max_length=1000, description="The query text")
    root_id: str | None = Field(None, description="Only search below this action")
    limit: int | None = Field(None, ge=1, le=1000, description="Maximum number of results")
    reference_time: datetime | None = Field(
        None, description="Reference time for recency scoring (default: now)"
    )


class UsageRequest(BaseModel):
    """Request to record a launch."""

    action_id: str = Field(..., min_length=1, description="The launched action")
    query: str = Field("", max_length=1000, description="Query the action was launched from")
    timestamp: datetime | None = Field(None, description="When the launch happened (default: now)")


# ============ Response Models ============


class ActionResponse(BaseModel):
    """A registered action."""

    id: str
    name: str
    keywords: list[str]
    parent_id: str | None = None
    stable_bias: float | None = None
    section: str | None = None
    subtitle: str | None = None
    priority: int = Priority.NORMAL
    children: list[str] = Field(default_factory=list)

    @classmethod
    def from_action(cls, action: Action) -> ActionResponse:
        return cls(**action.to_dict())


class RegisterActionsResponse(BaseModel):
    """Response from registering actions."""

    registered: list[str] = Field(..., description="Ids registered, in order")
    total: int = Field(..., description="Actions in the catalog after registration")


class UnregisterActionsResponse(BaseModel):
    """Response from unregistering actions."""

    removed: list[str] = Field(..., description="Ids removed, descendants included")
    total: int = Field(..., description="Actions in the catalog after removal")


class SearchResult(BaseModel):
    """One ranked result."""

    id: str
    name: str
    score: float
    base_score: float
    section: str | None = None
    subtitle: str | None = None


class SearchResponse(BaseModel):
    """Ranked search results."""

    query: str
    results: list[SearchResult]


class UsageRecordResponse(BaseModel):
    """Usage history of one action."""

    action_id: str
    usage_count: int
    last_used_time: datetime | None = None
    recent_usage: list[dict[str, Any]] = Field(default_factory=list)
    query_affinity: dict[str, dict[str, Any]] = Field(default_factory=dict)
    stable_bias: float | None = None

    @classmethod
    def from_record(cls, action_id: str, record: UsageRecord) -> UsageRecordResponse:
        return cls(
            action_id=action_id,
            usage_count=record.usage_count,
            last_used_time=record.last_used_time,
            recent_usage=[d.to_dict() for d in record.recent_usage],
            query_affinity={q: e.to_dict() for q, e in record.query_affinity.items()},
            stable_bias=record.stable_bias,
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    actions: int = 0
    history_records: int = 0


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: str | None = None
