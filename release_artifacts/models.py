"""
Domain models for workflow runs and their artifacts.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class RunStatus(StrEnum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    WAITING = "waiting"
    REQUESTED = "requested"
    PENDING = "pending"


class RunConclusion(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"
    ACTION_REQUIRED = "action_required"
    NEUTRAL = "neutral"
    STALE = "stale"


class RunQuery(BaseModel):
    """Identifies the workflow run to wait for."""

    model_config = ConfigDict(frozen=True)

    commit_sha: str
    workflow_name: str


class RunRecord(BaseModel):
    """Domain model for a workflow run as reported by the CI service."""

    id: int
    name: Optional[str] = None
    status: str
    conclusion: Optional[str] = None
    head_sha: str
    html_url: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> RunRecord:
        return cls.model_validate(data)

    @property
    def is_completed(self) -> bool:
        return self.status == RunStatus.COMPLETED

    @property
    def succeeded(self) -> bool:
        return self.is_completed and self.conclusion == RunConclusion.SUCCESS


class ArtifactRef(BaseModel):
    """Domain model for an artifact listed under a workflow run."""

    id: int
    name: str
    size_in_bytes: int = 0
    expired: bool = False

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> ArtifactRef:
        return cls.model_validate(data)


class ArtifactPayload(BaseModel):
    """Downloaded artifact archive, held in memory until staged."""

    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class ArtifactRequest(BaseModel):
    """
    An artifact to fetch and the extracted items to keep from it.

    With expected_files set, each of those files must exist after extraction
    and only they are relocated. Otherwise every top-level extracted item
    matching pattern is relocated, and at least one must match.
    """

    model_config = ConfigDict(frozen=True)

    artifact_name: str
    expected_files: Tuple[str, ...] = ()
    pattern: str = Field(default="*")
