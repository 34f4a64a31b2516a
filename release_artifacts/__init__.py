"""Stage CI build artifacts of a release commit into a local output directory."""

from release_artifacts.artifact_fetcher import fetch_artifact
from release_artifacts.config import Settings, load_settings
from release_artifacts.exceptions import (
    AmbiguousArtifactError,
    ConfigurationError,
    ExtractionError,
    ExtractionVerificationError,
    NotFoundError,
    ReleaseArtifactError,
    RunFailedError,
    RunTimeoutError,
)
from release_artifacts.github_client import GitHubActionsClient
from release_artifacts.models import (
    ArtifactPayload,
    ArtifactRef,
    ArtifactRequest,
    RunConclusion,
    RunQuery,
    RunRecord,
    RunStatus,
)
from release_artifacts.observability import PipelineEvent
from release_artifacts.orchestrator import ReleaseArtifactPipeline
from release_artifacts.run_locator import find_run
from release_artifacts.run_waiter import wait_for_run
from release_artifacts.stager import stage_artifact

__all__ = [
    "AmbiguousArtifactError",
    "ArtifactPayload",
    "ArtifactRef",
    "ArtifactRequest",
    "ConfigurationError",
    "ExtractionError",
    "ExtractionVerificationError",
    "GitHubActionsClient",
    "NotFoundError",
    "PipelineEvent",
    "ReleaseArtifactError",
    "ReleaseArtifactPipeline",
    "RunConclusion",
    "RunFailedError",
    "RunQuery",
    "RunRecord",
    "RunStatus",
    "RunTimeoutError",
    "Settings",
    "fetch_artifact",
    "find_run",
    "load_settings",
    "stage_artifact",
    "wait_for_run",
]
