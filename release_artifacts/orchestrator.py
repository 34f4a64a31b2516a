"""
Release artifact pipeline.

Waits for the CI run of the release commit, then fetches and stages each
planned artifact into the output directory.
"""

import asyncio
from pathlib import Path
from typing import List, Optional

from release_artifacts.artifact_fetcher import fetch_artifact
from release_artifacts.config import Settings
from release_artifacts.github_client import GitHubActionsClient
from release_artifacts.models import ArtifactRequest, RunQuery, RunRecord
from release_artifacts.observability import (
    EventHook,
    PipelineEvent,
    emit_event,
    get_logger,
    trace_span,
)
from release_artifacts.package_metadata import resolve_release_tarball
from release_artifacts.run_waiter import wait_for_run
from release_artifacts.stager import stage_artifact

logger = get_logger(__name__)


class ReleaseArtifactPipeline:
    """Sequences run waiting, artifact fetching and staging for one release."""

    def __init__(
        self,
        settings: Settings,
        client: GitHubActionsClient,
        on_event: Optional[EventHook] = None,
        work_dir: Optional[Path] = None,
    ):
        self.settings = settings
        self.client = client
        self.on_event = on_event
        self.work_dir = work_dir

    @property
    def query(self) -> RunQuery:
        return RunQuery(
            commit_sha=self.settings.ci_commit_sha,
            workflow_name=self.settings.workflow_name,
        )

    def release_tarball(self) -> str:
        return resolve_release_tarball(
            self.settings.package_json_path,
            release_name=self.settings.release_name,
            release_version=self.settings.release_version,
        )

    def plan(self, package: Optional[str] = None) -> List[ArtifactRequest]:
        """
        Decide which artifacts to fetch.

        Without a package both the release tarball artifact and the workspace
        packages artifact are staged. With a package only the artifact that
        carries it is fetched, and only that file is kept.
        """
        tarball = self.release_tarball()
        workspace = self.settings.workspace_artifact_name

        if package is None:
            return [
                ArtifactRequest(artifact_name=tarball, expected_files=(tarball,)),
                ArtifactRequest(artifact_name=workspace, pattern="*.tgz"),
            ]
        if package == tarball:
            return [ArtifactRequest(artifact_name=tarball, expected_files=(package,))]
        return [ArtifactRequest(artifact_name=workspace, expected_files=(package,))]

    async def wait(self) -> RunRecord:
        return await wait_for_run(
            self.client,
            self.settings.github_owner,
            self.settings.github_repo,
            self.query,
            timeout_seconds=self.settings.workflow_timeout_seconds,
            poll_interval_seconds=self.settings.poll_interval_seconds,
            on_event=self.on_event,
        )

    async def stage(self, run: RunRecord, request: ArtifactRequest) -> List[Path]:
        payload = await fetch_artifact(
            self.client,
            self.settings.github_owner,
            self.settings.github_repo,
            run,
            request.artifact_name,
        )
        emit_event(
            PipelineEvent.ARTIFACT_FETCHED,
            {"run_id": run.id, "artifact": payload.name, "size": payload.size},
            self.on_event,
        )

        staged = await asyncio.to_thread(
            stage_artifact,
            payload,
            request,
            self.settings.output_dir,
            self.work_dir,
            self.settings.extract_command,
        )
        emit_event(
            PipelineEvent.ARTIFACT_STAGED,
            {"artifact": payload.name, "files": ", ".join(str(path) for path in staged)},
            self.on_event,
        )
        return staged

    @trace_span
    async def run(self, package: Optional[str] = None) -> List[Path]:
        """
        Stage the release artifacts for the configured commit.

        The plan is resolved before waiting so metadata problems surface
        without polling the CI service.

        Returns:
            All staged file paths, in plan order

        Raises:
            ReleaseArtifactError: From any stage; nothing is retried
        """
        requests = self.plan(package)
        logger.info(
            f"Waiting for '{self.settings.workflow_name}' run of commit "
            f"{self.settings.ci_commit_sha} to stage "
            f"{', '.join(request.artifact_name for request in requests)}"
        )

        run = await self.wait()

        staged: List[Path] = []
        for request in requests:
            staged.extend(await self.stage(run, request))
        return staged
