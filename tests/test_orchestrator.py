"""
Tests for the release artifact pipeline.
"""

import json

import pytest

from release_artifacts.exceptions import (
    ConfigurationError,
    ExtractionVerificationError,
    NotFoundError,
    RunFailedError,
)
from release_artifacts.models import ArtifactRequest
from release_artifacts.orchestrator import ReleaseArtifactPipeline
from tests.fakes import FakeActionsClient, artifact_data, make_zip, run_data

TARBALL = "acme-widgets-1.2.3.tgz"


@pytest.fixture
def client():
    return FakeActionsClient(
        runs=[run_data(run_id=42)],
        artifacts={
            42: [
                artifact_data(501, TARBALL),
                artifact_data(502, "workspace-packages"),
            ]
        },
        downloads={
            501: make_zip({TARBALL: b"main package"}),
            502: make_zip(
                {
                    "acme-widgets-plugin-1.2.3.tgz": b"plugin",
                    "acme-widgets-cli-1.2.3.tgz": b"cli",
                }
            ),
        },
    )


class TestPlan:
    """Tests for choosing which artifacts to stage."""

    def test_plan_without_package_stages_all(self, settings, client):
        """Test the default plan covers the release tarball and workspace packages."""
        pipeline = ReleaseArtifactPipeline(settings, client)

        assert pipeline.plan() == [
            ArtifactRequest(artifact_name=TARBALL, expected_files=(TARBALL,)),
            ArtifactRequest(artifact_name="workspace-packages", pattern="*.tgz"),
        ]

    def test_plan_for_release_tarball(self, settings, client):
        """Test requesting the release tarball fetches only its artifact."""
        pipeline = ReleaseArtifactPipeline(settings, client)

        assert pipeline.plan(TARBALL) == [
            ArtifactRequest(artifact_name=TARBALL, expected_files=(TARBALL,))
        ]

    def test_plan_for_workspace_package(self, settings, client):
        """Test any other package is taken from the workspace packages artifact."""
        pipeline = ReleaseArtifactPipeline(settings, client)

        assert pipeline.plan("acme-widgets-cli-1.2.3.tgz") == [
            ArtifactRequest(
                artifact_name="workspace-packages",
                expected_files=("acme-widgets-cli-1.2.3.tgz",),
            )
        ]

    def test_plan_reads_package_json(self, settings, client, tmp_path):
        """Test the tarball name comes from package.json when not configured."""
        (tmp_path / "package.json").write_text(
            json.dumps({"name": "@splunk/otel", "version": "3.1.0"})
        )
        settings = settings.model_copy(update={"release_name": None, "release_version": None})
        pipeline = ReleaseArtifactPipeline(settings, client)

        assert pipeline.release_tarball() == "splunk-otel-3.1.0.tgz"

    def test_plan_version_override_with_package_json_name(self, settings, client, tmp_path):
        """Test a configured version is combined with the package.json name."""
        (tmp_path / "package.json").write_text(
            json.dumps({"name": "@splunk/otel", "version": "3.1.0"})
        )
        settings = settings.model_copy(update={"release_name": None, "release_version": "4.0.0-rc.1"})
        pipeline = ReleaseArtifactPipeline(settings, client)

        assert pipeline.release_tarball() == "splunk-otel-4.0.0-rc.1.tgz"


class TestRun:
    """Tests for the full wait, fetch and stage sequence."""

    async def test_run_stages_all_artifacts(self, settings, client, recorder, tmp_path):
        """Test the default run stages the tarball and every workspace package."""
        pipeline = ReleaseArtifactPipeline(settings, client, on_event=recorder)

        staged = await pipeline.run()

        dist = tmp_path / "dist"
        assert staged == [
            dist / TARBALL,
            dist / "acme-widgets-cli-1.2.3.tgz",
            dist / "acme-widgets-plugin-1.2.3.tgz",
        ]
        assert (dist / TARBALL).read_bytes() == b"main package"
        assert (dist / "acme-widgets-cli-1.2.3.tgz").read_bytes() == b"cli"
        assert recorder.names == [
            "run-located",
            "run-completed",
            "artifact-fetched",
            "artifact-staged",
            "artifact-fetched",
            "artifact-staged",
        ]
        assert list(tmp_path.glob("*.zip")) == []

    async def test_run_single_package(self, settings, client, tmp_path):
        """Test a package selection fetches one artifact and stages one file."""
        pipeline = ReleaseArtifactPipeline(settings, client)

        staged = await pipeline.run("acme-widgets-plugin-1.2.3.tgz")

        assert staged == [tmp_path / "dist" / "acme-widgets-plugin-1.2.3.tgz"]
        assert client.download_requests == [{"artifact_id": 502, "archive_format": "zip"}]
        assert not (tmp_path / "dist" / "acme-widgets-cli-1.2.3.tgz").exists()

    async def test_run_missing_package_in_workspace_artifact(self, settings, client):
        """Test a package absent from the workspace artifact fails verification."""
        pipeline = ReleaseArtifactPipeline(settings, client)

        with pytest.raises(ExtractionVerificationError):
            await pipeline.run("acme-widgets-missing-1.2.3.tgz")

    async def test_run_missing_artifact_fails(self, settings, client, recorder):
        """Test a missing artifact aborts the run after earlier artifacts were staged."""
        del client.artifacts[42][1]
        pipeline = ReleaseArtifactPipeline(settings, client, on_event=recorder)

        with pytest.raises(NotFoundError, match="workspace-packages"):
            await pipeline.run()

        assert recorder.names.count("artifact-staged") == 1

    async def test_run_failed_ci_run_fetches_nothing(self, settings, client):
        """Test a failed CI run stops the pipeline before any artifact request."""
        client.polls = [[run_data(run_id=42, conclusion="failure")]]
        pipeline = ReleaseArtifactPipeline(settings, client)

        with pytest.raises(RunFailedError):
            await pipeline.run()

        assert client.artifact_requests == []

    async def test_run_metadata_error_before_polling(self, settings, client):
        """Test unreadable package metadata fails before the CI service is called."""
        settings = settings.model_copy(update={"release_name": None, "release_version": None})
        pipeline = ReleaseArtifactPipeline(settings, client)

        with pytest.raises(ConfigurationError, match="package.json"):
            await pipeline.run()

        assert client.run_requests == []
