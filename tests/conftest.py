"""Shared pytest configuration and fixtures for release artifact tests."""

import pytest

from release_artifacts.config import Settings
from tests.fakes import COMMIT, PYTHON_UNZIP, EventRecorder, FakeClock


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run each test in its own directory with no settings leaking from the host."""
    for field_name in Settings.model_fields:
        monkeypatch.delenv(field_name.upper(), raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings for a release of @acme/widgets 1.2.3."""
    return Settings(
        _env_file=None,
        public_artifacts_token="test-token",
        github_owner="acme",
        github_repo="widgets",
        ci_commit_sha=COMMIT,
        release_name="@acme/widgets",
        release_version="1.2.3",
        output_dir=tmp_path / "dist",
        package_json_path=tmp_path / "package.json",
        poll_interval_seconds=0,
        extract_command=PYTHON_UNZIP,
    )


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
