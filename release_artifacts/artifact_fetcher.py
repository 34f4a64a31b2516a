"""
Artifact lookup and download for a workflow run.
"""

from release_artifacts.exceptions import AmbiguousArtifactError, NotFoundError
from release_artifacts.github_client import GitHubActionsClient
from release_artifacts.models import ArtifactPayload, ArtifactRef, RunRecord
from release_artifacts.observability import get_logger, trace_span

logger = get_logger(__name__)


@trace_span
async def fetch_artifact(
    client: GitHubActionsClient,
    owner: str,
    repo: str,
    run: RunRecord,
    name: str,
) -> ArtifactPayload:
    """
    Download the artifact called name from run.

    Each call is independent, so several artifacts of one run may be fetched
    one after another or concurrently.

    Args:
        client: GitHub Actions client
        owner: Repository owner
        repo: Repository name
        run: Completed workflow run
        name: Exact artifact name

    Returns:
        ArtifactPayload holding the zip archive

    Raises:
        NotFoundError: If the run has no live artifact with that name
        AmbiguousArtifactError: If several live artifacts share that name
    """
    body = await client.list_run_artifacts(owner, repo, run.id, name=name)
    matches = [
        ArtifactRef.from_api(artifact)
        for artifact in body.get("artifacts", [])
        if artifact.get("name") == name
    ]
    live = [artifact for artifact in matches if not artifact.expired]

    if not live:
        if matches:
            raise NotFoundError(f"Artifact {name} of run {run.id} has expired")
        raise NotFoundError(f"Unable to find artifact named {name} in run {run.id}")

    if len(live) > 1:
        ids = ", ".join(str(artifact.id) for artifact in live)
        raise AmbiguousArtifactError(
            f"Run {run.id} has {len(live)} artifacts named {name} (ids {ids})"
        )

    artifact = live[0]
    logger.info(f"Downloading artifact {name} (id={artifact.id}, {artifact.size_in_bytes} bytes)")
    data = await client.download_artifact(owner, repo, artifact.id, archive_format="zip")

    return ArtifactPayload(name=artifact.name, data=data)
