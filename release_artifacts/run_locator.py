"""
Workflow run lookup by commit and workflow name.
"""

from release_artifacts.exceptions import NotFoundError
from release_artifacts.github_client import GitHubActionsClient
from release_artifacts.models import RunQuery, RunRecord
from release_artifacts.observability import get_logger

logger = get_logger(__name__)


async def find_run(
    client: GitHubActionsClient,
    owner: str,
    repo: str,
    query: RunQuery,
    per_page: int = 100,
) -> RunRecord:
    """
    Find the workflow run for a commit.

    Runs are listed newest first and filtered server-side by head commit, then
    matched on the exact commit id and the case-insensitive workflow name. Pages
    are requested until a match turns up or the listing is exhausted.

    Args:
        client: GitHub Actions client
        owner: Repository owner
        repo: Repository name
        query: Commit and workflow name to match
        per_page: Runs requested per page

    Returns:
        First matching run record

    Raises:
        NotFoundError: If no run matches
    """
    workflow_name = query.workflow_name.lower()
    page = 1
    seen = 0

    while True:
        body = await client.list_workflow_runs(
            owner, repo, head_sha=query.commit_sha, page=page, per_page=per_page
        )
        runs = body.get("workflow_runs", [])
        seen += len(runs)

        for run in runs:
            if (
                run.get("head_sha") == query.commit_sha
                and (run.get("name") or "").lower() == workflow_name
            ):
                return RunRecord.from_api(run)

        total_count = body.get("total_count")
        if len(runs) < per_page or (total_count is not None and seen >= total_count):
            break

        logger.debug(f"No match in page {page} ({seen} runs seen), fetching next page")
        page += 1

    raise NotFoundError(
        f"Workflow '{query.workflow_name}' not found for commit {query.commit_sha}"
    )
