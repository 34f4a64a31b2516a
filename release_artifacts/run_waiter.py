"""
Polling until a workflow run reaches a terminal state.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from release_artifacts.exceptions import RunFailedError, RunTimeoutError
from release_artifacts.github_client import GitHubActionsClient
from release_artifacts.models import RunQuery, RunRecord
from release_artifacts.observability import EventHook, PipelineEvent, emit_event, trace_span
from release_artifacts.run_locator import find_run

DEFAULT_TIMEOUT_SECONDS = 15 * 60
DEFAULT_POLL_INTERVAL_SECONDS = 10.0


@trace_span
async def wait_for_run(
    client: GitHubActionsClient,
    owner: str,
    repo: str,
    query: RunQuery,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    on_event: Optional[EventHook] = None,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> RunRecord:
    """
    Wait for the run matching query to complete successfully.

    The run is looked up again on every poll. The deadline is fixed when waiting
    starts and only checked while the run is still incomplete, so a run found
    already failed is reported straight away.

    Args:
        client: GitHub Actions client
        owner: Repository owner
        repo: Repository name
        query: Commit and workflow name to match
        timeout_seconds: Wall-clock budget for the run to complete
        poll_interval_seconds: Pause between polls
        on_event: Optional pipeline event hook
        clock: Wall-clock source
        sleep: Awaitable pause

    Returns:
        The completed, successful run record

    Raises:
        NotFoundError: If no run matches the query
        RunTimeoutError: If the deadline passes while the run is incomplete
        RunFailedError: If the run completes with a conclusion other than success
    """
    deadline = clock() + timeout_seconds
    located = False

    while True:
        run = await find_run(client, owner, repo, query)

        if not located:
            emit_event(
                PipelineEvent.RUN_LOCATED,
                {"run_id": run.id, "commit": query.commit_sha, "url": run.html_url or ""},
                on_event,
            )
            located = True

        if not run.is_completed:
            if clock() > deadline:
                raise RunTimeoutError(
                    f"Timed out waiting for workflow run {run.id} to finish "
                    f"(status={run.status})"
                )

            emit_event(
                PipelineEvent.RUN_WAITING,
                {"run_id": run.id, "status": run.status},
                on_event,
            )
            await sleep(poll_interval_seconds)
            continue

        if not run.succeeded:
            raise RunFailedError(run.conclusion, run_id=run.id)

        emit_event(
            PipelineEvent.RUN_COMPLETED,
            {"run_id": run.id, "conclusion": run.conclusion},
            on_event,
        )
        return run
