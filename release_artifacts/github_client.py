"""
GitHub Actions REST client.

Covers the three calls the release pipeline needs: listing workflow runs,
listing a run's artifacts, and downloading an artifact archive.
"""

from typing import Any, Dict, Optional

import httpx

from release_artifacts.exceptions import NotFoundError
from release_artifacts.observability import get_logger

logger = get_logger(__name__)

API_VERSION = "2022-11-28"
USER_AGENT = "release-artifacts"


class GitHubActionsClient:
    """Async client for the GitHub Actions runs and artifacts endpoints."""

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            token: Bearer credential for the API
            api_url: API base URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": USER_AGENT,
            },
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubActionsClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        query = {key: value for key, value in (params or {}).items() if value is not None}
        response = await self._client.get(path, params=query)

        # 410 is returned for artifacts past their retention period
        if response.status_code in (404, 410):
            raise NotFoundError(f"GET {path} returned {response.status_code}")

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"GET {path} failed: {e}")
            raise
        return response

    async def list_workflow_runs(
        self,
        owner: str,
        repo: str,
        head_sha: Optional[str] = None,
        page: int = 1,
        per_page: int = 100,
    ) -> Dict[str, Any]:
        """
        List one page of workflow runs for a repository.

        Returns:
            Response body with total_count and workflow_runs
        """
        response = await self._get(
            f"/repos/{owner}/{repo}/actions/runs",
            params={"head_sha": head_sha, "page": page, "per_page": per_page},
        )
        return response.json()

    async def list_run_artifacts(
        self,
        owner: str,
        repo: str,
        run_id: int,
        name: Optional[str] = None,
        page: int = 1,
        per_page: int = 100,
    ) -> Dict[str, Any]:
        """
        List one page of artifacts produced by a workflow run.

        Returns:
            Response body with total_count and artifacts
        """
        response = await self._get(
            f"/repos/{owner}/{repo}/actions/runs/{run_id}/artifacts",
            params={"name": name, "page": page, "per_page": per_page},
        )
        return response.json()

    async def download_artifact(
        self, owner: str, repo: str, artifact_id: int, archive_format: str = "zip"
    ) -> bytes:
        """
        Download an artifact archive.

        The API answers with a redirect to blob storage, which is followed.
        httpx drops the Authorization header when the redirect leaves the API host.
        """
        response = await self._get(
            f"/repos/{owner}/{repo}/actions/artifacts/{artifact_id}/{archive_format}"
        )
        return response.content
