"""
GitHub API Client Module

This module fetches pull request diffs from the GitHub API.

Design Decisions:
- Use httpx for async HTTP requests
- Request the diff media type so the body is raw unified diff text
- Stream the body and return it verbatim
- Every failure surfaces as GitHubFetchError, never a process crash
"""

from typing import Dict, Optional

import httpx

from pr_analyzer.config import Settings
from pr_analyzer.logging_config import get_logger

logger = get_logger(__name__)

DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"


class GitHubFetchError(Exception):
    """Raised when a pull request diff cannot be fetched."""
    def __init__(self, message: str, status_code: int = None, response_body: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class GitHubClient:
    """
    Async GitHub API client for pull request diffs.

    Usage:
        client = GitHubClient(settings)
        diff = await client.fetch_pr_diff("owner", "repo", 42)
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the GitHub client.

        Args:
            settings: Application settings
            transport: Optional httpx transport, used to substitute the network
        """
        self.settings = settings
        self.api_base = settings.github_api_base
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for diff requests."""
        headers = {
            "Accept": DIFF_MEDIA_TYPE,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        # An unset token is sent without credentials and fails upstream
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"
        return headers

    def pr_url(self, owner: str, repo: str, pr_number: int) -> str:
        """Build the API URL of a pull request."""
        return f"{self.api_base}/repos/{owner}/{repo}/pulls/{pr_number}"

    async def fetch_pr_diff(self, owner: str, repo: str, pr_number: int) -> str:
        """
        Fetch the unified diff of a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            The diff text exactly as returned by GitHub

        Raises:
            GitHubFetchError: On transport failure or a non-2xx response
        """
        logger.info(
            "Fetching PR diff",
            owner=owner,
            repo=repo,
            pr_number=pr_number
        )

        url = self.pr_url(owner, repo, pr_number)

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.github_timeout,
                transport=self._transport
            ) as client:
                async with client.stream("GET", url, headers=self._get_headers()) as response:
                    if not response.is_success:
                        error_body = await self._read_error_body(response)
                        logger.error(
                            "GitHub API error",
                            status_code=response.status_code,
                            url=url,
                            error=error_body[:500]
                        )
                        raise GitHubFetchError(
                            f"GitHub API returned status: {response.status_code}",
                            status_code=response.status_code,
                            response_body=error_body
                        )

                    diff = await self._read_body(response)

        except httpx.HTTPError as e:
            logger.error(
                "Request to GitHub API failed",
                url=url,
                error=str(e),
                error_type=type(e).__name__
            )
            raise GitHubFetchError(f"Request to GitHub API failed: {e}") from e

        logger.info(
            "PR diff fetched successfully",
            owner=owner,
            repo=repo,
            pr_number=pr_number,
            diff_length=len(diff)
        )

        return diff

    async def _read_body(self, response: httpx.Response) -> str:
        """Read a streamed response to end of stream and decode it."""
        buffer = bytearray()
        async for chunk in response.aiter_bytes():
            buffer.extend(chunk)
        return buffer.decode(response.encoding or "utf-8", errors="replace")

    async def _read_error_body(self, response: httpx.Response) -> str:
        """
        Read an error response body for diagnostics.

        A failure while reading is reported as a GitHubFetchError that
        still carries the upstream status code.
        """
        try:
            return await self._read_body(response)
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.error(
                "Failed to read GitHub error response",
                status_code=response.status_code,
                error=str(e)
            )
            raise GitHubFetchError(
                f"GitHub API returned status: {response.status_code} "
                f"(error body unreadable: {e})",
                status_code=response.status_code
            ) from e
