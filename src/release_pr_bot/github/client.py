"""Installation-authenticated GitHub REST client."""

import logging
from typing import Any

import httpx

from release_pr_bot.errors import GitHubAPIError
from release_pr_bot.github.auth import GITHUB_ACCEPT, GITHUB_API
from release_pr_bot.github.models import NewPullRequest, PullRequest, PullRequestEdit

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """
    Flatten a GitHub error response into one line.

    Validation failures carry the interesting text in `errors[].message`,
    e.g. "Validation Failed: A pull request already exists for org:develop."
    """
    try:
        data: Any = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if not isinstance(data, dict):
        return response.text

    parts = [str(data.get("message", response.reason_phrase))]
    for error in data.get("errors", []) or []:
        if isinstance(error, dict) and error.get("message"):
            parts.append(str(error["message"]))
        elif isinstance(error, str):
            parts.append(error)
    return ": ".join(parts)


class GitHubClient:
    """Pull request operations scoped to the app's installation."""

    def __init__(
        self,
        auth: httpx.Auth,
        api_url: str = GITHUB_API,
        timeout: float = 30.0,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            auth=auth,
            timeout=timeout,
            headers={
                "Accept": GITHUB_ACCEPT,
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    async def _request(self, method: str, path: str, body: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.request(method, path, json=body)
        if response.is_error:
            raise GitHubAPIError(response.status_code, _error_message(response))
        return response.json()

    async def create_pull_request(
        self, owner: str, repo: str, pull: NewPullRequest
    ) -> PullRequest:
        """Open a new pull request."""
        logger.debug(f"Creating pull request {pull.head} -> {pull.base} in {owner}/{repo}")
        data = await self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            pull.model_dump(exclude_none=True),
        )
        return PullRequest.model_validate(data)

    async def edit_pull_request(
        self, owner: str, repo: str, number: int, pull: PullRequestEdit
    ) -> PullRequest:
        """Update an existing pull request."""
        logger.debug(f"Editing pull request #{number} in {owner}/{repo}")
        data = await self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/pulls/{number}",
            pull.model_dump(exclude_none=True),
        )
        return PullRequest.model_validate(data)

    async def aclose(self) -> None:
        await self._client.aclose()
