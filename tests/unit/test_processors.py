"""Tests for the release and pull request processors."""

import logging
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from release_pr_bot.errors import GitHubAPIError
from release_pr_bot.github.auth import AuthContext
from release_pr_bot.github.events import PullRequestEvent, ReleaseEvent
from release_pr_bot.github.models import PullRequest
from release_pr_bot.processors import (
    PR_BODY,
    PR_TITLE,
    process_pull_request_event,
    process_release_event,
)

DUPLICATE_ERROR = GitHubAPIError(
    422, "Validation Failed: A pull request already exists for test-org:develop."
)


@pytest.fixture
def github_client() -> MagicMock:
    client = MagicMock()
    client.create_pull_request = AsyncMock(
        return_value=PullRequest(number=1, html_url="https://github.com/test-org/test-repo/pull/1")
    )
    client.edit_pull_request = AsyncMock(
        return_value=PullRequest(number=7, html_url="https://github.com/test-org/test-repo/pull/7")
    )
    return client


@pytest.fixture
def release_event() -> ReleaseEvent:
    return ReleaseEvent.model_validate(
        {"action": "published", "release": {"id": 1, "tag_name": "v1.0.0"}}
    )


@pytest.fixture
def pull_request_event() -> PullRequestEvent:
    return PullRequestEvent.model_validate(
        {
            "action": "edited",
            "number": 7,
            "pull_request": {
                "number": 7,
                "title": "Updated title",
                "body": "Updated body",
                "state": "open",
                "head": {"ref": "develop"},
                "base": {"ref": "master"},
            },
        }
    )


def _error_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.levelno >= logging.ERROR]


@pytest.mark.asyncio
async def test_release_creates_pull_request(
    auth_context: AuthContext, github_client: MagicMock, release_event: ReleaseEvent
):
    """Test that a release opens develop -> master with the fixed template."""
    await process_release_event(auth_context, github_client, release_event)

    github_client.create_pull_request.assert_awaited_once()
    owner, repo, pull = github_client.create_pull_request.await_args.args
    assert (owner, repo) == ("test-org", "test-repo")
    assert pull.title == PR_TITLE == "Hello pull request!"
    assert pull.head == "develop"
    assert pull.base == "master"
    assert pull.body == PR_BODY
    assert pull.maintainer_can_modify is True


@pytest.mark.asyncio
async def test_release_duplicate_is_not_logged(
    auth_context: AuthContext,
    github_client: MagicMock,
    release_event: ReleaseEvent,
    caplog: pytest.LogCaptureFixture,
):
    """Test that GitHub's duplicate PR error is swallowed without an error log."""
    github_client.create_pull_request.side_effect = DUPLICATE_ERROR

    with caplog.at_level(logging.DEBUG):
        await process_release_event(auth_context, github_client, release_event)

    assert _error_records(caplog) == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        GitHubAPIError(403, "Resource not accessible by integration"),
        GitHubAPIError(422, "Validation Failed: No commits between master and develop"),
        httpx.ConnectError("connection refused"),
    ],
)
async def test_release_other_errors_log_once(
    auth_context: AuthContext,
    github_client: MagicMock,
    release_event: ReleaseEvent,
    caplog: pytest.LogCaptureFixture,
    error: Exception,
):
    """Test that any other failure produces exactly one error line."""
    github_client.create_pull_request.side_effect = error

    with caplog.at_level(logging.DEBUG):
        await process_release_event(auth_context, github_client, release_event)

    errors = _error_records(caplog)
    assert len(errors) == 1
    assert "creating pull request" in errors[0].getMessage()


@pytest.mark.asyncio
async def test_pull_request_event_edits_pull_request(
    auth_context: AuthContext, github_client: MagicMock, pull_request_event: PullRequestEvent
):
    """Test that the incoming pull request's fields are forwarded to an edit."""
    await process_pull_request_event(auth_context, github_client, pull_request_event)

    github_client.edit_pull_request.assert_awaited_once()
    owner, repo, number, edit = github_client.edit_pull_request.await_args.args
    assert (owner, repo, number) == ("test-org", "test-repo", 7)
    assert edit.title == "Updated title"
    assert edit.body == "Updated body"
    assert edit.state == "open"
    assert edit.base == "master"


@pytest.mark.asyncio
async def test_pull_request_event_error_logged(
    auth_context: AuthContext,
    github_client: MagicMock,
    pull_request_event: PullRequestEvent,
    caplog: pytest.LogCaptureFixture,
):
    github_client.edit_pull_request.side_effect = GitHubAPIError(404, "Not Found")

    with caplog.at_level(logging.DEBUG):
        await process_pull_request_event(auth_context, github_client, pull_request_event)

    assert len(_error_records(caplog)) == 1


@pytest.mark.asyncio
async def test_pull_request_event_duplicate_filter_applies(
    auth_context: AuthContext,
    github_client: MagicMock,
    pull_request_event: PullRequestEvent,
    caplog: pytest.LogCaptureFixture,
):
    """Test that the edit path shares the create path's duplicate filter."""
    github_client.edit_pull_request.side_effect = DUPLICATE_ERROR

    with caplog.at_level(logging.DEBUG):
        await process_pull_request_event(auth_context, github_client, pull_request_event)

    assert _error_records(caplog) == []
