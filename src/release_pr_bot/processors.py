"""Event processors that create or update pull requests."""

import logging

import httpx

from release_pr_bot.errors import GitHubAPIError
from release_pr_bot.github.auth import AuthContext
from release_pr_bot.github.client import GitHubClient
from release_pr_bot.github.events import PullRequestEvent, ReleaseEvent
from release_pr_bot.github.models import NewPullRequest, PullRequestEdit

logger = logging.getLogger(__name__)

PR_TITLE = "Hello pull request!"
PR_BODY = "This is an automatically created PR."
DUPLICATE_PR_MESSAGE = "A pull request already exists"


def build_release_pull_request(ctx: AuthContext) -> NewPullRequest:
    """Build the pull request opened for every release."""
    return NewPullRequest(
        title=PR_TITLE,
        head=ctx.settings.head_branch,
        base=ctx.settings.base_branch,
        body=PR_BODY,
        maintainer_can_modify=True,
    )


def _log_api_error(action: str, error: Exception) -> None:
    """Log a failed API call unless GitHub reports the PR already exists."""
    if DUPLICATE_PR_MESSAGE in str(error):
        logger.debug(f"Pull request already exists, nothing to {action}")
        return
    logger.error(f"Error {action} pull request: {error}")


async def process_release_event(
    ctx: AuthContext, client: GitHubClient, event: ReleaseEvent
) -> None:
    """Open the release pull request; a duplicate is not an error."""
    logger.info(f"Processing release {event.release.tag_name} ({event.action})")

    try:
        pr = await client.create_pull_request(ctx.owner, ctx.repo, build_release_pull_request(ctx))
    except (GitHubAPIError, httpx.HTTPError) as e:
        _log_api_error("creating", e)
        return

    logger.info(f"Created pull request: {pr.html_url or pr.url}")


async def process_pull_request_event(
    ctx: AuthContext, client: GitHubClient, event: PullRequestEvent
) -> None:
    """Forward the incoming pull request's fields to an edit of the same PR."""
    pull = event.pull_request
    logger.info(f"Processing pull request #{event.number} ({event.action})")

    edit = PullRequestEdit(
        title=pull.title,
        body=pull.body,
        state=pull.state,
        base=pull.base.ref if pull.base else None,
        maintainer_can_modify=pull.maintainer_can_modify,
    )

    try:
        pr = await client.edit_pull_request(ctx.owner, ctx.repo, event.number, edit)
    except (GitHubAPIError, httpx.HTTPError) as e:
        # Same duplicate suppression as the create path; an edit never
        # reports an existing PR, so this filter is effectively inert.
        _log_api_error("editing", e)
        return

    logger.info(f"Edited pull request: {pr.html_url or pr.url}")
