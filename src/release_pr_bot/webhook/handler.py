"""GitHub webhook handler."""

import logging
from functools import partial

from fastapi import APIRouter, Header, HTTPException, Request

from release_pr_bot.errors import EventNotFoundError, WebhookError
from release_pr_bot.github.events import (
    PullRequestEvent,
    ReleaseEvent,
    check_event_allowed,
    parse_event,
)
from release_pr_bot.processors import process_pull_request_event, process_release_event
from release_pr_bot.webhook.validator import validate_github_signature

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/github")
async def github_webhook(
    request: Request,
    x_github_event: str | None = Header(None),
    x_hub_signature_256: str | None = Header(None),
    x_hub_signature: str | None = Header(None),
) -> dict[str, str]:
    """
    Handle incoming GitHub webhooks.

    Unregistered event kinds are acknowledged with 200. Bad signatures and
    malformed payloads are rejected with 500. Release and pull_request
    events are queued for background processing.
    """
    state = request.app.state
    settings = state.settings

    if not x_github_event:
        logger.warning("Received GitHub webhook without X-GitHub-Event header")
        raise HTTPException(status_code=500, detail="Missing X-GitHub-Event header")

    try:
        check_event_allowed(x_github_event)
    except EventNotFoundError as e:
        logger.info(f"Received unregistered GitHub event: {e}")
        return {"status": "ignored", "reason": f"unregistered event {x_github_event}"}

    # Read raw body for signature validation
    body = await request.body()

    if not validate_github_signature(
        body, x_hub_signature_256, settings.webhook_secret, x_hub_signature
    ):
        raise HTTPException(status_code=500, detail="Invalid signature")

    try:
        event = parse_event(x_github_event, body)
    except WebhookError as e:
        logger.warning(f"Received malformed GitHub event: {e}")
        raise HTTPException(status_code=500, detail="Malformed payload") from e

    ctx = state.auth_context
    client = state.github_client

    if isinstance(event, ReleaseEvent):
        logger.info("Received release event")
        job = partial(process_release_event, ctx, client, event)
    elif isinstance(event, PullRequestEvent):
        logger.info("Received pull request event")
        job = partial(process_pull_request_event, ctx, client, event)
    else:
        logger.warning(f"No handler for GitHub event {x_github_event}")
        return {"status": "ignored", "reason": "no handler"}

    if not state.worker_pool.submit(job):
        return {"status": "dropped", "event": x_github_event}

    return {"status": "accepted", "event": x_github_event}


@router.api_route("/github", methods=["GET", "PUT", "PATCH", "DELETE"])
async def github_webhook_invalid_method(request: Request) -> None:
    """Reject anything but POST with 500, like other malformed deliveries."""
    logger.warning(f"Received GitHub webhook with invalid HTTP method {request.method}")
    raise HTTPException(status_code=500, detail="Invalid HTTP method")
