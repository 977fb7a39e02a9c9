"""Typed GitHub webhook event payloads."""

from pydantic import BaseModel, ConfigDict, ValidationError

from release_pr_bot.errors import EventNotFoundError, MalformedPayloadError, MissingEventHeaderError
from release_pr_bot.github.models import PullRequest

RELEASE_EVENT = "release"
PULL_REQUEST_EVENT = "pull_request"


class Repository(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    full_name: str


class InstallationRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int


class Release(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    tag_name: str
    name: str | None = None
    html_url: str = ""
    target_commitish: str | None = None
    draft: bool = False
    prerelease: bool = False


class ReleaseEvent(BaseModel):
    """A `release` webhook payload."""

    model_config = ConfigDict(extra="ignore")

    action: str
    release: Release
    repository: Repository | None = None
    installation: InstallationRef | None = None


class PullRequestEvent(BaseModel):
    """A `pull_request` webhook payload."""

    model_config = ConfigDict(extra="ignore")

    action: str
    number: int
    pull_request: PullRequest
    repository: Repository | None = None
    installation: InstallationRef | None = None


WebhookEvent = ReleaseEvent | PullRequestEvent

EVENT_MODELS: dict[str, type[ReleaseEvent] | type[PullRequestEvent]] = {
    RELEASE_EVENT: ReleaseEvent,
    PULL_REQUEST_EVENT: PullRequestEvent,
}


def parse_event(
    event_name: str | None,
    body: bytes,
    allowed: tuple[str, ...] = (RELEASE_EVENT, PULL_REQUEST_EVENT),
) -> WebhookEvent:
    """
    Parse a webhook body into its typed event.

    Args:
        event_name: The X-GitHub-Event header value
        body: The raw request body
        allowed: Event kinds this service handles

    Raises:
        MissingEventHeaderError: If no event header was sent
        EventNotFoundError: If the event kind is not allowed
        MalformedPayloadError: If the body does not match the event model
    """
    if not event_name:
        raise MissingEventHeaderError("missing X-GitHub-Event header")

    check_event_allowed(event_name, allowed)

    if not body:
        raise MalformedPayloadError(f"empty payload for {event_name} event")

    try:
        return EVENT_MODELS[event_name].model_validate_json(body)
    except ValidationError as e:
        raise MalformedPayloadError(f"invalid {event_name} payload: {e}") from e


def check_event_allowed(
    event_name: str,
    allowed: tuple[str, ...] = (RELEASE_EVENT, PULL_REQUEST_EVENT),
) -> None:
    """Raise EventNotFoundError unless the event kind is handled."""
    if event_name not in allowed or event_name not in EVENT_MODELS:
        raise EventNotFoundError(f"event {event_name!r} is not registered")
