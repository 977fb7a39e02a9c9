"""Exception hierarchy."""


class ReleasePRBotError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(ReleasePRBotError):
    """Configuration could not be loaded."""


class AuthenticationError(ReleasePRBotError):
    """GitHub App authentication could not be completed."""


class GitHubAPIError(ReleasePRBotError):
    """A GitHub REST API call returned a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code} {message}")
        self.status_code = status_code
        self.message = message


class WebhookError(ReleasePRBotError):
    """An inbound webhook request could not be parsed."""


class MissingEventHeaderError(WebhookError):
    """The X-GitHub-Event header is absent."""


class EventNotFoundError(WebhookError):
    """The event kind is not one this service handles."""


class MalformedPayloadError(WebhookError):
    """The request body could not be parsed into the event model."""
