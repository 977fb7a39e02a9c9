"""GitHub API interactions."""

from release_pr_bot.github.auth import (
    AppTransport,
    AuthContext,
    InstallationTransport,
    authenticate,
    create_app_transport,
    find_organization_installation,
    installation_transport,
)
from release_pr_bot.github.client import GitHubClient

__all__ = [
    "AppTransport",
    "AuthContext",
    "GitHubClient",
    "InstallationTransport",
    "authenticate",
    "create_app_transport",
    "find_organization_installation",
    "installation_transport",
]
