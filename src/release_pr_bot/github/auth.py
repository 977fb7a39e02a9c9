"""GitHub App authentication: app JWTs and installation tokens."""

import logging
import time
from collections.abc import Generator
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import httpx
import jwt
from cryptography.hazmat.primitives.serialization import load_pem_private_key

from release_pr_bot.config import Settings
from release_pr_bot.errors import AuthenticationError
from release_pr_bot.github.models import Installation

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
GITHUB_ACCEPT = "application/vnd.github+json"

# Refresh installation tokens this many seconds before GitHub expires them
_TOKEN_REFRESH_MARGIN = 60


class AppTransport(httpx.Auth):
    """Signs each request with a short-lived RS256 JWT issued by the app."""

    def __init__(self, app_id: int, private_key: bytes) -> None:
        self.app_id = app_id
        self._private_key = private_key

    def generate_jwt(self) -> str:
        """
        Create a JWT for GitHub App authentication.

        The token is backdated 60 seconds for clock drift and expires after
        10 minutes, the maximum GitHub allows.
        """
        now = int(time.time())
        payload = {
            "iat": now - 60,
            "exp": now + (10 * 60),
            "iss": str(self.app_id),
        }
        return jwt.encode(payload, self._private_key, algorithm="RS256")

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self.generate_jwt()}"
        yield request


class InstallationTransport(httpx.Auth):
    """
    Authenticates requests as one app installation.

    The installation token is exchanged on first use and refreshed
    transparently once it is close to expiry.
    """

    requires_response_body = True

    def __init__(
        self,
        app_transport: AppTransport,
        installation_id: int,
        api_url: str = GITHUB_API,
    ) -> None:
        self.app_transport = app_transport
        self.installation_id = installation_id
        self.api_url = api_url.rstrip("/")
        self._token: str | None = None
        self._expires_at: float = 0.0

    @property
    def token_valid(self) -> bool:
        return self._token is not None and time.time() < self._expires_at - _TOKEN_REFRESH_MARGIN

    def _build_token_request(self) -> httpx.Request:
        return httpx.Request(
            "POST",
            f"{self.api_url}/app/installations/{self.installation_id}/access_tokens",
            headers={
                "Authorization": f"Bearer {self.app_transport.generate_jwt()}",
                "Accept": GITHUB_ACCEPT,
            },
        )

    def _update_token(self, response: httpx.Response) -> None:
        if response.status_code != 201:
            raise AuthenticationError(
                f"Failed to create installation token for {self.installation_id}: "
                f"{response.status_code} {response.text}"
            )
        data = response.json()
        self._token = data["token"]
        expires_at = data.get("expires_at")
        if expires_at:
            self._expires_at = datetime.fromisoformat(expires_at.replace("Z", "+00:00")).timestamp()
        else:
            # GitHub issues installation tokens for one hour
            self._expires_at = time.time() + 60 * 60
        logger.debug(f"Refreshed installation token for installation {self.installation_id}")

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if not self.token_valid:
            token_response = yield self._build_token_request()
            self._update_token(token_response)

        request.headers["Authorization"] = f"token {self._token}"
        yield request


@dataclass(frozen=True)
class AuthContext:
    """Authentication state built once at startup and shared by all requests."""

    settings: Settings
    installation: Installation
    transport: InstallationTransport

    @property
    def owner(self) -> str:
        return self.settings.org_id

    @property
    def repo(self) -> str:
        return self.settings.repo_name


def create_app_transport(app_id: int, cert_path: str) -> AppTransport:
    """
    Build a JWT-signing transport from a private key file.

    Args:
        app_id: The GitHub App ID
        cert_path: Path to the app's PEM private key

    Returns:
        An httpx auth flow that signs requests as the app

    Raises:
        AuthenticationError: If the key file is unreadable or malformed
    """
    key_path = Path(cert_path)
    try:
        pem_data = key_path.read_bytes()
    except OSError as e:
        raise AuthenticationError(f"Could not read GitHub App private key at {cert_path}: {e}") from e

    try:
        load_pem_private_key(pem_data, password=None)
    except (ValueError, TypeError) as e:
        raise AuthenticationError(f"Malformed GitHub App private key at {cert_path}: {e}") from e

    return AppTransport(app_id, pem_data)


async def find_organization_installation(
    app_transport: AppTransport,
    org_id: str,
    api_url: str = GITHUB_API,
) -> Installation:
    """
    Find this app's installation on an organization.

    Raises:
        AuthenticationError: If the org has no installation of the app or the
            lookup fails
    """
    url = f"{api_url.rstrip('/')}/orgs/{org_id}/installation"

    async with httpx.AsyncClient(auth=app_transport, timeout=15.0) as client:
        try:
            response = await client.get(url, headers={"Accept": GITHUB_ACCEPT})
        except httpx.HTTPError as e:
            raise AuthenticationError(f"Error finding organization installation: {e}") from e

    if response.status_code == 404:
        raise AuthenticationError(f"GitHub App is not installed on organization {org_id}")
    if response.status_code != 200:
        raise AuthenticationError(
            f"Error finding organization installation: {response.status_code} {response.text}"
        )

    return Installation.model_validate(response.json())


def installation_transport(
    app_transport: AppTransport,
    installation_id: int,
    api_url: str = GITHUB_API,
) -> InstallationTransport:
    """Wrap an app transport so requests authenticate as the installation."""
    return InstallationTransport(app_transport, installation_id, api_url=api_url)


async def authenticate(settings: Settings) -> AuthContext:
    """Run the startup handshake: app key -> org installation -> installation auth."""
    app_transport = create_app_transport(settings.app_id_int, settings.cert_path)
    installation = await find_organization_installation(
        app_transport, settings.org_id, api_url=settings.github_api_url
    )
    transport = installation_transport(
        app_transport, installation.id, api_url=settings.github_api_url
    )

    logger.info(
        f"Initialized GitHub App client, installation-id: {installation.id} "
        f"expected-events: {installation.events}"
    )
    return AuthContext(settings=settings, installation=installation, transport=transport)
