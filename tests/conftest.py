"""Shared test fixtures."""

from pathlib import Path

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
)

from release_pr_bot.config import Settings
from release_pr_bot.github.auth import AppTransport, AuthContext, InstallationTransport
from release_pr_bot.github.models import Installation

API_URL = "https://api.github.test"
WEBHOOK_SECRET = "test-webhook-secret"


@pytest.fixture(scope="session")
def private_key_pem() -> bytes:
    """Generate an RSA private key once per test session."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return private_key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())


@pytest.fixture
def key_file(tmp_path: Path, private_key_pem: bytes) -> Path:
    """Write the private key to a temp file."""
    path = tmp_path / "test-app.pem"
    path.write_bytes(private_key_pem)
    return path


@pytest.fixture
def settings(key_file: Path) -> Settings:
    """Settings built without touching the process environment."""
    return Settings(
        org_id="test-org",
        app_id="12345",
        cert_path=str(key_file),
        webhook_secret=WEBHOOK_SECRET,
        repo_name="test-repo",
        github_api_url=API_URL,
        worker_count=2,
        queue_size=10,
    )


@pytest.fixture
def auth_context(settings: Settings, private_key_pem: bytes) -> AuthContext:
    """Auth context as produced by the startup handshake."""
    app_transport = AppTransport(12345, private_key_pem)
    return AuthContext(
        settings=settings,
        installation=Installation(id=42, events=["release", "pull_request"]),
        transport=InstallationTransport(app_transport, 42, api_url=API_URL),
    )
