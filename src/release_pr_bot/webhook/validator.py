"""GitHub webhook signature validation."""

import hashlib
import hmac
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


def _hex_digest(secret: str, payload: bytes, digestmod: Callable[..., Any]) -> str:
    return hmac.new(secret.encode("utf-8"), payload, digestmod).hexdigest()


def validate_github_signature(
    payload: bytes,
    signature: str | None,
    secret: str,
    legacy_signature: str | None = None,
) -> bool:
    """
    Validate GitHub webhook signature.

    The HMAC SHA-256 header is checked when present; otherwise the legacy
    HMAC SHA-1 header is used.

    Args:
        payload: The raw request body bytes
        signature: The X-Hub-Signature-256 header value
        secret: The webhook secret configured in GitHub
        legacy_signature: The X-Hub-Signature header value

    Returns:
        True if the signature is valid, False otherwise
    """
    if signature:
        prefix, digestmod, received = "sha256=", hashlib.sha256, signature
    elif legacy_signature:
        prefix, digestmod, received = "sha1=", hashlib.sha1, legacy_signature
    else:
        logger.warning("Missing webhook signature")
        return False

    if not received.startswith(prefix):
        logger.warning(f"Invalid signature format - expected {prefix} prefix")
        return False

    expected_signature = prefix + _hex_digest(secret, payload, digestmod)

    is_valid = hmac.compare_digest(expected_signature, received)

    if not is_valid:
        logger.warning("Webhook signature validation failed")

    return is_valid
