"""Webhook handling for GitHub events."""

from release_pr_bot.webhook.handler import router
from release_pr_bot.webhook.validator import validate_github_signature

__all__ = ["router", "validate_github_signature"]
