#!/usr/bin/env python3
"""
Simulate a GitHub webhook for local testing.

Usage:
    python scripts/simulate_webhook.py release --tag v1.2.0 --repo owner/repo
    python scripts/simulate_webhook.py pull_request --number 7 --repo owner/repo
"""

import argparse
import hashlib
import hmac
import json
import os

import httpx


def build_payload(args: argparse.Namespace) -> dict:
    _, name = args.repo.split("/")
    repository = {"name": name, "full_name": args.repo}

    if args.event == "release":
        return {
            "action": "published",
            "release": {
                "id": 1,
                "tag_name": args.tag,
                "name": args.tag,
                "html_url": f"https://github.com/{args.repo}/releases/tag/{args.tag}",
            },
            "repository": repository,
        }

    return {
        "action": "edited",
        "number": args.number,
        "pull_request": {
            "number": args.number,
            "url": f"https://api.github.com/repos/{args.repo}/pulls/{args.number}",
            "title": args.title,
            "state": "open",
            "head": {"ref": "develop"},
            "base": {"ref": "master"},
        },
        "repository": repository,
    }


def main():
    parser = argparse.ArgumentParser(description="Simulate GitHub webhook")
    parser.add_argument("event", choices=["release", "pull_request"], help="Event kind")
    parser.add_argument("--url", default="http://localhost:3210/github")
    parser.add_argument("--repo", required=True, help="Repository (owner/repo)")
    parser.add_argument("--tag", default="v0.1.0", help="Release tag")
    parser.add_argument("--number", type=int, default=1, help="Pull request number")
    parser.add_argument("--title", default="Hello pull request!", help="Pull request title")
    parser.add_argument(
        "--secret", default=None, help="Webhook secret (or use WEBHOOK_SECRET env)"
    )

    args = parser.parse_args()

    secret = args.secret or os.environ.get("WEBHOOK_SECRET")
    if not secret:
        print("Error: Webhook secret required (--secret or WEBHOOK_SECRET)")
        return 1

    payload = build_payload(args)
    payload_bytes = json.dumps(payload).encode()
    signature = (
        "sha256="
        + hmac.new(
            secret.encode("utf-8"),
            payload_bytes,
            hashlib.sha256,
        ).hexdigest()
    )

    print(f"Sending {args.event} webhook to {args.url}")
    print(f"Payload: {json.dumps(payload, indent=2)}")

    response = httpx.post(
        args.url,
        content=payload_bytes,
        headers={
            "Content-Type": "application/json",
            "X-Hub-Signature-256": signature,
            "X-GitHub-Event": args.event,
        },
    )

    print(f"\nResponse status: {response.status_code}")
    print(f"Response body: {response.text}")

    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    exit(main())
