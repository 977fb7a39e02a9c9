"""FastAPI application entry point."""

import argparse
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, Request

from release_pr_bot import __version__
from release_pr_bot.config import Settings, get_settings
from release_pr_bot.dispatch import WorkerPool
from release_pr_bot.github import AuthContext, GitHubClient, authenticate
from release_pr_bot.webhook import router as webhook_router

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure structured logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_app(
    settings: Settings | None = None,
    auth_context: AuthContext | None = None,
    github_client: GitHubClient | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Without an injected auth context the lifespan performs the GitHub App
    handshake before serving; any failure there aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        app_settings = settings or get_settings()
        setup_logging(app_settings.log_level)
        logger.info("Release PR bot starting up")

        ctx = auth_context or await authenticate(app_settings)
        client = github_client or GitHubClient(ctx.transport, api_url=app_settings.github_api_url)
        pool = WorkerPool(workers=app_settings.worker_count, maxsize=app_settings.queue_size)

        app.state.settings = app_settings
        app.state.auth_context = ctx
        app.state.github_client = client
        app.state.worker_pool = pool
        pool.start()
        try:
            yield
        finally:
            await pool.stop()
            if github_client is None:
                await client.aclose()
            logger.info("Release PR bot shutting down")

    app = FastAPI(
        title="Release PR Bot",
        description="Opens and updates pull requests in response to GitHub webhooks",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(webhook_router, tags=["webhook"])

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    @app.get("/metrics")
    async def metrics(request: Request) -> dict[str, Any]:
        """Worker pool counters."""
        return request.app.state.worker_pool.stats()

    return app


def cli() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Release PR bot - GitHub App webhook listener")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the webhook server")
    serve_parser.add_argument("--host", default=None, help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    if args.command == "serve":
        settings = get_settings()
        setup_logging(settings.log_level)
        uvicorn.run(
            "release_pr_bot.main:create_app",
            factory=True,
            host=args.host or settings.host,
            port=args.port or settings.port,
            reload=args.reload,
        )
    else:
        parser.print_help()


if __name__ == "__main__":
    cli()
