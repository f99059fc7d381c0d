"""GitHub Readiness MCP Server.

FastMCP server that scores a GitHub profile for recruiter readiness.
Run: github-readiness-mcp
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, AsyncIterator, Optional

from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations
from starlette.requests import Request
from starlette.responses import JSONResponse

from .core.clients.github import API_BASE, GitHubClient
from .core.errors import InvalidBundleError, InvalidUsernameError, ReadinessError
from .core.models import AnalysisResponse
from .core.scoring import calculate_score
from .core.usernames import extract_username

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=False, openWorldHint=True)
PURE = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)

DEFAULT_TIMEOUT_SECONDS = 20.0
TRANSPORTS = ("stdio", "sse", "streamable-http")


@dataclass
class AppContext:
    """Per-process resources shared by every tool call."""

    github: GitHubClient


def create_github_client() -> GitHubClient:
    """Build the GitHub client from environment configuration."""
    token = os.environ.get("GITHUB_TOKEN") or None
    base_url = os.environ.get("GITHUB_API_URL", API_BASE)
    timeout = float(os.environ.get("GITHUB_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)))
    if not token:
        logger.warning("GITHUB_TOKEN not set — unauthenticated requests are limited to 60/hour")
    return GitHubClient(token=token, base_url=base_url, timeout=timeout)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Configure logging and hold one GitHub client for the server's lifetime."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    github = create_github_client()
    try:
        yield AppContext(github=github)
    finally:
        await github.aclose()


mcp = FastMCP(
    "GitHub Readiness",
    instructions="Score a GitHub profile for recruiter readiness — documentation, consistency, impact, and best practices, with strengths, red flags, and recommendations.",
    lifespan=lifespan,
)


async def analyze_username(
    github: GitHubClient,
    raw_username: str,
    now: Optional[datetime] = None,
) -> dict:
    """Fetch and score one user, returning the response payload or an error payload."""
    try:
        username = extract_username(raw_username)
    except InvalidUsernameError as exc:
        return {"error": str(exc), "kind": "invalid_username", "status": exc.status}

    try:
        bundle = await github.fetch_profile_bundle(username)
    except ReadinessError as exc:
        if exc.status >= 500:
            logger.error("Analysis of %s failed: %s", username, getattr(exc, "detail", exc), exc_info=True)
        else:
            logger.info("Analysis of %s rejected: %s", username, exc.kind)
        return exc.to_dict()

    analysis = calculate_score(bundle, now=now)
    logger.info("Analyzed %s: total score %d", bundle.profile.login, analysis.total_score)

    response = AnalysisResponse(user=bundle.profile, analysis=analysis)
    return response.model_dump(mode="json", by_alias=True)


# ─── Tool 1: Analyze ─────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def github_analyze(username: str, ctx: Context) -> dict:
    """Analyze a GitHub profile and score its recruiter readiness from 0 to 100.

    Args:
        username: GitHub username or profile URL (e.g. 'octocat' or 'https://github.com/octocat').
    """
    app: AppContext = ctx.request_context.lifespan_context
    return await analyze_username(app.github, username)


# ─── Tool 2: Score a supplied bundle ─────────────────────────────────────────


@mcp.tool(annotations=PURE)
def github_score_bundle(bundle: dict[str, Any]) -> dict:
    """Score an already-fetched profile bundle without calling GitHub.

    Args:
        bundle: Object with 'profile', 'repos', 'repo_details', 'events', and 'languages'.
    """
    try:
        analysis = calculate_score(bundle)
    except InvalidBundleError as exc:
        return {"error": str(exc), "kind": "invalid_bundle", "status": 400}
    return analysis.model_dump(mode="json", by_alias=True)


# ─── Health ──────────────────────────────────────────────────────────────────


@mcp.custom_route("/health", methods=["GET"])
async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def main():
    """Entry point for the CLI command."""
    transport = os.environ.get("MCP_TRANSPORT", "stdio")
    if transport not in TRANSPORTS:
        raise ValueError(f"MCP_TRANSPORT must be one of {', '.join(TRANSPORTS)}, got {transport!r}")
    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
