"""GitHub webhook server.

Listens for ``issues`` events and flags newly opened or edited issues whose
title looks like an existing open issue.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from rich.console import Console

from .bot import check_issue
from .github import GitHubClient, GitHubError
from .policy import IssueRef

if TYPE_CHECKING:
    from .config import DuplicateSettings, IssueTwinConfig
    from .dictionaries import Dictionaries

console = Console()

HANDLED_ACTIONS = {"opened", "edited"}


class IssuePayload(BaseModel):
    """The parts of an issue payload we use."""

    number: int
    title: str


class RepositoryPayload(BaseModel):
    full_name: str


class IssuesEvent(BaseModel):
    """Body of an ``issues`` webhook delivery."""

    action: str
    issue: IssuePayload
    repository: RepositoryPayload


def verify_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """Check an ``X-Hub-Signature-256`` header against the raw body."""
    if not signature or not signature.startswith("sha256="):
        return False
    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(f"sha256={expected}", signature)


def create_webhook_app(
    config: IssueTwinConfig,
    settings: DuplicateSettings,
    dictionaries: Dictionaries | None = None,
    client: GitHubClient | None = None,
) -> FastAPI:
    """Create FastAPI app receiving GitHub webhooks.

    Args:
        config: IssueTwin configuration
        settings: Duplicate-detection settings
        dictionaries: Normalization tables (shared defaults when omitted)
        client: GitHub client (built from config when omitted)

    Returns:
        FastAPI application instance
    """
    from . import __version__

    app = FastAPI(
        title="IssueTwin",
        description="Flags issues whose title duplicates an open issue",
        version=__version__,
    )
    github = client or GitHubClient(config)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/webhook")
    async def webhook(
        request: Request,
        x_github_event: Annotated[str | None, Header()] = None,
        x_hub_signature_256: Annotated[str | None, Header()] = None,
    ) -> JSONResponse:
        """Handle one webhook delivery."""
        body = await request.body()

        if config.webhook_secret and not verify_signature(
            config.webhook_secret, body, x_hub_signature_256
        ):
            raise HTTPException(status_code=401, detail="Invalid signature")

        if x_github_event != "issues":
            return JSONResponse(content={"status": "ignored", "reason": "event"})

        try:
            payload: Any = json.loads(body)
            event = IssuesEvent.model_validate(payload)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid payload: {e}") from e

        if event.action not in HANDLED_ACTIONS:
            return JSONResponse(content={"status": "ignored", "reason": "action"})

        issue = IssueRef(number=event.issue.number, title=event.issue.title)
        try:
            # GitHub calls block (and may sleep through rate limits)
            matches = await run_in_threadpool(
                check_issue, github, event.repository.full_name, issue, settings, dictionaries
            )
        except GitHubError as e:
            console.print(f"[red]Error handling #{issue.number}:[/] {e}")
            return JSONResponse(status_code=502, content={"status": "error", "detail": str(e)})

        return JSONResponse(
            content={
                "status": "checked",
                "duplicates": [
                    {"number": m.issue.number, "title": m.issue.title, "accuracy": m.accuracy}
                    for m in matches
                ],
            }
        )

    return app
