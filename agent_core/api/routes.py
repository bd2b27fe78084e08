from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from agent_core.collectors.snapshot import build_snapshot

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND_BODY = "agent-core: not found\n"
INTERNAL_ERROR_BODY = "agent-core: internal error\n"


class JSONTextResponse(Response):
    media_type = "application/json"


def _respond(request: Request, body: str, status_code: int, response_class: type[Response]) -> Response:
    """Build the response; HEAD keeps the headers but drops the body."""
    if request.method != "HEAD":
        return response_class(content=body, status_code=status_code)
    length = len(body.encode("utf-8"))
    return response_class(content=b"", status_code=status_code, headers={"content-length": str(length)})


def _snapshot_response(request: Request) -> Response:
    """Fresh snapshot as minified JSON; 500 if it cannot be built."""
    settings = request.app.state.settings
    try:
        body = build_snapshot(settings).to_json()
    except Exception:
        logger.exception("Snapshot build failed for %s", request.url.path)
        return _respond(request, INTERNAL_ERROR_BODY, 500, PlainTextResponse)
    return _respond(request, body, 200, JSONTextResponse)


# ── status routes ─────────────────────────────────────
# Registered without a method list so every verb, standard or not, is answered.


async def health(request: Request) -> Response:
    return _snapshot_response(request)


async def status(request: Request) -> Response:
    return _snapshot_response(request)


# ── fallback ──────────────────────────────────────────


async def not_found(request: Request) -> Response:
    return _respond(request, NOT_FOUND_BODY, 404, PlainTextResponse)


router.add_route("/health", health, include_in_schema=False)
router.add_route("/status", status, include_in_schema=False)
router.add_route("/{path:path}", not_found, include_in_schema=False)
