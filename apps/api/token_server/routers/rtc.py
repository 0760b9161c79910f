"""RTC token issuance endpoint."""
from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ..schemas.rtc import ErrorResponse, RtcTokenRequest, RtcTokenResponse
from ..services import rtc as rtc_service

logger = logging.getLogger(__name__)

router = APIRouter()

# Tokens are sensitive and time-bound; no intermediary may keep a copy.
NO_CACHE_HEADERS = {
    "Cache-Control": "private, no-cache, no-store, must-revalidate",
    "Expires": "-1",
    "Pragma": "no-cache",
}


async def _read_payload(request: Request) -> dict[str, Any]:
    """Return the JSON object body, or an empty mapping for anything else.

    Bodies are only parsed when sent as ``application/json``.
    """

    content_type = request.headers.get("content-type", "")
    if content_type.split(";", 1)[0].strip().lower() != "application/json":
        return {}
    body = await request.body()
    if not body:
        return {}
    try:
        payload = json.loads(body)
    except (ValueError, RecursionError):
        logger.debug("Ignoring unparsable RTC token request body")
        return {}
    return payload if isinstance(payload, dict) else {}


@router.post(
    "/rtc",
    response_model=RtcTokenResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": RtcTokenRequest.model_json_schema(by_alias=True)}},
        }
    },
)
async def create_rtc_token(request: Request) -> JSONResponse:
    """Return a signed token for joining ``channelName``."""

    payload = await _read_payload(request)
    result = await run_in_threadpool(
        rtc_service.issue_token,
        payload,
        request.app.state.credentials,
        request.app.state.signer,
    )

    if result.ok:
        body = RtcTokenResponse(token=result.credential.token)
        return JSONResponse(content=body.model_dump(), headers=NO_CACHE_HEADERS)

    error = result.error
    body = ErrorResponse(error=error.message, details=error.details)
    return JSONResponse(
        status_code=error.status_code,
        content=body.model_dump(exclude_none=True),
        headers=NO_CACHE_HEADERS,
    )
