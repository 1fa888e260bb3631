"""Verify router - discloses the email address after a reCAPTCHA check."""

from typing import Annotated, AsyncIterator, Literal, Optional

import httpx
from fastapi import APIRouter, Depends, Query, Request, Response

from secrethide.config import Settings, get_settings
from secrethide.errors import BadRequest
from secrethide.handler import error_response, handle
from secrethide.renderers import get_renderer

router = APIRouter(tags=["verify"])


async def get_http_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield a siteverify client that is closed once the request is done."""
    async with httpx.AsyncClient(timeout=settings.siteverify_timeout) as client:
        yield client


@router.post("/verify")
async def verify(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    output: Annotated[Optional[Literal["json", "html"]], Query(alias="format")] = None,
):
    """Check the submitted form's reCAPTCHA token.

    The body is read raw so malformed form data reaches the pipeline and is
    reported the same way as behind Lambda. ``format`` overrides the
    configured response variant.
    """
    renderer = get_renderer(output or settings.response_variant)

    try:
        body = (await request.body()).decode("utf-8")
    except UnicodeDecodeError as e:
        result = error_response(BadRequest(f"request body is not valid UTF-8: {e}"), renderer)
    else:
        result = await handle(body, settings, renderer, client=client)
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )
