"""Verification pipeline.

Parses a form body, checks the reCAPTCHA token with siteverify and hands
the outcome to a renderer. Runs the same way behind Lambda and FastAPI.
"""

import logging
import re
from typing import Optional
from urllib.parse import unquote_plus

import httpx
from pydantic import BaseModel

from secrethide.config import Settings
from secrethide.errors import BadRequest, HandlerError
from secrethide.renderers import Renderer
from secrethide.services.recaptcha import verify_token

logger = logging.getLogger(__name__)

TOKEN_FIELD = "g-recaptcha-response"

# "%" not followed by two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class HandlerResponse(BaseModel):
    status_code: int
    headers: dict[str, str]
    body: str


def parse_form(body: str) -> dict[str, list[str]]:
    """Parse an ``application/x-www-form-urlencoded`` body.

    Empty segments are skipped and a segment without ``=`` is a key with an
    empty value. Raises BadRequest on ``;`` separators, invalid percent
    escapes or escapes that do not decode as UTF-8.
    """
    form: dict[str, list[str]] = {}
    for segment in body.split("&"):
        if not segment:
            continue
        if ";" in segment:
            raise BadRequest("invalid semicolon separator in form data")

        bad = _BAD_ESCAPE.search(segment)
        if bad:
            escape = segment[bad.start():bad.start() + 3]
            raise BadRequest(f"invalid URL escape {escape!r}")

        key, _, value = segment.partition("=")
        try:
            key = unquote_plus(key, errors="strict")
            value = unquote_plus(value, errors="strict")
        except UnicodeDecodeError as e:
            raise BadRequest(f"form data is not valid UTF-8: {e}") from e

        form.setdefault(key, []).append(value)
    return form


def extract_token(form: dict[str, list[str]]) -> str:
    """Return the reCAPTCHA token, checking the key is present first."""
    values = form.get(TOKEN_FIELD)
    if not values:
        raise BadRequest(f"key '{TOKEN_FIELD}' absent from request data")
    if len(values) > 1:
        logger.warning(f"{len(values)} values for '{TOKEN_FIELD}', using the first")
    return values[0]


def error_response(error: HandlerError, renderer: Renderer) -> HandlerResponse:
    """Render a pipeline error with its status code."""
    logger.warning(f"{error.title} ({error.status_code}): {error.detail}")
    return HandlerResponse(
        status_code=error.status_code,
        headers=renderer.headers,
        body=renderer.error(error),
    )


async def handle(
    body: str,
    settings: Settings,
    renderer: Renderer,
    client: Optional[httpx.AsyncClient] = None,
) -> HandlerResponse:
    """Run one verification request and return the response to send.

    Never raises for request or siteverify problems; those come back as
    error responses.
    """
    try:
        token = extract_token(parse_form(body))
        logger.info(f"ReCaptcha response: {token}")
        result = await verify_token(token, settings, client=client)
    except HandlerError as e:
        return error_response(e, renderer)

    if not result.success:
        logger.info(f"reCAPTCHA check failed, error codes: {result.error_codes}")
        return HandlerResponse(
            status_code=200,
            headers=renderer.headers,
            body=renderer.failure(),
        )

    return HandlerResponse(
        status_code=200,
        headers=renderer.headers,
        body=renderer.success(settings.email_address),
    )
