"""AWS Lambda entrypoint for API Gateway proxy events.

Wraps secrethide.handler.handle. Works with REST (v1) and HTTP API (v2)
payloads; both carry ``body`` and ``isBase64Encoded``.
"""

import asyncio
import base64
import binascii
import logging
from typing import Optional

import httpx

from secrethide.config import Settings, configure_logging, get_settings
from secrethide.errors import BadRequest
from secrethide.handler import HandlerResponse, error_response, handle
from secrethide.renderers import Renderer, get_renderer

logger = logging.getLogger(__name__)

# Cold start: configuration is read once and reused by every invocation.
settings = get_settings()
renderer = get_renderer(settings.response_variant)
configure_logging(settings)


def decode_body(event: dict) -> str:
    """Return the raw request body, base64-decoding it when flagged."""
    body = event.get("body") or ""
    if not event.get("isBase64Encoded"):
        return body
    try:
        return base64.b64decode(body, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise BadRequest(f"could not decode base64 request body: {e}") from e


def to_proxy_response(response: HandlerResponse) -> dict:
    return {
        "statusCode": response.status_code,
        "headers": response.headers,
        "body": response.body,
    }


def process_event(
    event: dict,
    config: Settings,
    output: Renderer,
    client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """Turn one API Gateway event into a proxy response dict."""
    try:
        body = decode_body(event)
    except BadRequest as e:
        return to_proxy_response(error_response(e, output))

    response = asyncio.run(handle(body, config, output, client=client))
    return to_proxy_response(response)


def handler(event, context):
    logger.info(f"Verification request {getattr(context, 'aws_request_id', None)}")
    return process_event(event, settings, renderer)
