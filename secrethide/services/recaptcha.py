"""reCAPTCHA siteverify service."""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from secrethide.config import Settings
from secrethide.errors import DeserializationError, HttpRequestError, SiteverifyError

logger = logging.getLogger(__name__)

# Siteverify URLs carry the shared secret; httpx logs request URLs at INFO.
logging.getLogger("httpx").setLevel(logging.WARNING)


class SiteVerifyResponse(BaseModel):
    """Decoded siteverify answer. Only ``success`` drives behavior."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    success: StrictBool = False
    challenge_ts: Optional[str] = None
    hostname: Optional[str] = None
    score: Optional[float] = None
    action: Optional[str] = None  # v3 only
    error_codes: Optional[list[str]] = Field(default=None, alias="error-codes")


async def verify_token(
    token: str,
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> SiteVerifyResponse:
    """Check a reCAPTCHA token against siteverify.

    When no client is passed, one is opened for this call and closed
    before returning, whatever the outcome. A passed-in client belongs to
    the caller and is left open.

    Raises HttpRequestError, SiteverifyError or DeserializationError.
    """
    if client is None:
        async with httpx.AsyncClient(timeout=settings.siteverify_timeout) as owned_client:
            return await _siteverify(owned_client, token, settings)
    return await _siteverify(client, token, settings)


async def _siteverify(
    client: httpx.AsyncClient, token: str, settings: Settings
) -> SiteVerifyResponse:
    try:
        response = await client.get(
            settings.siteverify_url,
            params={
                "secret": settings.recaptcha_secret_key,
                "response": token,
            },
            timeout=settings.siteverify_timeout,
        )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"siteverify request failed: {e!r}")
        raise HttpRequestError(f"{type(e).__name__}: {e}") from e

    if response.status_code != 200:
        logger.warning(
            f"siteverify responded with {response.status_code}: {response.text}"
        )
        raise SiteverifyError(
            f"siteverify responded with {response.status_code}. "
            f"Body of response: {response.text}"
        )

    try:
        result = SiteVerifyResponse.model_validate_json(response.content)
    except ValidationError as e:
        logger.warning(f"Could not decode siteverify response: {response.text!r}")
        raise DeserializationError(str(e)) from e

    logger.info(f"SiteVerify response: {result.model_dump(by_alias=True)}")
    return result
