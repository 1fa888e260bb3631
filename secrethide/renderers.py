"""Response renderers.

The pipeline only decides *what* happened (success, failure or an error);
a renderer turns that into a body and content type. ``JsonRenderer`` serves
API clients, ``HtmlRenderer`` returns fragments meant to be swapped into a
page.
"""

from abc import ABC, abstractmethod
from html import escape
from typing import Optional

from pydantic import BaseModel

from secrethide.errors import HandlerError


# Schemas
class SecretHideResponse(BaseModel):
    success: bool
    secret: Optional[str] = None


class ErrorResponse(BaseModel):
    status: int
    title: str
    detail: str


class Renderer(ABC):
    """Base renderer. Subclasses set ``content_type`` and the three bodies."""

    content_type: str = "text/plain; charset=utf-8"

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Type": self.content_type}

    @abstractmethod
    def success(self, email: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def failure(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def error(self, error: HandlerError) -> str:
        raise NotImplementedError


class JsonRenderer(Renderer):
    content_type = "application/json"

    def success(self, email: str) -> str:
        return SecretHideResponse(success=True, secret=email).model_dump_json()

    def failure(self) -> str:
        return SecretHideResponse(success=False, secret=None).model_dump_json()

    def error(self, error: HandlerError) -> str:
        return ErrorResponse(
            status=error.status_code,
            title=error.title,
            detail=error.detail,
        ).model_dump_json()


class HtmlRenderer(Renderer):
    content_type = "text/html; charset=utf-8"

    GO_BACK = '<button type="button" onclick="history.back()">Go back</button>'

    def success(self, email: str) -> str:
        email = escape(email)
        return f'<a href="mailto:{email}">{email}</a>'

    def failure(self) -> str:
        return (
            '<div class="secrethide secrethide-failure">'
            "<p>reCAPTCHA failed. Please try again.</p>"
            f"{self.GO_BACK}"
            "</div>"
        )

    def error(self, error: HandlerError) -> str:
        return (
            '<div class="secrethide secrethide-error">'
            f"<p>Something went wrong ({escape(error.title)}).</p>"
            f"<pre>{escape(error.detail)}</pre>"
            f"{self.GO_BACK}"
            "</div>"
        )


RENDERERS: dict[str, type[Renderer]] = {
    "json": JsonRenderer,
    "html": HtmlRenderer,
}


def get_renderer(variant: str) -> Renderer:
    """Return a renderer for ``"json"`` or ``"html"``."""
    try:
        return RENDERERS[variant.lower()]()
    except KeyError:
        raise ValueError(f"Unknown response variant: {variant!r}") from None
