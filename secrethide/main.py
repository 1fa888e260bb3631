"""SecretHide - FastAPI application entry point.

Serves the same verification pipeline as the Lambda entry point, for local
runs and container deployments:

    uvicorn secrethide.main:app
"""

from fastapi import FastAPI

from secrethide.config import configure_logging, get_settings
from secrethide.routers import verify_router

settings = get_settings()
configure_logging(settings)

app = FastAPI(
    title="SecretHide API",
    description="Discloses an email address after a reCAPTCHA check",
    version="0.1.0",
)

app.include_router(verify_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "secrethide"}
