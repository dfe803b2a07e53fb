"""Chat gateway FastAPI application.

Keeps the upstream model endpoint and its token on the server side. Clients
post ``{message, user_role}`` and get ``{response, success}`` back.
"""
from typing import AsyncIterator

import httpx
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from compliance_assistant.config import settings
from compliance_assistant.logging_client import setup_logger
from compliance_assistant.models.requests import ChatRequest
from compliance_assistant.models.responses import ChatResponse
from compliance_assistant.providers.http_responder import extract_reply
from compliance_assistant.utils.sanitize import sanitize_text

logger = setup_logger(f"{settings.SERVICE_NAME}.gateway")

app = FastAPI(
    title="Compliance Assistant Gateway",
    version=settings.SERVICE_VERSION,
    description="Proxy between the compliance assistant and the model endpoint"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


async def get_upstream_client() -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client for the upstream call, closed after the request."""
    async with httpx.AsyncClient(timeout=settings.UPSTREAM_TIMEOUT_SECONDS) as client:
        yield client


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "upstream_configured": bool(settings.UPSTREAM_URL)
    }


@app.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    client: httpx.AsyncClient = Depends(get_upstream_client)
):
    """
    Forward one message upstream.

    Returns 400 for a blank message, 500 when no upstream is configured or
    the upstream call fails.
    """
    message = sanitize_text(request.message)
    if not message:
        return error_response(400, "Message required")

    if not settings.UPSTREAM_URL:
        logger.error("UPSTREAM_URL not set, cannot forward chat")
        return error_response(500, "Service not configured")

    headers = {}
    if settings.UPSTREAM_API_TOKEN:
        headers["Authorization"] = f"Bearer {settings.UPSTREAM_API_TOKEN}"

    try:
        response = await client.post(
            f"{settings.UPSTREAM_URL.rstrip('/')}/chat",
            json={"message": message, "user_role": request.user_role},
            headers=headers
        )
        response.raise_for_status()
        result = response.json()
    except httpx.HTTPStatusError as e:
        logger.error(f"Upstream error: HTTP {e.response.status_code}")
        return error_response(500, "Service temporarily unavailable")
    except Exception as e:
        logger.error(f"Chat error: {e}")
        return error_response(500, "Service temporarily unavailable")

    return ChatResponse(response=extract_reply(result) or "No response", success=True)
