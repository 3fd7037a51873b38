"""
Chat route for the Astro Assistant.

Relays the conversation to the upstream AI gateway and streams the gateway's
OpenAI-style delta frames straight back to the caller.
"""

import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from astro_assistant.models.request import ChatRequest
from astro_assistant.providers.base import BaseProvider, GatewayError
from astro_assistant.services.prompts import get_system_prompt
from astro_assistant.utils.exceptions import (
    raise_bad_gateway,
    raise_bad_request,
    raise_internal_error,
    raise_payment_required,
    raise_rate_limited,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_provider(request: Request) -> BaseProvider:
    """Upstream provider created at startup."""
    return request.app.state.provider


@router.post("/chat")
async def chat(
    request: ChatRequest,
    provider: BaseProvider = Depends(get_provider),
):
    """
    POST /api/chat - stream an assistant reply

    Body: {"messages": [{"role": "user" | "assistant", "content": str}, ...]}

    Returns an SSE stream of frames:
    - data: {"choices": [{"delta": {"content": "..."}}]}
    - data: [DONE]

    Errors are returned as JSON {"error": str}.
    """
    if not request.messages:
        raise_bad_request("No messages provided")

    if not provider.is_configured():
        raise_internal_error("AI gateway is not configured")

    try:
        upstream = await provider.open_stream(request.messages, get_system_prompt())
    except GatewayError as e:
        if e.status_code == 429:
            raise_rate_limited()
        if e.status_code == 402:
            raise_payment_required()
        raise_bad_gateway()
    except httpx.HTTPError as e:
        logger.error(f"AI gateway unreachable: {e}")
        raise_bad_gateway()

    return StreamingResponse(
        upstream.aiter_bytes(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
        background=BackgroundTask(upstream.aclose),
    )
