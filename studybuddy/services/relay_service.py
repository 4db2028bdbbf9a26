"""
Relay to the hosted completion gateway.

The gateway speaks the OpenAI chat-completions protocol. We always ask for
``stream: true`` and hand the raw response bytes back to our caller, so the
SSE frame boundaries the browser sees are exactly the gateway's.
"""
import logging
from typing import AsyncIterator, List, Optional

import httpx

from studybuddy import config
from studybuddy.models.chat_model import ChatMessage
from studybuddy.utils.errors import (
    UpstreamError,
    UpstreamQuotaExceeded,
    UpstreamRateLimited,
)

logger = logging.getLogger("relay_service")
logging.basicConfig(level=logging.INFO)

SYSTEM_PROMPT = """You are StudyBuddy, an expert AI tutor designed to help students prepare for exams and understand academic concepts. Your goal is to provide clear, accurate, and helpful explanations.

Guidelines:
- Explain concepts in a clear, step-by-step manner
- Use examples and analogies to make complex topics easier to understand
- Be encouraging and supportive
- If a question is ambiguous, ask for clarification
- For math and science questions, show your work and explain each step
- For essay-type subjects, provide structured, well-organized responses
- Keep responses concise but thorough - typically 2-4 paragraphs
- Use bullet points and numbered lists when appropriate
- If you don't know something, be honest about it
- Always encourage further learning and curiosity

You can help with subjects including but not limited to:
- Mathematics (algebra, calculus, geometry, statistics)
- Science (physics, chemistry, biology, earth science)
- History and Social Studies
- English and Literature
- Foreign Languages
- Computer Science
- Economics
- Test prep (SAT, ACT, GRE, etc.)"""


def get_gateway_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport for gateway calls; ``None`` means the default network transport."""
    return None


def build_payload(messages: List[ChatMessage]) -> dict:
    return {
        "model": config.LLM_MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            *[m.model_dump() for m in messages],
        ],
        "stream": True,
    }


class CompletionStream:
    """An open upstream response whose body has not been read yet."""

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response):
        self.client = client
        self.response = response

    async def body(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.response.aiter_raw():
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self.response.aclose()
        await self.client.aclose()


async def open_completion_stream(
    messages: List[ChatMessage],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> CompletionStream:
    api_key = config.LLM_GATEWAY_API_KEY
    if not api_key:
        logger.error("LLM_GATEWAY_API_KEY is not configured")
        raise UpstreamError()

    # no timeout: the caller closing the connection is what ends a long stream
    client = httpx.AsyncClient(transport=transport, timeout=None)
    request = client.build_request(
        "POST",
        config.LLM_GATEWAY_URL,
        headers={
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        },
        json=build_payload(messages),
    )

    try:
        response = await client.send(request, stream=True)
    except httpx.HTTPError as e:
        await client.aclose()
        logger.error(f"AI gateway request failed: {e!r}")
        raise UpstreamError()

    if response.is_success:
        return CompletionStream(client, response)

    # the status alone decides the mapping; the body is only for the log
    try:
        error_text = (await response.aread()).decode("utf-8", errors="replace")
    except httpx.HTTPError as e:
        error_text = f"<unreadable body: {e!r}>"
    finally:
        await response.aclose()
        await client.aclose()
    logger.error(f"AI gateway error: {response.status_code} {error_text[:500]}")

    if response.status_code == 429:
        raise UpstreamRateLimited("Rate limit exceeded. Please try again in a moment.")
    if response.status_code == 402:
        raise UpstreamQuotaExceeded("Usage limit reached. Please add credits to continue.")
    raise UpstreamError("Failed to get AI response")
