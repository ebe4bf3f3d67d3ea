"""
Generative-text client.

Sends a single prompt to the OpenAI chat completions API and returns the
text of the first choice. No streaming, no retries.
"""
import logging
from typing import Any, Dict, Optional
import httpx
from ..config import settings, require_setting
from ..exceptions import UpstreamRequestError

logger = logging.getLogger(__name__)


async def complete(
    prompt: str,
    client: Optional[httpx.AsyncClient] = None
) -> str:
    """Send a prompt as a single user message and return the reply text.

    Args:
        prompt: Text prompt
        client: Optional HTTP client; a short-lived one is opened if omitted

    Returns:
        Content of the first choice's message

    Raises:
        ConfigurationError: OPENAI_API_KEY is not set
        UpstreamRequestError: non-2xx status, transport error or unexpected body
    """
    api_key = require_setting('OPENAI_API_KEY')
    if client is None:
        async with httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT) as own_client:
            return await complete(prompt, own_client)

    payload: Dict[str, Any] = {
        "model": settings.OPENAI_MODEL,
        "messages": [{"role": "user", "content": prompt}],
    }
    if settings.OPENAI_MAX_TOKENS:
        payload["max_tokens"] = settings.OPENAI_MAX_TOKENS

    try:
        response = await client.post(
            f"{settings.OPENAI_BASE_URL.rstrip('/')}/chat/completions",
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            json=payload
        )
        response.raise_for_status()
        data = response.json()
    except httpx.TimeoutException as e:
        logger.error(f"OpenAI request timeout for model {settings.OPENAI_MODEL}: {e}")
        raise UpstreamRequestError("openai", f"timeout: {e}") from e
    except httpx.HTTPError as e:
        logger.error(f"OpenAI HTTP error for model {settings.OPENAI_MODEL}: {e}")
        raise UpstreamRequestError("openai", str(e)) from e
    except ValueError as e:
        raise UpstreamRequestError("openai", f"invalid JSON body: {e}") from e

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise UpstreamRequestError("openai", "response has no message content") from e
    if not isinstance(content, str):
        raise UpstreamRequestError("openai", "response has no message content")
    return content
