"""
Completion Service - Client for the hosted text-completion model.

Every call is bounded by a timeout and reports failures as ``Err``
values instead of raising, so each caller picks its own fallback.
"""

import asyncio
import re
from typing import Any, Optional

from loguru import logger
from openai import APIError, AsyncAzureOpenAI
from pydantic import TypeAdapter, ValidationError

from src.config import Settings
from src.models.result import Err, Ok, Result

_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences wrapped around model output."""
    return _FENCE_PATTERN.sub("", text).strip()


def decode_payload(text: str, adapter: TypeAdapter) -> Result:
    """
    Decode fenced or bare JSON model output into the adapter's type.

    Args:
        text: Raw text returned by the completion service
        adapter: Pydantic adapter for the expected payload type

    Returns:
        Ok with the decoded value, or Err when the text is not valid for the type
    """
    cleaned = strip_code_fences(text)
    if not cleaned:
        return Err(message="Completion returned no content", kind="empty")
    try:
        return Ok(value=adapter.validate_json(cleaned))
    except ValidationError as e:
        return Err(message=f"Could not decode completion payload: {e.error_count()} error(s)", kind="decode")


class CompletionService:
    """
    Async text-completion client.

    The underlying OpenAI-compatible client is constructed by the caller
    and injected, so tests can substitute a fake one.
    """

    def __init__(
        self,
        client: Any,
        model: str,
        timeout: float = 10.0,
        temperature: float = 0.0,
    ):
        self._client = client
        self._model = model
        self._timeout = timeout
        self._temperature = temperature

    @property
    def timeout(self) -> float:
        return self._timeout

    async def complete(self, prompt: str, timeout: Optional[float] = None) -> Result:
        """
        Send a single prompt and return the model's text.

        Args:
            prompt: The full prompt text
            timeout: Seconds to wait before giving up (defaults to the service timeout)

        Returns:
            Ok with the response text, or Err describing the failure
        """
        limit = timeout if timeout is not None else self._timeout

        try:
            # wait_for cancels the pending request when the limit expires
            response = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=self._model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=self._temperature,
                ),
                timeout=limit,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Completion timed out after {limit}s")
            return Err(message=f"Completion timed out after {limit}s", kind="timeout")
        except APIError as e:
            logger.error(f"Completion API error: {e}")
            return Err(message=str(e), kind="api")
        except Exception as e:
            logger.error(f"Unexpected completion error: {e}")
            return Err(message=str(e), kind="unexpected")

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            logger.error(f"Malformed completion response: {e}")
            return Err(message="Malformed completion response", kind="malformed")

        if not content or not content.strip():
            return Err(message="Completion returned no content", kind="empty")
        return Ok(value=content)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        close = getattr(self._client, "close", None)
        if close is not None:
            await close()


def create_completion_service(settings: Settings) -> CompletionService:
    """Build a completion service backed by Azure OpenAI."""
    client = AsyncAzureOpenAI(
        api_key=settings.azure_openai_api_key,
        azure_endpoint=settings.azure_openai_endpoint,
        api_version=settings.azure_openai_api_version,
        max_retries=0,
    )
    logger.info(f"Completion service using deployment '{settings.azure_openai_deployment}'")
    return CompletionService(
        client=client,
        model=settings.azure_openai_deployment,
        timeout=settings.completion_timeout,
        temperature=settings.completion_temperature,
    )
