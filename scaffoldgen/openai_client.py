"""Async client for an OpenAI-compatible chat completions API.

Wraps ``POST /chat/completions`` with timeout handling and a structured
response. Transport problems (connection, timeout, HTTP status, malformed
payload) are reported through ``ChatResponse.error`` instead of being raised,
and no request is ever retried.

Typical usage::

    client = OpenAIClient(api_key="sk-...")
    resp = await client.chat(system="...", prompt="...", model="gpt-3.5-turbo")
    if resp.success:
        print(resp.text)
"""

from __future__ import annotations

import time
from typing import Literal

import httpx
from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class TransportError(BaseModel):
    """The model could not be reached or rejected the request."""

    kind: Literal["transport"] = "transport"
    message: str
    status_code: int | None = Field(default=None, description="HTTP status, when there was one")


class ChatResponse(BaseModel):
    """Structured response from a chat completion call."""

    text: str = Field(default="", description="Content of the first choice")
    model: str = Field(default="", description="Model that produced the response")
    finish_reason: str | None = Field(default=None, description="Why generation stopped")
    duration_ms: float = Field(default=0.0, description="Client-side round-trip time in ms")
    success: bool = Field(default=True, description="Whether the request succeeded")
    error: TransportError | None = Field(default=None, description="Failure details")


class OpenAIClient:
    """Async client for the chat completions endpoint.

    Uses ``httpx.AsyncClient`` so the single model call does not block the
    event loop.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        timeout: int = 300,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    @staticmethod
    def _extract_text(data: dict) -> str:
        """Pull the message content of the first choice out of a response."""
        choices = data.get("choices") or []
        if not choices:
            return ""
        message = choices[0].get("message") or {}
        return message.get("content") or ""

    @staticmethod
    def _failure(model: str, message: str, status_code: int | None = None) -> ChatResponse:
        return ChatResponse(
            model=model,
            success=False,
            error=TransportError(message=message, status_code=status_code),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def chat(
        self,
        system: str,
        prompt: str,
        model: str = "gpt-3.5-turbo",
        max_tokens: int = 2048,
    ) -> ChatResponse:
        """Send one system + user message pair and return the reply.

        Args:
            system: System instruction.
            prompt: User prompt.
            model: Model identifier.
            max_tokens: Upper bound on generated tokens.

        Returns:
            A ``ChatResponse`` with the reply text or a ``TransportError``.
        """
        payload: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        }

        start = time.monotonic()
        try:
            async with self._client() as client:
                response = await client.post("/chat/completions", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.ConnectError:
            return self._failure(model, f"Cannot connect to the model API at {self.base_url}.")
        except httpx.TimeoutException:
            return self._failure(model, f"Request to the model API timed out after {self.timeout}s.")
        except httpx.HTTPStatusError as exc:
            return self._failure(
                model,
                f"Model API returned HTTP {exc.response.status_code}: {exc.response.text[:500]}",
                status_code=exc.response.status_code,
            )
        except Exception as exc:  # noqa: BLE001
            return self._failure(model, f"Unexpected error during chat completion: {exc}")

        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices or not isinstance(choices[0], dict):
            return self._failure(model, "Model API response contained no choices.")

        return ChatResponse(
            text=self._extract_text(data),
            model=data.get("model", model),
            finish_reason=choices[0].get("finish_reason"),
            duration_ms=(time.monotonic() - start) * 1000.0,
            success=True,
        )
