"""HTTP client for an OpenAI-compatible chat completions endpoint."""

from __future__ import annotations

from typing import Any

import requests

from dayshare.core.constants import AI_MAX_TOKENS, AI_TEMPERATURE
from dayshare.errors import AIServiceError


class CompletionClient:
    """Posts a conversation to ``{base_url}/chat/completions``."""

    def __init__(
        self,
        base_url: str | None,
        api_key: str | None,
        model: str = "gpt-4.1-nano",
        timeout: float = 15,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Any) -> CompletionClient:
        """Build a client from the Flask app config."""
        return cls(
            config.get("AI_BASE_URL"),
            config.get("AI_API_KEY"),
            model=config.get("AI_MODEL") or "gpt-4.1-nano",
            timeout=config.get("AI_TIMEOUT_SECONDS") or 15,
        )

    def complete(self, messages: list[dict[str, str]]) -> str:
        """Return the assistant's reply to ``messages``.

        Raises:
            AIServiceError: If the service is not configured, unreachable,
                answers with a non-2xx status or returns no usable reply.
        """
        if not self.base_url or not self.api_key:
            raise AIServiceError("AI service is not configured")

        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": AI_MAX_TOKENS,
            "temperature": AI_TEMPERATURE,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            resp = requests.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.RequestException as exc:
            raise AIServiceError(f"AI API error: {exc}") from exc
        except ValueError as exc:
            raise AIServiceError("AI API returned invalid JSON") from exc

        try:
            reply = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise AIServiceError("AI API returned an unexpected payload") from exc

        if not isinstance(reply, str) or not reply.strip():
            raise AIServiceError("No response from AI")
        return reply
