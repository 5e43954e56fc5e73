"""Anthropic (Claude) LLM Provider implementation."""

import logging
import time

import anthropic

from .base import LLMProvider, TokenUsage
from .logging import log_request_response

_MAX_OUTPUT_TOKENS = 16384

logger = logging.getLogger(__name__)


def _extract_text(response) -> str:
    """Concatenate the text blocks of a Messages API response."""
    parts = [block.text for block in response.content if block.type == "text"]
    return "".join(parts)


def _extract_usage(response) -> TokenUsage:
    """Extract token usage from an Anthropic API response."""
    if not hasattr(response, "usage") or response.usage is None:
        return TokenUsage()
    return TokenUsage(
        input_tokens=getattr(response.usage, "input_tokens", 0) or 0,
        output_tokens=getattr(response.usage, "output_tokens", 0) or 0,
    )


class AnthropicProvider(LLMProvider):
    """Anthropic (Claude) LLM provider using the Messages API."""

    provider_name = "anthropic"

    transient_errors = (
        anthropic.APIConnectionError,
        anthropic.InternalServerError,
        anthropic.RateLimitError,
    )

    def __init__(self, api_key: str = "", *, base_url: str = "") -> None:
        if not api_key:
            raise ValueError(
                "Anthropic API key not found. Set it via:\n"
                "  export ANTHROPIC_API_KEY=sk-ant-...\n"
                "Get your key from: https://console.anthropic.com/settings/keys"
            )
        super().__init__(api_key)
        self._base_url = base_url
        self._client: anthropic.Anthropic | None = None

    @property
    def default_model(self) -> str:
        return "claude-haiku-4-5-20251001"

    def _get_client(self) -> anthropic.Anthropic:
        if self._client is None:
            kwargs: dict = {"api_key": self._api_key, "max_retries": 0}
            if self._base_url:
                kwargs["base_url"] = self._base_url
            self._client = anthropic.Anthropic(**kwargs)
        return self._client

    def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model: str | None = None,
        temperature: float = 0.0,
        log: bool = False,
    ) -> tuple[str, TokenUsage]:
        model = model or self.default_model
        client = self._get_client()

        request_params = {
            "model": model,
            "max_tokens": _MAX_OUTPUT_TOKENS,
            "temperature": temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}],
        }

        logger.debug(f"[LLM] generate starting - provider=anthropic, model={model}")

        api_start = time.time()
        response = self._with_retry(lambda: client.messages.create(**request_params))
        logger.debug(f"[LLM] API response received in {time.time() - api_start:.2f}s")

        if log:
            log_request_response(
                function_name="generate",
                request=request_params,
                response=response,
                provider="anthropic",
            )

        return _extract_text(response), _extract_usage(response)
