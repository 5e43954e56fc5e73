"""OpenAI LLM Provider implementation.

Uses the Chat Completions API, which every OpenAI-compatible endpoint
(OpenRouter, DeepSeek, Together, Groq) also serves. Pass ``base_url`` to
point the client at a third-party endpoint.
"""

import logging
import time

import openai
from openai import OpenAI

from .base import LLMProvider, TokenUsage
from .logging import log_request_response

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI (or OpenAI-compatible) chat provider."""

    provider_name = "openai"

    transient_errors = (
        openai.APIConnectionError,
        openai.InternalServerError,
        openai.RateLimitError,
    )

    def __init__(
        self,
        api_key: str = "",
        *,
        base_url: str = "",
        provider_label: str = "openai",
        default_model: str = "gpt-4o-mini",
    ) -> None:
        if not api_key:
            env_var = f"{provider_label.upper()}_API_KEY"
            raise ValueError(
                f"{env_var} not found. Set it as an environment variable.\n"
                f"  export {env_var}=..."
            )
        super().__init__(api_key)
        self._base_url = base_url
        self._default_model = default_model
        self._client: OpenAI | None = None
        self.provider_name = provider_label

    @property
    def default_model(self) -> str:
        return self._default_model

    def _get_client(self) -> OpenAI:
        if self._client is None:
            kwargs: dict = {"api_key": self._api_key, "max_retries": 0}
            if self._base_url:
                kwargs["base_url"] = self._base_url
            self._client = OpenAI(**kwargs)
        return self._client

    @staticmethod
    def _extract_text(response) -> str:
        """Extract message text from a Chat Completions response."""
        if response.choices:
            content = response.choices[0].message.content
            if content:
                return content
        return ""

    @staticmethod
    def _extract_usage(response) -> TokenUsage:
        usage = getattr(response, "usage", None)
        if usage is None:
            return TokenUsage()
        return TokenUsage(
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
        )

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
            "temperature": temperature,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }

        logger.debug(
            f"[LLM] generate starting - provider={self.provider_name}, model={model}, "
            f"prompt length: {len(system_prompt) + len(user_prompt)} chars"
        )

        api_start = time.time()
        response = self._with_retry(
            lambda: client.chat.completions.create(**request_params)
        )
        logger.debug(f"[LLM] API response received in {time.time() - api_start:.2f}s")

        if log:
            log_request_response(
                function_name="generate",
                request=request_params,
                response=response,
                provider=self.provider_name,
            )

        return self._extract_text(response), self._extract_usage(response)
