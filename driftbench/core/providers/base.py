"""Abstract base class for LLM providers."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_API_ATTEMPTS = 5
INITIAL_RETRY_DELAY = 1.0


@dataclass
class TokenUsage:
    """Token usage from a single LLM API call."""

    input_tokens: int = 0
    output_tokens: int = 0


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Subclasses implement ``generate`` against their SDK and declare which
    SDK exceptions are transient transport failures. Those are retried by
    ``_with_retry``; anything else propagates immediately.

    Args:
        api_key: API key or access token for the provider.
    """

    provider_name: str = "unknown"

    # Transport errors worth retrying (override in subclasses)
    transient_errors: tuple[type[BaseException], ...] = ()

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Model used when the caller passes none."""
        ...

    @abstractmethod
    def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model: str | None = None,
        temperature: float = 0.0,
        log: bool = False,
    ) -> tuple[str, TokenUsage]:
        """Single system + user turn. Returns (text, token_usage)."""
        ...

    def _with_retry(
        self,
        fn: Callable[[], T],
        max_attempts: int = MAX_API_ATTEMPTS,
        initial_delay: float = INITIAL_RETRY_DELAY,
    ) -> T:
        """Call fn, retrying transient errors with doubling backoff.

        Delays run initial_delay, 2x, 4x, ... between attempts. When the
        last attempt fails the original exception is re-raised.
        """
        for attempt in range(1, max_attempts + 1):
            try:
                return fn()
            except self.transient_errors as e:
                if attempt == max_attempts:
                    raise
                wait = initial_delay * 2 ** (attempt - 1)
                logger.warning(
                    f"[{self.provider_name}] Transient error (attempt {attempt}/{max_attempts}): "
                    f"{type(e).__name__}: {e}. Retrying in {wait:.1f}s"
                )
                time.sleep(wait)
        raise RuntimeError("unreachable")  # pragma: no cover
