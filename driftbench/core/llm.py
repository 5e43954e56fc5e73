"""LLM client facade with two-tier routing.

- fast: document writing, repair and regeneration calls (models.fast)
- strong: requirement reconciliation (models.strong)

Model strings use "provider/model" format. The provider is extracted to
route to the correct backend; the model name is passed through.

Strategies depend on the GenerateFn signature rather than on this module,
so tests and alternate backends can hand in any callable with the same
keyword arguments.
"""

import logging
from enum import Enum
from typing import Callable

from .providers import get_cached_provider
from .providers.base import TokenUsage
from .usage import UsageTracker
from ..config import get_config, parse_model_string

logger = logging.getLogger(__name__)


class ModelTier(str, Enum):
    """Capability tier of a generation call."""

    FAST = "fast"
    STRONG = "strong"


# generate(system_prompt=..., user_prompt=..., tier=...) -> text
GenerateFn = Callable[..., str]


__all__ = [
    "ModelTier",
    "GenerateFn",
    "generate",
    "resolve_tier",
    "TokenUsage",
]


def resolve_tier(tier: ModelTier | str = ModelTier.FAST) -> str:
    """Resolve a tier to its model string and build its provider.

    Lets callers surface model misconfiguration before the first call.

    Raises:
        ValueError: Malformed model string, unknown provider or missing API key
    """
    tier = ModelTier(tier)
    model_string = get_config().resolve_tier(tier.value)
    provider_name, _ = parse_model_string(model_string)
    get_cached_provider(provider_name)
    return model_string


def generate(
    system_prompt: str,
    user_prompt: str,
    tier: ModelTier | str = ModelTier.FAST,
    temperature: float = 0.0,
    model: str | None = None,
    usage: UsageTracker | None = None,
) -> str:
    """Generate text from a system + user instruction pair.

    Transport failures are retried inside the provider; if every attempt
    fails the provider's exception propagates to the caller.

    Args:
        system_prompt: System instruction
        user_prompt: User instruction
        tier: Model tier; resolved to a model string from config
        temperature: Sampling temperature (0 for reproducible runs)
        model: Explicit "provider/model" string, overrides the tier
        usage: Optional accumulator that receives this call's token usage
    """
    config = get_config()
    tier = ModelTier(tier)
    model_string = model or config.resolve_tier(tier.value)
    provider_name, model_name = parse_model_string(model_string)
    provider = get_cached_provider(provider_name)

    text, token_usage = provider.generate(
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        model=model_name,
        temperature=temperature,
        log=config.defaults.log_requests,
    )

    if usage is not None:
        usage.record(model_string, token_usage, tier=tier.value)

    logger.debug(
        f"[LLM] {tier.value} call on {model_string}: "
        f"{token_usage.input_tokens} in / {token_usage.output_tokens} out"
    )
    return text
