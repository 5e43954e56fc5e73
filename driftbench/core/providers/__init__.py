"""LLM Provider registry and factory.

Provides:
- get_provider(): Create a provider instance from a provider name
- get_cached_provider(): Same, reused across calls within a process
- reset_provider_cache(): Drop cached instances (for tests)
"""

import importlib

from .base import LLMProvider, TokenUsage
from ...config import get_api_key_for_provider, parse_model_string


# =============================================================================
# Provider Registry
# =============================================================================

# Each entry: module, class name and constructor kwargs.
# Lazy-imported so only the SDK actually in use gets loaded.
_BUILTIN_REGISTRY: dict[str, dict] = {
    "openai": {
        "module": ".openai",
        "class": "OpenAIProvider",
    },
    "anthropic": {
        "module": ".anthropic",
        "class": "AnthropicProvider",
    },
    "openrouter": {
        "module": ".openai",
        "class": "OpenAIProvider",
        "kwargs": {
            "base_url": "https://openrouter.ai/api/v1",
            "provider_label": "openrouter",
            "default_model": "openai/gpt-4o-mini",
        },
    },
    "deepseek": {
        "module": ".openai",
        "class": "OpenAIProvider",
        "kwargs": {
            "base_url": "https://api.deepseek.com/v1",
            "provider_label": "deepseek",
            "default_model": "deepseek-chat",
        },
    },
    "together": {
        "module": ".openai",
        "class": "OpenAIProvider",
        "kwargs": {
            "base_url": "https://api.together.xyz/v1",
            "provider_label": "together",
            "default_model": "meta-llama/Meta-Llama-3.1-8B-Instruct-Turbo",
        },
    },
    "groq": {
        "module": ".openai",
        "class": "OpenAIProvider",
        "kwargs": {
            "base_url": "https://api.groq.com/openai/v1",
            "provider_label": "groq",
            "default_model": "llama-3.3-70b-versatile",
        },
    },
}


def available_providers() -> list[str]:
    return sorted(_BUILTIN_REGISTRY)


def get_provider(provider_name: str) -> LLMProvider:
    """Create a provider instance by name.

    Args:
        provider_name: Provider name (e.g., "openai", "anthropic", "openrouter")

    Returns:
        LLMProvider instance

    Raises:
        ValueError: If provider is unknown or its API key is missing
    """
    if provider_name not in _BUILTIN_REGISTRY:
        raise ValueError(
            f"Unknown LLM provider: {provider_name!r}. "
            f"Available: {', '.join(available_providers())}"
        )

    entry = _BUILTIN_REGISTRY[provider_name]
    module = importlib.import_module(entry["module"], package=__package__)
    cls = getattr(module, entry["class"])

    kwargs = dict(entry.get("kwargs", {}))
    kwargs["api_key"] = get_api_key_for_provider(provider_name)

    return cls(**kwargs)


# Cached providers, reused across calls
_cached_providers: dict[str, LLMProvider] = {}


def get_cached_provider(provider_name: str) -> LLMProvider:
    """Get or create a cached provider instance."""
    if provider_name not in _cached_providers:
        _cached_providers[provider_name] = get_provider(provider_name)
    return _cached_providers[provider_name]


def reset_provider_cache() -> None:
    """Reset the provider cache (for testing)."""
    _cached_providers.clear()


__all__ = [
    "LLMProvider",
    "TokenUsage",
    "available_providers",
    "get_provider",
    "get_cached_provider",
    "reset_provider_cache",
    "parse_model_string",
]
