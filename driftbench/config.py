"""Configuration management for Driftbench.

Two model tiers:
- models.fast: document generation, repair and regeneration calls
- models.strong: requirement reconciliation (reasoning tier)

Model strings use "provider/model" format (e.g., "openai/gpt-4o-mini").

Config resolution order (highest priority first):
1. Programmatic (DriftbenchConfig constructed in code)
2. Environment variables (MODELS_FAST, DRIFTBENCH_ITERATIONS, etc.)
3. Config file (~/.config/driftbench/config.json, managed by `driftbench config`)
4. Hardcoded defaults

API keys are ALWAYS from env vars, never stored in the config file.
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


# =============================================================================
# Config file location
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "driftbench"
CONFIG_FILE = CONFIG_DIR / "config.json"


# =============================================================================
# Model string parsing
# =============================================================================


def parse_model_string(model_string: str) -> tuple[str, str]:
    """Parse a "provider/model" string into (provider, model) tuple.

    Examples:
        "openai/gpt-4o-mini" → ("openai", "gpt-4o-mini")
        "anthropic/claude-sonnet-4.5" → ("anthropic", "claude-sonnet-4.5")
        "openrouter/openai/gpt-5" → ("openrouter", "openai/gpt-5")

    Raises:
        ValueError: If the string doesn't contain a '/' separator.
    """
    if "/" not in model_string:
        raise ValueError(
            f"Invalid model string: {model_string!r}. "
            f"Expected format: 'provider/model' (e.g., 'openai/gpt-4o-mini')"
        )
    provider, _, model = model_string.partition("/")
    if not provider or not model:
        raise ValueError(
            f"Invalid model string: {model_string!r}. "
            f"Both provider and model must be non-empty."
        )
    return provider, model


# =============================================================================
# Config dataclasses
# =============================================================================


@dataclass
class ModelsConfig:
    """Model tier configuration.

    - fast: default tier for document writing and repair
    - strong: reasoning tier, used only for requirement reconciliation
    """

    fast: str = "openai/gpt-4o-mini"
    strong: str = "openai/gpt-5.2"


@dataclass
class ExperimentConfig:
    """Experiment defaults used by `driftbench run` when flags are omitted."""

    iterations: int = 15
    runs: int = 1
    atypicality: str = "none"
    temperature: float = 0.0
    template_path: str = "./data/blueprint.md"
    requests_path: str = "./data/patches.json"
    runs_dir: str = "./data/runs"


@dataclass
class DefaultsConfig:
    """Non-experiment settings."""

    log_requests: bool = False
    logs_dir: str = "./logs"


# =============================================================================
# Main config class
# =============================================================================


_INT_ENV_VARS = {
    "DRIFTBENCH_ITERATIONS": "iterations",
    "DRIFTBENCH_RUNS": "runs",
}

_STR_ENV_VARS = {
    "DRIFTBENCH_ATYPICALITY": "atypicality",
    "DRIFTBENCH_TEMPLATE": "template_path",
    "DRIFTBENCH_REQUESTS": "requests_path",
    "DRIFTBENCH_RUNS_DIR": "runs_dir",
}


@dataclass
class DriftbenchConfig:
    """Top-level driftbench configuration.

    Examples:
        # Package use, no files needed
        config = DriftbenchConfig(
            models=ModelsConfig(fast="openai/gpt-4o-mini", strong="anthropic/claude-sonnet-4.5"),
        )

        # CLI use, loads from ~/.config/driftbench/config.json
        config = DriftbenchConfig.load()
    """

    models: ModelsConfig = field(default_factory=ModelsConfig)
    experiment: ExperimentConfig = field(default_factory=ExperimentConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls) -> "DriftbenchConfig":
        """Load config from file + env vars.

        Priority: env var values > config.json values > defaults.
        """
        config = cls()

        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    data = json.load(f)
                _apply_dict(config, data)
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Failed to load config from %s: %s", CONFIG_FILE, exc)

        if val := os.environ.get("MODELS_FAST"):
            config.models.fast = val
        if val := os.environ.get("MODELS_STRONG"):
            config.models.strong = val

        for env_var, attr in _INT_ENV_VARS.items():
            if val := os.environ.get(env_var):
                try:
                    setattr(config.experiment, attr, int(val))
                except ValueError:
                    logger.warning("Invalid %s=%r, ignoring", env_var, val)
        for env_var, attr in _STR_ENV_VARS.items():
            if val := os.environ.get(env_var):
                setattr(config.experiment, attr, val)
        if val := os.environ.get("DRIFTBENCH_TEMPERATURE"):
            try:
                config.experiment.temperature = float(val)
            except ValueError:
                logger.warning("Invalid DRIFTBENCH_TEMPERATURE=%r, ignoring", val)
        if val := os.environ.get("DRIFTBENCH_LOG_REQUESTS"):
            config.defaults.log_requests = val.lower() in ("1", "true", "yes")

        return config

    def save(self) -> None:
        """Save config to ~/.config/driftbench/config.json."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        data: dict[str, Any] = {
            "models": asdict(self.models),
            "experiment": asdict(self.experiment),
        }
        if self.defaults != DefaultsConfig():
            data["defaults"] = asdict(self.defaults)
        with open(CONFIG_FILE, "w") as f:
            json.dump(data, f, indent=2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for display."""
        return {
            "models": asdict(self.models),
            "experiment": asdict(self.experiment),
            "defaults": asdict(self.defaults),
        }

    def resolve_tier(self, tier: str) -> str:
        """Resolve a tier name ("fast" / "strong") to its model string."""
        if tier == "strong":
            return self.models.strong
        if tier == "fast":
            return self.models.fast
        raise ValueError(f"Unknown model tier: {tier!r}. Expected 'fast' or 'strong'.")


# =============================================================================
# Config dict application
# =============================================================================


def _apply_dict(config: DriftbenchConfig, data: dict) -> None:
    """Apply a dict of values onto a DriftbenchConfig."""
    sections = {
        "models": config.models,
        "experiment": config.experiment,
        "defaults": config.defaults,
    }
    for name, target in sections.items():
        values = data.get(name)
        if not isinstance(values, dict):
            continue
        for k, v in values.items():
            if hasattr(target, k):
                setattr(target, k, v)


# =============================================================================
# API key resolution
# =============================================================================

_dotenv_loaded = False


def _ensure_dotenv() -> None:
    """Load .env file into os.environ if not already loaded."""
    global _dotenv_loaded
    if not _dotenv_loaded:
        _dotenv_loaded = True
        from dotenv import find_dotenv, load_dotenv

        dotenv_path = find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path=dotenv_path, override=False)


def get_api_key_for_provider(provider_name: str) -> str:
    """Get API key for a provider.

    Convention: {PROVIDER_UPPER}_API_KEY (e.g., OPENAI_API_KEY, ANTHROPIC_API_KEY).

    Returns empty string if not found.
    """
    _ensure_dotenv()
    env_var = f"{provider_name.upper()}_API_KEY"
    return os.environ.get(env_var, "")


# =============================================================================
# Global config singleton
# =============================================================================

_config: DriftbenchConfig | None = None


def get_config() -> DriftbenchConfig:
    """Get the global DriftbenchConfig instance.

    First call loads from file + env vars. Subsequent calls return cached instance.
    Use configure() to replace the global config programmatically.
    """
    global _config
    if _config is None:
        _config = DriftbenchConfig.load()
    return _config


def configure(config: DriftbenchConfig) -> None:
    """Set the global DriftbenchConfig programmatically.

    Use this when driftbench is used as a package:
        from driftbench.config import configure, DriftbenchConfig, ModelsConfig
        configure(DriftbenchConfig(models=ModelsConfig(fast="openai/gpt-4o-mini")))
    """
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global config (forces reload on next get_config())."""
    global _config
    _config = None
