"""Tests for config layering and the global config singleton."""

import json

import pytest

from driftbench import config as config_module
from driftbench.config import (
    DriftbenchConfig,
    ModelsConfig,
    configure,
    get_api_key_for_provider,
    get_config,
    parse_model_string,
    reset_config,
)


class TestParseModelString:
    def test_simple(self):
        assert parse_model_string("openai/gpt-4o-mini") == ("openai", "gpt-4o-mini")

    def test_nested_model_path(self):
        assert parse_model_string("openrouter/openai/gpt-5") == ("openrouter", "openai/gpt-5")

    @pytest.mark.parametrize("value", ["gpt-4o", "/gpt-4o", "openai/"])
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="Invalid model string"):
            parse_model_string(value)


class TestLoad:
    def test_defaults(self, isolated_config):
        config = DriftbenchConfig.load()
        assert config.models.fast == "openai/gpt-4o-mini"
        assert config.experiment.iterations == 15
        assert config.experiment.atypicality == "none"
        assert config.defaults.log_requests is False

    def test_file_values_apply(self, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text(
            json.dumps({"models": {"strong": "anthropic/claude-opus-4"}, "experiment": {"runs": 3}})
        )
        config = DriftbenchConfig.load()
        assert config.models.strong == "anthropic/claude-opus-4"
        assert config.experiment.runs == 3

    def test_env_overrides_file(self, isolated_config, monkeypatch):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text(json.dumps({"models": {"fast": "openai/from-file"}}))
        monkeypatch.setenv("MODELS_FAST", "anthropic/from-env")
        monkeypatch.setenv("DRIFTBENCH_ITERATIONS", "4")
        monkeypatch.setenv("DRIFTBENCH_ATYPICALITY", "high")
        monkeypatch.setenv("DRIFTBENCH_TEMPERATURE", "0.3")
        monkeypatch.setenv("DRIFTBENCH_LOG_REQUESTS", "yes")

        config = DriftbenchConfig.load()

        assert config.models.fast == "anthropic/from-env"
        assert config.experiment.iterations == 4
        assert config.experiment.atypicality == "high"
        assert config.experiment.temperature == 0.3
        assert config.defaults.log_requests is True

    def test_invalid_env_values_are_ignored(self, isolated_config, monkeypatch):
        monkeypatch.setenv("DRIFTBENCH_RUNS", "many")
        monkeypatch.setenv("DRIFTBENCH_TEMPERATURE", "warm")
        config = DriftbenchConfig.load()
        assert config.experiment.runs == 1
        assert config.experiment.temperature == 0.0

    def test_corrupt_file_falls_back_to_defaults(self, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("{not json")
        assert DriftbenchConfig.load().experiment.iterations == 15


class TestSave:
    def test_round_trip(self, isolated_config):
        config = DriftbenchConfig(models=ModelsConfig(fast="deepseek/deepseek-chat"))
        config.experiment.iterations = 7
        config.save()

        data = json.loads(isolated_config.read_text())
        assert "defaults" not in data
        loaded = DriftbenchConfig.load()
        assert loaded.models.fast == "deepseek/deepseek-chat"
        assert loaded.experiment.iterations == 7

    def test_to_dict_has_every_zone(self):
        assert set(DriftbenchConfig().to_dict()) == {"models", "experiment", "defaults"}


class TestTiers:
    def test_resolve_tier(self):
        config = DriftbenchConfig()
        assert config.resolve_tier("fast") == config.models.fast
        assert config.resolve_tier("strong") == config.models.strong

    def test_unknown_tier(self):
        with pytest.raises(ValueError, match="Unknown model tier"):
            DriftbenchConfig().resolve_tier("medium")


class TestSingleton:
    def test_get_config_is_cached(self, isolated_config):
        assert get_config() is get_config()

    def test_configure_and_reset(self, isolated_config):
        custom = DriftbenchConfig(models=ModelsConfig(fast="openai/custom"))
        configure(custom)
        assert get_config() is custom
        reset_config()
        assert get_config() is not custom


def test_api_key_from_env(isolated_config, monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
    monkeypatch.delenv("TOGETHER_API_KEY", raising=False)
    assert get_api_key_for_provider("groq") == "gsk-test"
    assert get_api_key_for_provider("together") == ""
    assert config_module._dotenv_loaded
