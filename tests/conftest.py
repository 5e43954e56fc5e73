"""Shared fixtures: conforming document builder and a scripted generator."""

import pytest

from driftbench import config as config_module
from driftbench.core.providers import reset_provider_cache
from driftbench.validators import REQUIRED_SUBSECTIONS, VOCABULARY

SECTION_TITLES = ("Identity", "Network", "Storage", "Response")


def build_document(omit_terms: int = 0, extra: str = "", cross_ref: str = "See Section 2.") -> str:
    """Build a policy document that scores 0 drift at atypicality none.

    Four sections of five subsections give one slot per vocabulary term.
    Each omitted term (taken from the front of VOCABULARY) adds exactly one
    vocabulary violation and nothing else.
    """
    terms = list(VOCABULARY)
    lines = ["# Security Policy", ""]
    slot = 0
    for number, title in enumerate(SECTION_TITLES, 1):
        lines.append(f"## {number}. {title}")
        lines.append("")
        for name in REQUIRED_SUBSECTIONS:
            term = terms[slot] if slot >= omit_terms else "nothing"
            lines.append(f"### {name}")
            lines.append(f"We apply {term} here.")
            if number == 1 and name == "Enforcement" and cross_ref:
                lines.append(cross_ref)
            lines.append("")
            slot += 1
    if extra:
        lines.append(extra)
    return "\n".join(lines)


class ScriptedGenerator:
    """Generation stub that returns queued outputs and records every call."""

    def __init__(self, outputs):
        self.outputs = list(outputs)
        self.calls = []

    def __call__(self, system_prompt, user_prompt, tier="fast", **kwargs):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "tier": str(getattr(tier, "value", tier)),
                **kwargs,
            }
        )
        if not self.outputs:
            raise AssertionError("ScriptedGenerator ran out of outputs")
        output = self.outputs.pop(0)
        if isinstance(output, BaseException):
            raise output
        return output


@pytest.fixture
def conforming_doc():
    return build_document()


@pytest.fixture
def document_builder():
    return build_document


@pytest.fixture
def scripted():
    """Factory: scripted(outputs) -> ScriptedGenerator."""
    return ScriptedGenerator


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at tmp_path and clear driftbench env vars."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_dir / "config.json")
    monkeypatch.setattr(config_module, "_dotenv_loaded", True)
    for var in (
        "MODELS_FAST",
        "MODELS_STRONG",
        "DRIFTBENCH_ITERATIONS",
        "DRIFTBENCH_RUNS",
        "DRIFTBENCH_ATYPICALITY",
        "DRIFTBENCH_TEMPERATURE",
        "DRIFTBENCH_TEMPLATE",
        "DRIFTBENCH_REQUESTS",
        "DRIFTBENCH_RUNS_DIR",
        "DRIFTBENCH_LOG_REQUESTS",
    ):
        monkeypatch.delenv(var, raising=False)
    config_module.reset_config()
    reset_provider_cache()
    yield config_dir / "config.json"
    config_module.reset_config()
    reset_provider_cache()
