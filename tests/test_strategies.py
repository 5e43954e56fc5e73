"""Strategy control-loop tests with a scripted generator."""

import pytest

from driftbench.core.models import AtypicalityLevel, Strategy
from driftbench.strategies import (
    get_strategy,
    incremental_evolve,
    reconcile_requirements,
    reconciled_regeneration_evolve,
    regeneration_evolve,
    repair_evolve,
    run_strategy,
)
from driftbench.strategies.prompts import (
    RECONCILE_SYSTEM_PROMPT,
    REGENERATION_SYSTEM_PROMPT,
    REPAIR_SYSTEM_PROMPT,
)


class TestGetStrategy:
    def test_resolves_names(self):
        assert get_strategy("regen-full") is Strategy.REGEN_FULL
        assert get_strategy(Strategy.REPAIR) is Strategy.REPAIR

    def test_unknown_name_lists_options(self):
        with pytest.raises(ValueError, match="Unknown strategy: bogus. Valid options: incremental"):
            get_strategy("bogus")

    def test_unknown_strategy_fails_before_any_call(self, scripted, conforming_doc):
        gen = scripted([conforming_doc])
        with pytest.raises(ValueError):
            run_strategy(
                "bogus",
                previous_artifact=conforming_doc,
                template=conforming_doc,
                history=["Add a rule."],
                generator=gen,
            )
        assert gen.calls == []

    def test_empty_history_is_rejected(self, scripted, conforming_doc):
        gen = scripted([conforming_doc])
        with pytest.raises(ValueError, match="at least one change request"):
            run_strategy(
                Strategy.INCREMENTAL,
                previous_artifact=conforming_doc,
                template=conforming_doc,
                history=[],
                generator=gen,
            )
        assert gen.calls == []


class TestIncremental:
    def test_single_call_no_retries(self, scripted, document_builder):
        gen = scripted([document_builder(omit_terms=3)])
        result = incremental_evolve("PREVIOUS DOC", "Add a VPN rule.", generator=gen)

        assert len(gen.calls) == 1
        assert "PREVIOUS DOC" in gen.calls[0]["user_prompt"]
        assert "Add a VPN rule." in gen.calls[0]["user_prompt"]
        assert result.retries == 0
        assert result.final_score.total == 3
        assert not result.converged
        assert result.drift_history == (3,)

    def test_converged_when_output_conforms(self, scripted, conforming_doc):
        result = incremental_evolve("prev", "req", generator=scripted([conforming_doc]))
        assert result.converged

    def test_casing_constraint_goes_on_request(self, scripted, conforming_doc):
        gen = scripted([conforming_doc])
        incremental_evolve("prev", "req", AtypicalityLevel.WORD_INITIAL, generator=gen)
        assert "Title Case" in gen.calls[0]["user_prompt"]


class TestRepair:
    def test_stops_after_max_retries(self, scripted, document_builder):
        outputs = [document_builder(omit_terms=n) for n in (5, 4, 3, 2)]
        gen = scripted(outputs)
        result = repair_evolve("prev", "req", generator=gen)

        assert len(gen.calls) == 4
        assert result.retries == 3
        assert result.drift_history == (5, 4, 3, 2)
        assert result.artifact == outputs[-1]
        assert not result.converged

    def test_breaks_on_non_improving_attempt(self, scripted, document_builder):
        outputs = [
            document_builder(omit_terms=5),
            document_builder(omit_terms=5, extra="Marker beta."),
        ]
        gen = scripted(outputs)
        result = repair_evolve("prev", "req", generator=gen)

        assert len(gen.calls) == 2
        assert result.retries == 1
        assert result.drift_history == (5, 5)
        assert result.artifact == outputs[1]

    def test_worse_attempt_is_kept(self, scripted, document_builder):
        outputs = [document_builder(omit_terms=2), document_builder(omit_terms=4)]
        result = repair_evolve("prev", "req", generator=scripted(outputs))
        assert result.final_score.total == 4
        assert result.drift_history == (2, 4)

    def test_converges_mid_loop(self, scripted, document_builder, conforming_doc):
        gen = scripted([document_builder(omit_terms=3), conforming_doc])
        result = repair_evolve("prev", "req", generator=gen)

        assert result.converged
        assert result.retries == 1
        assert result.drift_history == (3, 0)

    def test_retry_prompt_carries_violation_report(self, scripted, document_builder, conforming_doc):
        gen = scripted([document_builder(omit_terms=1), conforming_doc])
        repair_evolve("prev", "req", generator=gen)

        assert gen.calls[1]["system_prompt"] == REPAIR_SYSTEM_PROMPT
        assert "VOCABULARY ERRORS" in gen.calls[1]["user_prompt"]
        assert '"Zero Trust" appears 0 times' in gen.calls[1]["user_prompt"]

    def test_conforming_first_attempt_skips_loop(self, scripted, conforming_doc):
        gen = scripted([conforming_doc])
        result = repair_evolve("prev", "req", generator=gen)
        assert len(gen.calls) == 1
        assert result.retries == 0


class TestRegeneration:
    def test_uses_template_and_full_history(self, scripted, conforming_doc):
        gen = scripted([conforming_doc])
        result = regeneration_evolve("BASE TEMPLATE", ["first", "second"], generator=gen)

        prompt = gen.calls[0]["user_prompt"]
        assert gen.calls[0]["system_prompt"] == REGENERATION_SYSTEM_PROMPT
        assert "BASE TEMPLATE" in prompt
        assert "1. first\n2. second" in prompt
        assert result.retries == 0
        assert result.converged

    def test_casing_constraint_goes_on_template(self, scripted, conforming_doc):
        gen = scripted([conforming_doc])
        regeneration_evolve("BASE", ["r"], AtypicalityLevel.THIRD_CHAR, generator=gen)
        assert "3rd-Letter-Uppercase" in gen.calls[0]["user_prompt"]


class TestReconciliation:
    def test_reconciliation_uses_strong_tier(self, scripted):
        gen = scripted(["1. merged"])
        assert reconcile_requirements(["a", "b"], generator=gen) == "1. merged"
        assert gen.calls[0]["tier"] == "strong"
        assert gen.calls[0]["system_prompt"] == RECONCILE_SYSTEM_PROMPT
        assert "1. a\n2. b" in gen.calls[0]["user_prompt"]

    def test_regen_reconcile_is_single_shot(self, scripted, document_builder):
        gen = scripted(["1. merged", document_builder(omit_terms=2)])
        result = reconciled_regeneration_evolve("BASE", ["a"], generator=gen, use_retries=False)

        assert [c["tier"] for c in gen.calls] == ["strong", "fast"]
        assert "1. merged" in gen.calls[1]["user_prompt"]
        assert result.retries == 0
        assert result.drift_history == (2,)

    def test_regen_full_returns_best_attempt(self, scripted, document_builder):
        outputs = [
            document_builder(omit_terms=5),
            document_builder(omit_terms=2, extra="Marker alpha."),
            document_builder(omit_terms=7),
            document_builder(omit_terms=2, extra="Marker beta."),
        ]
        gen = scripted(["1. merged"] + outputs)
        result = reconciled_regeneration_evolve("BASE", ["a", "b"], generator=gen)

        assert len(gen.calls) == 5
        assert gen.calls[0]["tier"] == "strong"
        assert result.retries == 3
        assert result.drift_history == (5, 2, 7, 2)
        assert result.artifact == outputs[1]
        assert result.final_score.total == 2
        assert not result.converged

    def test_regen_full_keeps_going_after_non_improving_attempt(
        self, scripted, document_builder, conforming_doc
    ):
        outputs = [document_builder(omit_terms=3), document_builder(omit_terms=4), conforming_doc]
        gen = scripted(["1. merged"] + outputs)
        result = reconciled_regeneration_evolve("BASE", ["a"], generator=gen)

        assert result.drift_history == (3, 4, 0)
        assert result.retries == 2
        assert result.converged
        assert result.artifact == conforming_doc

    def test_regen_full_feedback_prompt(self, scripted, document_builder, conforming_doc):
        gen = scripted(["1. merged", document_builder(omit_terms=1), conforming_doc])
        reconciled_regeneration_evolve("BASE", ["a"], generator=gen)
        assert "YOUR PREVIOUS ATTEMPT HAD THESE ERRORS" in gen.calls[2]["user_prompt"]


class TestRunStrategy:
    def test_incremental_family_gets_previous_artifact_and_newest_request(
        self, scripted, conforming_doc
    ):
        gen = scripted([conforming_doc])
        run_strategy(
            "incremental",
            previous_artifact="PREVIOUS",
            template="TEMPLATE",
            history=["old request", "new request"],
            generator=gen,
        )
        prompt = gen.calls[0]["user_prompt"]
        assert "PREVIOUS" in prompt
        assert "new request" in prompt
        assert "old request" not in prompt
        assert "TEMPLATE" not in prompt

    def test_regeneration_family_gets_template_and_history(self, scripted, conforming_doc):
        gen = scripted(["1. merged", conforming_doc])
        result = run_strategy(
            Strategy.REGEN_FULL,
            previous_artifact="PREVIOUS",
            template="TEMPLATE",
            history=["old request", "new request"],
            generator=gen,
        )
        assert "old request" in gen.calls[0]["user_prompt"]
        assert "TEMPLATE" in gen.calls[1]["user_prompt"]
        assert "PREVIOUS" not in gen.calls[1]["user_prompt"]
        assert result.converged
