"""Experiment engine tests: lineage, persistence and failure handling."""

import json

import pytest

from driftbench.core.models import Strategy
from driftbench.experiment import ExperimentEngine, ExperimentRun, run_experiment, run_id_for
from driftbench.storage import ArtifactStore


REQUESTS = ["Add a VPN rule.", "Tighten badge access.", "Drop the guest network."]


def test_run_id_for():
    assert run_id_for(3) == "run_03"


def test_incremental_threads_previous_artifact(scripted, document_builder, tmp_path):
    first = document_builder(extra="Marker alpha.")
    second = document_builder(extra="Marker beta.")
    gen = scripted([first, second])

    metrics = run_experiment(
        strategy="incremental",
        template="BASE TEMPLATE",
        requests=REQUESTS,
        iterations=2,
        generator=gen,
        store=ArtifactStore(tmp_path),
    )

    assert "BASE TEMPLATE" in gen.calls[0]["user_prompt"]
    assert "Marker alpha" in gen.calls[1]["user_prompt"]
    assert REQUESTS[1] in gen.calls[1]["user_prompt"]
    assert [m.iteration for m in metrics.iterations] == [1, 2]
    assert metrics.final_drift == 0
    assert metrics.converged_count == 2
    assert all(m.drift_history is None for m in metrics.iterations)


def test_iterations_capped_by_request_count(scripted, conforming_doc):
    gen = scripted([conforming_doc] * 3)
    metrics = run_experiment(
        strategy=Strategy.INCREMENTAL,
        template="BASE",
        requests=REQUESTS,
        iterations=15,
        generator=gen,
    )
    assert len(metrics.iterations) == 3
    assert len(gen.calls) == 3


def test_regeneration_sees_growing_history(scripted, conforming_doc):
    gen = scripted([conforming_doc] * 2)
    run_experiment(
        strategy="regeneration",
        template="BASE",
        requests=REQUESTS,
        iterations=2,
        generator=gen,
    )
    assert f"1. {REQUESTS[0]}" in gen.calls[0]["user_prompt"]
    assert REQUESTS[1] not in gen.calls[0]["user_prompt"]
    assert f"1. {REQUESTS[0]}\n2. {REQUESTS[1]}" in gen.calls[1]["user_prompt"]


def test_repair_metrics_record_drift_history(scripted, document_builder, conforming_doc):
    gen = scripted([document_builder(omit_terms=2), conforming_doc])
    metrics = run_experiment(
        strategy="repair",
        template="BASE",
        requests=REQUESTS[:1],
        iterations=1,
        generator=gen,
    )
    record = metrics.iterations[0]
    assert record.drift_history == [2, 0]
    assert record.retries == 1
    assert record.converged
    assert metrics.total_retries == 1


def test_artifacts_and_metrics_are_persisted(scripted, document_builder, tmp_path):
    gen = scripted([document_builder(omit_terms=1), document_builder(omit_terms=2)])
    run_experiment(
        strategy="incremental",
        template="BASE",
        requests=REQUESTS,
        iterations=2,
        generator=gen,
        run_id="run_02",
        atypicality="none",
        store=ArtifactStore(tmp_path),
    )

    run_dir = tmp_path / "run_02_incremental"
    assert sorted(p.name for p in run_dir.iterdir()) == ["v01.md", "v02.md"]
    assert (tmp_path / "run_02_incremental_metrics.md").exists()

    data = json.loads((tmp_path / "run_02_incremental_metrics.json").read_text())
    assert data["strategy"] == "incremental"
    assert [m["drift_score"] for m in data["iterations"]] == [1, 2]


def test_atypicality_suffix_in_run_directory(scripted, conforming_doc, tmp_path):
    gen = scripted([conforming_doc])
    metrics = run_experiment(
        strategy="incremental",
        template="BASE",
        requests=REQUESTS[:1],
        iterations=1,
        generator=gen,
        atypicality="mid",
        store=ArtifactStore(tmp_path),
    )
    assert metrics.atypicality == "word-initial"
    assert (tmp_path / "run_01_incremental_atyp_word-initial" / "v01.md").exists()
    assert metrics.iterations[0].atypicality_violations > 0


def test_invalid_inputs_fail_before_generation(scripted):
    gen = scripted([])
    with pytest.raises(ValueError, match="Unknown strategy"):
        run_experiment("bogus", "BASE", REQUESTS, 1, gen)
    with pytest.raises(ValueError, match="Unknown atypicality level"):
        run_experiment("incremental", "BASE", REQUESTS, 1, gen, atypicality="loud")
    assert gen.calls == []


def test_generation_failure_aborts_run(scripted, conforming_doc, tmp_path):
    gen = scripted([conforming_doc, RuntimeError("provider down")])
    run = ExperimentRun(
        strategy=Strategy.INCREMENTAL,
        run_id="run_01",
        iterations=3,
        template="BASE",
        requests=REQUESTS,
    )

    with pytest.raises(RuntimeError, match="provider down"):
        ExperimentEngine(generator=gen, store=ArtifactStore(tmp_path)).run(run)

    assert run.artifacts == [conforming_doc]
    assert (tmp_path / "run_01_incremental" / "v01.md").exists()
    assert not (tmp_path / "run_01_incremental_metrics.json").exists()
