"""Tests for sequential stage execution."""

from __future__ import annotations

import pytest

from mr.core.result import Err, Ok, Skip
from mr.output.console import MockConsole
from mr.pipeline.context import Context
from mr.pipeline.runner import run_stage
from mr.pipeline.step import PipelineError, Step

from mr.test.pipeline.fakes import RecordingStep, failing_step, make_context, ok_step, skip_step


def test_empty_stage_succeeds() -> None:
    assert run_stage(make_context(), []) == Ok(None)


@pytest.mark.parametrize("k", [0, 1, 2, 3])
def test_failure_at_k_stops_the_stage(k: int) -> None:
    log: list[str] = []
    steps: list[Step] = [ok_step(f"s{i}", log) for i in range(4)]
    steps[k] = failing_step(f"s{k}", log, message="exploded")

    result = run_stage(make_context(), steps)

    assert result == Err(PipelineError(step=f"s{k}", message="exploded"))
    assert log == [f"s{i}" for i in range(k + 1)]


def test_mixed_skips_and_successes_run_every_step_once() -> None:
    log: list[str] = []
    steps = [
        ok_step("a", log),
        skip_step("b", log),
        ok_step("c", log),
        skip_step("d", log),
    ]
    assert run_stage(make_context(), steps) == Ok(None)
    assert log == ["a", "b", "c", "d"]


def test_error_message_is_prefixed_with_step_name() -> None:
    result = run_stage(
        make_context(), [failing_step("signing application", [], "identity not found", "hint")]
    )
    assert isinstance(result, Err)
    assert str(result.error) == "signing application: identity not found"
    assert result.error.hint == "hint"


def test_logs_names_and_skip_reasons() -> None:
    ctx = make_context()
    log: list[str] = []
    run_stage(ctx, [ok_step("first", log), skip_step("second", log, "publishing skipped")])

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.actions() == ["first", "second"]
    assert ctx.console.find("skipped: publishing skipped")


def test_duplicate_names_are_allowed() -> None:
    log: list[str] = []
    assert run_stage(make_context(), [ok_step("same", log), ok_step("same", log)]) == Ok(None)
    assert log == ["same", "same"]


def test_skip_leaves_state_untouched() -> None:
    ctx = make_context()
    before = ctx.artifacts.snapshot()
    run_stage(ctx, [skip_step("noop", [])])
    assert ctx.artifacts.snapshot() == before


class TestArtifactContract:
    def test_missing_required_artifact_fails_before_execute(self) -> None:
        log: list[str] = []
        step = RecordingStep("signing application", log, requires=("app_path",))

        result = run_stage(make_context(), [step])

        assert isinstance(result, Err)
        assert result.error.step == "signing application"
        assert "app_path" in result.error.message
        assert log == []

    def test_required_artifact_present(self) -> None:
        ctx = make_context()
        ctx.artifacts.app_path = "/tmp/MyApp.app"
        log: list[str] = []
        assert run_stage(ctx, [RecordingStep("sign", log, requires=("app_path",))]) == Ok(None)
        assert log == ["sign"]

    def test_producer_satisfies_consumer(self) -> None:
        def produce(ctx: Context) -> None:
            ctx.artifacts.packages.append("dist/MyApp-v1.zip")

        log: list[str] = []
        steps = [
            RecordingStep("archive", log, provides=("packages",), effect=produce),
            RecordingStep("release", log, requires=("packages",)),
        ]
        assert run_stage(make_context(), steps) == Ok(None)
        assert log == ["archive", "release"]

    def test_writing_a_foreign_field_fails(self) -> None:
        def trespass(ctx: Context) -> None:
            ctx.artifacts.release_url = "https://example.com"

        step = RecordingStep("changelog", [], provides=("changelog_path",), effect=trespass)
        result = run_stage(make_context(), [step])
        assert isinstance(result, Err)
        assert "release_url" in result.error.message

    def test_failing_step_keeps_partial_writes(self) -> None:
        def partial(ctx: Context) -> None:
            ctx.artifacts.output_dir = "dist/MyApp/v1"

        ctx = make_context()
        step = failing_step("build", [])
        step.effect = partial
        step.provides = ("output_dir",)

        assert isinstance(run_stage(ctx, [step]), Err)
        assert ctx.artifacts.output_dir == "dist/MyApp/v1"

    @pytest.mark.parametrize("field", ["release_url", "changelog_path"])
    def test_skipping_step_must_not_write(self, field: str) -> None:
        def write(ctx: Context) -> None:
            setattr(ctx.artifacts, field, "https://example.com")

        log: list[str] = []
        steps = [
            RecordingStep("changelog", log, Skip("disabled"), provides=("changelog_path",), effect=write),
            ok_step("after", log),
        ]

        result = run_stage(make_context(), steps)

        assert isinstance(result, Err)
        assert result.error.step == "changelog"
        assert field in result.error.message
        assert log == ["changelog"]

    def test_requires_is_checked_before_a_step_can_skip(self) -> None:
        log: list[str] = []
        step = RecordingStep("release", log, Skip("publishing skipped"), requires=("packages",))

        result = run_stage(make_context(), [step])

        assert isinstance(result, Err)
        assert "packages" in result.error.message
        assert log == []
