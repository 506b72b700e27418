"""Tests for the shared adapter lifecycle (run_adapter) and AdapterContext."""

from pathlib import Path

import pytest

from formpilot.core.errors import NoMatchFound, RunFailure
from formpilot.core.perf import PerformanceLog
from formpilot.platforms.base import AdapterContext, PlatformAdapter, run_adapter


class ScriptedAdapter(PlatformAdapter):
    """Returns ``outcome`` from apply(), or raises it when it is an exception."""

    def __init__(self, context: AdapterContext, outcome: object) -> None:
        super().__init__(context)
        self.outcome = outcome

    @property
    def platform_id(self) -> str:
        return "scripted"

    async def apply(self) -> str:
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome  # type: ignore[return-value]


@pytest.fixture
def make_adapter(engine, profile):
    def build(page, outcome: object) -> ScriptedAdapter:
        context = AdapterContext(
            page=page,
            profile=profile,
            actions=engine.build_actions(page, "scripted"),
            name="Scripted Corp",
            screenshot_dir=engine.settings.screenshot_dir,
        )
        return ScriptedAdapter(context, outcome)

    return build


class TestRunAdapter:
    async def test_success_result(self, page_factory, make_adapter) -> None:
        result = await run_adapter(make_adapter(page_factory(), "REF-1"))

        assert result.success is True
        assert result.confirmation_id == "REF-1"
        assert result.error is None
        assert result.duration_ms > 0
        assert result.platform == "scripted"

    async def test_success_recorded_in_perf(self, page_factory, make_adapter) -> None:
        perf = PerformanceLog()
        await run_adapter(make_adapter(page_factory(), "REF-1"), perf)
        assert "Scripted Corp application completed" in perf.metrics

    async def test_exception_becomes_failed_result(self, page_factory, make_adapter) -> None:
        page = page_factory()
        result = await run_adapter(make_adapter(page, NoMatchFound("#education", "astrology")))

        assert result.success is False
        assert result.confirmation_id is None
        assert result.error == 'No match found for "astrology" in #education'
        assert result.duration_ms > 0

    async def test_failure_takes_error_screenshot(self, page_factory, make_adapter) -> None:
        page = page_factory()
        await run_adapter(make_adapter(page, RuntimeError("boom")))

        shots = page.calls("screenshot")
        assert len(shots) == 1
        assert Path(shots[0][1]).name.startswith("scripted-error-")

    async def test_screenshot_failure_does_not_mask_error(self, page_factory, make_adapter) -> None:
        page = page_factory(screenshot_error=RuntimeError("browser gone"))
        result = await run_adapter(make_adapter(page, RuntimeError("original")))

        assert result.success is False
        assert result.error == "original"

    async def test_empty_message_falls_back_to_type_name(self, page_factory, make_adapter) -> None:
        result = await run_adapter(make_adapter(page_factory(), TimeoutError()))
        assert result.error == "TimeoutError"

    async def test_empty_confirmation_is_failure(self, page_factory, make_adapter) -> None:
        result = await run_adapter(make_adapter(page_factory(), ""))

        assert result.success is False
        assert "no confirmation identifier" in result.error


class TestConfirmation:
    async def test_reads_stripped_text(self, page_factory, make_adapter) -> None:
        adapter = make_adapter(page_factory(texts={"#ref": "  X-9 "}), "unused")
        assert await adapter.confirmation("#ref") == "X-9"

    async def test_missing_text_raises(self, page_factory, make_adapter) -> None:
        adapter = make_adapter(page_factory(), "unused")
        with pytest.raises(RunFailure, match="Reference number not found"):
            await adapter.confirmation("#ref", "Reference number")


class TestAdapterContext:
    def test_exposes_collaborators(self, page_factory, make_adapter) -> None:
        page = page_factory()
        adapter = make_adapter(page, "x")

        assert adapter.name == "Scripted Corp"
        assert adapter.actions.page is page
        assert adapter.context.timing is adapter.actions.timing
        assert isinstance(adapter.context.screenshot_dir, Path)
