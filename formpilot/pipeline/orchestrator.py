"""Orchestrator: wires validation, browser session, registry and adapter run.

Data flow per target:
  1. Profile validation (once, before any browser is launched)
  2. Browser session → navigate to the target URL
  3. Registry detection → adapter instantiation
  4. run_adapter → ApplicationResult
"""

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from formpilot.browser.actions import FormActions
from formpilot.browser.session import BrowserSession
from formpilot.browser.timing import HumanTimingModel
from formpilot.core.config import Settings, TargetConfig
from formpilot.core.perf import PerformanceLog
from formpilot.core.retry import RetryExecutor, Sleep
from formpilot.core.schemas import ApplicationResult
from formpilot.pipeline.matcher import FuzzyOptionMatcher
from formpilot.platforms.base import AdapterContext, elapsed_ms, run_adapter
from formpilot.platforms.registry import PlatformDescriptor, PlatformRegistry, default_registry
from formpilot.profile.schema import CandidateProfile
from formpilot.profile.validation import validate_profile

logger = logging.getLogger(__name__)

SessionFactory = Callable[..., Any]


class ApplicationRun:
    """Outcome of one target: where we went and what came back."""

    def __init__(self, target: TargetConfig, result: ApplicationResult) -> None:
        self.target = target
        self.result = result


class Engine:
    """Builds the shared collaborators for a run from Settings.

    ``sleep`` and ``timing`` are injectable so tests can run without delays.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        sleep: Sleep | None = None,
        timing: HumanTimingModel | None = None,
        matcher: FuzzyOptionMatcher | None = None,
    ) -> None:
        self.settings = settings
        self.executor = RetryExecutor(settings.retry.to_policy(), sleep=sleep)
        self.timing = timing or HumanTimingModel(settings.timing)
        self.matcher = matcher or FuzzyOptionMatcher()

    def build_actions(self, page: Any, platform_name: str) -> FormActions:
        return FormActions(
            page,
            executor=self.executor,
            timing=self.timing,
            matcher=self.matcher,
            screenshot_dir=self.settings.screenshot_dir,
            platform_name=platform_name,
            element_timeout_ms=self.settings.element_timeout_ms,
            typeahead_timeout_ms=self.settings.typeahead_timeout_ms,
        )

    def context_builder(
        self, page: Any, profile: CandidateProfile,
    ) -> Callable[[PlatformDescriptor], AdapterContext]:
        def build(descriptor: PlatformDescriptor) -> AdapterContext:
            return AdapterContext(
                page=page,
                profile=profile,
                actions=self.build_actions(page, descriptor.platform.value),
                name=descriptor.name,
                screenshot_dir=self.settings.screenshot_dir,
            )

        return build


async def apply_to_job(
    page: Any,
    url: str,
    profile: CandidateProfile,
    engine: Engine,
    *,
    registry: PlatformRegistry | None = None,
    perf: PerformanceLog | None = None,
) -> ApplicationResult:
    """Navigate ``page`` to ``url`` and run the matching adapter.

    Navigation and detection failures become a failed result too.
    """
    registry = registry or default_registry(engine.settings.platforms)
    started = time.perf_counter()
    try:
        await page.goto(url, wait_until=engine.settings.navigation_wait)
        logger.info("Navigated to: %s", url)
        adapter = registry.create_adapter(url, engine.context_builder(page, profile))
    except Exception as e:
        error = str(e) or type(e).__name__
        logger.error("Application failed: %s", error)
        return ApplicationResult.failed(error, elapsed_ms(started))

    return await run_adapter(adapter, perf)


async def run_applications(
    settings: Settings,
    profile: CandidateProfile,
    targets: list[TargetConfig],
    *,
    engine: Engine | None = None,
    session_factory: SessionFactory = BrowserSession,
    registry: PlatformRegistry | None = None,
    perf: PerformanceLog | None = None,
) -> list[ApplicationRun]:
    """Apply to every target sequentially, one browser session each.

    Raises:
        ProfileValidationError: before any browser launch if the profile is incomplete.
    """
    validate_profile(profile)

    engine = engine or Engine(settings)
    registry = registry or default_registry(settings.platforms)
    Path(settings.screenshot_dir).mkdir(parents=True, exist_ok=True)

    runs: list[ApplicationRun] = []
    for target in targets:
        logger.info("--- Applying to %s ---", target.name or target.url)
        started = time.perf_counter()
        try:
            async with session_factory(settings.browser, perf) as session:
                result = await apply_to_job(
                    session.page, target.url, profile, engine, registry=registry, perf=perf,
                )
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.error("Browser session failed for %s: %s", target.url, error)
            result = ApplicationResult.failed(error, elapsed_ms(started))
        runs.append(ApplicationRun(target, result))

    succeeded = sum(1 for r in runs if r.result.success)
    logger.info("Applications complete: %d/%d succeeded", succeeded, len(runs))
    return runs


def export_results_json(runs: list[ApplicationRun]) -> str:
    """Export application results as a JSON string."""
    data = [
        {
            "name": r.target.name,
            "url": r.target.url,
            **r.result.model_dump(),
        }
        for r in runs
    ]
    return json.dumps(data, indent=2)
