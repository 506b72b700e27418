"""Platform adapter contract and the run lifecycle shared by every adapter.

An adapter only supplies ``apply()``: the ordered field fills that submit
one form and return its confirmation identifier. ``run_adapter`` owns
timing, error capture and the result shape, identically for all platforms.
"""

import logging
import math
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from formpilot.browser.actions import FormActions
from formpilot.browser.timing import HumanTimingModel
from formpilot.core.errors import RunFailure
from formpilot.core.perf import PerformanceLog
from formpilot.core.schemas import ApplicationResult
from formpilot.profile.schema import CandidateProfile

logger = logging.getLogger(__name__)


class AdapterContext:
    """Shared collaborators handed to an adapter factory."""

    def __init__(
        self,
        *,
        page: Any,
        profile: CandidateProfile,
        actions: FormActions,
        name: str,
        screenshot_dir: str | Path = "screenshots",
    ) -> None:
        self.page = page
        self.profile = profile
        self.actions = actions
        self.name = name
        self.screenshot_dir = Path(screenshot_dir)

    @property
    def timing(self) -> HumanTimingModel:
        return self.actions.timing


class PlatformAdapter(ABC):
    """Base class that every platform adapter must implement."""

    def __init__(self, context: AdapterContext) -> None:
        self._context = context

    @property
    @abstractmethod
    def platform_id(self) -> str:
        """Unique identifier for this platform (e.g. 'acme')."""

    @abstractmethod
    async def apply(self) -> str:
        """Fill and submit the form. Returns the confirmation identifier."""

    @property
    def name(self) -> str:
        return self._context.name

    @property
    def context(self) -> AdapterContext:
        return self._context

    @property
    def profile(self) -> CandidateProfile:
        return self._context.profile

    @property
    def actions(self) -> FormActions:
        return self._context.actions

    async def confirmation(self, selector: str, what: str = "Confirmation ID") -> str:
        """Read the confirmation text from the success page."""
        text = await self.actions.text_content(selector)
        if not text:
            msg = f"{what} not found on success page"
            raise RunFailure(msg)
        logger.info("Application submitted successfully: %s", text)
        return text


def elapsed_ms(started: float) -> int:
    return math.ceil((time.perf_counter() - started) * 1000)


async def run_adapter(adapter: PlatformAdapter, perf: PerformanceLog | None = None) -> ApplicationResult:
    """Time and guard ``adapter.apply()``, converting any failure into a result."""
    started = time.perf_counter()
    logger.info("Starting %s application...", adapter.name)

    try:
        confirmation_id = await adapter.apply()
        if not confirmation_id:
            msg = f"{adapter.name} returned no confirmation identifier"
            raise RunFailure(msg)
    except Exception as e:
        await adapter.actions.screenshot("error")
        duration = elapsed_ms(started)
        error = str(e) or type(e).__name__
        logger.error("%s application failed: %s", adapter.name, error, exc_info=True)
        return ApplicationResult.failed(error, duration, platform=adapter.platform_id)

    duration = elapsed_ms(started)
    if perf is not None:
        perf.record(f"{adapter.name} application completed", duration)
    return ApplicationResult.succeeded(confirmation_id, duration, platform=adapter.platform_id)
