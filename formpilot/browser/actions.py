"""Reusable form interaction primitives.

Design rules:
  - Each primitive (click, type, select, select_smart, check, toggle,
    upload_file) is exactly one RetryExecutor call.
  - Every interactive step applies HumanTimingModel delays.
  - Screenshots are best-effort and never retried.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path
from typing import Any, Literal, TypeVar

from patchright.async_api import TimeoutError as PlaywrightTimeoutError

from formpilot.browser.timing import HumanTimingModel
from formpilot.browser.typeahead import TypeaheadResolver, css_string
from formpilot.core.errors import ElementTimeout, NoMatchFound
from formpilot.core.retry import RetryExecutor
from formpilot.core.schemas import MatchableOption
from formpilot.pipeline.matcher import FuzzyOptionMatcher

logger = logging.getLogger(__name__)

T = TypeVar("T")

FieldType = Literal["text", "email", "phone", "date", "number"]
WaitState = Literal["attached", "visible", "hidden"]

DEFAULT_ELEMENT_TIMEOUT_MS = 10000

_SELECT_OPTIONS_JS = """
el => Array.from(el.options).map(opt => ({
    value: opt.value,
    text: (opt.textContent || '').trim(),
    disabled: opt.disabled
}))
"""

_CHOICE_OPTIONS_JS = """
elements => elements.map(input => ({
    value: input.value,
    text: ((input.labels && input.labels[0] && input.labels[0].textContent) || '').trim() || input.value,
    disabled: input.disabled
}))
"""

_TOGGLE_STATE_JS = """
el => el.checked === true
    || el.classList.contains('active')
    || el.getAttribute('aria-checked') === 'true'
"""


class FormActions:
    """Retry-wrapped, human-timed interactions against one page.

    Args:
        page: Browser page object (patchright Page or mock).
        executor: Failure-containment boundary for every primitive.
        timing: Source of randomized delays and click geometry.
        matcher: Resolves free-text values against option lists.
        screenshot_dir: Directory for diagnostic screenshots.
        platform_name: Prefix for screenshot filenames.
    """

    def __init__(
        self,
        page: Any,
        *,
        executor: RetryExecutor,
        timing: HumanTimingModel,
        matcher: FuzzyOptionMatcher,
        screenshot_dir: str | Path = "screenshots",
        platform_name: str = "platform",
        element_timeout_ms: int = DEFAULT_ELEMENT_TIMEOUT_MS,
        typeahead_timeout_ms: int = 15000,
    ) -> None:
        self._page = page
        self._executor = executor
        self.timing = timing
        self.matcher = matcher
        self._screenshot_dir = Path(screenshot_dir)
        self._platform_name = platform_name
        self._element_timeout_ms = element_timeout_ms
        self._typeahead_timeout_ms = typeahead_timeout_ms
        self._typeahead = TypeaheadResolver(page, self, executor, timing, matcher)

    @property
    def page(self) -> Any:
        return self._page

    async def retry(self, action: Callable[[], Awaitable[T]], label: str) -> T:
        """Run a platform-specific composite step under the retry policy."""
        return await self._executor.execute(action, label)

    async def wait_for(
        self,
        selector: str,
        *,
        state: WaitState = "visible",
        timeout_ms: int | None = None,
    ) -> Any:
        """Wait for ``selector`` to reach ``state``. Not retried."""
        timeout = timeout_ms or self._element_timeout_ms
        try:
            element = await self._page.wait_for_selector(selector, state=state, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ElementTimeout(selector, state, timeout) from e
        logger.debug("Waited for: %s (%s)", selector, state)
        return element

    async def click(self, selector: str, *, timeout_ms: int | None = None) -> None:
        async def action() -> None:
            await self.wait_for(selector, state="visible", timeout_ms=timeout_ms)
            await self.timing.hover_then_click(self._page.locator(selector))
            logger.debug("Clicked: %s", selector)

        await self._executor.execute(action, f"click {selector}")

    async def type(
        self,
        selector: str,
        text: str,
        *,
        field_type: FieldType = "text",
        clear_first: bool = False,
        timeout_ms: int | None = None,
    ) -> None:
        async def action() -> None:
            await self.wait_for(selector, state="visible", timeout_ms=timeout_ms)
            if clear_first:
                await self._page.fill(selector, "")

            # Date inputs reject keystroke-by-keystroke entry.
            if field_type == "date":
                await self._page.fill(selector, text)
                await self.timing.delay()
            else:
                await self._page.focus(selector)
                await self.timing.type_text(self._page, text, field_type)

            preview = text[:30] + ("..." if len(text) > 30 else "")
            logger.debug("Typed into %s: %s", selector, preview)

        await self._executor.execute(action, f"type into {selector}")

    async def select(
        self,
        selector: str,
        target: str,
        *,
        required: bool = True,
        timeout_ms: int | None = None,
    ) -> str | None:
        """Pick the <select> option closest to ``target``.

        Returns the selected value, or None when an optional field had no match.
        """
        async def action() -> str | None:
            element = await self.wait_for(selector, state="visible", timeout_ms=timeout_ms)
            raw = await element.evaluate(_SELECT_OPTIONS_JS)
            options = [MatchableOption.model_validate(item) for item in raw or []]

            matched = self._resolve(selector, target, options, required=required)
            if matched is None:
                return None

            await element.select_option(matched)
            await self.timing.delay()
            logger.debug("Selected %s: %s -> %s", selector, target, matched)
            return matched

        return await self._executor.execute(action, f"select {selector}")

    async def select_smart(
        self,
        input_selector: str,
        results_selector: str,
        target: str,
        *,
        spinner_selector: str | None = None,
        timeout_ms: int | None = None,
    ) -> str:
        """Resolve a typeahead widget. See TypeaheadResolver."""
        return await self._typeahead.resolve(
            input_selector,
            results_selector,
            target,
            timeout_ms=timeout_ms or self._typeahead_timeout_ms,
            spinner_selector=spinner_selector,
        )

    async def check(self, container_selector: str, target: str, *, required: bool = True) -> str | None:
        """Tick the checkbox/radio in ``container_selector`` closest to ``target``."""
        async def action() -> str | None:
            inputs = (
                f'{container_selector} input[type="checkbox"], '
                f'{container_selector} input[type="radio"]'
            )
            raw = await self._page.eval_on_selector_all(inputs, _CHOICE_OPTIONS_JS)
            options = [MatchableOption.model_validate(item) for item in raw or []]

            matched = self._resolve(container_selector, target, options, required=required)
            if matched is None:
                return None

            await self.click(f"{container_selector} input[value={css_string(matched)}]")
            logger.debug("Checked %s: %s -> %s", container_selector, target, matched)
            return matched

        return await self._executor.execute(action, f"check {container_selector}")

    async def toggle(self, selector: str, target_state: bool) -> None:
        """Bring a checkbox or switch to ``target_state``, clicking only if needed."""
        async def action() -> None:
            element = await self.wait_for(selector, state="visible")
            current = bool(await element.evaluate(_TOGGLE_STATE_JS))
            if current != target_state:
                await self.click(selector)
                logger.debug("Toggled %s: %s -> %s", selector, current, target_state)
            else:
                logger.debug("Toggle %s already in desired state: %s", selector, target_state)

        await self._executor.execute(action, f"toggle {selector}")

    async def upload_file(self, selector: str, file_path: str) -> None:
        async def action() -> None:
            await self.wait_for(selector, state="attached")
            await self._page.set_input_files(selector, file_path)
            await self.timing.delay()
            logger.debug("Uploaded file to %s: %s", selector, file_path)

        await self._executor.execute(action, f"uploadFile {selector}")

    async def text_content(self, selector: str) -> str:
        text = await self._page.text_content(selector)
        return (text or "").strip()

    async def screenshot(self, label: str) -> Path | None:
        """Capture a full-page screenshot. Failures are logged, never raised."""
        timestamp = datetime.now().isoformat().replace(":", "-").replace(".", "-")
        path = self._screenshot_dir / f"{self._platform_name}-{label}-{timestamp}.png"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await self._page.screenshot(path=str(path), full_page=True)
        except Exception as e:
            logger.warning("Failed to take screenshot: %s", e)
            return None
        logger.debug("Screenshot saved: %s", path)
        return path

    def _resolve(
        self,
        field: str,
        target: str,
        options: list[MatchableOption],
        *,
        required: bool,
    ) -> str | None:
        matched = self.matcher.match(target, options)
        if matched is None:
            if required:
                raise NoMatchFound(field, target)
            logger.warning("No match for optional field %s: '%s' — skipping", field, target)
        return matched
