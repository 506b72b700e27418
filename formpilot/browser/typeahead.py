"""Resolution protocol for asynchronous search-and-select widgets.

Sequence per attempt:
  1. click the input
  2. reading delay, then type the first 3 characters of the target
  3. wait for the results container to become visible
  4. optionally wait for the loading spinner to clear (a spinner that never
     shows up is fine)
  5. reading delay (result scanning)
  6. extract the live options
  7. fuzzy-match; no match is fatal for the field and is not retried
  8. click the option whose displayed text is exactly the matched one
"""

import logging
from typing import TYPE_CHECKING, Any

from patchright.async_api import TimeoutError as PlaywrightTimeoutError

from formpilot.core.errors import ElementTimeout, NoMatchFound
from formpilot.core.retry import RetryExecutor
from formpilot.core.schemas import MatchableOption
from formpilot.browser.timing import HumanTimingModel
from formpilot.pipeline.matcher import FuzzyOptionMatcher

if TYPE_CHECKING:
    from formpilot.browser.actions import FormActions

logger = logging.getLogger(__name__)

SEARCH_PREFIX_LENGTH = 3
DEFAULT_TIMEOUT_MS = 15000

OPTION_SELECTORS: tuple[str, ...] = ('[role="option"]', "li", ".option")

_EXTRACT_OPTIONS_JS = """
elements => elements.map(el => ({
    value: el.dataset.value || (el.textContent || '').trim(),
    text: (el.textContent || '').trim(),
    disabled: el.getAttribute('aria-disabled') === 'true'
}))
"""


def search_prefix(target: str) -> str:
    """The few characters typed to trigger the remote search."""
    return target[:SEARCH_PREFIX_LENGTH]


def option_selector(results_selector: str) -> str:
    return ", ".join(f"{results_selector} {sel}" for sel in OPTION_SELECTORS)


def css_string(value: str) -> str:
    """Quote ``value`` for use inside a CSS or Playwright selector."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def option_text_selector(results_selector: str, text: str) -> str:
    """The first option whose whole displayed text equals ``text``.

    :has-text() is a substring match ("MIT" also hits "Smith College");
    :text-is() compares the whole normalized text.
    """
    quoted = css_string(text)
    union = ", ".join(f"{results_selector} {sel}:text-is({quoted})" for sel in OPTION_SELECTORS)
    return f"{union} >> nth=0"


class TypeaheadResolver:
    """Types a short prefix, waits out the loading states, then picks a match."""

    def __init__(
        self,
        page: Any,
        actions: "FormActions",
        executor: RetryExecutor,
        timing: HumanTimingModel,
        matcher: FuzzyOptionMatcher,
    ) -> None:
        self._page = page
        self._actions = actions
        self._executor = executor
        self._timing = timing
        self._matcher = matcher

    async def resolve(
        self,
        input_selector: str,
        results_selector: str,
        target: str,
        *,
        field: str | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        spinner_selector: str | None = None,
    ) -> str:
        """Resolve ``target`` in the typeahead and return the selected option value."""
        field = field or f"typeahead {input_selector}"

        async def attempt() -> str:
            return await self._attempt(
                input_selector, results_selector, target,
                field=field, timeout_ms=timeout_ms, spinner_selector=spinner_selector,
            )

        return await self._executor.execute(attempt, f"selectSmart {input_selector}")

    async def _attempt(
        self,
        input_selector: str,
        results_selector: str,
        target: str,
        *,
        field: str,
        timeout_ms: int,
        spinner_selector: str | None,
    ) -> str:
        await self._actions.click(input_selector)
        await self._timing.delay()

        await self._actions.type(input_selector, search_prefix(target), clear_first=True)

        await self._wait_for_results(results_selector, timeout_ms)
        if spinner_selector:
            await self._wait_for_spinner(spinner_selector, timeout_ms)

        await self._timing.delay()

        options = await self.extract_options(results_selector)
        matched = self._matcher.match(target, options)
        if matched is None:
            raise NoMatchFound(field, target)

        chosen = next((opt for opt in options if opt.value == matched and not opt.disabled), None)
        display_text = chosen.text if chosen and chosen.text else matched
        await self._actions.click(option_text_selector(results_selector, display_text))

        logger.debug("Selected typeahead %s: %s -> %s", input_selector, target, matched)
        return matched

    async def _wait_for_results(self, results_selector: str, timeout_ms: int) -> None:
        try:
            await self._page.wait_for_selector(results_selector, state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ElementTimeout(results_selector, "visible", timeout_ms) from e

    async def _wait_for_spinner(self, spinner_selector: str, timeout_ms: int) -> None:
        try:
            await self._page.wait_for_selector(spinner_selector, state="hidden", timeout=timeout_ms)
        except PlaywrightTimeoutError:
            logger.debug("Spinner %s never settled — continuing", spinner_selector)

    async def extract_options(self, results_selector: str) -> list[MatchableOption]:
        raw = await self._page.eval_on_selector_all(
            option_selector(results_selector), _EXTRACT_OPTIONS_JS,
        )
        return [MatchableOption.model_validate(item) for item in raw or []]
