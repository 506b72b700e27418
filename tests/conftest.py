"""Shared fixtures: a scripted fake page and a complete candidate profile."""

import asyncio
import random
import re
from collections.abc import Iterator
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from patchright.async_api import Error as PlaywrightError
from patchright.async_api import TimeoutError as PlaywrightTimeoutError

from formpilot.browser.timing import HumanTimingModel
from formpilot.core.config import RetryConfig, Settings
from formpilot.pipeline.orchestrator import Engine
from formpilot.profile.schema import CandidateProfile

# ---------------------------------------------------------------------------
# Fake browser page
# ---------------------------------------------------------------------------


class FakeKeyboard:
    def __init__(self, page: "FakePage") -> None:
        self._page = page

    async def type(self, text: str, delay: float | None = None) -> None:
        self._page.typed.append(text)
        self._page.key_delays.append(delay)


class FakeElement:
    def __init__(self, page: "FakePage", selector: str) -> None:
        self._page = page
        self.selector = selector

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        if self.selector in self._page.select_options:
            return self._page.select_options[self.selector]
        return self._page.states.get(self.selector, False)

    async def select_option(self, value: str) -> None:
        self._page.record("select_option", self.selector, value)


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str) -> None:
        self._page = page
        self.selector = selector

    async def hover(self) -> None:
        self._page.ensure_unique(self.selector)
        self._page.record("hover", self.selector)

    async def click(self, position: dict[str, float] | None = None) -> None:
        self._page.record("click", self.selector, position)

    async def bounding_box(self) -> dict[str, float] | None:
        return self._page.boxes.get(self.selector, {"x": 0, "y": 0, "width": 200, "height": 40})

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        return self._page.states.get(self.selector, False)

    async def get_attribute(self, name: str) -> str | None:
        return self._page.attributes.get((self.selector, name))

    async def fill(self, value: str) -> None:
        self._page.record("fill", self.selector, value)


class FakePage:
    """Just enough of the patchright Page API to drive the adapters.

    Args:
        select_options: <select> selector → option dicts.
        option_lists: selector prefix → dicts returned by eval_on_selector_all.
        texts: selector → text_content.
        states: selector → value returned by evaluate() on locators/elements.
        missing: selectors whose waits always time out.
        flaky: selector → number of waits that time out before succeeding.
    """

    def __init__(
        self,
        *,
        select_options: dict[str, list[dict[str, Any]]] | None = None,
        option_lists: dict[str, list[dict[str, Any]]] | None = None,
        texts: dict[str, str] | None = None,
        states: dict[str, Any] | None = None,
        missing: set[str] | None = None,
        flaky: dict[str, int] | None = None,
        screenshot_error: Exception | None = None,
    ) -> None:
        self.select_options = select_options or {}
        self.option_lists = option_lists or {}
        self.texts = texts or {}
        self.states = states or {}
        self.missing = missing or set()
        self.flaky = dict(flaky or {})
        self.screenshot_error = screenshot_error
        self.boxes: dict[str, dict[str, float] | None] = {}
        self.attributes: dict[tuple[str, str], str] = {}
        self.keyboard = FakeKeyboard(self)
        self.actions: list[tuple[Any, ...]] = []
        self.typed: list[str] = []
        self.key_delays: list[float | None] = []
        self.waits: list[tuple[str, str]] = []

    def record(self, *entry: Any) -> None:
        self.actions.append(entry)

    def clicked(self) -> list[str]:
        return [a[1] for a in self.actions if a[0] == "click"]

    def calls(self, kind: str) -> list[tuple[Any, ...]]:
        return [a for a in self.actions if a[0] == kind]

    async def goto(self, url: str, wait_until: str | None = None) -> None:
        self.record("goto", url)

    async def wait_for_selector(
        self, selector: str, state: str = "visible", timeout: float | None = None,
    ) -> FakeElement | None:
        self.waits.append((selector, state))
        if selector in self.missing:
            msg = f"Timeout {timeout}ms exceeded waiting for {selector}"
            raise PlaywrightTimeoutError(msg)
        if self.flaky.get(selector, 0) > 0:
            self.flaky[selector] -= 1
            msg = f"Timeout {timeout}ms exceeded waiting for {selector}"
            raise PlaywrightTimeoutError(msg)
        if state == "hidden":
            return None
        return FakeElement(self, selector)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def fill(self, selector: str, value: str) -> None:
        self.record("fill", selector, value)

    async def focus(self, selector: str) -> None:
        self.record("focus", selector)

    async def set_input_files(self, selector: str, files: str) -> None:
        self.record("set_input_files", selector, files)

    def options_under(self, selector: str) -> list[dict[str, Any]]:
        prefixes = sorted(
            (p for p in self.option_lists if selector.startswith(p)), key=len, reverse=True,
        )
        return list(self.option_lists[prefixes[0]]) if prefixes else []

    def ensure_unique(self, selector: str) -> None:
        """Strict mode: a text-located option must resolve to exactly one element."""
        if ">> nth=" in selector:
            return
        found = re.search(r':has-text\("((?:[^"\\]|\\.)*)"\)', selector)
        if found is None:
            return
        needle = found.group(1).replace('\\"', '"').lower()
        hits = [o for o in self.options_under(selector) if needle in o["text"].lower()]
        if len(hits) > 1:
            msg = f"strict mode violation: {selector} resolved to {len(hits)} elements"
            raise PlaywrightError(msg)

    async def eval_on_selector_all(self, selector: str, expression: str) -> list[dict[str, Any]]:
        return self.options_under(selector)

    async def text_content(self, selector: str) -> str | None:
        return self.texts.get(selector)

    async def screenshot(self, path: str | None = None, full_page: bool = False) -> bytes:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        self.record("screenshot", path)
        return b""


# ---------------------------------------------------------------------------
# Form layouts
# ---------------------------------------------------------------------------

EXPERIENCE_OPTIONS = [
    {"value": "", "text": "Select experience", "disabled": True},
    {"value": "entry", "text": "Entry Level (0-2 years)", "disabled": False},
    {"value": "mid", "text": "Mid-Level (3-5 years)", "disabled": False},
    {"value": "senior", "text": "Senior (6+ years)", "disabled": False},
]

EDUCATION_OPTIONS = [
    {"value": "high-school", "text": "High School", "disabled": False},
    {"value": "bachelors-degree", "text": "Bachelor's Degree", "disabled": False},
    {"value": "masters-degree", "text": "Master's Degree", "disabled": False},
    {"value": "phd", "text": "PhD", "disabled": False},
]

REFERRAL_OPTIONS = [
    {"value": "linkedin", "text": "LinkedIn", "disabled": False},
    {"value": "indeed", "text": "Indeed", "disabled": False},
    {"value": "employee-referral", "text": "Employee Referral", "disabled": False},
    {"value": "other", "text": "Other", "disabled": False},
]

SCHOOL_RESULTS = [
    {"value": "stanford", "text": "Stanford University", "disabled": False},
    {"value": "mit", "text": "Massachusetts Institute of Technology", "disabled": False},
]

SKILL_OPTIONS = [
    {"value": "python", "text": "Python", "disabled": False},
    {"value": "typescript", "text": "TypeScript", "disabled": False},
    {"value": "go", "text": "Go", "disabled": False},
]

YES_NO = [
    {"value": "yes", "text": "Yes", "disabled": False},
    {"value": "no", "text": "No", "disabled": False},
]

SALARY_BRACKETS = [
    {"value": "80-100k", "text": "$80,000 - $100,000", "disabled": False},
    {"value": "100-130k", "text": "$100,000 - $130,000", "disabled": False},
    {"value": "130k-plus", "text": "$130,000+", "disabled": False},
]


def acme_page() -> FakePage:
    return FakePage(
        select_options={
            "#experience-level": EXPERIENCE_OPTIONS,
            "#education": EDUCATION_OPTIONS,
            "#referral": REFERRAL_OPTIONS,
        },
        option_lists={
            "#school-dropdown": SCHOOL_RESULTS,
            "#skills-group": SKILL_OPTIONS,
            'div.radio-group:has(input[name="workAuth"])': YES_NO,
            "#visa-sponsorship-group .radio-group": YES_NO,
        },
        texts={"#confirmation-id": "  ACME-2024-0042  "},
    )


def globex_page() -> FakePage:
    return FakePage(
        select_options={
            "#g-experience": EXPERIENCE_OPTIONS,
            "#g-degree": EDUCATION_OPTIONS,
            "#g-source": REFERRAL_OPTIONS,
        },
        option_lists={
            "#g-school-results": SCHOOL_RESULTS,
            ".chip": SKILL_OPTIONS,
        },
        texts={"#globex-ref": "GLX-77310"},
    )


def initech_page() -> FakePage:
    return FakePage(
        select_options={
            "#i-experience": EXPERIENCE_OPTIONS,
            "#i-education": EDUCATION_OPTIONS,
            "#i-salary": SALARY_BRACKETS,
            "#i-referral": REFERRAL_OPTIONS,
        },
        option_lists={
            "#i-school-results": SCHOOL_RESULTS,
            "#i-skills-group": SKILL_OPTIONS,
            '.radio-group:has(input[name="workAuth"])': YES_NO,
            "#i-visa-group .radio-group": YES_NO,
        },
        texts={"#initech-ref": "INI-5521"},
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def make_profile(**overrides: Any) -> CandidateProfile:
    data: dict[str, Any] = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "phone": "+1 555 0100",
        "location": "San Francisco, CA",
        "linkedin": "https://linkedin.com/in/ada",
        "portfolio": "https://ada.dev",
        "resume_path": "resume.pdf",
        "school": "Stanford University",
        "education": "bachelors",
        "experience_level": "mid-level",
        "skills": ["Python", "TypeScript"],
        "work_authorized": True,
        "requires_visa": False,
        "earliest_start_date": "2025-01-15",
        "salary_expectation": "$120,000",
        "referral_source": "LinkedIn",
        "cover_letter": "I build reliable automation.",
    }
    data.update(overrides)
    return CandidateProfile(**data)


class SleepRecorder:
    """Async sleep stand-in that records requested durations in seconds."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def no_sleep() -> Iterator[AsyncMock]:
    """Patch asyncio.sleep so timing delays return immediately."""
    with patch.object(asyncio, "sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def profile() -> CandidateProfile:
    return make_profile()


@pytest.fixture
def settings(tmp_path: Any) -> Settings:
    return Settings(
        screenshot_dir=str(tmp_path / "screenshots"),
        retry=RetryConfig(max_attempts=3, base_delay_ms=10),
    )


@pytest.fixture
def engine(settings: Settings, sleeper: SleepRecorder, no_sleep: AsyncMock) -> Engine:
    return Engine(settings, sleep=sleeper, timing=HumanTimingModel(settings.timing, rng=random.Random(7)))


@pytest.fixture
def page_factory() -> type[FakePage]:
    return FakePage


@pytest.fixture
def layouts() -> dict[str, Any]:
    """Fake pages for each form layout, keyed by platform id."""
    return {"acme": acme_page, "globex": globex_page, "initech": initech_page}


@pytest.fixture
def profile_factory() -> Any:
    return make_profile
