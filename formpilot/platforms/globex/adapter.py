"""Globex Corp adapter: accordion sections, skill chips, toggle switches, salary slider."""

import logging
import re

from formpilot.browser.typeahead import css_string
from formpilot.core.schemas import MatchableOption
from formpilot.platforms.base import PlatformAdapter
from formpilot.platforms.globex import selectors as sel

logger = logging.getLogger(__name__)

SUBMIT_TIMEOUT_MS = 15000

_HAS_CLASS_JS = "(el, name) => el.classList.contains(name)"
_SWITCH_STATE_JS = "el => el.dataset.value === 'true'"
_CHIPS_JS = """
elements => elements.map(el => ({
    value: el.dataset.skill || '',
    text: (el.textContent || '').trim(),
    disabled: false
}))
"""


def parse_salary(text: str) -> int | None:
    """Digits of a free-text salary ("$85,000" → 85000), or None."""
    digits = re.sub(r"\D", "", text)
    return int(digits) if digits else None


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class GlobexAdapter(PlatformAdapter):
    """Each accordion section is expanded only if it is not already open."""

    @property
    def platform_id(self) -> str:
        return "globex"

    async def apply(self) -> str:
        logger.info("Filling Globex Corp application (accordion form)...")

        await self._fill_contact_details()
        await self._fill_qualifications()
        await self._fill_additional_information()
        await self._fill_motivation()

        await self.actions.screenshot("before-submit")

        logger.info("Submitting Globex application...")
        await self.actions.click(sel.SUBMIT)
        await self.actions.wait_for(sel.CONFIRMATION, timeout_ms=SUBMIT_TIMEOUT_MS)
        await self.actions.screenshot("success")

        return await self.confirmation(sel.REFERENCE, "Reference number")

    async def expand_section(self, section_name: str) -> None:
        header = sel.SECTION_HEADER.format(name=section_name)
        is_open = await self.context.page.locator(header).evaluate(
            _HAS_CLASS_JS, sel.SECTION_OPEN_CLASS,
        )
        if not is_open:
            await self.actions.click(header)
            await self.actions.timing.delay(300, 500)

    async def _fill_contact_details(self) -> None:
        logger.info("Section: Personal Information")
        await self.expand_section(sel.CONTACT_SECTION)
        p = self.profile
        await self.actions.type(sel.FIRST_NAME, p.first_name)
        await self.actions.type(sel.LAST_NAME, p.last_name)
        await self.actions.type(sel.EMAIL, p.email, field_type="email")
        await self.actions.type(sel.PHONE, p.phone, field_type="phone")
        await self.actions.type(sel.CITY, p.location)
        if p.linkedin:
            await self.actions.type(sel.LINKEDIN, p.linkedin)
        if p.portfolio:
            await self.actions.type(sel.WEBSITE, p.portfolio)

    async def _fill_qualifications(self) -> None:
        logger.info("Section: Education")
        await self.expand_section(sel.QUALIFICATIONS_SECTION)
        p = self.profile
        if p.resume_path:
            await self.actions.upload_file(sel.RESUME, p.resume_path)

        await self.actions.select(sel.EXPERIENCE, p.experience_level)
        await self.actions.select(sel.DEGREE, p.education)
        await self.actions.select_smart(
            sel.SCHOOL_INPUT, sel.SCHOOL_RESULTS, p.school,
            spinner_selector=sel.SCHOOL_SPINNER,
        )

        for skill in p.skill_list:
            await self.select_skill_chip(skill)

    async def _fill_additional_information(self) -> None:
        logger.info("Section: Additional Information (work auth, salary, etc)")
        await self.expand_section(sel.ADDITIONAL_SECTION)
        p = self.profile

        await self.set_switch(sel.WORK_AUTH_TOGGLE, p.work_authorized)
        if p.work_authorized and p.requires_visa:
            await self.actions.wait_for(sel.VISA_BLOCK)
            await self.set_switch(sel.VISA_TOGGLE, True)

        await self.actions.type(sel.START_DATE, p.earliest_start_date, field_type="date")
        if p.salary_expectation:
            await self.set_salary(p.salary_expectation)
        await self.actions.select(sel.SOURCE, p.referral_source)

    async def _fill_motivation(self) -> None:
        logger.info("Section: Additional Information (cover letter)")
        await self.actions.type(sel.MOTIVATION, self.profile.cover_letter)
        await self.actions.click(sel.CONSENT)

    async def select_skill_chip(self, skill: str) -> None:
        page = self.context.page

        async def action() -> None:
            raw = await page.eval_on_selector_all(sel.SKILL_CHIPS, _CHIPS_JS)
            options = [MatchableOption.model_validate(item) for item in raw or []]
            matched = self.actions.matcher.match(skill, options)
            if matched is None:
                logger.warning("No skill chip matches '%s' — skipping", skill)
                return

            chip = sel.SKILL_CHIP.format(skill=css_string(matched))
            selected = await page.locator(chip).evaluate(_HAS_CLASS_JS, sel.CHIP_SELECTED_CLASS)
            if selected:
                logger.debug("Skill chip already selected: %s", skill)
                return
            await self.actions.click(chip)
            logger.debug("Selected skill chip: %s -> %s", skill, matched)

        await self.actions.retry(action, f"clickSkillChip {skill}")

    async def set_switch(self, selector: str, target_state: bool) -> None:
        """Globex switches expose their state through data-value, not :checked."""
        page = self.context.page

        async def action() -> None:
            current = bool(await page.locator(selector).evaluate(_SWITCH_STATE_JS))
            if current == target_state:
                logger.debug("Switch %s already in desired state: %s", selector, target_state)
                return
            await self.actions.click(selector)
            await self.actions.timing.delay()
            logger.debug("Toggled switch %s: %s -> %s", selector, current, target_state)

        await self.actions.retry(action, f"toggleSwitch {selector}")

    async def set_salary(self, salary_expectation: str) -> None:
        salary = parse_salary(salary_expectation)
        if salary is None:
            logger.warning("Invalid salary format: %s", salary_expectation)
            return

        slider = self.context.page.locator(sel.SALARY_SLIDER)

        async def action() -> None:
            low = int(await slider.get_attribute("min") or sel.SALARY_MIN_DEFAULT)
            high = int(await slider.get_attribute("max") or sel.SALARY_MAX_DEFAULT)
            value = clamp(salary, low, high)
            await slider.fill(str(value))
            await self.actions.timing.delay()
            logger.debug("Set salary slider: %d", value)

        await self.actions.retry(action, "setSalarySlider")
