"""Initech Corp adapter: three tabs, salary chosen from a bracket dropdown."""

import logging

from formpilot.platforms.base import PlatformAdapter
from formpilot.platforms.initech import selectors as sel

logger = logging.getLogger(__name__)

SUBMIT_TIMEOUT_MS = 15000


class InitechAdapter(PlatformAdapter):

    @property
    def platform_id(self) -> str:
        return "initech"

    async def apply(self) -> str:
        logger.info("Filling Initech Corp application (tabbed form)...")

        await self._fill_profile_tab()
        await self.open_tab(sel.QUALIFICATIONS_TAB)

        await self._fill_qualifications_tab()
        await self.open_tab(sel.PREFERENCES_TAB)

        await self._fill_preferences_tab()
        await self.actions.screenshot("before-submit")

        logger.info("Submitting Initech application...")
        await self.actions.click(sel.SUBMIT)
        await self.actions.wait_for(sel.SUCCESS, timeout_ms=SUBMIT_TIMEOUT_MS)
        await self.actions.screenshot("success")

        return await self.confirmation(sel.REFERENCE, "Reference number")

    async def open_tab(self, tab_name: str) -> None:
        await self.actions.click(sel.TAB_BUTTON.format(name=tab_name))
        await self.actions.timing.delay(300, 600)

    async def _fill_profile_tab(self) -> None:
        logger.info("Tab: Profile")
        p = self.profile
        await self.actions.type(sel.FIRST_NAME, p.first_name)
        await self.actions.type(sel.LAST_NAME, p.last_name)
        await self.actions.type(sel.EMAIL, p.email, field_type="email")
        await self.actions.type(sel.PHONE, p.phone, field_type="phone")
        await self.actions.type(sel.LOCATION, p.location)
        if p.linkedin:
            await self.actions.type(sel.LINKEDIN, p.linkedin)
        if p.portfolio:
            await self.actions.type(sel.PORTFOLIO, p.portfolio)
        if p.resume_path:
            await self.actions.upload_file(sel.RESUME, p.resume_path)

    async def _fill_qualifications_tab(self) -> None:
        logger.info("Tab: Qualifications")
        p = self.profile
        await self.actions.select(sel.EXPERIENCE, p.experience_level)
        await self.actions.select(sel.EDUCATION, p.education)
        await self.actions.select_smart(
            sel.SCHOOL_INPUT, sel.SCHOOL_RESULTS, p.school,
            spinner_selector=sel.SCHOOL_SPINNER,
        )
        for skill in p.skill_list:
            await self.actions.check(sel.SKILLS_GROUP, skill, required=False)

    async def _fill_preferences_tab(self) -> None:
        logger.info("Tab: Preferences")
        p = self.profile
        await self.actions.check(sel.WORK_AUTH_GROUP, "yes" if p.work_authorized else "no")

        if p.work_authorized and p.requires_visa:
            await self.actions.wait_for(sel.VISA_BLOCK)
            await self.actions.check(sel.VISA_GROUP, "yes")

        await self.actions.type(sel.START_DATE, p.earliest_start_date, field_type="date")
        if p.salary_expectation:
            await self.actions.select(sel.SALARY, p.salary_expectation)
        await self.actions.select(sel.REFERRAL, p.referral_source)
        await self.actions.type(sel.COVER_LETTER, p.cover_letter)
        await self.actions.click(sel.CONSENT)
