"""Acme Corp adapter: four-step wizard with a Continue button per step."""

import logging

from formpilot.platforms.acme import selectors as sel
from formpilot.platforms.base import PlatformAdapter

logger = logging.getLogger(__name__)

SUBMIT_TIMEOUT_MS = 15000


class AcmeAdapter(PlatformAdapter):
    """Personal info → experience & education → questions → review."""

    @property
    def platform_id(self) -> str:
        return "acme"

    async def apply(self) -> str:
        logger.info("Filling Acme Corp application (4-step wizard)...")

        await self._fill_personal_info()
        await self._continue()

        await self._fill_experience_and_education()
        await self._continue()

        await self._fill_questions()
        await self._continue()

        await self._review()
        await self.actions.screenshot("before-submit")

        logger.info("Submitting Acme application...")
        await self.actions.click(sel.SUBMIT)
        await self.actions.wait_for(sel.SUCCESS_PAGE, timeout_ms=SUBMIT_TIMEOUT_MS)
        await self.actions.screenshot("success")

        return await self.confirmation(sel.CONFIRMATION_ID)

    async def _fill_personal_info(self) -> None:
        logger.info("Step 1: Personal Information")
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

    async def _fill_experience_and_education(self) -> None:
        logger.info("Step 2: Experience & Education")
        p = self.profile
        if p.resume_path:
            await self.actions.upload_file(sel.RESUME, p.resume_path)

        await self.actions.select(sel.EXPERIENCE_LEVEL, p.experience_level)
        await self.actions.select(sel.EDUCATION, p.education)
        await self.actions.select_smart(sel.SCHOOL_INPUT, sel.SCHOOL_RESULTS, p.school)

        for skill in p.skill_list:
            await self.actions.check(sel.SKILLS_GROUP, skill, required=False)

    async def _fill_questions(self) -> None:
        logger.info("Step 3: Additional Questions")
        p = self.profile
        await self.actions.check(sel.WORK_AUTH_GROUP, "yes" if p.work_authorized else "no")

        # Sponsorship question is only rendered once authorization is affirmed.
        if p.work_authorized and p.requires_visa:
            await self.actions.wait_for(sel.VISA_BLOCK)
            await self.actions.check(sel.VISA_GROUP, "yes")

        await self.actions.type(sel.START_DATE, p.earliest_start_date, field_type="date")
        if p.salary_expectation:
            await self.actions.type(sel.SALARY, p.salary_expectation)
        await self.actions.select(sel.REFERRAL, p.referral_source)
        await self.actions.type(sel.COVER_LETTER, p.cover_letter)

    async def _review(self) -> None:
        logger.info("Step 4: Review & Submit")
        await self.actions.wait_for(sel.REVIEW_SECTION)
        await self.actions.click(sel.TERMS)

    async def _continue(self) -> None:
        await self.actions.click(sel.CONTINUE)
        await self.actions.timing.delay(500, 1000)
