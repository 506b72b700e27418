"""Pre-launch validation of the candidate profile."""

import logging

from formpilot.core.errors import ProfileValidationError
from formpilot.profile.schema import REQUIRED_FIELDS, CandidateProfile

logger = logging.getLogger(__name__)


def find_violations(profile: CandidateProfile) -> tuple[list[str], list[str]]:
    """Return (missing, empty) required field names, in declaration order."""
    missing: list[str] = []
    empty: list[str] = []
    for name in REQUIRED_FIELDS:
        value = getattr(profile, name)
        if value is None:
            missing.append(name)
        elif isinstance(value, str) and not value.strip():
            empty.append(name)
        elif isinstance(value, list) and not value:
            empty.append(name)
    return missing, empty


def validate_profile(profile: CandidateProfile) -> None:
    """Fail fast listing every missing or blank required field in one error."""
    missing, empty = find_violations(profile)
    if missing or empty:
        error = ProfileValidationError(missing, empty)
        logger.error("%s", error)
        raise error
    logger.debug("Profile valid for %s", profile.full_name)
