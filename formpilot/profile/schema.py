"""CandidateProfile model for config/profile.yaml."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict


class CandidateProfile(BaseModel):
    """The single candidate every form is filled for.

    Frozen: the engine only reads it. Required fields may be absent at load
    time; ``validate_profile`` reports all of them at once before launch.
    """

    model_config = ConfigDict(frozen=True)

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    portfolio: str | None = None
    resume_path: str | None = None

    school: str | None = None
    education: str | None = None
    experience_level: str | None = None
    skills: list[str] | None = None

    work_authorized: bool = False
    requires_visa: bool = False
    earliest_start_date: str | None = None
    salary_expectation: str | None = None
    referral_source: str | None = None
    cover_letter: str | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def skill_list(self) -> list[str]:
        return list(self.skills or [])

    @classmethod
    def from_yaml(cls, path: str | Path) -> "CandidateProfile":
        """Load profile from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Profile file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)

    def to_yaml(self, path: str | Path) -> None:
        """Write profile to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(exclude_none=True)
        path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))


REQUIRED_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "location",
    "school",
    "education",
    "experience_level",
    "skills",
    "cover_letter",
    "earliest_start_date",
    "referral_source",
)
