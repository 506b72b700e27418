"""Configuration models and YAML loader for the form automation engine."""

import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from formpilot.core.schemas import RetryPolicy

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


class BrowserConfig(BaseModel):
    """Browser session configuration."""

    headless: bool = False
    timeout_ms: int = Field(default=30000, ge=1000)
    viewport_width: int = Field(default=1280, ge=320)
    viewport_height: int = Field(default=720, ge=240)
    launch_args: list[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"],
    )


class TimingConfig(BaseModel):
    """Bounds for the generic randomized delay between interactions."""

    min_delay_ms: int = Field(default=50, ge=0)
    max_delay_ms: int = Field(default=300, ge=0)

    @model_validator(mode="after")
    def max_not_below_min(self) -> "TimingConfig":
        if self.max_delay_ms < self.min_delay_ms:
            msg = "max_delay_ms must be >= min_delay_ms"
            raise ValueError(msg)
        return self


class RetryConfig(BaseModel):
    """Default retry policy for every interaction primitive."""

    max_attempts: int = Field(default=3, ge=1)
    base_delay_ms: int = Field(default=1000, ge=0)

    def to_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.max_attempts, base_delay_ms=self.base_delay_ms)


class PlatformConfig(BaseModel):
    """An extra URL pattern routed to one of the built-in adapters."""

    name: str
    platform: Literal["acme", "globex", "initech"]
    url_pattern: str

    @field_validator("url_pattern")
    @classmethod
    def pattern_compiles(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            msg = f"invalid url_pattern '{v}': {e}"
            raise ValueError(msg) from e
        return v


class TargetConfig(BaseModel):
    """A single application form to fill."""

    name: str = ""
    url: str

    @field_validator("url")
    @classmethod
    def url_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "url must not be empty"
            raise ValueError(msg)
        return v.strip()


class Settings(BaseModel):
    """Top-level settings loaded from YAML.

    Every collaborator receives its slice of this object at construction
    time; nothing reads the process environment.
    """

    log_level: str = "INFO"
    screenshot_dir: str = "screenshots"
    profile_path: str = "config/profile.yaml"
    element_timeout_ms: int = Field(default=10000, ge=100)
    typeahead_timeout_ms: int = Field(default=15000, ge=100)
    navigation_wait: Literal["load", "domcontentloaded", "networkidle", "commit"] = "networkidle"
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    timing: TimingConfig = Field(default_factory=TimingConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    platforms: list[PlatformConfig] = Field(default_factory=list)
    targets: list[TargetConfig] = Field(default_factory=list)

    @field_validator("log_level")
    @classmethod
    def log_level_known(cls, v: str) -> str:
        v = v.upper().strip()
        if v == "WARN":
            v = "WARNING"
        if v not in LOG_LEVELS:
            msg = f"log_level must be one of {sorted(LOG_LEVELS)}, got '{v}'"
            raise ValueError(msg)
        return v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
