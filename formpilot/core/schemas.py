"""Core data models for the form automation engine."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MatchableOption(BaseModel):
    """A single selectable choice extracted from a form widget.

    Built fresh for every matching call, never stored.
    """

    model_config = ConfigDict(frozen=True)

    value: str
    text: str = ""
    disabled: bool = False


class RetryPolicy(BaseModel):
    """Bounded retry with exponential backoff.

    The delay after failed attempt ``i`` (0-indexed) is ``base_delay_ms * 2**i``.
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    base_delay_ms: int = Field(default=1000, ge=0)

    def delay_ms(self, attempt: int) -> int:
        return self.base_delay_ms * 2**attempt


class ApplicationResult(BaseModel):
    """Outcome of one adapter run.

    Exactly one of confirmation_id / error is set, depending on success.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    confirmation_id: str | None = None
    error: str | None = None
    duration_ms: int = Field(ge=0)
    platform: str = ""

    @model_validator(mode="after")
    def exactly_one_outcome(self) -> "ApplicationResult":
        if self.success:
            if not self.confirmation_id or self.error is not None:
                msg = "successful result needs a confirmation_id and no error"
                raise ValueError(msg)
        elif self.error is None or self.confirmation_id is not None:
            msg = "failed result needs an error and no confirmation_id"
            raise ValueError(msg)
        return self

    @classmethod
    def succeeded(cls, confirmation_id: str, duration_ms: int, platform: str = "") -> "ApplicationResult":
        return cls(
            success=True,
            confirmation_id=confirmation_id,
            duration_ms=duration_ms,
            platform=platform,
        )

    @classmethod
    def failed(cls, error: str, duration_ms: int, platform: str = "") -> "ApplicationResult":
        return cls(success=False, error=error, duration_ms=duration_ms, platform=platform)
