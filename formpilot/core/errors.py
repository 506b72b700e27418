"""Error taxonomy for the automation engine.

Interaction failures are retried by the RetryExecutor and surface as
RetryExhausted. NoMatchFound and ProfileValidationError are deterministic
and escalate immediately.
"""


class AutomationError(Exception):
    """Base class for every error raised by formpilot."""


class ProfileValidationError(AutomationError):
    """The candidate profile is missing required data. Raised before launch."""

    def __init__(self, missing: list[str], empty: list[str]) -> None:
        self.missing = list(missing)
        self.empty = list(empty)
        lines: list[str] = []
        if self.missing:
            lines.append(f"Missing required fields: {', '.join(self.missing)}")
        if self.empty:
            lines.append(f"Empty required fields: {', '.join(self.empty)}")
        super().__init__("Profile validation failed:\n  " + "\n  ".join(lines))

    @property
    def fields(self) -> list[str]:
        return self.missing + self.empty


class ElementTimeout(AutomationError):
    """A selector never reached the requested state in time."""

    def __init__(self, selector: str, state: str, timeout_ms: int) -> None:
        self.selector = selector
        self.state = state
        self.timeout_ms = timeout_ms
        super().__init__(
            f"Timed out after {timeout_ms}ms waiting for '{selector}' to be {state}",
        )


class NoMatchFound(AutomationError):
    """The fuzzy matcher found no acceptable option for a required field."""

    def __init__(self, field: str, target: str) -> None:
        self.field = field
        self.target = target
        super().__init__(f'No match found for "{target}" in {field}')


class NoPlatformDetected(AutomationError):
    """No registered platform pattern matches the URL."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"No platform adapter found for URL: {url}")


class RetryExhausted(AutomationError):
    """An action kept failing until its retry policy ran out."""

    def __init__(self, label: str, attempts: int, last_error: BaseException | None) -> None:
        self.label = label
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed after {attempts} attempts: {label} - {last_error}")


class RunFailure(AutomationError):
    """Adapter-level failure that has no more specific type."""
