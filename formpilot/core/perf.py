"""Named duration metrics collected over a CLI run."""

import logging

logger = logging.getLogger(__name__)


class PerformanceLog:
    """Records named durations and logs each one as it arrives.

    Recording never raises; a repeated name overwrites the earlier value.
    """

    def __init__(self) -> None:
        self._metrics: dict[str, int] = {}

    def record(self, name: str, duration_ms: int) -> None:
        self._metrics[name] = int(duration_ms)
        logger.info("PERF %s: %dms", name, duration_ms)

    @property
    def metrics(self) -> dict[str, int]:
        return dict(self._metrics)

    def summary(self) -> list[str]:
        """Human-readable summary lines, empty when nothing was recorded."""
        if not self._metrics:
            return []
        lines = ["=== PERFORMANCE SUMMARY ==="]
        lines.extend(f"  {name}: {ms}ms" for name, ms in self._metrics.items())
        lines.append(f"  Total: {sum(self._metrics.values())}ms")
        return lines
