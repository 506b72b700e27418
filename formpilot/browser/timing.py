"""Randomized human-like timing and click geometry.

Design rules:
  - All delays randomized. No fixed asyncio.sleep() outside random_sleep().
  - Clicks land at 30-70% of the element box, never dead-center or on an edge.
  - Email and phone fields are typed without mid-word pauses so eager
    validators do not fire on partial input.
"""

import asyncio
import logging
import random
from typing import Any

from formpilot.core.config import TimingConfig

logger = logging.getLogger(__name__)

CHAR_DELAY_MS = (100, 200)
SLOW_CHAR_DELAY_MS = (150, 250)
THINKING_PAUSE_MS = (300, 500)
THINKING_RUN_LENGTH = (10, 14)
HOVER_PAUSE_MS = (100, 300)
CLICK_FRACTION = (0.3, 0.7)

# Digits and punctuation take longer to reach on a keyboard.
SLOW_CHARS = frozenset("0123456789!@#$%^&*()_+-=[]{}|;:,.<>?")
NO_PAUSE_FIELD_TYPES = frozenset({"email", "phone"})


async def random_sleep(min_s: float, max_s: float, *, rng: random.Random | None = None) -> float:
    """Sleep for a random duration between min_s and max_s seconds.

    Floor enforcement: negative minimums are clamped to zero, and if
    max_s < min_s, max_s is raised to min_s.

    Returns the actual sleep duration (useful for testing).
    """
    floor = max(min_s, 0.0)
    ceiling = max(max_s, floor)
    duration = (rng or random).uniform(floor, ceiling)
    await asyncio.sleep(duration)
    return duration


class HumanTimingModel:
    """Produces randomized delays, keystroke timing and click offsets.

    Args:
        config: Default bounds for ``delay()``.
        rng: Optional seeded Random for deterministic tests.
    """

    def __init__(self, config: TimingConfig | None = None, *, rng: random.Random | None = None) -> None:
        self._config = config or TimingConfig()
        self._rng = rng or random.Random()

    async def delay(self, min_ms: float | None = None, max_ms: float | None = None) -> float:
        """Suspend for a uniform random duration in [min_ms, max_ms].

        Returns the slept duration in milliseconds.
        """
        low = self._config.min_delay_ms if min_ms is None else min_ms
        high = self._config.max_delay_ms if max_ms is None else max_ms
        slept = await random_sleep(low / 1000, high / 1000, rng=self._rng)
        return slept * 1000

    def char_delay_ms(self, char: str) -> float:
        low, high = SLOW_CHAR_DELAY_MS if char in SLOW_CHARS else CHAR_DELAY_MS
        return self._rng.uniform(low, high)

    def _next_pause_after(self) -> int:
        return self._rng.randint(*THINKING_RUN_LENGTH)

    async def type_text(self, page: Any, text: str, field_type: str = "text") -> None:
        """Type ``text`` into the focused element one character at a time."""
        pauses = field_type not in NO_PAUSE_FIELD_TYPES
        run_length = self._next_pause_after()
        typed_in_run = 0

        for char in text:
            await page.keyboard.type(char, delay=self.char_delay_ms(char))
            typed_in_run += 1

            if pauses and typed_in_run >= run_length:
                await self.delay(*THINKING_PAUSE_MS)
                typed_in_run = 0
                run_length = self._next_pause_after()

    def click_offset(self, box: dict[str, float] | None) -> dict[str, float] | None:
        """Pick a click point inside ``box`` (element-relative), or None without a box."""
        if not box:
            return None
        return {
            "x": box["width"] * self._rng.uniform(*CLICK_FRACTION),
            "y": box["height"] * self._rng.uniform(*CLICK_FRACTION),
        }

    async def click_with_offset(self, locator: Any) -> None:
        position = self.click_offset(await locator.bounding_box())
        if position is None:
            await locator.click()
            return
        await locator.click(position=position)

    async def hover_then_click(self, locator: Any) -> None:
        """Hover, pause briefly, then click at a randomized offset."""
        await locator.hover()
        await self.delay(*HOVER_PAUSE_MS)
        await self.click_with_offset(locator)
