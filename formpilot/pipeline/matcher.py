"""Progressive fuzzy matching of free-text profile values to form options.

Tier order (strict → loose):
  1. 0.2: near-exact or clean substring hits ("bachelors" → "Bachelor's Degree")
  2. 0.4: moderate wording differences
  3. 0.6: weak matches, logged as warnings

Scores are distances in [0, 1], lower is better. A candidate is accepted at a
tier when its distance is <= the tier threshold. When no tier yields a hit the
matcher returns None; it never falls back to an arbitrary option and never
raises. Callers decide whether None is fatal.
"""

import logging
from collections.abc import Iterable

from thefuzz import fuzz, utils

from formpilot.core.schemas import MatchableOption

logger = logging.getLogger(__name__)

THRESHOLDS: tuple[float, ...] = (0.2, 0.4, 0.6)
WEAK_MATCH_THRESHOLD = 0.4


def _window_ratio(needle: str, haystack: str) -> int:
    """Best ratio of ``needle`` against every same-length slice of ``haystack``.

    Unlike fuzz.partial_ratio, slices shorter than the needle are never
    scored, so "phd" cannot ride a lone "h" at the start of "high school".
    """
    n = len(needle)
    return max(fuzz.ratio(needle, haystack[i:i + n]) for i in range(len(haystack) - n + 1))


def distance(target: str, candidate: str) -> float:
    """Normalized distance between a target value and one option string.

    The target is searched inside longer candidates, so a short profile
    value can hit a verbose label. A target longer than the candidate is
    compared whole.
    """
    a = utils.full_process(target)
    b = utils.full_process(candidate)
    if not a or not b:
        return 1.0
    if len(a) <= len(b):
        similarity = _window_ratio(a, b)
    else:
        similarity = fuzz.ratio(a, b)
    return (100 - similarity) / 100


class FuzzyOptionMatcher:
    """Maps a free-text target onto the closest enabled option value."""

    def __init__(self, thresholds: Iterable[float] = THRESHOLDS) -> None:
        self._thresholds = tuple(sorted(thresholds))
        if not self._thresholds:
            msg = "at least one threshold is required"
            raise ValueError(msg)

    @property
    def thresholds(self) -> tuple[float, ...]:
        return self._thresholds

    def score(self, target: str, option: MatchableOption) -> float:
        """Best distance of the target against the option's value and text."""
        return min(distance(target, option.value), distance(target, option.text))

    def match(self, target: str, options: Iterable[MatchableOption]) -> str | None:
        """Return the value of the best option, or None when nothing clears a tier."""
        enabled = [opt for opt in options if not opt.disabled]
        if not enabled:
            logger.debug("No enabled options to match '%s' against", target)
            return None

        scored = [(self.score(target, opt), idx, opt) for idx, opt in enumerate(enabled)]

        for threshold in self._thresholds:
            hits = [entry for entry in scored if entry[0] <= threshold]
            if not hits:
                continue
            best_score, _, best = min(hits, key=lambda entry: (entry[0], entry[1]))
            if threshold > WEAK_MATCH_THRESHOLD:
                logger.warning(
                    "Weak fuzzy match: '%s' → '%s' (threshold: %.1f, score: %.2f)",
                    target, best.text or best.value, threshold, best_score,
                )
            else:
                logger.debug(
                    "Matched '%s' → '%s' (threshold: %.1f, score: %.2f)",
                    target, best.value, threshold, best_score,
                )
            return best.value

        logger.debug("No option for '%s' cleared the loosest threshold", target)
        return None


def find_best_match(target: str, options: Iterable[MatchableOption]) -> str | None:
    """Convenience wrapper around a default-tier FuzzyOptionMatcher."""
    return FuzzyOptionMatcher().match(target, options)
