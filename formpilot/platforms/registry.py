"""URL → platform adapter dispatch.

Entries are checked in registration order and the first pattern that
matches wins. When two patterns can match the same URL, register the more
specific one first.
"""

import logging
import re
from collections.abc import Callable
from enum import Enum
from typing import NamedTuple

from formpilot.core.config import PlatformConfig
from formpilot.core.errors import NoPlatformDetected
from formpilot.platforms.acme.adapter import AcmeAdapter
from formpilot.platforms.base import AdapterContext, PlatformAdapter
from formpilot.platforms.globex.adapter import GlobexAdapter
from formpilot.platforms.initech.adapter import InitechAdapter

logger = logging.getLogger(__name__)


class Platform(str, Enum):
    """Every form layout the engine knows how to fill."""

    ACME = "acme"
    GLOBEX = "globex"
    INITECH = "initech"


AdapterFactory = Callable[[AdapterContext], PlatformAdapter]

# Adding a platform: one enum member, one row here, one row in DEFAULT_PLATFORMS.
ADAPTERS: dict[Platform, AdapterFactory] = {
    Platform.ACME: AcmeAdapter,
    Platform.GLOBEX: GlobexAdapter,
    Platform.INITECH: InitechAdapter,
}

DEFAULT_PLATFORMS: tuple[tuple[str, str, Platform], ...] = (
    ("Acme Corp", r"/acme\.html", Platform.ACME),
    ("Globex Corp", r"/globex\.html", Platform.GLOBEX),
    ("Initech Corp", r"/initech\.html", Platform.INITECH),
)


class PlatformDescriptor(NamedTuple):
    name: str
    platform: Platform
    url_pattern: re.Pattern[str]
    factory: AdapterFactory


class PlatformRegistry:
    """Ordered list of (name, pattern, factory) rows; first match wins."""

    def __init__(self) -> None:
        self._platforms: list[PlatformDescriptor] = []

    def __len__(self) -> int:
        return len(self._platforms)

    @property
    def platforms(self) -> list[PlatformDescriptor]:
        return list(self._platforms)

    def register(
        self,
        name: str,
        url_pattern: str | re.Pattern[str],
        platform: Platform | str,
        factory: AdapterFactory | None = None,
    ) -> PlatformDescriptor:
        platform = Platform(platform)
        pattern = re.compile(url_pattern) if isinstance(url_pattern, str) else url_pattern
        descriptor = PlatformDescriptor(name, platform, pattern, factory or ADAPTERS[platform])
        self._platforms.append(descriptor)
        logger.debug("Registered platform: %s (pattern: %s)", name, pattern.pattern)
        return descriptor

    def detect(self, url: str) -> PlatformDescriptor | None:
        for descriptor in self._platforms:
            if descriptor.url_pattern.search(url):
                logger.info("Detected platform: %s", descriptor.name)
                return descriptor
        logger.error("No platform detected for URL: %s", url)
        return None

    def create_adapter(
        self,
        url: str,
        build_context: Callable[[PlatformDescriptor], AdapterContext],
    ) -> PlatformAdapter:
        """Detect the platform for ``url`` and instantiate its adapter.

        ``build_context`` receives the descriptor so collaborators can be
        named after the detected platform.

        Raises:
            NoPlatformDetected: if no registered pattern matches.
        """
        descriptor = self.detect(url)
        if descriptor is None:
            raise NoPlatformDetected(url)
        return descriptor.factory(build_context(descriptor))


def default_registry(extra: list[PlatformConfig] | None = None) -> PlatformRegistry:
    """Registry with configured extras first, then the built-in layouts."""
    registry = PlatformRegistry()
    for entry in extra or []:
        registry.register(entry.name, entry.url_pattern, entry.platform)
    for name, pattern, platform in DEFAULT_PLATFORMS:
        registry.register(name, pattern, platform)
    return registry
