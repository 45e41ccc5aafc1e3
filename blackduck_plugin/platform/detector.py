"""Host platform detection used to pick the shell strategy."""

import platform
from enum import Enum
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class PlatformType(Enum):
    """Host platform families the plugin distinguishes."""
    WINDOWS = "windows"
    LINUX = "linux"
    DARWIN = "darwin"
    UNKNOWN = "unknown"

    @property
    def is_windows(self) -> bool:
        return self is PlatformType.WINDOWS


class PlatformDetector:
    """Resolves the running platform family."""

    @staticmethod
    def detect(system_name: Optional[str] = None) -> PlatformType:
        """Detect current platform family.

        Args:
            system_name: Override for ``platform.system()``, mainly for tests

        Returns:
            PlatformType: Detected platform family
        """
        system = (system_name if system_name is not None else platform.system()).lower()

        if system == "windows" or system.startswith(("cygwin", "msys")):
            # Git Bash and friends still launch native Windows processes
            detected = PlatformType.WINDOWS
        elif system == "linux":
            detected = PlatformType.LINUX
        elif system == "darwin":
            detected = PlatformType.DARWIN
        else:
            detected = PlatformType.UNKNOWN

        logger.debug(f"Detected platform: {detected.value} (system={system!r})")
        return detected
