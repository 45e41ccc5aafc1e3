"""Core data structures for a Black Duck Detect scan."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ...platform import PlatformType
from ..exceptions import InvalidOptionWarning
from ..logger.secret_filter import MASK

POSIX_DETECT_JAR = "/opt/synopsys-detect-9.7.0.jar"
WINDOWS_DETECT_JAR = "C:\\opt\\synopsys-detect-9.7.0.jar"


class ScanMode(Enum):
    """Detect scan modes accepted by ``--detect.blackduck.scan.mode``."""
    RAPID = "RAPID"
    STATELESS = "STATELESS"
    INTELLIGENT = "INTELLIGENT"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['ScanMode']:
        """Return the matching mode, or None for an unknown value."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class ScanConfig:
    """Inputs of a single scan invocation."""
    service_url: str
    auth_token: str = field(repr=False)
    project_name: str
    offline_mode: bool = False
    test_connection_only: bool = False
    offline_bdio_mode: bool = False
    trust_all_certificates: bool = False
    timeout_seconds: Optional[int] = None
    scan_mode: Optional[str] = None
    extra_arguments: Optional[str] = None
    java_path: str = "java"
    detect_jar: Optional[str] = None

    def missing_required(self) -> Tuple[str, ...]:
        """Names of required fields that are empty."""
        required = (
            ('service_url', self.service_url),
            ('auth_token', self.auth_token),
            ('project_name', self.project_name),
        )
        return tuple(name for name, value in required if not (value or '').strip())

    def jar_for(self, platform_type: PlatformType) -> str:
        if self.detect_jar:
            return self.detect_jar
        return WINDOWS_DETECT_JAR if platform_type.is_windows else POSIX_DETECT_JAR

    def to_dict(self) -> Dict[str, Any]:
        """Dictionary form with the token masked."""
        return {
            'service_url': self.service_url,
            'auth_token': MASK if self.auth_token else '',
            'project_name': self.project_name,
            'offline_mode': self.offline_mode,
            'test_connection_only': self.test_connection_only,
            'offline_bdio_mode': self.offline_bdio_mode,
            'trust_all_certificates': self.trust_all_certificates,
            'timeout_seconds': self.timeout_seconds,
            'scan_mode': self.scan_mode,
            'extra_arguments': self.extra_arguments,
            'java_path': self.java_path,
            'detect_jar': self.detect_jar,
        }


@dataclass(frozen=True)
class CommandLine:
    """Platform-specific command built from a ScanConfig.

    ``argv`` is what gets handed to the OS: the shell, its inline-script
    switch and ``script``, the full Detect command.
    """
    argv: Tuple[str, ...]
    script: str
    platform: PlatformType
    secrets: Tuple[str, ...] = field(default=(), repr=False)
    warnings: Tuple[InvalidOptionWarning, ...] = ()

    def mask(self, text: str) -> str:
        for secret in sorted(self.secrets, key=len, reverse=True):
            if secret:
                text = text.replace(secret, MASK)
        return text

    def masked(self) -> str:
        """Printable command with every secret replaced."""
        return self.mask(" ".join(self.argv))

    def __str__(self) -> str:
        return self.masked()

    def __repr__(self) -> str:
        return f"CommandLine({self.masked()!r}, platform={self.platform.value})"
