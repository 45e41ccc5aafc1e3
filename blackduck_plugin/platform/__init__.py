"""Platform detection for the Black Duck plugin."""

from .detector import PlatformDetector, PlatformType

__all__ = ['PlatformDetector', 'PlatformType']
