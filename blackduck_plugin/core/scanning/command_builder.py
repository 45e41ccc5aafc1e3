"""Translation of a ScanConfig into a Detect command line.

Flag order is fixed: the three mandatory flags first (URL, token, project),
then the optional flags in the order of ``_optional_flags``, then the
caller's extra arguments. Detect does not care about order but logs and
tests do.
"""

import logging
from typing import Callable, List, Optional, Tuple

from ...platform import PlatformDetector, PlatformType
from ..exceptions import InvalidOptionWarning
from .data_structures import CommandLine, ScanConfig, ScanMode

logger = logging.getLogger(__name__)

POSIX_SHELL = ("bash", "-c")
WINDOWS_SHELL = ("powershell.exe", "-Command")

_POSIX_ESCAPES = ('\\', '"', '$', '`')

Quoter = Callable[[str], str]


def escape_posix(value: str) -> str:
    """Backslash-escape what stays special inside bash double quotes."""
    for char in _POSIX_ESCAPES:
        value = value.replace(char, '\\' + char)
    return value


def quote_posix(value: str) -> str:
    """Double-quote a value for bash."""
    return f'"{escape_posix(value)}"'


def escape_powershell(value: str) -> str:
    return value.replace("'", "''")


def quote_powershell(value: str) -> str:
    """Single-quote a value for PowerShell; embedded quotes are doubled."""
    return f"'{escape_powershell(value)}'"


def secret_forms(secret: str) -> Tuple[str, ...]:
    """Every spelling of ``secret`` that can end up in a built command.

    Longest first, so an escaped form is masked before the raw value
    inside it.
    """
    if not secret:
        return ()
    forms = {secret, escape_posix(secret), escape_powershell(secret)}
    return tuple(sorted(forms, key=lambda form: (-len(form), form)))


def _optional_flags(config: ScanConfig) -> Tuple[List[str], List[InvalidOptionWarning]]:
    flags: List[str] = []
    warnings: List[InvalidOptionWarning] = []

    if config.offline_mode:
        flags.append("--blackduck.offline.mode=true")
    if config.test_connection_only:
        flags.append("--detect.test.connection=true")
    if config.offline_bdio_mode:
        flags.append("--blackduck.offline.mode.force.bdio=true")
    if config.trust_all_certificates:
        flags.append("--blackduck.trust.cert=true")
    if config.timeout_seconds is not None and config.timeout_seconds > 0:
        flags.append(f"--detect.timeout={config.timeout_seconds}")

    if config.scan_mode:
        mode = ScanMode.parse(config.scan_mode)
        if mode is not None:
            flags.append(f"--detect.blackduck.scan.mode={mode.value}")
        else:
            valid = ", ".join(m.value for m in ScanMode)
            warning = InvalidOptionWarning(
                'scan_mode', config.scan_mode, f"scan mode can be {valid}"
            )
            logger.warning(str(warning), extra={'option': 'scan_mode'})
            warnings.append(warning)

    return flags, warnings


def _detect_script(config: ScanConfig, quote: Quoter,
                   jar: str) -> Tuple[str, Tuple[InvalidOptionWarning, ...]]:
    parts = [
        config.java_path,
        "-jar",
        jar,
        f"--blackduck.url={quote(config.service_url)}",
        f"--blackduck.api.token={quote(config.auth_token)}",
        f"--detect.project.name={quote(config.project_name)}",
    ]
    flags, warnings = _optional_flags(config)
    parts.extend(flags)

    # Trust boundary: appended as given, never parsed or quoted
    if config.extra_arguments:
        parts.append(config.extra_arguments)

    return " ".join(parts), tuple(warnings)


def build_posix_command(config: ScanConfig,
                        platform_type: PlatformType = PlatformType.LINUX) -> CommandLine:
    """Build ``bash -c "<detect command>"``."""
    script, warnings = _detect_script(config, quote_posix, config.jar_for(platform_type))
    return CommandLine(
        argv=POSIX_SHELL + (script,),
        script=script,
        platform=platform_type,
        secrets=secret_forms(config.auth_token),
        warnings=warnings,
    )


def build_windows_command(config: ScanConfig,
                          platform_type: PlatformType = PlatformType.WINDOWS) -> CommandLine:
    """Build ``powershell.exe -Command "<detect command>"``."""
    jar = quote_powershell(config.jar_for(platform_type))
    script, warnings = _detect_script(config, quote_powershell, jar)
    return CommandLine(
        argv=WINDOWS_SHELL + (script,),
        script=script,
        platform=platform_type,
        secrets=secret_forms(config.auth_token),
        warnings=warnings,
    )


def select_builder(platform_type: PlatformType) -> Callable[..., CommandLine]:
    """Pick the shell strategy for a platform family."""
    if platform_type.is_windows:
        return build_windows_command
    return build_posix_command


def build_command(config: ScanConfig,
                  platform_type: Optional[PlatformType] = None) -> CommandLine:
    """Build the command line for ``config`` on ``platform_type``.

    Args:
        config: Scan inputs
        platform_type: Target platform; detected from the host when omitted

    Returns:
        CommandLine ready to be executed
    """
    if platform_type is None:
        platform_type = PlatformDetector.detect()
    return select_builder(platform_type)(config, platform_type)
