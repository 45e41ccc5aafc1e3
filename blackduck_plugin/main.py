"""Command line entry point for the Black Duck plugin."""

import argparse
import os
import sys
from typing import Optional

from rich.console import Console

from . import __version__
from .core.config import ConfigManager, ConfigValidator
from .core.exceptions import (
    ConfigurationError, ConfigValidationError, PluginException, ScanCancelledError,
    ScanError
)
from .core.logger import LoggerManager, ScanAuditLogger
from .core.scanning import ScanInvoker, build_command, validate_config
from .platform import PlatformDetector
from .tools import ProcessRunner

EXIT_SUCCESS = 0
EXIT_CANCELLED = 1
EXIT_CONFIG_ERROR = 2
EXIT_SCAN_FAILED = 3
EXIT_UNEXPECTED = 4

# Status lines go to stderr; stdout carries the command echo and Detect output
console = Console(stderr=True, highlight=False, soft_wrap=True)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='blackduck-plugin',
        description='Run a Black Duck Detect scan from PLUGIN_BLACKDUCK_* settings',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  PLUGIN_BLACKDUCK_URL, PLUGIN_BLACKDUCK_TOKEN, PLUGIN_BLACKDUCK_PROJECT (required)
  PLUGIN_BLACKDUCK_OFFLINEMODE, PLUGIN_BLACKDUCK_TEST_CONNECTION,
  PLUGIN_BLACKDUCK_OFFLINE_BDIO, PLUGIN_BLACKDUCK_TRUST_CERTS,
  PLUGIN_BLACKDUCK_TIMEOUT, PLUGIN_BLACKDUCK_SCAN_MODE,
  PLUGIN_BLACKDUCK_PROPERTIES, PLUGIN_LOG_LEVEL

Examples:
  blackduck-plugin
  blackduck-plugin --config blackduck.yml --dry-run
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'blackduck-plugin {__version__}'
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Path to a YAML configuration file (environment still wins)',
        metavar='PATH'
    )

    parser.add_argument(
        '--log-level', '-l',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (overrides PLUGIN_LOG_LEVEL)',
        metavar='LEVEL'
    )

    parser.add_argument(
        '--validate-config',
        action='store_true',
        help='Validate configuration and exit'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Print the scan command without running it'
    )

    return parser


def setup_environment(args: argparse.Namespace) -> None:
    """Apply command line overrides to the environment."""
    if args.log_level:
        os.environ['PLUGIN_LOG_LEVEL'] = args.log_level


def validate_configuration(config_manager: ConfigManager) -> bool:
    """Report every configuration problem at once.

    Returns:
        True if configuration is valid, False otherwise
    """
    validator = ConfigValidator(config_manager.to_dict())
    errors = list(validator.validate())
    try:
        validate_config(config_manager.to_scan_config())
    except ConfigurationError as e:
        errors.append(e.message)

    for warning in validator.warnings:
        console.print(f"Warning: {warning}", style="yellow", markup=False)

    if errors:
        console.print("[red]Configuration validation failed:[/red]")
        for error in errors:
            console.print(f"  - {error}", markup=False)
        return False

    console.print("[green]Configuration validation passed[/green]")
    return True


def run(config_path: Optional[str] = None, dry_run: bool = False,
        validate_only: bool = False) -> int:
    """Load configuration and run (or preview) the scan.

    Returns:
        Process exit code
    """
    config_manager = ConfigManager(config_path)
    logger_manager = LoggerManager(config_manager.to_dict(), secrets=config_manager.secrets())
    logger = logger_manager.get_logger('main')

    try:
        if validate_only:
            return EXIT_SUCCESS if validate_configuration(config_manager) else EXIT_CONFIG_ERROR

        errors = config_manager.validate()
        if errors:
            for error in errors:
                logger.error(f"Configuration error: {error}")
            raise ConfigValidationError(errors)

        scan_config = config_manager.to_scan_config()
        platform_type = PlatformDetector.detect()

        if dry_run:
            validate_config(scan_config)
            print(build_command(scan_config, platform_type).masked())
            return EXIT_SUCCESS

        invoker = ScanInvoker(
            scan_config,
            platform_type=platform_type,
            runner=ProcessRunner(
                grace_period=float(config_manager.get('system.kill_grace_period', 5))
            ),
            audit_logger=ScanAuditLogger(logger_manager),
            execution_timeout=config_manager.get('system.execution_timeout') or None,
        )
        result = invoker.run()
        console.print(
            f"[green]Black Duck scan completed in {result.execution_time:.1f}s[/green]"
        )
        return EXIT_SUCCESS
    finally:
        logger_manager.shutdown()


def report_error(prefix: str, error: PluginException) -> None:
    console.print(f"{prefix}: {error.message}", style="red", markup=False)
    if error.suggestion:
        console.print(f"Suggestion: {error.suggestion}", markup=False)


def main(argv: Optional[list] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_environment(args)

    try:
        return run(args.config, dry_run=args.dry_run, validate_only=args.validate_config)
    except ScanCancelledError as e:
        console.print(e.message, style="yellow", markup=False)
        return EXIT_CANCELLED
    except ConfigurationError as e:
        report_error("Configuration error", e)
        return EXIT_CONFIG_ERROR
    except ScanError as e:
        report_error("Black Duck scan failed", e)
        return EXIT_SCAN_FAILED
    except PluginException as e:
        report_error("Plugin error", e)
        return EXIT_UNEXPECTED
    except Exception as e:
        console.print(f"Unexpected error: {e}", style="red", markup=False)
        return EXIT_UNEXPECTED


if __name__ == '__main__':
    sys.exit(main())
