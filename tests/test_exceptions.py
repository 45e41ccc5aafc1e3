"""Tests for exception classes."""

import pytest

from blackduck_plugin.core.exceptions import (
    PluginException, PluginError,
    ConfigurationError, ConfigValidationError, ConfigFileNotFoundError,
    ConfigFileFormatError, MissingRequiredConfigError,
    ScanError, ScanExecutionError, ScanCancelledError, ScanTimeoutError,
    InvalidOptionWarning
)


class TestBaseExceptions:
    """Test cases for base exception classes."""

    def test_plugin_exception_basic(self):
        exc = PluginException("Test message")

        assert str(exc) == "Test message"
        assert exc.message == "Test message"
        assert exc.error_code is None
        assert exc.details == {}
        assert exc.suggestion is None

    def test_plugin_exception_with_all_params(self):
        """Test PluginException with all parameters."""
        details = {'key': 'value', 'number': 42}
        exc = PluginException(
            "Test message",
            error_code="TEST_ERROR",
            details=details,
            suggestion="Try this fix"
        )

        assert exc.error_code == "TEST_ERROR"
        assert exc.details == details
        assert str(exc) == "Test message. Suggestion: Try this fix"

    def test_details_are_copied(self):
        details = {'step': 'detect'}

        exc = ScanExecutionError(exit_code=3, command="bash -c java", details=details)
        ConfigurationError("bad", config_key="blackduck.timeout", details=details)

        assert details == {'step': 'detect'}
        assert exc.details == {'step': 'detect', 'exit_code': 3, 'command': "bash -c java"}

    def test_to_dict(self):
        exc = PluginError("Test message", error_code="TEST_ERROR", details={'key': 'value'})

        assert exc.to_dict() == {
            'exception_type': 'PluginError',
            'message': 'Test message',
            'error_code': 'TEST_ERROR',
            'details': {'key': 'value'},
            'suggestion': None,
        }


class TestConfigurationExceptions:
    """Test cases for configuration-related exceptions."""

    def test_configuration_error(self):
        exc = ConfigurationError("Config error", config_section="blackduck", config_key="timeout")

        assert exc.error_code == "CONFIG_ERROR"
        assert exc.details == {'config_section': 'blackduck', 'config_key': 'timeout'}
        assert isinstance(exc, PluginError)

    def test_missing_required_single(self):
        exc = MissingRequiredConfigError(['service_url'])

        assert exc.message == "Missing required configuration: service_url"
        assert exc.error_code == "MISSING_REQUIRED_CONFIG"
        assert "PLUGIN_BLACKDUCK_URL" in exc.suggestion

    def test_missing_required_multiple(self):
        exc = MissingRequiredConfigError(['service_url', 'auth_token'])

        assert "service_url, auth_token" in exc.message
        assert exc.required_keys == ['service_url', 'auth_token']
        assert isinstance(exc, ConfigurationError)

    def test_config_validation_error(self):
        errors = ["Error 1", "Error 2"]
        exc = ConfigValidationError(errors)

        assert "failed with 2 errors" in exc.message
        assert exc.details['validation_errors'] == errors

    def test_config_file_errors(self):
        missing = ConfigFileNotFoundError("/nope.yml")
        broken = ConfigFileFormatError("/bad.yml", "mapping values are not allowed")

        assert missing.error_code == "CONFIG_FILE_NOT_FOUND"
        assert "/nope.yml" in missing.message
        assert broken.error_code == "CONFIG_FORMAT_ERROR"
        assert "mapping values" in broken.message
        assert "PLUGIN_CONFIG_FILE" in missing.suggestion
        assert broken.details == {'file_path': '/bad.yml',
                                  'format_error': 'mapping values are not allowed'}

    def test_missing_required_names_variables(self):
        exc = MissingRequiredConfigError(['auth_token', 'project_name'])

        assert "PLUGIN_BLACKDUCK_TOKEN, PLUGIN_BLACKDUCK_PROJECT" in exc.suggestion
        assert "PLUGIN_BLACKDUCK_URL" not in exc.suggestion


class TestScanExceptions:
    """Test cases for scan-related exceptions."""

    def test_execution_error_with_exit_code(self):
        exc = ScanExecutionError(exit_code=1, command="bash -c java ...")

        assert exc.message == "Scan command failed with exit code 1"
        assert exc.exit_code == 1
        assert exc.details['command'] == "bash -c java ..."
        assert exc.error_code == "SCAN_EXECUTION_ERROR"
        assert isinstance(exc, ScanError)

    def test_execution_error_without_start(self):
        cause = FileNotFoundError(2, "No such file or directory", "bash")
        exc = ScanExecutionError(original_exception=cause)

        assert "failed to start" in exc.message
        assert exc.exit_code is None
        assert exc.original_exception is cause
        assert "No such file" in exc.details['original_error']

    def test_cancellation_errors(self):
        cancelled = ScanCancelledError()
        timeout = ScanTimeoutError(30)

        assert cancelled.error_code == "SCAN_CANCELLED"
        assert timeout.error_code == "SCAN_TIMEOUT"
        assert "timed out after 30 seconds" in timeout.message
        assert isinstance(timeout, ScanCancelledError)
        assert not isinstance(cancelled, ScanExecutionError)

    def test_invalid_option_warning(self):
        warning = InvalidOptionWarning('scan_mode', 'FAST', 'scan mode can be RAPID')

        assert isinstance(warning, UserWarning)
        assert "scan_mode='FAST'" in str(warning)
        assert warning == InvalidOptionWarning('scan_mode', 'FAST', 'scan mode can be RAPID')
