"""Errors raised while loading or checking plugin settings."""

from typing import List, Optional

from .base_exceptions import PluginError, add_details

# Field name -> variable a CI pipeline sets for it
REQUIRED_SETTINGS = {
    'service_url': 'PLUGIN_BLACKDUCK_URL',
    'auth_token': 'PLUGIN_BLACKDUCK_TOKEN',
    'project_name': 'PLUGIN_BLACKDUCK_PROJECT',
}


class ConfigurationError(PluginError):
    """A setting is missing, malformed or of the wrong type.

    ``config_section``/``config_key`` name the offending setting in the
    dotted form used by the YAML file, e.g. ``blackduck.timeout``.
    """

    def __init__(self, message: str, config_section: Optional[str] = None,
                 config_key: Optional[str] = None, **kwargs):
        add_details(kwargs, config_section=config_section, config_key=config_key)
        kwargs.setdefault('error_code', 'CONFIG_ERROR')
        super().__init__(message, **kwargs)

        self.config_section = config_section
        self.config_key = config_key


class ConfigValidationError(ConfigurationError):
    """One or more settings failed type or range checks."""

    def __init__(self, validation_errors: List[str], **kwargs):
        count = len(validation_errors)
        add_details(kwargs, validation_errors=list(validation_errors))
        kwargs['error_code'] = 'CONFIG_VALIDATION_ERROR'
        kwargs['suggestion'] = 'Run with --validate-config to list every invalid setting'
        super().__init__(
            f"Configuration validation failed with {count} error{'s' if count != 1 else ''}",
            **kwargs
        )

        self.validation_errors = validation_errors


class ConfigFileNotFoundError(ConfigurationError):
    """The file named by --config or PLUGIN_CONFIG_FILE does not exist."""

    def __init__(self, file_path: str, **kwargs):
        add_details(kwargs, file_path=file_path)
        kwargs['error_code'] = 'CONFIG_FILE_NOT_FOUND'
        kwargs['suggestion'] = (
            'Point --config or PLUGIN_CONFIG_FILE at an existing YAML file, '
            'or unset it to use PLUGIN_BLACKDUCK_* variables only'
        )
        super().__init__(f"Configuration file not found: {file_path}", **kwargs)

        self.file_path = file_path


class ConfigFileFormatError(ConfigurationError):
    """The configuration file is not YAML or its top level is not a mapping."""

    def __init__(self, file_path: str, format_error: str, **kwargs):
        add_details(kwargs, file_path=file_path, format_error=format_error)
        kwargs['error_code'] = 'CONFIG_FORMAT_ERROR'
        kwargs['suggestion'] = (
            'The file must be a YAML mapping with blackduck, system and logging sections'
        )
        super().__init__(f"Cannot read configuration file {file_path}: {format_error}", **kwargs)

        self.file_path = file_path
        self.format_error = format_error


class MissingRequiredConfigError(ConfigurationError):
    """Black Duck URL, API token or project name is empty.

    All missing fields are reported at once.
    """

    def __init__(self, required_keys: List[str], **kwargs):
        if len(required_keys) == 1:
            message = f"Missing required configuration: {required_keys[0]}"
        else:
            message = f"Missing required configurations: {', '.join(required_keys)}"

        variables = [REQUIRED_SETTINGS.get(key, key) for key in required_keys]
        add_details(kwargs, required_keys=list(required_keys))
        kwargs['error_code'] = 'MISSING_REQUIRED_CONFIG'
        kwargs['suggestion'] = f"Set {', '.join(variables)} in the pipeline step settings"
        super().__init__(message, **kwargs)

        self.required_keys = required_keys
