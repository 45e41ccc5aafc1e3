"""Configuration manager for the Black Duck plugin."""

import os
import yaml
from typing import Dict, Any, Optional, List, Tuple
from pathlib import Path

from ..exceptions import ConfigFileFormatError, ConfigFileNotFoundError, ConfigurationError
from ..scanning.command_builder import secret_forms
from ..scanning.data_structures import ScanConfig

CONFIG_FILE_ENV = 'PLUGIN_CONFIG_FILE'

# Boolean spellings CI settings use, matched case-insensitively
TRUE_STRINGS = ('1', 't', 'true', 'yes')
FALSE_STRINGS = ('0', 'f', 'false', 'no')

# Variable name -> (nested config path, keep raw string)
ENV_MAPPINGS: Dict[str, Tuple[Tuple[str, ...], bool]] = {
    'PLUGIN_BLACKDUCK_URL': (('blackduck', 'url'), True),
    'PLUGIN_BLACKDUCK_TOKEN': (('blackduck', 'token'), True),
    'PLUGIN_BLACKDUCK_PROJECT': (('blackduck', 'project'), True),
    'PLUGIN_BLACKDUCK_OFFLINEMODE': (('blackduck', 'offline_mode'), False),
    'PLUGIN_BLACKDUCK_TEST_CONNECTION': (('blackduck', 'test_connection'), False),
    'PLUGIN_BLACKDUCK_OFFLINE_BDIO': (('blackduck', 'offline_bdio'), False),
    'PLUGIN_BLACKDUCK_TRUST_CERTS': (('blackduck', 'trust_certs'), False),
    'PLUGIN_BLACKDUCK_TIMEOUT': (('blackduck', 'timeout'), False),
    'PLUGIN_BLACKDUCK_SCAN_MODE': (('blackduck', 'scan_mode'), True),
    'PLUGIN_BLACKDUCK_PROPERTIES': (('blackduck', 'properties'), True),
    'PLUGIN_BLACKDUCK_JAVA_PATH': (('blackduck', 'java_path'), True),
    'PLUGIN_BLACKDUCK_DETECT_JAR': (('blackduck', 'detect_jar'), True),
    'PLUGIN_LOG_LEVEL': (('logging', 'level'), True),
    'PLUGIN_EXECUTION_TIMEOUT': (('system', 'execution_timeout'), False),
}


class ConfigManager:
    """Loads plugin settings from defaults, a YAML file and the environment."""

    def __init__(self, config_path: Optional[str] = None,
                 environ: Optional[Dict[str, str]] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to a user configuration file
            environ: Environment to read instead of ``os.environ``
        """
        self.environ = os.environ if environ is None else environ
        self.config_path = config_path or self.environ.get(CONFIG_FILE_ENV) or None
        self.config: Dict[str, Any] = {}
        self.base_dir = Path(__file__).parent.parent.parent
        self._load_configuration()

    def _load_configuration(self) -> None:
        """Load configuration from multiple sources in order of priority."""
        default_config = self._load_config_file(self.base_dir / "config" / "default.yml")
        if default_config:
            self.config.update(default_config)

        if self.config_path:
            user_path = Path(self.config_path)
            if not user_path.exists():
                raise ConfigFileNotFoundError(str(user_path))
            user_config = self._load_config_file(user_path)
            if user_config:
                self._deep_merge(self.config, user_config)

        self._load_environment_variables()

    def _load_config_file(self, file_path: Path) -> Optional[Dict[str, Any]]:
        """Load configuration from YAML file.

        Args:
            file_path: Path to configuration file

        Returns:
            Configuration dictionary or None if file doesn't exist
        """
        if not file_path.exists():
            return None

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigFileFormatError(str(file_path), str(e))
        except IOError as e:
            raise ConfigurationError(f"Failed to load configuration from {file_path}: {e}")

        if data is None:
            return None
        if not isinstance(data, dict):
            raise ConfigFileFormatError(str(file_path), "top level must be a mapping")
        return data

    def _deep_merge(self, base: Dict[str, Any], update: Dict[str, Any]) -> None:
        """Deep merge update dictionary into base dictionary."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _load_environment_variables(self) -> None:
        """Load configuration overrides from PLUGIN_* environment variables."""
        for env_var, (config_path, raw) in ENV_MAPPINGS.items():
            value = self.environ.get(env_var)
            if value is None or value == '':
                continue
            self._set_nested_value(
                self.config, config_path, value if raw else self._convert_env_value(value)
            )

    def _set_nested_value(self, config: Dict[str, Any], path: tuple, value: Any) -> None:
        current = config
        for key in path[:-1]:
            if key not in current or not isinstance(current[key], dict):
                current[key] = {}
            current = current[key]
        current[path[-1]] = value

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to bool, int, float or str."""
        value = value.strip()
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated key.

        Args:
            key: Dot-separated configuration key (e.g., 'blackduck.url')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        current = self.config
        for k in key.split('.'):
            if isinstance(current, dict) and k in current:
                current = current[k]
            else:
                return default
        return current

    def set(self, key: str, value: Any) -> None:
        """Set configuration value by dot-separated key."""
        self._set_nested_value(self.config, tuple(key.split('.')), value)

    def get_section(self, section: str) -> Dict[str, Any]:
        return self.config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from all sources."""
        self.config = {}
        self._load_configuration()

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        from .config_validator import ConfigValidator
        validator = ConfigValidator(self.config)
        return validator.validate()

    def secrets(self) -> List[str]:
        """Values that must never reach a log line, escaped spellings included."""
        token = self.get('blackduck.token')
        return list(secret_forms(str(token))) if token else []

    def to_scan_config(self) -> ScanConfig:
        """Build the immutable ScanConfig for one invocation.

        Raises:
            ConfigurationError: A value cannot be converted to its field type
        """
        section = self.get_section('blackduck')
        return ScanConfig(
            service_url=self._as_str(section.get('url')),
            auth_token=self._as_str(section.get('token')),
            project_name=self._as_str(section.get('project')),
            offline_mode=self._as_bool('blackduck.offline_mode', section.get('offline_mode')),
            test_connection_only=self._as_bool('blackduck.test_connection', section.get('test_connection')),
            offline_bdio_mode=self._as_bool('blackduck.offline_bdio', section.get('offline_bdio')),
            trust_all_certificates=self._as_bool('blackduck.trust_certs', section.get('trust_certs')),
            timeout_seconds=self._as_int('blackduck.timeout', section.get('timeout')),
            scan_mode=self._as_str(section.get('scan_mode')) or None,
            extra_arguments=self._as_str(section.get('properties')) or None,
            java_path=self._as_str(section.get('java_path')) or 'java',
            detect_jar=self._as_str(section.get('detect_jar')) or None,
        )

    def _as_str(self, value: Any) -> str:
        if value is None:
            return ''
        return str(value)

    def _as_bool(self, key: str, value: Any) -> bool:
        if value is None or value == '':
            return False
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
        raise ConfigurationError(
            f"{key} must be a boolean, got {value!r}",
            config_section=key.split('.')[0], config_key=key
        )

    def _as_int(self, key: str, value: Any) -> Optional[int]:
        if value is None or value == '':
            return None
        if isinstance(value, bool):
            raise ConfigurationError(f"{key} must be an integer", config_key=key)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"{key} must be an integer, got {value!r}",
                config_section=key.split('.')[0], config_key=key
            )

    def to_dict(self) -> Dict[str, Any]:
        """Get complete configuration as dictionary."""
        return self.config.copy()
