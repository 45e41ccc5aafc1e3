"""Test configuration and utilities for the Black Duck plugin test suite."""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Any

import pytest

from blackduck_plugin.core.config.config_manager import CONFIG_FILE_ENV, ENV_MAPPINGS
from blackduck_plugin.core.scanning import ScanConfig


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture(autouse=True)
def clean_plugin_env(monkeypatch):
    """Keep PLUGIN_* variables of the host out of every test."""
    for name in list(ENV_MAPPINGS) + [CONFIG_FILE_ENV]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def scan_config() -> ScanConfig:
    """Minimal valid scan configuration."""
    return ScanConfig(
        service_url="https://blackduck.example.com",
        auth_token="test-token",
        project_name="test-project",
    )


@pytest.fixture
def plugin_env() -> Dict[str, str]:
    """Environment a CI runner would pass to the plugin."""
    return {
        'PLUGIN_BLACKDUCK_URL': 'https://blackduck.example.com',
        'PLUGIN_BLACKDUCK_TOKEN': 'test-token',
        'PLUGIN_BLACKDUCK_PROJECT': 'test-project',
    }


@pytest.fixture
def test_config() -> Dict[str, Any]:
    """Basic test configuration."""
    return {
        'blackduck': {
            'url': 'https://blackduck.example.com',
            'token': 'file-token',
            'project': 'file-project',
            'offline_mode': False,
            'test_connection': False,
            'offline_bdio': False,
            'trust_certs': True,
            'timeout': 120,
            'scan_mode': 'RAPID',
            'properties': '',
        },
        'system': {
            'execution_timeout': 0,
            'kill_grace_period': 2,
        },
        'logging': {
            'level': 'ERROR',  # Reduce noise in tests
            'format_type': 'text',
            'format': '%(message)s',
        },
    }


@pytest.fixture
def config_file(temp_dir, test_config):
    """Create temporary configuration file."""
    import yaml

    config_file = temp_dir / 'blackduck.yml'
    with open(config_file, 'w') as f:
        yaml.dump(test_config, f)

    return config_file


@pytest.fixture(autouse=True)
def reset_plugin_logging():
    """Undo handlers and levels a LoggerManager installed during a test."""
    yield
    for name in ('blackduck_plugin', 'blackduck_plugin.audit'):
        plugin_logger = logging.getLogger(name)
        for handler in plugin_logger.handlers[:]:
            handler.close()
            plugin_logger.removeHandler(handler)
        plugin_logger.setLevel(logging.NOTSET)
        plugin_logger.propagate = True
