"""
Pytest configuration and shared fixtures for PythonInstaller unit tests.
"""

import pytest

from pyprovision.python_installer.config import PythonInstallerConfig


@pytest.fixture
def sample_config(tmp_path):
    """Full default configuration pointing scratch and log files at tmp_path."""
    config = PythonInstallerConfig.get_default_config()
    config['download_dir'] = str(tmp_path / 'scratch')
    config['log_file'] = str(tmp_path / 'pyprovision.log')
    return config


@pytest.fixture
def make_settings(sample_config):
    """Factory: build InstallSettings from the sample config plus overrides."""
    def _make(**overrides):
        config = PythonInstallerConfig.merge_config(sample_config, overrides)
        return PythonInstallerConfig.build_settings(config)
    return _make
