"""
Unit tests for PythonInstallerConfig.
"""

import dataclasses
import tempfile
from pathlib import Path

import pytest

from pyprovision.python_installer.config import (
    ALLOWED_VERSIONS,
    InstallSettings,
    PythonInstallerConfig,
)
from pyprovision.python_installer.exceptions import PythonInstallerConfigError


class TestPythonInstallerConfig:
    """Test suite for PythonInstallerConfig class."""

    # ----- get_default_config -----

    def test_returns_dict(self):
        config = PythonInstallerConfig.get_default_config()
        assert isinstance(config, dict)

    def test_required_keys_present(self):
        config = PythonInstallerConfig.get_default_config()
        for key in ['version', 'allowed_versions', 'upgrade', 'reinstall',
                    'base_url', 'download_dir', 'installer_path',
                    'runtime_commands', 'uninstall_pattern', 'timeout_seconds',
                    'log_file', 'min_os_version', 'dry_run']:
            assert key in config, f"Missing key: {key}"

    def test_defaults(self):
        config = PythonInstallerConfig.get_default_config()
        assert config['version'] in ALLOWED_VERSIONS
        assert config['upgrade'] is True
        assert config['reinstall'] is False
        assert config['timeout_seconds'] is None
        assert config['runtime_commands'] == ['python', 'python3', 'py']

    def test_returns_copy(self):
        """Modifying one copy must not affect another."""
        c1 = PythonInstallerConfig.get_default_config()
        c2 = PythonInstallerConfig.get_default_config()
        c1['allowed_versions'].append('3.99.0')
        assert '3.99.0' not in c2['allowed_versions']

    # ----- validate_config -----

    def test_validate_valid(self, sample_config):
        assert PythonInstallerConfig.validate_config(sample_config) is True

    def test_validate_empty(self):
        assert PythonInstallerConfig.validate_config({}) is True

    def test_validate_unknown_key(self):
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.validate_config({'nonexistent_key': 1})

    def test_validate_wrong_type_upgrade(self):
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.validate_config({'upgrade': 'yes'})

    def test_validate_wrong_type_version(self):
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.validate_config({'version': 3.12})

    def test_validate_timeout_none_allowed(self):
        assert PythonInstallerConfig.validate_config({'timeout_seconds': None}) is True

    def test_validate_timeout_zero_rejected(self):
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.validate_config({'timeout_seconds': 0})

    def test_validate_timeout_bool_rejected(self):
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.validate_config({'timeout_seconds': True})

    def test_validate_empty_allowed_versions(self):
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.validate_config({'allowed_versions': []})

    def test_validate_runtime_commands_non_string(self):
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.validate_config({'runtime_commands': ['python', 3]})

    def test_validate_min_os_version_shape(self):
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.validate_config({'min_os_version': [10]})

    def test_validate_base_url_scheme(self):
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.validate_config({'base_url': 'ftp://python.org'})

    # ----- merge_config -----

    def test_merge_overrides_value(self):
        base = PythonInstallerConfig.get_default_config()
        merged = PythonInstallerConfig.merge_config(base, {'version': '3.11.9'})
        assert merged['version'] == '3.11.9'
        assert base['version'] == '3.12.9'

    def test_merge_invalid_override_raises(self):
        base = PythonInstallerConfig.get_default_config()
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.merge_config(base, {'bad_key': 1})

    # ----- load_config_file -----

    def test_load_yaml_file(self, tmp_path):
        path = tmp_path / 'pyprovision.yaml'
        path.write_text("version: '3.11.9'\nupgrade: false\ntimeout_seconds: 600\n",
                        encoding='utf-8')
        data = PythonInstallerConfig.load_config_file(str(path))
        assert data == {'version': '3.11.9', 'upgrade': False, 'timeout_seconds': 600}

    def test_load_empty_file(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text('', encoding='utf-8')
        assert PythonInstallerConfig.load_config_file(str(path)) == {}

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.load_config_file(str(tmp_path / 'missing.yaml'))

    def test_load_non_mapping(self, tmp_path):
        path = tmp_path / 'list.yaml'
        path.write_text('- 3.11.9\n', encoding='utf-8')
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.load_config_file(str(path))

    def test_load_invalid_yaml(self, tmp_path):
        path = tmp_path / 'broken.yaml'
        path.write_text('version: [3.11\n', encoding='utf-8')
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.load_config_file(str(path))

    def test_load_unknown_key(self, tmp_path):
        path = tmp_path / 'unknown.yaml'
        path.write_text('colour: blue\n', encoding='utf-8')
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.load_config_file(str(path))

    # ----- build_settings -----

    def test_build_settings_returns_frozen(self, sample_config):
        settings = PythonInstallerConfig.build_settings(sample_config)
        assert isinstance(settings, InstallSettings)
        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.version = '3.9.13'

    def test_build_settings_converts_sequences(self, sample_config):
        settings = PythonInstallerConfig.build_settings(sample_config)
        assert isinstance(settings.allowed_versions, tuple)
        assert settings.runtime_commands == ('python', 'python3', 'py')
        assert settings.min_os_version == (6, 3)

    def test_build_settings_empty_dirs_use_temp(self):
        config = PythonInstallerConfig.get_default_config()
        settings = PythonInstallerConfig.build_settings(config)
        temp_dir = Path(tempfile.gettempdir())
        assert settings.download_dir == temp_dir
        assert settings.log_file == temp_dir / 'pyprovision.log'

    def test_build_settings_strips_trailing_slash(self, sample_config):
        sample_config['base_url'] = 'https://mirror.example.com/python/'
        settings = PythonInstallerConfig.build_settings(sample_config)
        assert settings.base_url == 'https://mirror.example.com/python'

    def test_build_settings_missing_key(self, sample_config):
        del sample_config['upgrade']
        with pytest.raises(PythonInstallerConfigError):
            PythonInstallerConfig.build_settings(sample_config)
