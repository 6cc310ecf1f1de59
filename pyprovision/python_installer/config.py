"""
PythonInstaller Configuration Management

This module provides configuration management and validation for the Python
provisioning workflow. Values come from three layers, later layers winning:
the built-in defaults, an optional YAML config file, and command-line flags.
The merged dict is frozen into an ``InstallSettings`` instance which is what
the policy, acquisition and installer components receive.
"""

import copy
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .exceptions import PythonInstallerConfigError

# Versions this tool is willing to install
ALLOWED_VERSIONS: Tuple[str, ...] = (
    '3.9.13',
    '3.10.11',
    '3.11.9',
    '3.12.9',
    '3.13.2',
)

DEFAULT_BASE_URL = 'https://www.python.org/ftp/python'
DEFAULT_LOG_NAME = 'pyprovision.log'


@dataclass(frozen=True)
class InstallSettings:
    """Immutable run configuration built by ``PythonInstallerConfig.build_settings``."""

    version: str
    allowed_versions: Tuple[str, ...]
    upgrade: bool
    reinstall: bool
    base_url: str
    download_dir: Path
    installer_path: str
    install_all_users: bool
    add_to_path: bool
    runtime_commands: Tuple[str, ...]
    uninstall_pattern: str
    timeout_seconds: Optional[float]
    log_file: Path
    min_os_version: Tuple[int, int]
    dry_run: bool


class PythonInstallerConfig:
    """
    Configuration manager for provisioning parameters.

    Example:
        >>> config = PythonInstallerConfig.get_default_config()
        >>> PythonInstallerConfig.validate_config({'version': '3.12.9'})
        True
    """

    DEFAULT_CONFIG: Dict[str, Any] = {
        # Target Python version, must be one of allowed_versions
        'version': '3.12.9',
        'allowed_versions': list(ALLOWED_VERSIONS),
        # Install over an older detected version
        'upgrade': True,
        # Remove every registered Python before installing
        'reinstall': False,
        'base_url': DEFAULT_BASE_URL,
        # Scratch directory for the downloaded installer.  Empty = user temp dir.
        'download_dir': '',
        # Pre-downloaded installer .exe path.  If empty, auto-download.
        'installer_path': '',
        'install_all_users': True,
        'add_to_path': True,
        # Commands tried in order when probing the installed version
        'runtime_commands': ['python', 'python3', 'py'],
        # fnmatch pattern applied to registry DisplayName during reinstall
        'uninstall_pattern': 'Python *',
        # Seconds to wait for each installer subprocess.  None = wait forever.
        'timeout_seconds': None,
        # Log file path.  Empty = <user temp dir>/pyprovision.log
        'log_file': '',
        # Minimum Windows (major, minor); 6.3 is Windows 8.1
        'min_os_version': [6, 3],
        # Decide and report only, do not touch the host
        'dry_run': False,
    }

    VALID_PARAMS: set = set(DEFAULT_CONFIG.keys())

    PARAM_TYPES: Dict[str, Any] = {
        'version': str,
        'allowed_versions': (list, tuple),
        'upgrade': bool,
        'reinstall': bool,
        'base_url': str,
        'download_dir': str,
        'installer_path': str,
        'install_all_users': bool,
        'add_to_path': bool,
        'runtime_commands': (list, tuple),
        'uninstall_pattern': str,
        'timeout_seconds': (int, float, type(None)),
        'log_file': str,
        'min_os_version': (list, tuple),
        'dry_run': bool,
    }

    @classmethod
    def get_default_config(cls) -> Dict[str, Any]:
        """Return a deep copy of the default configuration."""
        return copy.deepcopy(cls.DEFAULT_CONFIG)

    @classmethod
    def validate_config(cls, config: Dict[str, Any]) -> bool:
        """
        Validate configuration parameters.

        Only structure is checked here.  Membership of ``version`` in the
        allow-list is a policy decision and is checked by
        ``policy.validate_requested``.

        Args:
            config: Configuration dict to validate.

        Returns:
            True if valid.

        Raises:
            PythonInstallerConfigError: If any parameter is invalid.
        """
        for key, value in config.items():
            if key not in cls.VALID_PARAMS:
                raise PythonInstallerConfigError(f"Unknown config parameter: '{key}'")
            expected_type = cls.PARAM_TYPES.get(key)
            if expected_type and not isinstance(value, expected_type):
                raise PythonInstallerConfigError(
                    f"Parameter '{key}' must be {expected_type}, "
                    f"got {type(value).__name__}"
                )

        if 'timeout_seconds' in config:
            timeout = config['timeout_seconds']
            if isinstance(timeout, bool) or (timeout is not None and timeout <= 0):
                raise PythonInstallerConfigError("timeout_seconds must be > 0 or null")

        for key in ('allowed_versions', 'runtime_commands'):
            if key in config:
                items = config[key]
                if not items or not all(isinstance(item, str) and item for item in items):
                    raise PythonInstallerConfigError(
                        f"{key} must be a non-empty list of strings"
                    )

        if 'min_os_version' in config:
            minimum = config['min_os_version']
            if len(minimum) != 2 or not all(
                isinstance(part, int) and not isinstance(part, bool) for part in minimum
            ):
                raise PythonInstallerConfigError(
                    f"min_os_version must be [major, minor], got {minimum!r}"
                )

        if 'base_url' in config and not config['base_url'].startswith(('http://', 'https://')):
            raise PythonInstallerConfigError(
                f"base_url must be an http(s) URL, got '{config['base_url']}'"
            )

        return True

    @classmethod
    def merge_config(cls, base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge override values into base config.

        Args:
            base:      Base configuration dict.
            overrides: Values to override.

        Returns:
            Merged configuration dict.

        Raises:
            PythonInstallerConfigError: If overrides contain invalid params.
        """
        cls.validate_config(overrides)
        merged = copy.deepcopy(base)
        merged.update(overrides)
        return merged

    @classmethod
    def load_config_file(cls, path: str) -> Dict[str, Any]:
        """
        Read overrides from a YAML file.

        An empty file yields an empty dict.  The top level must be a mapping.

        Raises:
            PythonInstallerConfigError: File missing, unparsable or invalid.
        """
        config_path = Path(path)
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except OSError as exc:
            raise PythonInstallerConfigError(
                f"Cannot read config file {config_path}: {exc}"
            ) from exc
        except yaml.YAMLError as exc:
            raise PythonInstallerConfigError(
                f"Invalid YAML in config file {config_path}: {exc}"
            ) from exc

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise PythonInstallerConfigError(
                f"Config file {config_path} must contain a mapping, "
                f"got {type(data).__name__}"
            )
        cls.validate_config(data)
        return data

    @classmethod
    def build_settings(cls, config: Dict[str, Any]) -> InstallSettings:
        """Validate a full config dict and freeze it into ``InstallSettings``."""
        cls.validate_config(config)
        missing = cls.VALID_PARAMS - set(config)
        if missing:
            raise PythonInstallerConfigError(
                f"Missing config parameters: {', '.join(sorted(missing))}"
            )

        temp_dir = Path(tempfile.gettempdir())
        download_dir = Path(config['download_dir']) if config['download_dir'] else temp_dir
        log_file = Path(config['log_file']) if config['log_file'] else temp_dir / DEFAULT_LOG_NAME

        return InstallSettings(
            version=config['version'],
            allowed_versions=tuple(config['allowed_versions']),
            upgrade=config['upgrade'],
            reinstall=config['reinstall'],
            base_url=config['base_url'].rstrip('/'),
            download_dir=download_dir,
            installer_path=config['installer_path'],
            install_all_users=config['install_all_users'],
            add_to_path=config['add_to_path'],
            runtime_commands=tuple(config['runtime_commands']),
            uninstall_pattern=config['uninstall_pattern'],
            timeout_seconds=config['timeout_seconds'],
            log_file=log_file,
            min_os_version=(config['min_os_version'][0], config['min_os_version'][1]),
            dry_run=config['dry_run'],
        )
