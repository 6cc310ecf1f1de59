"""
PythonInstaller Package

Provisions a specific Python version on a Windows host: detects what is
installed, decides whether to install, upgrade or skip, downloads the
python.org installer and runs it silently.

Main Components:
- PythonInstallerController:     One provisioning run, start to finish
- PythonInstallerConfig:         Configuration defaults, validation, YAML loading
- PythonInstallerProcessManager: Download / install / uninstall lifecycle
- policy.evaluate:               Pure install/upgrade/skip decision
- probe:                         Installed version, architecture, OS checks
- Custom exceptions for error handling

Usage::

    from pyprovision.python_installer import (
        PythonInstallerConfig,
        PythonInstallerController,
    )

    config = PythonInstallerConfig.get_default_config()
    config = PythonInstallerConfig.merge_config(config, {'version': '3.11.9'})
    settings = PythonInstallerConfig.build_settings(config)
    result = PythonInstallerController(settings).run()
    print(result.decision)
"""

from .config import InstallSettings, PythonInstallerConfig
from .controller import ProvisionResult, PythonInstallerController
from .policy import Decision, evaluate, validate_requested
from .probe import Architecture
from .process_manager import PythonInstallerProcessManager, build_download_url
from .version import PythonVersion
from .exceptions import (
    PythonInstallerError,
    PythonInstallerConfigError,
    PythonInstallerVersionError,
    PythonInstallerHostError,
    PythonInstallerDownloadError,
    PythonInstallerInstallError,
    PythonInstallerProcessError,
    PythonInstallerTimeoutError,
    PythonInstallerElevationError,
)

__all__ = [
    'Architecture',
    'Decision',
    'InstallSettings',
    'ProvisionResult',
    'PythonInstallerConfig',
    'PythonInstallerController',
    'PythonInstallerProcessManager',
    'PythonVersion',
    'build_download_url',
    'evaluate',
    'validate_requested',
    'PythonInstallerError',
    'PythonInstallerConfigError',
    'PythonInstallerVersionError',
    'PythonInstallerHostError',
    'PythonInstallerDownloadError',
    'PythonInstallerInstallError',
    'PythonInstallerProcessError',
    'PythonInstallerTimeoutError',
    'PythonInstallerElevationError',
]
