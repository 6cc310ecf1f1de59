"""
PythonInstaller Integration Test Fixtures and Configuration

Requirements
------------
- Real Windows environment
- Administrator privileges (all-users install and registry sweep need elevation)
- Internet access to python.org  OR  a pre-downloaded installer via env var

Environment-variable overrides
-------------------------------
PYPROVISION_VERSION              Target Python version (default: config default)
PYPROVISION_INSTALLER_PATH       Path to a pre-downloaded .exe (skips download)
PYPROVISION_ALLOW_HOST_CHANGES   Set to 1 to run tests that install/uninstall

Run integration tests
---------------------
    pytest tests/integration/pyprovision/ -v -m "integration"

Skip integration tests
----------------------
    pytest ... -m "not integration"
"""

import os
import platform
import urllib.request
from typing import Any, Dict

import pytest

from pyprovision.python_installer.config import PythonInstallerConfig
from pyprovision.python_installer.privilege import is_elevated


def _can_reach_python_org(timeout: int = 10) -> bool:
    """Return True if python.org download server is reachable."""
    url = "https://www.python.org/ftp/python/"
    try:
        req = urllib.request.Request(url, method='HEAD')
        urllib.request.urlopen(req, timeout=timeout)
        return True
    except OSError:
        return False


@pytest.fixture(scope="session")
def provision_env() -> Dict[str, Any]:
    """Session configuration read from environment variables."""
    defaults = PythonInstallerConfig.get_default_config()
    return {
        'version': os.getenv("PYPROVISION_VERSION", defaults['version']),
        'installer_path': os.getenv("PYPROVISION_INSTALLER_PATH", ""),
        'allow_host_changes': os.getenv("PYPROVISION_ALLOW_HOST_CHANGES") == "1",
    }


@pytest.fixture(scope="session")
def check_environment(provision_env):
    """
    Guard fixture: skip the session when the environment is not suitable.

    Checks (in order):
      1. Running on Windows
      2. Administrator privileges
    """
    if platform.system() != 'Windows':
        pytest.skip("pyprovision integration tests require Windows.")
    if not is_elevated():
        pytest.skip("pyprovision integration tests must be run as Administrator.")
    return provision_env


@pytest.fixture(scope="session")
def network_or_installer(check_environment):
    """Skip when neither a local installer nor python.org is available."""
    if not check_environment['installer_path'] and not _can_reach_python_org():
        pytest.skip(
            "No pre-downloaded installer and python.org is not reachable. "
            "Run:  python tools/download_python_installer.py  and set "
            "PYPROVISION_INSTALLER_PATH."
        )
    return check_environment


@pytest.fixture
def make_settings(check_environment, tmp_path):
    """Factory: settings with scratch and log files under tmp_path."""
    def _make(**overrides):
        config = PythonInstallerConfig.get_default_config()
        config.update({
            'version': check_environment['version'],
            'download_dir': str(tmp_path / 'scratch'),
            'log_file': str(tmp_path / 'pyprovision.log'),
        })
        config = PythonInstallerConfig.merge_config(config, overrides)
        return PythonInstallerConfig.build_settings(config)
    return _make
