"""
PythonInstaller Custom Exceptions

This module defines custom exception classes for provisioning operations.
All exceptions inherit from PythonInstallerError base class.
"""


class PythonInstallerError(Exception):
    """Base exception for all PythonInstaller-related errors."""
    pass


class PythonInstallerConfigError(PythonInstallerError):
    """
    Configuration error.
    Raised when invalid config params are provided or a config file cannot be read.
    """
    pass


class PythonInstallerVersionError(PythonInstallerError):
    """
    Version error.
    Raised when the requested Python version is malformed or not in the allow-list.
    """
    pass


class PythonInstallerHostError(PythonInstallerError):
    """
    Unsupported host.
    Raised when the Windows version is below the supported minimum.
    """
    pass


class PythonInstallerDownloadError(PythonInstallerError):
    """
    Download error.
    Raised when fetching the installer does not produce the expected local file.
    """
    pass


class PythonInstallerInstallError(PythonInstallerError):
    """
    Installation error.
    Raised when no Python version is detectable after running the installer.
    """
    pass


class PythonInstallerProcessError(PythonInstallerError):
    """
    Process control error.
    Raised when the installer subprocess cannot be started.
    """
    pass


class PythonInstallerTimeoutError(PythonInstallerError):
    """
    Timeout error.
    Raised when an installer subprocess exceeds the configured timeout.
    """
    pass


class PythonInstallerElevationError(PythonInstallerError):
    """
    Elevation error.
    Raised when the elevated re-launch is refused or cannot be started.
    """
    pass
