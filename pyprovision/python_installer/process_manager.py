"""
PythonInstaller Process Manager

Handles the host-changing side of provisioning on Windows:
  - Download the official Python installer (.exe) to a scratch path
  - Run the silent installation and re-probe to confirm it worked
  - Sweep every registered Python package with its silent uninstaller

Download URL pattern (official python.org):
    https://www.python.org/ftp/python/<version>/python-<version><suffix>.exe

where <suffix> is ``-amd64`` on 64-bit hosts and empty on 32-bit hosts.

Silent install switches:
    /quiet InstallAllUsers=1 PrependPath=1
"""

import fnmatch
import subprocess
import urllib.request
from pathlib import Path
from typing import List, NamedTuple, Optional

from pyprovision.logger import get_module_logger
from .config import InstallSettings
from .exceptions import (
    PythonInstallerDownloadError,
    PythonInstallerInstallError,
    PythonInstallerProcessError,
    PythonInstallerTimeoutError,
)
from .probe import Architecture, detect_installed_version, refresh_path_from_registry
from .version import PythonVersion

logger = get_module_logger(__name__)

_DOWNLOAD_URL_TEMPLATE = '{base_url}/{version}/python-{version}{suffix}.exe'

# Uninstall registrations live under these keys in each hive
_UNINSTALL_KEYS = [
    ('HKEY_LOCAL_MACHINE', r'SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall'),
    ('HKEY_LOCAL_MACHINE', r'SOFTWARE\WOW6432Node\Microsoft\Windows\CurrentVersion\Uninstall'),
    ('HKEY_CURRENT_USER', r'SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall'),
]


class UninstallEntry(NamedTuple):
    """One registered package and the command that removes it silently."""
    display_name: str
    command: str


def build_download_url(version: str, architecture: Architecture, base_url: str) -> str:
    """Return the python.org installer URL for *version* on *architecture*."""
    return _DOWNLOAD_URL_TEMPLATE.format(
        base_url=base_url.rstrip('/'), version=version, suffix=architecture.suffix
    )


def _silent_uninstall_command(product_code: str, values: dict) -> Optional[str]:
    """Build the quiet removal command for one Uninstall registry entry."""
    if values.get('WindowsInstaller') == 1 and product_code.startswith('{'):
        return f'MsiExec.exe /x {product_code} /quiet /norestart'
    if values.get('QuietUninstallString'):
        return values['QuietUninstallString']
    if values.get('UninstallString'):
        return f"{values['UninstallString']} /quiet"
    return None


def find_registered_installs(pattern: str = 'Python *') -> List[UninstallEntry]:
    """
    List registered packages whose DisplayName matches *pattern* (fnmatch).

    Entries without any uninstall command are skipped.  A command seen in
    more than one registry view is returned once.
    """
    import winreg

    entries: List[UninstallEntry] = []
    seen = set()
    for hive_name, root in _UNINSTALL_KEYS:
        hive = getattr(winreg, hive_name)
        try:
            root_key = winreg.OpenKey(hive, root)
        except OSError:
            continue

        with root_key:
            index = 0
            while True:
                try:
                    product_code = winreg.EnumKey(root_key, index)
                except OSError:
                    break
                index += 1

                values = {}
                try:
                    with winreg.OpenKey(root_key, product_code) as key:
                        for name in ('DisplayName', 'WindowsInstaller',
                                     'QuietUninstallString', 'UninstallString'):
                            try:
                                values[name], _ = winreg.QueryValueEx(key, name)
                            except OSError:
                                pass
                except OSError:
                    continue

                display_name = values.get('DisplayName')
                if not display_name or not fnmatch.fnmatch(display_name, pattern):
                    continue

                command = _silent_uninstall_command(product_code, values)
                if command is None:
                    logger.warning(f"No uninstall command registered for '{display_name}'")
                    continue
                if command in seen:
                    continue
                seen.add(command)
                entries.append(UninstallEntry(display_name, command))

    return entries


class PythonInstallerProcessManager:
    """
    Runs acquisition, installation and uninstallation for one settings object.

    Args:
        settings:     Frozen run configuration.
        architecture: Host architecture from the probe.

    Example:
        >>> pm = PythonInstallerProcessManager(settings, Architecture.X64)
        >>> installer = pm.fetch_installer()
        >>> pm.run_installer(installer)
        PythonVersion(major=3, minor=12, patch=9)
    """

    def __init__(self, settings: InstallSettings, architecture: Architecture):
        self.settings = settings
        self.architecture = architecture

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    @property
    def download_url(self) -> str:
        return build_download_url(
            self.settings.version, self.architecture, self.settings.base_url
        )

    @property
    def scratch_path(self) -> Path:
        """Deterministic local path of the downloaded installer."""
        filename = f"python-{self.settings.version}{self.architecture.suffix}.exe"
        return self.settings.download_dir / filename

    def fetch_installer(self) -> Path:
        """
        Download the installer to ``scratch_path``.

        A file left at that path by an interrupted earlier run is deleted
        first.

        Raises:
            PythonInstallerDownloadError: Fetch failed or produced no file.
        """
        dest = self.scratch_path
        self._remove_artifact(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)

        url = self.download_url
        logger.info(f"Downloading Python installer from {url} -> {dest}")
        try:
            urllib.request.urlretrieve(url, dest)
        except Exception as exc:
            self._remove_artifact(dest)
            raise PythonInstallerDownloadError(
                f"Failed to download Python installer from {url}: {exc}"
            ) from exc

        if not dest.is_file():
            raise PythonInstallerDownloadError(
                f"Download finished but no installer found at {dest}"
            )
        logger.info(f"Download complete: {dest}")
        return dest

    def resolve_installer(self) -> Path:
        """
        Return the installer to run: the configured ``installer_path`` if set,
        otherwise a fresh download.

        Raises:
            PythonInstallerDownloadError: Provided path missing or download failed.
        """
        if self.settings.installer_path:
            provided = Path(self.settings.installer_path)
            if not provided.is_file():
                raise PythonInstallerDownloadError(
                    f"Installer not found at provided path: {provided}"
                )
            logger.info(f"Using provided installer: {provided}")
            return provided
        return self.fetch_installer()

    # ------------------------------------------------------------------
    # Installation
    # ------------------------------------------------------------------

    def install_command(self, installer: Path) -> List[str]:
        cmd = [str(installer), '/quiet']
        cmd.append('InstallAllUsers=1' if self.settings.install_all_users else 'InstallAllUsers=0')
        if self.settings.add_to_path:
            cmd.append('PrependPath=1')
        return cmd

    def run_installer(self, installer: Path) -> PythonVersion:
        """
        Run the installer silently and confirm a Python is now detectable.

        The installer's exit code is logged but not trusted; success means the
        re-probe finds a version.  A downloaded installer is deleted afterwards
        whatever the outcome; a user-provided one is left in place.

        Raises:
            PythonInstallerProcessError:  Installer could not be started.
            PythonInstallerTimeoutError:  ``timeout_seconds`` exceeded.
            PythonInstallerInstallError:  No version detectable afterwards.
        """
        cmd = self.install_command(installer)
        logger.info(f"Running installer: {' '.join(cmd)}")
        try:
            result = self._run(cmd, what='Installer')
            logger.info(f"Installer exited with code {result.returncode}")

            refresh_path_from_registry()
            detected = detect_installed_version(
                self.settings.runtime_commands, self.settings.timeout_seconds
            )
            if detected is None:
                raise PythonInstallerInstallError(
                    f"Installation of Python {self.settings.version} failed: "
                    "no Python version detectable after running the installer"
                )
            logger.info(f"Verified install: Python {detected}")
            return detected
        finally:
            if not self.settings.installer_path:
                self._remove_artifact(installer)

    # ------------------------------------------------------------------
    # Uninstallation
    # ------------------------------------------------------------------

    def uninstall_all(self) -> int:
        """
        Silently remove every registered package matching ``uninstall_pattern``.

        Entries are processed one at a time.  A failing entry is logged and
        the sweep moves on.

        Returns:
            Number of entries an uninstall was attempted for.
        """
        entries = find_registered_installs(self.settings.uninstall_pattern)
        logger.info(
            f"Found {len(entries)} registered package(s) matching "
            f"'{self.settings.uninstall_pattern}'"
        )
        for entry in entries:
            logger.info(f"Uninstalling '{entry.display_name}': {entry.command}")
            try:
                result = self._run(entry.command, what='Uninstaller', shell=True)
            except (PythonInstallerProcessError, PythonInstallerTimeoutError) as exc:
                logger.warning(f"Uninstall of '{entry.display_name}' failed: {exc}")
                continue
            if result.returncode != 0:
                logger.warning(
                    f"Uninstall of '{entry.display_name}' exited with code {result.returncode}"
                )

        refresh_path_from_registry()
        return len(entries)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run(self, cmd, what: str, shell: bool = False) -> subprocess.CompletedProcess:
        timeout = self.settings.timeout_seconds
        try:
            return subprocess.run(cmd, capture_output=True, shell=shell, timeout=timeout)
        except subprocess.TimeoutExpired:
            raise PythonInstallerTimeoutError(f"{what} timed out after {timeout}s")
        except OSError as exc:
            raise PythonInstallerProcessError(f"{what} subprocess error: {exc}") from exc

    @staticmethod
    def _remove_artifact(path: Path) -> None:
        try:
            if path.exists():
                path.unlink()
                logger.debug(f"Removed installer artifact: {path}")
        except OSError as exc:
            logger.warning(f"Could not remove installer artifact {path}: {exc}")
