"""
Environment Probe

Read-only detection of host state:
  - the Python version currently reachable on PATH (if any)
  - the processor address width (selects the installer flavour)
  - the Windows version (gates unsupported hosts)

Absence of Python is an expected outcome, so ``detect_installed_version``
never raises.  Architecture and OS queries go through WMI.
"""

import os
import shutil
import subprocess
from enum import Enum
from typing import Iterable, Optional, Tuple

from pyprovision.logger import get_module_logger
from .exceptions import PythonInstallerHostError
from .version import PythonVersion

logger = get_module_logger(__name__)

DEFAULT_RUNTIME_COMMANDS: Tuple[str, ...] = ('python', 'python3', 'py')

# Registry locations of the persisted PATH
_MACHINE_ENV_KEY = r'SYSTEM\CurrentControlSet\Control\Session Manager\Environment'
_USER_ENV_KEY = 'Environment'


class Architecture(Enum):
    """Host processor width and the matching installer file suffix."""
    X86 = ''
    X64 = '-amd64'

    @property
    def suffix(self) -> str:
        return self.value


def _wmi_connection():
    """Open a WMI connection to the local ``root/cimv2`` namespace."""
    import wmi
    return wmi.WMI()


def detect_installed_version(
    commands: Iterable[str] = DEFAULT_RUNTIME_COMMANDS,
    timeout: Optional[float] = None,
) -> Optional[PythonVersion]:
    """
    Return the version reported by the first Python command found on PATH.

    Only the first resolvable command is executed.  Returns None when no
    command resolves, the command cannot be run, or its output holds no
    ``X.Y.Z`` pattern.  *timeout* caps the ``--version`` call; None waits
    as long as the command runs.  Undecodable output bytes are replaced.
    """
    for name in commands:
        exe = shutil.which(name)
        if not exe:
            logger.debug(f"Probe: '{name}' not found on PATH")
            continue

        logger.debug(f"Probe: running {exe} --version")
        try:
            result = subprocess.run(
                [exe, '--version'],
                capture_output=True,
                text=True,
                errors='replace',
                timeout=timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.warning(f"Probe: could not execute '{exe}': {exc}")
            return None

        output = (result.stdout or '') + (result.stderr or '')
        version = PythonVersion.search(output)
        if version is None:
            logger.info(f"Probe: no version found in output of '{name}': {output.strip()!r}")
        return version

    logger.info("Probe: no Python command found on PATH")
    return None


def detect_architecture() -> Architecture:
    """Map the processor AddressWidth to an installer architecture."""
    processors = _wmi_connection().Win32_Processor()
    width = int(processors[0].AddressWidth) if processors else 0
    arch = Architecture.X64 if width == 64 else Architecture.X86
    logger.info(f"Processor address width: {width} -> {arch.name}")
    return arch


def detect_os_version() -> Tuple[int, int, int]:
    """Return the Windows version as ``(major, minor, build)``."""
    os_info = _wmi_connection().Win32_OperatingSystem()[0]
    parts = [int(part) for part in str(os_info.Version).split('.')[:3]]
    parts += [0] * (3 - len(parts))
    logger.info(f"Host OS: {os_info.Caption} ({os_info.Version})")
    return parts[0], parts[1], parts[2]


def ensure_supported_host(minimum: Tuple[int, int] = (6, 3)) -> None:
    """
    Fail when the host Windows version is older than *minimum*.

    Raises:
        PythonInstallerHostError: Host below ``minimum`` (major, minor).
    """
    major, minor, build = detect_os_version()
    if (major, minor) < tuple(minimum):
        raise PythonInstallerHostError(
            f"Windows {major}.{minor}.{build} is not supported; "
            f"{minimum[0]}.{minimum[1]} or newer is required"
        )


def refresh_path_from_registry() -> None:
    """
    Reload ``PATH`` for this process from the machine and user environment.

    An installer run with ``PrependPath=1`` only updates the registry, so the
    running process would otherwise keep probing the stale ``PATH``.
    """
    import winreg

    entries = []
    for hive, subkey in (
        (winreg.HKEY_LOCAL_MACHINE, _MACHINE_ENV_KEY),
        (winreg.HKEY_CURRENT_USER, _USER_ENV_KEY),
    ):
        try:
            with winreg.OpenKey(hive, subkey) as key:
                value, _ = winreg.QueryValueEx(key, 'Path')
        except OSError:
            continue
        if value:
            entries.append(winreg.ExpandEnvironmentStrings(value))

    if entries:
        os.environ['PATH'] = os.pathsep.join(entries)
        logger.debug(f"PATH refreshed from registry: {os.environ['PATH']}")
