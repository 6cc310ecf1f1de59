"""
Privilege Guard

The python.org installer needs administrator rights for an all-users
install.  ``is_elevated`` checks the current token; ``relaunch_elevated``
hands the same invocation over to a new elevated process.  Only the CLI
entry point calls ``relaunch_elevated``; the original process must exit
right after the handoff.
"""

import ctypes
import os
import subprocess
import sys
from typing import Sequence

from pyprovision.logger import get_module_logger
from .exceptions import PythonInstallerElevationError

logger = get_module_logger(__name__)

# ShellExecuteW returns a value > 32 on success
_SHELL_EXECUTE_OK = 32
_SW_SHOWNORMAL = 1


def is_elevated() -> bool:
    """Return True if the current process has administrator privileges."""
    try:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())
    except (AttributeError, OSError):
        return False


def relaunch_elevated(args: Sequence[str]) -> None:
    """
    Start ``python -m pyprovision <args>`` through the ``runas`` verb.

    The elevated process starts in the current working directory so that
    relative path arguments resolve to the same files.

    Args:
        args: Command-line arguments of the current invocation (without argv[0]).

    Raises:
        PythonInstallerElevationError: UAC refused or the shell call failed.
    """
    params = subprocess.list2cmdline(['-m', 'pyprovision', *args])
    cwd = os.getcwd()
    logger.info(f"Re-launching elevated: {sys.executable} {params}")
    try:
        rc = ctypes.windll.shell32.ShellExecuteW(
            None, 'runas', sys.executable, params, cwd, _SW_SHOWNORMAL
        )
    except (AttributeError, OSError) as exc:
        raise PythonInstallerElevationError(f"Cannot request elevation: {exc}") from exc

    if rc <= _SHELL_EXECUTE_OK:
        raise PythonInstallerElevationError(
            f"Elevated re-launch was refused (ShellExecuteW returned {rc})"
        )
