"""
Version Policy

Pure decision logic: given what is installed and what was requested, decide
whether to install, upgrade or leave the host alone.  Nothing in this module
touches the host.

Rules, in order:
    1. ``reinstall`` forces the installed version to None.  The uninstall
       sweep itself is performed by the controller before evaluation.
    2. ``installed is None``  -> INSTALL
    3. requested <= installed -> SKIP_UP_TO_DATE (downgrades included)
    4. requested >  installed and ``upgrade``     -> UPGRADE
    5. requested >  installed and not ``upgrade`` -> SKIP_UPGRADE_DISABLED
"""

from enum import Enum
from typing import Iterable, Optional

from .exceptions import PythonInstallerVersionError
from .version import PythonVersion


class Decision(Enum):
    """Outcome of policy evaluation."""
    INSTALL = 'install'
    UPGRADE = 'upgrade'
    SKIP_UP_TO_DATE = 'skip-up-to-date'
    SKIP_UPGRADE_DISABLED = 'skip-upgrade-disabled'

    @property
    def requires_install(self) -> bool:
        """INSTALL and UPGRADE share the download + install path."""
        return self in (Decision.INSTALL, Decision.UPGRADE)


def validate_requested(version: str, allowed: Iterable[str]) -> PythonVersion:
    """
    Check *version* against the allow-list and parse it.

    Raises:
        PythonInstallerVersionError: Not in the allow-list, or malformed.
    """
    allowed = tuple(allowed)
    if version not in allowed:
        raise PythonInstallerVersionError(
            f"Python version '{version}' is not supported. "
            f"Allowed versions: {', '.join(allowed)}"
        )
    return PythonVersion.parse(version)


def evaluate(
    installed: Optional[PythonVersion],
    requested: PythonVersion,
    upgrade: bool,
    reinstall: bool,
) -> Decision:
    """Decide what to do.  Deterministic, no side effects."""
    if reinstall:
        installed = None

    if installed is None:
        return Decision.INSTALL

    if requested <= installed:
        return Decision.SKIP_UP_TO_DATE

    if upgrade:
        return Decision.UPGRADE
    return Decision.SKIP_UPGRADE_DISABLED
