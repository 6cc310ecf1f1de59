"""
PythonInstaller Controller

Drives one provisioning run from start to finish:

    validate version -> check host -> probe -> (reinstall sweep) -> decide
    -> download -> install -> re-probe

Everything runs sequentially in the calling thread.  Elevation is not handled
here; the CLI entry point guards it before building the controller.
"""

from dataclasses import dataclass
from typing import Optional

from pyprovision.logger import get_module_logger, LogResult, LogSection
from .config import InstallSettings
from .policy import Decision, evaluate, validate_requested
from .probe import (
    Architecture,
    detect_architecture,
    detect_installed_version,
    ensure_supported_host,
)
from .process_manager import PythonInstallerProcessManager
from .version import PythonVersion

logger = get_module_logger(__name__)


@dataclass
class ProvisionResult:
    """What a run decided and what it left on the host."""
    decision: Decision
    requested: PythonVersion
    installed_before: Optional[PythonVersion]
    installed_after: Optional[PythonVersion]
    architecture: Architecture
    download_url: str
    dry_run: bool = False


class PythonInstallerController:
    """
    Controller for a single provisioning run.

    Example::

        settings = PythonInstallerConfig.build_settings(config)
        result = PythonInstallerController(settings).run()
        if result.decision is Decision.SKIP_UPGRADE_DISABLED:
            print("A newer Python is available; upgrade is disabled")
    """

    def __init__(self, settings: InstallSettings):
        self._settings = settings
        self._result: Optional[ProvisionResult] = None

    @property
    def settings(self) -> InstallSettings:
        return self._settings

    @property
    def result(self) -> Optional[ProvisionResult]:
        """Outcome of the last ``run()``, or None before it completes."""
        return self._result

    def run(self) -> ProvisionResult:
        """
        Execute the provisioning flow.

        Raises:
            PythonInstallerVersionError:  Requested version not allowed.
            PythonInstallerHostError:     Windows version too old.
            PythonInstallerDownloadError: Installer could not be fetched.
            PythonInstallerInstallError:  No Python detectable after install.
        """
        settings = self._settings
        LogSection(f"Python provisioning: {settings.version}")

        requested = validate_requested(settings.version, settings.allowed_versions)
        ensure_supported_host(settings.min_os_version)

        architecture = detect_architecture()
        process_manager = self._build_process_manager(architecture)

        installed = detect_installed_version(
            settings.runtime_commands, settings.timeout_seconds
        )
        installed_before = installed
        logger.info(
            f"Installed version: {installed if installed else 'none'}; "
            f"requested: {requested}; upgrade={settings.upgrade}; "
            f"reinstall={settings.reinstall}"
        )

        if settings.reinstall and installed is not None:
            if settings.dry_run:
                logger.info("Dry run: would uninstall all registered Python packages")
            else:
                logger.info(f"Reinstall requested: removing Python {installed} and related packages")
                process_manager.uninstall_all()
                installed = detect_installed_version(
                    settings.runtime_commands, settings.timeout_seconds
                )
                if installed is not None:
                    logger.warning(f"Python {installed} still detectable after uninstall sweep")

        decision = evaluate(installed, requested, settings.upgrade, settings.reinstall)
        logger.info(f"Decision: {decision.value}")

        result = ProvisionResult(
            decision=decision,
            requested=requested,
            installed_before=installed_before,
            installed_after=installed,
            architecture=architecture,
            download_url=process_manager.download_url,
            dry_run=settings.dry_run,
        )
        self._result = result

        if decision is Decision.SKIP_UP_TO_DATE:
            if installed is not None and requested < installed:
                logger.info(
                    f"Requested {requested} is older than installed {installed}; "
                    "downgrades are not performed"
                )
            LogResult(True, f"Python {installed} is up to date")
            return result

        if decision is Decision.SKIP_UPGRADE_DISABLED:
            logger.warning(
                f"Python {requested} is newer than installed {installed} but upgrade "
                "is disabled; administrator action required"
            )
            LogResult(True, f"Python {installed} left in place")
            return result

        if settings.dry_run:
            logger.info(f"Dry run: would {decision.value} Python {requested} from {result.download_url}")
            return result

        installer = process_manager.resolve_installer()
        detected = process_manager.run_installer(installer)
        if detected != requested:
            logger.warning(
                f"Detected Python {detected} after installing {requested}; "
                "another interpreter may precede it on PATH"
            )
        result.installed_after = detected
        LogResult(True, f"Python {requested} {decision.value} complete")
        return result

    def _build_process_manager(self, architecture: Architecture) -> PythonInstallerProcessManager:
        """Instantiate a PythonInstallerProcessManager from current settings."""
        return PythonInstallerProcessManager(self._settings, architecture)
