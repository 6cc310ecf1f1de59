"""
pyprovision command line

Usage
-----
    # Install the default version if nothing newer is present
    pyprovision

    # Install a specific allowed version, never upgrading an older one
    pyprovision --version 3.11.9 --no-upgrade

    # Remove every registered Python, then install
    pyprovision --version 3.12.9 --reinstall

    # Report the decision only
    pyprovision --dry-run

Exit status
-----------
    0  installed, upgraded, or nothing to do
    1  unexpected error
    2  usage error (argparse)
    3  version not in the allow-list
    4  unsupported Windows version
    5  download failed
    6  installation failed
    7  elevation refused
    8  configuration error
"""

import argparse
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

from pyprovision import __version__
from pyprovision.logger import Logger, LogResult, get_module_logger
from pyprovision.python_installer.config import (
    DEFAULT_LOG_NAME,
    InstallSettings,
    PythonInstallerConfig,
)
from pyprovision.python_installer.controller import PythonInstallerController
from pyprovision.python_installer.exceptions import (
    PythonInstallerConfigError,
    PythonInstallerDownloadError,
    PythonInstallerElevationError,
    PythonInstallerError,
    PythonInstallerHostError,
    PythonInstallerInstallError,
    PythonInstallerVersionError,
)
from pyprovision.python_installer.privilege import is_elevated, relaunch_elevated

logger = get_module_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_INVALID_VERSION = 3
EXIT_UNSUPPORTED_HOST = 4
EXIT_DOWNLOAD_FAILED = 5
EXIT_INSTALL_FAILED = 6
EXIT_ELEVATION_FAILED = 7
EXIT_CONFIG_ERROR = 8


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pyprovision',
        description='Install a pinned Python version on this Windows host.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        '--version', dest='version', default=None,
        help='Python version to provision, e.g. 3.12.9 (must be in the allow-list)',
    )
    parser.add_argument(
        '--no-upgrade', dest='upgrade', action='store_const', const=False, default=None,
        help='Leave an older installed Python in place instead of upgrading it',
    )
    parser.add_argument(
        '--reinstall', dest='reinstall', action='store_const', const=True, default=None,
        help='Uninstall every registered Python before installing',
    )
    parser.add_argument(
        '--dry-run', dest='dry_run', action='store_const', const=True, default=None,
        help='Probe and decide only; do not download, install or uninstall',
    )
    parser.add_argument(
        '--installer', dest='installer_path', default=None,
        help='Use a pre-downloaded installer .exe instead of downloading',
    )
    parser.add_argument(
        '--config', dest='config_file', default=None,
        help='YAML file with configuration overrides',
    )
    parser.add_argument(
        '--log-file', dest='log_file', default=None,
        help=f'Log file path (default: <temp>/{DEFAULT_LOG_NAME})',
    )
    parser.add_argument(
        '--no-elevate', action='store_true',
        help='Do not check for or request administrator rights',
    )
    parser.add_argument(
        '-V', '--tool-version', action='version', version=f'pyprovision {__version__}',
    )
    return parser


def load_settings(args: argparse.Namespace) -> InstallSettings:
    """
    Merge defaults, the optional YAML file and command-line flags.

    Raises:
        PythonInstallerConfigError: Invalid file or values.
    """
    config = PythonInstallerConfig.get_default_config()
    if args.config_file:
        file_overrides = PythonInstallerConfig.load_config_file(args.config_file)
        config = PythonInstallerConfig.merge_config(config, file_overrides)

    cli_overrides = {
        key: getattr(args, key)
        for key in ('version', 'upgrade', 'reinstall', 'dry_run', 'installer_path', 'log_file')
        if getattr(args, key) is not None
    }
    config = PythonInstallerConfig.merge_config(config, cli_overrides)
    return PythonInstallerConfig.build_settings(config)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point.  Returns the process exit status."""
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
    except PythonInstallerConfigError as exc:
        fallback = Path(args.log_file) if args.log_file else Path(tempfile.gettempdir()) / DEFAULT_LOG_NAME
        Logger.init_logging(fallback)
        logger.error(f"Configuration error: {exc}")
        return EXIT_CONFIG_ERROR

    Logger.init_logging(settings.log_file)

    if not args.no_elevate and not is_elevated():
        try:
            relaunch_elevated(argv)
        except PythonInstallerElevationError as exc:
            logger.error(f"Elevation error: {exc}")
            return EXIT_ELEVATION_FAILED
        logger.info("Continuing in the elevated process")
        return EXIT_OK

    controller = PythonInstallerController(settings)
    try:
        controller.run()
    except PythonInstallerVersionError as exc:
        logger.error(f"Invalid version: {exc}")
        return EXIT_INVALID_VERSION
    except PythonInstallerHostError as exc:
        logger.error(f"Unsupported host: {exc}")
        return EXIT_UNSUPPORTED_HOST
    except PythonInstallerDownloadError as exc:
        LogResult(False, f"Download error: {exc}")
        return EXIT_DOWNLOAD_FAILED
    except PythonInstallerInstallError as exc:
        LogResult(False, f"Installation error: {exc}")
        return EXIT_INSTALL_FAILED
    except PythonInstallerError as exc:
        LogResult(False, f"Provisioning error: {exc}")
        return EXIT_ERROR
    except Exception as exc:
        logger.error(f"Unexpected error: {exc}", exc_info=True)
        return EXIT_ERROR

    return EXIT_OK
