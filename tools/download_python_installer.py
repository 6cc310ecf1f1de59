"""
Download Python Installer

Pre-downloads the official Python Windows installer (.exe) from python.org
so that hosts without internet access can be provisioned with
``pyprovision --installer <path>``.

Usage
-----
    # Download the default version for 64-bit hosts
    python tools/download_python_installer.py

    # Download a specific allowed version
    python tools/download_python_installer.py --version 3.11.9

    # Download the 32-bit installer
    python tools/download_python_installer.py --arch win32

    # Save to a custom directory
    python tools/download_python_installer.py --output-dir C:\\Downloads
"""

import argparse
import sys
from pathlib import Path

from pyprovision.logger import Logger
from pyprovision.python_installer import (
    Architecture,
    PythonInstallerConfig,
    PythonInstallerError,
    PythonInstallerProcessManager,
    validate_requested,
)

_ARCHITECTURES = {
    'amd64': Architecture.X64,
    'win32': Architecture.X86,
}

_DEFAULT_OUTPUT_DIR = Path(__file__).resolve().parents[1] / 'installers'


def main() -> int:
    defaults = PythonInstallerConfig.get_default_config()
    parser = argparse.ArgumentParser(
        description="Download an official Python Windows installer from python.org",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--version",
        default=defaults['version'],
        help=f"Python version to download (default: {defaults['version']})",
    )
    parser.add_argument(
        "--arch",
        default="amd64",
        choices=sorted(_ARCHITECTURES),
        help="Installer architecture (default: amd64)",
    )
    parser.add_argument(
        "--output-dir",
        default=str(_DEFAULT_OUTPUT_DIR),
        help=f"Directory to save the installer (default: {_DEFAULT_OUTPUT_DIR})",
    )
    args = parser.parse_args()

    output_dir = Path(args.output_dir)
    config = PythonInstallerConfig.merge_config(
        defaults,
        {'version': args.version, 'download_dir': str(output_dir)},
    )
    settings = PythonInstallerConfig.build_settings(config)
    Logger.init_logging(output_dir / 'download.log')

    try:
        validate_requested(settings.version, settings.allowed_versions)
        manager = PythonInstallerProcessManager(settings, _ARCHITECTURES[args.arch])
        dest = manager.fetch_installer()
    except PythonInstallerError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(f"Installer saved to: {dest}")
    print(f"Provision offline with:  pyprovision --installer \"{dest}\"")
    return 0


if __name__ == "__main__":
    sys.exit(main())
