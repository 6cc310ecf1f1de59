"""
Python version triple.

Versions are compared numerically component by component
(major, then minor, then patch). Pre-release and build suffixes are not
supported; ``"3.10.11"`` sorts above ``"3.9.13"``.
"""

import re
from typing import NamedTuple, Optional

from .exceptions import PythonInstallerVersionError

# First dotted triple in arbitrary text, e.g. "Python 3.10.11"
VERSION_PATTERN = re.compile(r'(\d+)\.(\d+)\.(\d+)')


class PythonVersion(NamedTuple):
    """Parsed ``major.minor.patch`` version with numeric ordering."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> 'PythonVersion':
        """
        Parse an exact dotted triple.

        Raises:
            PythonInstallerVersionError: If *text* is not ``MAJOR.MINOR.PATCH``.
        """
        match = VERSION_PATTERN.fullmatch(text.strip())
        if not match:
            raise PythonInstallerVersionError(
                f"version must be 'MAJOR.MINOR.PATCH', got '{text}'"
            )
        return cls(*(int(part) for part in match.groups()))

    @classmethod
    def search(cls, text: str) -> Optional['PythonVersion']:
        """Return the first dotted triple found in *text*, or None."""
        match = VERSION_PATTERN.search(text or '')
        if not match:
            return None
        return cls(*(int(part) for part in match.groups()))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
