"""pyprovision: install a pinned Python version on Windows hosts."""

__version__ = '1.0.0'
