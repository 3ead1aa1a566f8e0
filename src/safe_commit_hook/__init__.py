"""Pre-commit guard that blocks commits of files matching risky name patterns."""

__version__ = "0.1.0"
