"""Maintenance tooling for the GitHub repository used as a test sandbox."""

__version__ = "1.0.0"
