"""Filtered yarn audit runner with advisory exclusions and CI exit codes."""

__version__ = "0.1.0"
