"""Routine generation and weekly distribution engine for PT exercise plans."""

__version__ = "0.1.0"
