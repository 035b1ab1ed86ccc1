"""Vole, a safe rule-based cleanup utility for Linux."""

__version__ = "0.1.0"
