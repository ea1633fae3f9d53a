"""Completion engine for the Fluxon scripting language."""

__version__ = "0.1.0"
