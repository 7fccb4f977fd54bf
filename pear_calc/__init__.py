"""PEAR production carbon calculator: emission-factor engine, CLI and helpers."""

__version__ = "1.0.0"
