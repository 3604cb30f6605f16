"""Backdated commit history generator."""

__version__ = "0.1.0"
