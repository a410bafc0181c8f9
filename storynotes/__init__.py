"""Storynotes - release notes from unreleased commits and Shortcut stories."""

__version__ = "0.1.0"
