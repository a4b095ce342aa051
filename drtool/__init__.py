"""Scan files for simulator dataref and command names, track their values and search them."""

__version__ = "0.1.0"