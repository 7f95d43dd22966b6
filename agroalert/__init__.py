"""Agroalert: farmer and extension-officer dashboard."""

__version__ = "0.1.0"
