"""Reconciles spreadsheet timesheets with recorded attendance."""

__version__ = "1.0.0"
