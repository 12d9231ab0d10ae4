"""Candidate bulk upload: spreadsheet -> normalized candidates -> platform API."""

__version__ = "0.1.0"
