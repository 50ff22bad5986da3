"""Applicant pipeline engine: filtering, sorting, transitions, analytics and export."""

__version__ = "0.1.0"
