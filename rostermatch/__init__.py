"""Roster Match: reconcile a student roster against hardship category rosters."""

__version__ = "1.0.0"
