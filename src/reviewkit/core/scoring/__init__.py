"""Weighted multi-criteria scoring and the built-in scoring schemes."""
