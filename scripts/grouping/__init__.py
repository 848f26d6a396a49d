"""Grouping passes over parsed export records."""
