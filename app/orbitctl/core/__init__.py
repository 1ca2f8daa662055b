"""Shared helpers: paths, theme, and logging setup."""
