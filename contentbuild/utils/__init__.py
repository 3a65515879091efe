"""Shared helpers: logging setup and diagnostic message templates."""
