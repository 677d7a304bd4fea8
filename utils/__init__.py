"""Shared helpers for HTTP access, files and logging."""
