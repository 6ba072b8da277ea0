"""Shared helpers: logging, tracing and subprocess calls."""
