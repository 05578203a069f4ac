"""Shared helpers: JSON codec, logging setup and signal-driven serving."""
