"""Unified Data Repository procedures, in-memory storage and notifications."""

__version__ = "1.0.0"