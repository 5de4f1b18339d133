"""Mockflow - document model and mutation engine for UI prototypes."""

__version__ = "0.1.0"
