"""Ledgerline - bank CSV and statement import pipeline."""

__version__ = "0.1.0"
