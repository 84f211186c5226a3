"""Command line interface for ledgerline."""
