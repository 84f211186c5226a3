"""Click commands for ledgerline."""
