"""Domain layer for ledgerline: parsing, classification and the import workflow."""
