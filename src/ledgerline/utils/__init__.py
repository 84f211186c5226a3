"""Utility functions for ledgerline."""

from ledgerline.utils.date_parser import parse_date
from ledgerline.utils.amount_parser import parse_amount
from ledgerline.utils.chunking import BATCH_SIZE, chunk, map_chunked, update_chunked

__all__ = [
    "parse_date",
    "parse_amount",
    "BATCH_SIZE",
    "chunk",
    "map_chunked",
    "update_chunked",
]
