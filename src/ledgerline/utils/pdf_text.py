"""PDF text extraction for statement imports."""

from io import BytesIO
from typing import Union
from pathlib import Path

import pdfplumber


def extract_pdf_text(source: Union[str, Path, bytes]) -> str:
    """Extract the plain text of every page of a PDF.

    Args:
        source: File path or raw PDF bytes

    Returns:
        Page texts joined with newlines; pages without a text layer are skipped
    """
    if isinstance(source, bytes):
        source = BytesIO(source)

    text_parts = []
    with pdfplumber.open(source) as pdf:
        for page in pdf.pages:
            text = page.extract_text()
            if text:
                text_parts.append(text)
    return "\n".join(text_parts)
