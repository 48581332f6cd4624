"""
CII to UBL field mapping.

The engine resolves the document kind, then runs one mapper per section of
the EN 16931 semantic model.
"""

from .engine import SECTION_MAPPERS, CIIToUBLConverter
from .type_resolver import (
    CREDIT_NOTE_TYPE_CODES,
    INVOICE_TYPE_CODES,
    resolve_document_kind,
)

__all__ = [
    "SECTION_MAPPERS",
    "CIIToUBLConverter",
    "CREDIT_NOTE_TYPE_CODES",
    "INVOICE_TYPE_CODES",
    "resolve_document_kind",
]
