"""
Cross Industry Invoice (CII) source documents.
"""

from .reader import NAMESPACES, CIIDocument, CIIReadError, parse_cii, read_cii

__all__ = [
    "NAMESPACES",
    "CIIDocument",
    "CIIReadError",
    "parse_cii",
    "read_cii",
]
