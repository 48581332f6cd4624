"""
UBL 2.x target documents: construction, version shaping and serialization.
"""

from .document import NAMESPACES, DocumentKind, UBLDocument
from .versions import VERSION_SHAPES, VersionShape, get_version_shape
from .writer import serialize, write_document

__all__ = [
    "NAMESPACES",
    "DocumentKind",
    "UBLDocument",
    "VERSION_SHAPES",
    "VersionShape",
    "get_version_shape",
    "serialize",
    "write_document",
]
