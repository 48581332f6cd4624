"""
UBL target documents.
"""

from dataclasses import dataclass
from enum import Enum
from xml.etree import ElementTree as ET

from .builder import CAC_NS, CBC_NS

INVOICE_NS = 'urn:oasis:names:specification:ubl:schema:xsd:Invoice-2'
CREDIT_NOTE_NS = 'urn:oasis:names:specification:ubl:schema:xsd:CreditNote-2'

# Prefixes for querying generated documents
NAMESPACES = {
    'cbc': CBC_NS,
    'cac': CAC_NS,
    'inv': INVOICE_NS,
    'cn': CREDIT_NOTE_NS,
}


class DocumentKind(str, Enum):
    """UBL document type produced by a conversion."""

    INVOICE = "Invoice"
    CREDIT_NOTE = "CreditNote"

    @property
    def root_name(self) -> str:
        return self.value

    @property
    def namespace(self) -> str:
        return INVOICE_NS if self is DocumentKind.INVOICE else CREDIT_NOTE_NS

    @property
    def type_code_name(self) -> str:
        return "InvoiceTypeCode" if self is DocumentKind.INVOICE else "CreditNoteTypeCode"

    @property
    def line_name(self) -> str:
        return "InvoiceLine" if self is DocumentKind.INVOICE else "CreditNoteLine"

    @property
    def quantity_name(self) -> str:
        return "InvoicedQuantity" if self is DocumentKind.INVOICE else "CreditedQuantity"


@dataclass
class UBLDocument:
    """A generated UBL Invoice or CreditNote."""

    kind: DocumentKind
    version: str
    root: ET.Element

    def find(self, path: str) -> ET.Element | None:
        return self.root.find(path, NAMESPACES)

    def findall(self, path: str) -> list[ET.Element]:
        return self.root.findall(path, NAMESPACES)

    def findtext(self, path: str) -> str | None:
        return self.root.findtext(path, namespaces=NAMESPACES)
