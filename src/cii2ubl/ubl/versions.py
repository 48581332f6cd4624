"""
UBL version shaping.

All UBL 2.x versions share the Invoice-2 / CreditNote-2 namespaces. The
versions differ in a handful of cardinalities and in which elements exist,
which is captured by VersionShape and consulted by the mapping code.
"""

from dataclasses import dataclass
from xml.etree import ElementTree as ET

from ..config import UnsupportedUBLVersionError
from .document import DocumentKind, UBLDocument


@dataclass(frozen=True)
class VersionShape:
    """Version-specific structure of the UBL output."""

    version_id: str
    # CompanyLegalForm is repeatable from 2.3 on
    multiple_company_legal_forms: bool
    # PaymentMeans/CardAccount is repeatable from 2.3 on
    multiple_card_accounts: bool
    # CreditNote/ProjectReference exists from 2.2 on
    credit_note_project_reference: bool

    def create_document(self, kind: DocumentKind) -> UBLDocument:
        """Create an empty Invoice or CreditNote root for this version."""
        root = ET.Element(f'{{{kind.namespace}}}{kind.root_name}')
        return UBLDocument(kind=kind, version=self.version_id, root=root)

    def supports_project_reference(self, kind: DocumentKind) -> bool:
        return kind is DocumentKind.INVOICE or self.credit_note_project_reference


VERSION_SHAPES = {
    "2.1": VersionShape(
        version_id="2.1",
        multiple_company_legal_forms=False,
        multiple_card_accounts=False,
        credit_note_project_reference=False,
    ),
    "2.2": VersionShape(
        version_id="2.2",
        multiple_company_legal_forms=False,
        multiple_card_accounts=False,
        credit_note_project_reference=True,
    ),
    "2.3": VersionShape(
        version_id="2.3",
        multiple_company_legal_forms=True,
        multiple_card_accounts=True,
        credit_note_project_reference=True,
    ),
    "2.4": VersionShape(
        version_id="2.4",
        multiple_company_legal_forms=True,
        multiple_card_accounts=True,
        credit_note_project_reference=True,
    ),
}


def get_version_shape(version: str) -> VersionShape:
    """Look up the shape for a version token such as "2.1".

    Raises:
        UnsupportedUBLVersionError: for any other token
    """
    try:
        return VERSION_SHAPES[version.strip()]
    except (KeyError, AttributeError):
        raise UnsupportedUBLVersionError(str(version)) from None
