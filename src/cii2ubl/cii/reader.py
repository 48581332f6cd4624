"""
Reader for UN/CEFACT Cross Industry Invoice (CII D16B) documents.

Parses the XML with the standard library ElementTree and wraps the root in a
read-only CIIDocument that gives named access to the header, agreement,
delivery and settlement sub-trees. Nothing in the converter modifies the
parsed tree.
"""

import logging
from pathlib import Path
from xml.etree import ElementTree as ET

from ..diagnostics import ErrorCollector

logger = logging.getLogger(__name__)

# XML namespaces of the CII D16B schema
NAMESPACES = {
    'rsm': 'urn:un:unece:uncefact:data:standard:CrossIndustryInvoice:100',
    'ram': 'urn:un:unece:uncefact:data:standard:ReusableAggregateBusinessInformationEntity:100',
    'udt': 'urn:un:unece:uncefact:data:standard:UnqualifiedDataType:100',
    'qdt': 'urn:un:unece:uncefact:data:standard:QualifiedDataType:100',
}

ROOT_TAG = f"{{{NAMESPACES['rsm']}}}CrossIndustryInvoice"


def find(element: ET.Element | None, path: str) -> ET.Element | None:
    """Find the first element at a prefixed path, tolerating a None parent."""
    if element is None:
        return None
    return element.find(path, NAMESPACES)


def findall(element: ET.Element | None, path: str) -> list[ET.Element]:
    """Find all elements at a prefixed path, tolerating a None parent."""
    if element is None:
        return []
    return element.findall(path, NAMESPACES)


def text(element: ET.Element | None, path: str | None = None) -> str | None:
    """Get the stripped text of an element (or of its child at path).

    Returns None for missing elements and for whitespace-only content.
    """
    if path is not None:
        element = find(element, path)
    if element is None or element.text is None:
        return None
    value = element.text.strip()
    return value or None


class CIIDocument:
    """Read-only view of a parsed CrossIndustryInvoice.

    The sub-tree properties return None when the corresponding container is
    missing, so mapping code can walk partially filled documents.
    """

    def __init__(self, root: ET.Element):
        self._root = root

    @property
    def root(self) -> ET.Element:
        return self._root

    @property
    def context(self) -> ET.Element | None:
        return find(self._root, 'rsm:ExchangedDocumentContext')

    @property
    def exchanged_document(self) -> ET.Element | None:
        return find(self._root, 'rsm:ExchangedDocument')

    @property
    def transaction(self) -> ET.Element | None:
        return find(self._root, 'rsm:SupplyChainTradeTransaction')

    @property
    def agreement(self) -> ET.Element | None:
        return find(self.transaction, 'ram:ApplicableHeaderTradeAgreement')

    @property
    def delivery(self) -> ET.Element | None:
        return find(self.transaction, 'ram:ApplicableHeaderTradeDelivery')

    @property
    def settlement(self) -> ET.Element | None:
        return find(self.transaction, 'ram:ApplicableHeaderTradeSettlement')

    @property
    def line_items(self) -> list[ET.Element]:
        return findall(self.transaction, 'ram:IncludedSupplyChainTradeLineItem')

    @property
    def type_code(self) -> str | None:
        return text(self.exchanged_document, 'ram:TypeCode')


class CIIReadError(Exception):
    """Raised when a CII document cannot be parsed."""

    pass


def parse_cii(source: Path | str | bytes) -> CIIDocument:
    """Parse CII XML from a file path or from XML content.

    Raises:
        CIIReadError: if the content is not well-formed XML or not a
            CrossIndustryInvoice
    """
    try:
        if isinstance(source, Path):
            root = ET.parse(source).getroot()
        else:
            root = ET.fromstring(source)
    except ET.ParseError as e:
        raise CIIReadError(f"Malformed XML: {e}") from e
    except OSError as e:
        raise CIIReadError(f"Cannot read {source}: {e}") from e

    if root.tag != ROOT_TAG:
        raise CIIReadError(f"Root element {root.tag} is not a CrossIndustryInvoice")

    return CIIDocument(root)


def read_cii(source: Path | str | bytes, errors: ErrorCollector) -> CIIDocument | None:
    """Parse CII XML, recording a failure in the collector instead of raising."""
    try:
        document = parse_cii(source)
    except CIIReadError as e:
        locator = str(source) if isinstance(source, Path) else None
        errors.error(str(e), locator)
        logger.debug(f"Failed to read CII document: {e}")
        return None
    return document
