"""
UBL serialization.
"""

import copy
import logging
from pathlib import Path
from xml.etree import ElementTree as ET

from .builder import CAC_NS, CBC_NS
from .document import UBLDocument

logger = logging.getLogger(__name__)

ET.register_namespace('cac', CAC_NS)
ET.register_namespace('cbc', CBC_NS)


def serialize(document: UBLDocument, pretty: bool = True) -> bytes:
    """Serialize a UBL document to UTF-8 XML with a declaration.

    The document namespace becomes the default namespace; aggregate and
    basic components use the customary cac/cbc prefixes.
    """
    root = document.root
    if pretty:
        root = copy.deepcopy(root)
        ET.indent(root, space="  ")
    return ET.tostring(
        root,
        encoding="UTF-8",
        xml_declaration=True,
        default_namespace=document.kind.namespace,
    )


def write_document(document: UBLDocument, path: Path, pretty: bool = True) -> None:
    """Write a UBL document to a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(serialize(document, pretty=pretty))
    logger.debug(f"Wrote UBL {document.version} {document.kind.value} to {path}")
