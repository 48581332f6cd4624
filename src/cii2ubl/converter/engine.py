"""
Conversion engine.

Runs the section mappers over a CII document in document order. Each mapper
covers a group of EN 16931 business terms; problems are collected as
diagnostics and never abort the conversion.
"""

import logging
from pathlib import Path
from typing import Callable
from xml.etree import ElementTree as ET

from ..cii.reader import CIIDocument, read_cii
from ..config import ConversionConfig, ConfigValidationError
from ..diagnostics import ErrorCollector
from ..ubl.builder import prune_empty
from ..ubl.document import UBLDocument
from ..ubl.versions import get_version_shape
from .allowances import map_allowances_charges
from .context import MappingContext
from .delivery import map_delivery
from .header import map_header
from .lines import map_lines
from .parties import map_buyer, map_payee, map_seller, map_tax_representative
from .payment import map_payment_means, map_payment_terms
from .references import map_references
from .tax import map_tax
from .totals import map_totals
from .type_resolver import resolve_document_kind

logger = logging.getLogger(__name__)

SectionMapper = Callable[[MappingContext, CIIDocument, ET.Element], None]

# Section → mapper, in the order the sections are converted
SECTION_MAPPERS: tuple[tuple[str, SectionMapper], ...] = (
    ("header", map_header),
    ("references", map_references),
    ("seller", map_seller),
    ("buyer", map_buyer),
    ("payee", map_payee),
    ("tax representative", map_tax_representative),
    ("delivery", map_delivery),
    ("payment means", map_payment_means),
    ("payment terms", map_payment_terms),
    ("allowances and charges", map_allowances_charges),
    ("tax", map_tax),
    ("totals", map_totals),
    ("lines", map_lines),
)


class CIIToUBLConverter:
    """
    Convert CII D16B invoices to UBL Invoice or CreditNote documents.

    The converter holds only its configuration and can be reused for any
    number of documents. Each call receives its own ErrorCollector.

    Raises:
        ConfigValidationError: at construction, for an invalid configuration
            (UnsupportedUBLVersionError for an unknown UBL version)
    """

    def __init__(self, config: ConversionConfig | None = None):
        self.config = config or ConversionConfig()
        self.shape = get_version_shape(self.config.ubl_version)
        problems = self.config.validate()
        if problems:
            raise ConfigValidationError("; ".join(problems))

    def convert(self, cii: CIIDocument, errors: ErrorCollector) -> UBLDocument | None:
        """Convert a parsed CII document.

        Returns:
            The UBL document, or None when the CII document lacks the
            structure needed for a conversion. A returned document may still
            be incomplete; check errors.has_errors().
        """
        kind = resolve_document_kind(
            cii,
            self.config.creation_mode,
            errors,
            use_payable_fallback=self.config.use_payable_amount_fallback,
        )
        if kind is None:
            logger.debug("CII document lacks the mandatory structure, nothing converted")
            return None

        document = self.shape.create_document(kind)
        ctx = MappingContext(config=self.config, shape=self.shape, kind=kind, errors=errors)

        for section, mapper in SECTION_MAPPERS:
            before = len(errors)
            mapper(ctx, cii, document.root)
            added = len(errors) - before
            if added:
                logger.debug(f"Section '{section}' added {added} diagnostic(s)")

        prune_empty(document.root)

        logger.info(
            f"Converted CII to UBL {self.shape.version_id} {kind.value} "
            f"({len(errors.errors)} error(s), {len(errors.warnings)} warning(s))"
        )
        return document

    def convert_file(self, path: Path, errors: ErrorCollector) -> UBLDocument | None:
        """Read a CII file and convert it."""
        cii = read_cii(path, errors)
        if cii is None:
            return None
        return self.convert(cii, errors)

    def convert_bytes(self, content: bytes | str, errors: ErrorCollector) -> UBLDocument | None:
        """Parse CII XML content and convert it."""
        cii = read_cii(content, errors)
        if cii is None:
            return None
        return self.convert(cii, errors)
