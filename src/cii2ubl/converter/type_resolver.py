"""
Decides whether a CII document becomes a UBL Invoice or a CreditNote.

The document type code (BT-3) is the primary signal. The sign of the amount
due for payment is only consulted when the type code gives no answer and the
configuration allows the fallback.
"""

import logging

from ..cii.reader import CIIDocument, find, text
from ..config import CreationMode
from ..diagnostics import ErrorCollector
from ..numeric import parse_decimal
from ..ubl.document import DocumentKind

logger = logging.getLogger(__name__)

# UNTDID 1001 codes mapping to a UBL Invoice (875-877 are XRechnung additions)
INVOICE_TYPE_CODES = frozenset({
    "80", "82", "84", "130", "202", "203", "204", "211", "295", "325", "326",
    "380", "383", "384", "385", "386", "387", "388", "389", "390", "393", "394",
    "395", "456", "457", "527", "575", "623", "633", "751", "780", "875", "876",
    "877", "935",
})

CREDIT_NOTE_TYPE_CODES = frozenset({
    "81", "83", "261", "262", "296", "308", "381", "396", "420", "458", "532",
})

TYPE_CODE_LOCATOR = "CrossIndustryInvoice/ExchangedDocument/TypeCode"

_REQUIRED_CONTAINERS = (
    'ram:ApplicableHeaderTradeAgreement',
    'ram:ApplicableHeaderTradeDelivery',
    'ram:ApplicableHeaderTradeSettlement',
)


def check_structure(cii: CIIDocument, errors: ErrorCollector) -> bool:
    """Check that the transaction and its three header containers exist."""
    transaction = cii.transaction
    if transaction is None:
        errors.error(
            "The element 'SupplyChainTradeTransaction' is missing",
            "CrossIndustryInvoice",
        )
        return False

    complete = True
    for path in _REQUIRED_CONTAINERS:
        if find(transaction, path) is None:
            name = path.split(':', 1)[1]
            errors.error(
                f"The element '{name}' is missing",
                "CrossIndustryInvoice/SupplyChainTradeTransaction",
            )
            complete = False
    return complete


def kind_from_type_code(type_code: str | None) -> DocumentKind | None:
    if type_code in INVOICE_TYPE_CODES:
        return DocumentKind.INVOICE
    if type_code in CREDIT_NOTE_TYPE_CODES:
        return DocumentKind.CREDIT_NOTE
    return None


def kind_from_payable_amount(cii: CIIDocument) -> DocumentKind | None:
    amount = parse_decimal(text(
        cii.settlement,
        'ram:SpecifiedTradeSettlementHeaderMonetarySummation/ram:DuePayableAmount',
    ))
    if amount is None:
        return None
    return DocumentKind.INVOICE if amount >= 0 else DocumentKind.CREDIT_NOTE


def resolve_document_kind(
    cii: CIIDocument,
    mode: CreationMode,
    errors: ErrorCollector,
    use_payable_fallback: bool = True,
) -> DocumentKind | None:
    """Resolve the UBL document type for a CII document.

    Returns:
        The document kind, or None if the document lacks the structure
        needed for any conversion.
    """
    if not check_structure(cii, errors):
        return None

    type_code = cii.type_code
    from_code = kind_from_type_code(type_code)

    if mode is CreationMode.INVOICE or mode is CreationMode.CREDIT_NOTE:
        forced = DocumentKind.INVOICE if mode is CreationMode.INVOICE else DocumentKind.CREDIT_NOTE
        if from_code is not None and from_code is not forced:
            errors.warning(
                f"Type code '{type_code}' denotes a {from_code.value} "
                f"but a {forced.value} is created",
                TYPE_CODE_LOCATOR,
            )
        return forced

    if from_code is not None:
        logger.debug(f"Type code {type_code} resolved to {from_code.value}")
        return from_code

    if type_code is not None:
        errors.error(f"Unsupported document type code '{type_code}'", TYPE_CODE_LOCATOR)

    if use_payable_fallback:
        from_amount = kind_from_payable_amount(cii)
        if from_amount is not None:
            logger.debug(f"Payable amount sign resolved to {from_amount.value}")
            return from_amount

    errors.warning(
        "Failed to determine the document type, creating an Invoice",
        TYPE_CODE_LOCATOR,
    )
    return DocumentKind.INVOICE
