"""
Per-conversion mapping state shared by the section mappers.
"""

from dataclasses import dataclass
from xml.etree import ElementTree as ET

from ..config import ConversionConfig
from ..diagnostics import ErrorCollector
from ..ubl.document import DocumentKind
from ..ubl.versions import VersionShape


@dataclass
class MappingContext:
    """State of one conversion.

    Created by the engine for every call and discarded afterwards, so
    mappers may record values for later sections (the document currency,
    the due date that a credit note carries in its payment means).
    """

    config: ConversionConfig
    shape: VersionShape
    kind: DocumentKind
    errors: ErrorCollector
    currency: str | None = None
    due_date: str | None = None
    seller_party: ET.Element | None = None

    @property
    def is_invoice(self) -> bool:
        return self.kind is DocumentKind.INVOICE


# Locators of the CII containers, used in diagnostics
ROOT_PATH = "CrossIndustryInvoice"
DOCUMENT_PATH = f"{ROOT_PATH}/ExchangedDocument"
TRANSACTION_PATH = f"{ROOT_PATH}/SupplyChainTradeTransaction"
AGREEMENT_PATH = f"{TRANSACTION_PATH}/ApplicableHeaderTradeAgreement"
DELIVERY_PATH = f"{TRANSACTION_PATH}/ApplicableHeaderTradeDelivery"
SETTLEMENT_PATH = f"{TRANSACTION_PATH}/ApplicableHeaderTradeSettlement"
LINE_PATH = f"{TRANSACTION_PATH}/IncludedSupplyChainTradeLineItem"
