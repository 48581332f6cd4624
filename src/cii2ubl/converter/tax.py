"""
Tax totals (BT-110, BT-111) and the VAT breakdown (BG-23).
"""

import logging
from xml.etree import ElementTree as ET

from ..cii.reader import CIIDocument, find, findall, text
from ..ubl.builder import aggregate, basic
from .allowances import map_tax_category
from .context import SETTLEMENT_PATH, MappingContext
from .values import copy_amount, require

logger = logging.getLogger(__name__)

SUMMATION_PATH = f"{SETTLEMENT_PATH}/SpecifiedTradeSettlementHeaderMonetarySummation"
TRADE_TAX_PATH = f"{SETTLEMENT_PATH}/ApplicableTradeTax"


def _map_tax_totals(ctx: MappingContext, summation: ET.Element | None, root: ET.Element) -> ET.Element:
    """Create one TaxTotal per tax total amount.

    Returns:
        The TaxTotal in document currency, which receives the subtotals
    """
    tax_amounts = [a for a in findall(summation, 'ram:TaxTotalAmount') if text(a)]
    if not tax_amounts:
        # TaxTotal is mandatory in UBL
        ctx.errors.warning(
            "No tax total amount found, a tax total of 0 is written",
            f"{SUMMATION_PATH}/TaxTotalAmount",
        )
        tax_total = aggregate(root, 'TaxTotal')
        basic(tax_total, 'TaxAmount', "0", currencyID=ctx.currency)
        return tax_total

    document_total = None
    first_total = None
    for amount in tax_amounts:
        tax_total = aggregate(root, 'TaxTotal')
        copy_amount(ctx, tax_total, 'TaxAmount', amount, f"{SUMMATION_PATH}/TaxTotalAmount")
        first_total = first_total if first_total is not None else tax_total
        currency = amount.get('currencyID') or ctx.currency
        if document_total is None and currency == ctx.currency:
            document_total = tax_total
    return document_total if document_total is not None else first_total


def map_tax(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    settlement = cii.settlement
    summation = find(settlement, 'ram:SpecifiedTradeSettlementHeaderMonetarySummation')
    tax_total = _map_tax_totals(ctx, summation, root)

    # BG-23
    breakdowns = findall(settlement, 'ram:ApplicableTradeTax')
    if not breakdowns:
        require(ctx, None, "BG-23 (VAT breakdown)", TRADE_TAX_PATH)
    for trade_tax in breakdowns:
        subtotal = aggregate(tax_total, 'TaxSubtotal')
        # BT-116
        taxable = copy_amount(
            ctx, subtotal, 'TaxableAmount', find(trade_tax, 'ram:BasisAmount'), f"{TRADE_TAX_PATH}/BasisAmount"
        )
        require(ctx, taxable, "BT-116 (VAT category taxable amount)", f"{TRADE_TAX_PATH}/BasisAmount")
        # BT-117
        tax_amount = copy_amount(
            ctx, subtotal, 'TaxAmount', find(trade_tax, 'ram:CalculatedAmount'), f"{TRADE_TAX_PATH}/CalculatedAmount"
        )
        require(ctx, tax_amount, "BT-117 (VAT category tax amount)", f"{TRADE_TAX_PATH}/CalculatedAmount")
        # BT-118, BT-119, BT-120, BT-121
        map_tax_category(ctx, subtotal, 'TaxCategory', trade_tax, TRADE_TAX_PATH, with_exemption=True)
        require(ctx, text(trade_tax, 'ram:CategoryCode'), "BT-118 (VAT category code)", f"{TRADE_TAX_PATH}/CategoryCode")

    logger.debug(f"Mapped {len(breakdowns)} VAT breakdown(s)")
