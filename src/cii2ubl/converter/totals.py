"""
Document totals (BG-22).
"""

from xml.etree import ElementTree as ET

from ..cii.reader import CIIDocument, find
from ..ubl.builder import aggregate, basic
from .context import MappingContext
from .tax import SUMMATION_PATH
from .values import copy_amount, read_decimal, require

# (CII summation element, UBL element, business term or None if optional)
MONETARY_TOTALS = (
    ('LineTotalAmount', 'LineExtensionAmount', "BT-106 (Sum of Invoice line net amount)"),
    ('TaxBasisTotalAmount', 'TaxExclusiveAmount', "BT-109 (Invoice total amount without VAT)"),
    ('GrandTotalAmount', 'TaxInclusiveAmount', "BT-112 (Invoice total amount with VAT)"),
    ('AllowanceTotalAmount', 'AllowanceTotalAmount', None),
    ('ChargeTotalAmount', 'ChargeTotalAmount', None),
    ('TotalPrepaidAmount', 'PrepaidAmount', None),
    ('DuePayableAmount', 'PayableAmount', "BT-115 (Amount due for payment)"),
)


def map_totals(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    summation = find(cii.settlement, 'ram:SpecifiedTradeSettlementHeaderMonetarySummation')
    monetary_total = aggregate(root, 'LegalMonetaryTotal')

    for source_name, target_name, term in MONETARY_TOTALS:
        locator = f"{SUMMATION_PATH}/{source_name}"
        value = copy_amount(ctx, monetary_total, target_name, find(summation, f'ram:{source_name}'), locator)
        if term is not None:
            require(ctx, value, term, locator)

    # BT-114, a zero rounding amount is left out
    rounding = find(summation, 'ram:RoundingAmount')
    value = read_decimal(ctx, rounding, f"{SUMMATION_PATH}/RoundingAmount")
    if value is not None and value != 0:
        basic(
            monetary_total,
            'PayableRoundingAmount',
            value,
            currencyID=rounding.get('currencyID') or ctx.currency,
        )
