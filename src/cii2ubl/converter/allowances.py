"""
Allowances and charges on document level (BG-20, BG-21) and line level
(BG-27, BG-28).
"""

from xml.etree import ElementTree as ET

from ..cii.reader import CIIDocument, find, findall
from ..ubl.builder import aggregate, basic
from .context import SETTLEMENT_PATH, MappingContext
from .values import copy_amount, copy_code, copy_decimal, copy_text, read_indicator, require

ALLOWANCE_CHARGE_PATH = f"{SETTLEMENT_PATH}/SpecifiedTradeAllowanceCharge"


def map_tax_category(
    ctx: MappingContext,
    parent: ET.Element,
    name: str,
    trade_tax: ET.Element,
    locator: str,
    with_exemption: bool = False,
) -> ET.Element:
    """Map a CII trade tax to a UBL TaxCategory in the configured VAT scheme."""
    category = aggregate(parent, name)
    copy_code(category, 'ID', find(trade_tax, 'ram:CategoryCode'))
    copy_decimal(ctx, category, 'Percent', find(trade_tax, 'ram:RateApplicablePercent'), f"{locator}/RateApplicablePercent")
    if with_exemption:
        copy_code(category, 'TaxExemptionReasonCode', find(trade_tax, 'ram:ExemptionReasonCode'))
        copy_text(category, 'TaxExemptionReason', find(trade_tax, 'ram:ExemptionReason'))
    basic(aggregate(category, 'TaxScheme'), 'ID', ctx.config.vat_scheme)
    return category


def map_allowance_charge(
    ctx: MappingContext,
    parent: ET.Element,
    allowance_charge: ET.Element,
    locator: str,
    with_tax_category: bool = True,
) -> ET.Element | None:
    """Map one CII SpecifiedTradeAllowanceCharge.

    Skipped with an error when the charge indicator cannot be determined.
    """
    indicator = read_indicator(ctx, find(allowance_charge, 'ram:ChargeIndicator'), f"{locator}/ChargeIndicator")
    if indicator is None:
        ctx.errors.error(
            "Failed to determine if SpecifiedTradeAllowanceCharge is an Allowance or a Charge",
            locator,
        )
        return None

    element = aggregate(parent, 'AllowanceCharge')
    basic(element, 'ChargeIndicator', 'true' if indicator else 'false')
    # BT-98, BT-105
    copy_code(element, 'AllowanceChargeReasonCode', find(allowance_charge, 'ram:ReasonCode'))
    # BT-97, BT-104
    copy_text(element, 'AllowanceChargeReason', find(allowance_charge, 'ram:Reason'))
    # BT-94, BT-101
    copy_decimal(
        ctx, element, 'MultiplierFactorNumeric',
        find(allowance_charge, 'ram:CalculationPercent'), f"{locator}/CalculationPercent",
    )
    # BT-92, BT-99
    amount = copy_amount(
        ctx, element, 'Amount', find(allowance_charge, 'ram:ActualAmount'), f"{locator}/ActualAmount"
    )
    require(ctx, amount, "BT-92/BT-99 (Allowance or charge amount)", f"{locator}/ActualAmount")
    # BT-93, BT-100
    copy_amount(
        ctx, element, 'BaseAmount', find(allowance_charge, 'ram:BasisAmount'), f"{locator}/BasisAmount"
    )

    if with_tax_category:
        # BT-95, BT-96, BT-102, BT-103
        trade_tax = find(allowance_charge, 'ram:CategoryTradeTax')
        if trade_tax is not None:
            map_tax_category(ctx, element, 'TaxCategory', trade_tax, f"{locator}/CategoryTradeTax")

    return element


def map_allowances_charges(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    for allowance_charge in findall(cii.settlement, 'ram:SpecifiedTradeAllowanceCharge'):
        map_allowance_charge(ctx, root, allowance_charge, ALLOWANCE_CHARGE_PATH)
