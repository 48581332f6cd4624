"""
Invoice lines (BG-25 to BG-32).

Lines become InvoiceLine/InvoicedQuantity or CreditNoteLine/CreditedQuantity
depending on the document kind. UBL requires a non-negative item price, so a
negative line amount is expressed through the quantity sign when
swap_quantity_sign_if_needed is set.
"""

import logging
from decimal import Decimal
from xml.etree import ElementTree as ET

from ..cii.reader import CIIDocument, find, findall, text
from ..config import BaseQuantityPolicy
from ..numeric import format_decimal, reconcile_sign
from ..ubl.builder import aggregate, basic
from .allowances import map_allowance_charge, map_tax_category
from .context import LINE_PATH, MappingContext
from .header import map_notes, map_period
from .references import map_document_reference
from .values import (
    QUANTITY_ATTRIBUTES,
    attributes_of,
    copy_code,
    copy_id,
    copy_text,
    read_decimal,
    require,
)

logger = logging.getLogger(__name__)


def _map_item(
    ctx: MappingContext,
    line: ET.Element,
    product: ET.Element | None,
    settlement: ET.Element | None,
    locator: str,
) -> None:
    item = aggregate(line, 'Item')

    # BT-154
    copy_text(item, 'Description', find(product, 'ram:Description'))
    # BT-153
    name = copy_text(item, 'Name', find(product, 'ram:Name'))
    require(ctx, name, "BT-153 (Item name)", f"{locator}/SpecifiedTradeProduct/Name")

    # BT-156
    buyer_id = find(product, 'ram:BuyerAssignedID')
    if text(buyer_id):
        copy_id(aggregate(item, 'BuyersItemIdentification'), 'ID', buyer_id, with_scheme=False)
    # BT-155
    seller_id = find(product, 'ram:SellerAssignedID')
    if text(seller_id):
        copy_id(aggregate(item, 'SellersItemIdentification'), 'ID', seller_id, with_scheme=False)
    # BT-157
    global_id = find(product, 'ram:GlobalID')
    if text(global_id):
        copy_id(aggregate(item, 'StandardItemIdentification'), 'ID', global_id)

    # BT-159
    origin = find(product, 'ram:OriginTradeCountry')
    if text(origin, 'ram:ID'):
        country = aggregate(item, 'OriginCountry')
        copy_code(country, 'IdentificationCode', find(origin, 'ram:ID'))
        copy_text(country, 'Name', find(origin, 'ram:Name'))

    # BT-158
    for classification in findall(product, 'ram:DesignatedProductClassification'):
        class_code = find(classification, 'ram:ClassCode')
        if text(class_code):
            copy_code(aggregate(item, 'CommodityClassification'), 'ItemClassificationCode', class_code)

    # BT-151, BT-152
    taxes = findall(settlement, 'ram:ApplicableTradeTax')
    tax_locator = f"{locator}/SpecifiedLineTradeSettlement/ApplicableTradeTax"
    if not taxes:
        require(ctx, None, "BT-151 (Invoiced item VAT category code)", tax_locator)
    for trade_tax in taxes:
        map_tax_category(ctx, item, 'ClassifiedTaxCategory', trade_tax, tax_locator)
        require(
            ctx, text(trade_tax, 'ram:CategoryCode'),
            "BT-151 (Invoiced item VAT category code)", f"{tax_locator}/CategoryCode",
        )

    # BG-32
    for characteristic in findall(product, 'ram:ApplicableProductCharacteristic'):
        item_property = aggregate(item, 'AdditionalItemProperty')
        copy_text(item_property, 'Name', find(characteristic, 'ram:Description'))
        copy_text(item_property, 'Value', find(characteristic, 'ram:Value'))


def _map_base_quantity(
    ctx: MappingContext,
    price: ET.Element,
    net_price: ET.Element | None,
    gross_price: ET.Element | None,
    locator: str,
) -> None:
    # BT-149, BT-150
    gross_basis = find(gross_price, 'ram:BasisQuantity')
    net_basis = find(net_price, 'ram:BasisQuantity')
    gross_quantity = read_decimal(ctx, gross_basis, f"{locator}/GrossPriceProductTradePrice/BasisQuantity")
    net_quantity = read_decimal(ctx, net_basis, f"{locator}/NetPriceProductTradePrice/BasisQuantity")

    if gross_quantity is not None:
        basis, quantity = gross_basis, gross_quantity
        if net_quantity is not None and net_quantity != gross_quantity:
            ctx.errors.warning(
                f"Gross price base quantity {format_decimal(gross_quantity)} differs from "
                f"net price base quantity {format_decimal(net_quantity)}, the gross one is used",
                locator,
            )
    else:
        basis, quantity = net_basis, net_quantity

    if ctx.config.base_quantity_policy is BaseQuantityPolicy.ONE:
        if quantity is not None and quantity != 1:
            ctx.errors.warning(
                f"Price base quantity {format_decimal(quantity)} is written as 1",
                locator,
            )
        basic(price, 'BaseQuantity', "1", **attributes_of(basis, QUANTITY_ATTRIBUTES))
    elif quantity is not None:
        basic(price, 'BaseQuantity', quantity, **attributes_of(basis, QUANTITY_ATTRIBUTES))


def _map_price(
    ctx: MappingContext,
    line: ET.Element,
    agreement: ET.Element | None,
    price_amount: Decimal | None,
    locator: str,
) -> None:
    if price_amount is None:
        return
    net_price = find(agreement, 'ram:NetPriceProductTradePrice')
    gross_price = find(agreement, 'ram:GrossPriceProductTradePrice')
    currency = find(net_price, 'ram:ChargeAmount').get('currencyID') or ctx.currency

    price = aggregate(line, 'Price')
    # BT-146
    basic(price, 'PriceAmount', price_amount, currencyID=currency)
    _map_base_quantity(ctx, price, net_price, gross_price, f"{locator}/SpecifiedLineTradeAgreement")

    # BT-147, BT-148
    gross_amount = read_decimal(ctx, find(gross_price, 'ram:ChargeAmount'))
    discount = read_decimal(ctx, find(gross_price, 'ram:AppliedTradeAllowanceCharge/ram:ActualAmount'))
    if gross_amount is None and discount is None:
        return
    allowance = aggregate(price, 'AllowanceCharge')
    basic(allowance, 'ChargeIndicator', 'false')
    basic(allowance, 'Amount', discount if discount is not None else "0", currencyID=currency)
    basic(allowance, 'BaseAmount', gross_amount, currencyID=currency)


def _map_line(ctx: MappingContext, line_item: ET.Element, root: ET.Element, locator: str) -> None:
    line_document = find(line_item, 'ram:AssociatedDocumentLineDocument')
    product = find(line_item, 'ram:SpecifiedTradeProduct')
    agreement = find(line_item, 'ram:SpecifiedLineTradeAgreement')
    delivery = find(line_item, 'ram:SpecifiedLineTradeDelivery')
    settlement = find(line_item, 'ram:SpecifiedLineTradeSettlement')

    line = aggregate(root, ctx.kind.line_name)

    # BT-126
    line_id = text(line_document, 'ram:LineID')
    copy_id(line, 'ID', find(line_document, 'ram:LineID'), with_scheme=False)
    require(ctx, line_id, "BT-126 (Invoice line identifier)", f"{locator}/AssociatedDocumentLineDocument/LineID")

    # BT-127
    map_notes(line, line_document)

    # BT-131
    summation_locator = f"{locator}/SpecifiedLineTradeSettlement/SpecifiedTradeSettlementLineMonetarySummation"
    line_total = find(settlement, 'ram:SpecifiedTradeSettlementLineMonetarySummation/ram:LineTotalAmount')
    extension_amount = read_decimal(ctx, line_total, f"{summation_locator}/LineTotalAmount")
    require(ctx, extension_amount, "BT-131 (Invoice line net amount)", f"{summation_locator}/LineTotalAmount")

    # BT-129, BT-130
    billed = find(delivery, 'ram:BilledQuantity')
    quantity_locator = f"{locator}/SpecifiedLineTradeDelivery/BilledQuantity"
    quantity = read_decimal(ctx, billed, quantity_locator)
    require(ctx, quantity, "BT-129 (Invoiced quantity)", quantity_locator)

    # BT-146
    price_locator = f"{locator}/SpecifiedLineTradeAgreement/NetPriceProductTradePrice/ChargeAmount"
    price_amount = read_decimal(ctx, find(agreement, 'ram:NetPriceProductTradePrice/ram:ChargeAmount'), price_locator)
    require(ctx, price_amount, "BT-146 (Item net price)", price_locator)

    new_quantity, new_price = reconcile_sign(
        quantity, price_amount, extension_amount, ctx.config.swap_quantity_sign_if_needed
    )
    if new_quantity != quantity or new_price != price_amount:
        ctx.errors.info(
            f"Line {line_id}: quantity and price signs adjusted to the negative line amount",
            locator,
        )
        logger.debug(f"Swapped quantity/price sign of line {line_id}")

    if new_quantity is not None:
        basic(line, ctx.kind.quantity_name, new_quantity, **attributes_of(billed, QUANTITY_ATTRIBUTES))
    if extension_amount is not None:
        basic(
            line, 'LineExtensionAmount', extension_amount,
            currencyID=line_total.get('currencyID') or ctx.currency,
        )

    # BT-133
    copy_text(line, 'AccountingCost', find(settlement, 'ram:ReceivableSpecifiedTradeAccountingAccount/ram:ID'))

    # BG-26
    map_period(
        ctx, line, find(settlement, 'ram:BillingSpecifiedPeriod'),
        f"{locator}/SpecifiedLineTradeSettlement/BillingSpecifiedPeriod",
    )

    # BT-132
    order_line_id = text(agreement, 'ram:BuyerOrderReferencedDocument/ram:LineID')
    if order_line_id:
        basic(aggregate(line, 'OrderLineReference'), 'LineID', order_line_id)

    # BT-128
    for reference in findall(settlement, 'ram:AdditionalReferencedDocument'):
        map_document_reference(
            ctx, line, 'DocumentReference', reference,
            f"{locator}/SpecifiedLineTradeSettlement/AdditionalReferencedDocument",
        )

    # BG-27, BG-28
    for allowance_charge in findall(settlement, 'ram:SpecifiedTradeAllowanceCharge'):
        map_allowance_charge(
            ctx, line, allowance_charge,
            f"{locator}/SpecifiedLineTradeSettlement/SpecifiedTradeAllowanceCharge",
            with_tax_category=False,
        )

    # BG-31
    _map_item(ctx, line, product, settlement, locator)

    # BG-29
    _map_price(ctx, line, agreement, new_price, locator)


def map_lines(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    line_items = cii.line_items
    if not line_items:
        require(ctx, None, "BG-25 (Invoice line)", LINE_PATH)
        return
    for index, line_item in enumerate(line_items, start=1):
        _map_line(ctx, line_item, root, f"{LINE_PATH}[{index}]")
