"""
Delivery information (BG-13, BG-15).
"""

from xml.etree import ElementTree as ET

from ..cii.reader import CIIDocument, find, findall, text
from ..ubl.builder import aggregate, basic
from .context import DELIVERY_PATH, MappingContext
from .dates import convert_date
from .parties import map_address
from .values import copy_id, copy_text


def map_delivery(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    cii_delivery = cii.delivery
    delivery = aggregate(root, 'Delivery')

    # BT-72
    basic(delivery, 'ActualDeliveryDate', convert_date(
        ctx,
        find(cii_delivery, 'ram:ActualDeliverySupplyChainEvent/ram:OccurrenceDateTime'),
        f"{DELIVERY_PATH}/ActualDeliverySupplyChainEvent/OccurrenceDateTime",
    ))

    ship_to = find(cii_delivery, 'ram:ShipToTradeParty')
    if ship_to is None:
        return

    # BT-71, BG-15
    location = aggregate(delivery, 'DeliveryLocation')
    identifiers = [i for i in findall(ship_to, 'ram:GlobalID') + findall(ship_to, 'ram:ID') if text(i)]
    if identifiers:
        copy_id(location, 'ID', identifiers[0])
    map_address(location, 'Address', find(ship_to, 'ram:PostalTradeAddress'))

    # BT-70
    if text(ship_to, 'ram:Name'):
        delivery_party = aggregate(delivery, 'DeliveryParty')
        copy_text(aggregate(delivery_party, 'PartyName'), 'Name', find(ship_to, 'ram:Name'))
