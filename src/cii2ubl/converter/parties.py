"""
Trade parties: seller (BG-4), buyer (BG-7), payee (BG-10) and seller tax
representative (BG-11), with their addresses and contacts.
"""

from xml.etree import ElementTree as ET

from ..cii.reader import CIIDocument, find, findall, text
from ..ubl.builder import aggregate, basic
from ..ubl.document import NAMESPACES as UBL_NAMESPACES
from .context import AGREEMENT_PATH, SETTLEMENT_PATH, MappingContext
from .values import copy_code, copy_id, copy_text, require

LEGACY_VAT_SCHEME = "VA"


def add_party_identification(party: ET.Element, value: str, scheme_id: str | None = None) -> bool:
    """Add a PartyIdentification unless the same (value, schemeID) exists.

    Returns:
        True if an identification was added
    """
    for existing in party.findall('cac:PartyIdentification/cbc:ID', UBL_NAMESPACES):
        if existing.text == value and existing.get('schemeID') == (scheme_id or None):
            return False
    identification = aggregate(party, 'PartyIdentification')
    basic(identification, 'ID', value, schemeID=scheme_id)
    return True


def _party_identifiers(cii_party: ET.Element, all_ids: bool) -> list[ET.Element]:
    global_ids = [g for g in findall(cii_party, 'ram:GlobalID') if text(g)]
    local_ids = [i for i in findall(cii_party, 'ram:ID') if text(i)]
    usable = [g for g in global_ids if g.get('schemeID')]
    if all_ids:
        return usable + local_ids
    return (usable or local_ids or global_ids)[:1]


def map_address(parent: ET.Element, name: str, address: ET.Element | None) -> str | None:
    """Map a CII trade address to a UBL address.

    Returns:
        The country code, if any
    """
    if address is None:
        return None
    element = aggregate(parent, name)
    copy_text(element, 'StreetName', find(address, 'ram:LineOne'))
    copy_text(element, 'AdditionalStreetName', find(address, 'ram:LineTwo'))
    copy_text(element, 'CityName', find(address, 'ram:CityName'))
    copy_text(element, 'PostalZone', find(address, 'ram:PostcodeCode'))
    subdivisions = findall(address, 'ram:CountrySubDivisionName')
    if subdivisions:
        copy_text(element, 'CountrySubentity', subdivisions[0])
    line_three = find(address, 'ram:LineThree')
    if text(line_three):
        copy_text(aggregate(element, 'AddressLine'), 'Line', line_three)
    country = find(address, 'ram:CountryID')
    if text(country):
        copy_code(aggregate(element, 'Country'), 'IdentificationCode', country)
    return text(country)


def _map_tax_registrations(ctx: MappingContext, party: ET.Element, cii_party: ET.Element) -> None:
    for registration in findall(cii_party, 'ram:SpecifiedTaxRegistration'):
        registration_id = find(registration, 'ram:ID')
        value = text(registration_id)
        if value is None:
            continue
        scheme = registration_id.get('schemeID')
        if not scheme or scheme == LEGACY_VAT_SCHEME:
            scheme = ctx.config.vat_scheme
        tax_scheme = aggregate(party, 'PartyTaxScheme')
        basic(tax_scheme, 'CompanyID', value)
        basic(aggregate(tax_scheme, 'TaxScheme'), 'ID', scheme)


def _map_legal_entity(
    ctx: MappingContext, party: ET.Element, cii_party: ET.Element, registration_name: str | None
) -> None:
    organization = find(cii_party, 'ram:SpecifiedLegalOrganization')
    legal_entity = aggregate(party, 'PartyLegalEntity')
    basic(legal_entity, 'RegistrationName', registration_name)
    copy_id(legal_entity, 'CompanyID', find(organization, 'ram:ID'))

    legal_forms = [d for d in findall(cii_party, 'ram:Description') if text(d)]
    if not ctx.shape.multiple_company_legal_forms:
        legal_forms = legal_forms[:1]
    for legal_form in legal_forms:
        copy_text(legal_entity, 'CompanyLegalForm', legal_form)


def _map_contact(party: ET.Element, cii_party: ET.Element) -> None:
    cii_contact = find(cii_party, 'ram:DefinedTradeContact')
    if cii_contact is None:
        return
    contact = aggregate(party, 'Contact')
    name = find(cii_contact, 'ram:PersonName')
    if text(name) is None:
        name = find(cii_contact, 'ram:DepartmentName')
    copy_text(contact, 'Name', name)
    copy_text(contact, 'Telephone', find(cii_contact, 'ram:TelephoneUniversalCommunication/ram:CompleteNumber'))
    copy_text(contact, 'ElectronicMail', find(cii_contact, 'ram:EmailURIUniversalCommunication/ram:URIID'))


def map_party(
    ctx: MappingContext,
    party: ET.Element,
    cii_party: ET.Element,
    all_ids: bool = False,
    legal_name: bool = False,
) -> tuple[str | None, str | None]:
    """Fill a cac:Party from a CII trade party.

    Args:
        all_ids: Map every identifier instead of the first one
        legal_name: Put the party name in PartyLegalEntity/RegistrationName
            instead of PartyName/Name

    Returns:
        (party name, country code)
    """
    # Electronic address
    copy_id(party, 'EndpointID', find(cii_party, 'ram:URIUniversalCommunication/ram:URIID'))

    for identifier in _party_identifiers(cii_party, all_ids):
        add_party_identification(party, text(identifier), identifier.get('schemeID'))

    name = text(cii_party, 'ram:Name')
    trading_name = find(cii_party, 'ram:SpecifiedLegalOrganization/ram:TradingBusinessName')
    if legal_name:
        if text(trading_name):
            copy_text(aggregate(party, 'PartyName'), 'Name', trading_name)
    else:
        copy_text(aggregate(party, 'PartyName'), 'Name', find(cii_party, 'ram:Name'))

    country = map_address(party, 'PostalAddress', find(cii_party, 'ram:PostalTradeAddress'))

    _map_tax_registrations(ctx, party, cii_party)
    _map_legal_entity(ctx, party, cii_party, name if legal_name else None)
    _map_contact(party, cii_party)

    return name, country


def map_seller(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    seller = find(cii.agreement, 'ram:SellerTradeParty')
    locator = f"{AGREEMENT_PATH}/SellerTradeParty"
    party = aggregate(aggregate(root, 'AccountingSupplierParty'), 'Party')
    ctx.seller_party = party
    if seller is None:
        require(ctx, None, "BT-27 (Seller name)", locator)
        return
    name, country = map_party(ctx, party, seller, all_ids=True, legal_name=True)
    require(ctx, name, "BT-27 (Seller name)", f"{locator}/Name")
    require(ctx, country, "BT-40 (Seller country code)", f"{locator}/PostalTradeAddress/CountryID")


def map_buyer(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    buyer = find(cii.agreement, 'ram:BuyerTradeParty')
    locator = f"{AGREEMENT_PATH}/BuyerTradeParty"
    if buyer is None:
        require(ctx, None, "BT-44 (Buyer name)", locator)
        return
    party = aggregate(aggregate(root, 'AccountingCustomerParty'), 'Party')
    name, country = map_party(ctx, party, buyer, legal_name=True)
    require(ctx, name, "BT-44 (Buyer name)", f"{locator}/Name")
    require(ctx, country, "BT-55 (Buyer country code)", f"{locator}/PostalTradeAddress/CountryID")


def map_payee(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    payee = find(cii.settlement, 'ram:PayeeTradeParty')
    if payee is None:
        return
    name, _ = map_party(ctx, aggregate(root, 'PayeeParty'), payee)
    require(ctx, name, "BT-59 (Payee name)", f"{SETTLEMENT_PATH}/PayeeTradeParty/Name")


def map_tax_representative(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    representative = find(cii.agreement, 'ram:SellerTaxRepresentativeTradeParty')
    if representative is None:
        return
    map_party(ctx, aggregate(root, 'TaxRepresentativeParty'), representative)
