"""
Copying CII data type values into UBL basic components.

Each helper reads one CII element, copies the attributes both syntaxes
share, writes the UBL component under parent and returns what it wrote
(None when there was nothing to write).
"""

from decimal import Decimal
from xml.etree import ElementTree as ET

from ..cii.reader import find, text
from ..numeric import parse_decimal
from ..ubl.builder import basic
from .context import MappingContext

ID_ATTRIBUTES = (
    'schemeID', 'schemeName', 'schemeAgencyID', 'schemeAgencyName',
    'schemeVersionID', 'schemeDataURI', 'schemeURI',
)
CODE_ATTRIBUTES = (
    'listID', 'listAgencyID', 'listAgencyName', 'listName', 'listVersionID',
    'name', 'languageID', 'listURI', 'listSchemeURI',
)
TEXT_ATTRIBUTES = ('languageID', 'languageLocaleID')
QUANTITY_ATTRIBUTES = (
    'unitCode', 'unitCodeListID', 'unitCodeListAgencyID', 'unitCodeListAgencyName',
)
BINARY_ATTRIBUTES = ('mimeCode', 'filename', 'encodingCode', 'characterSetCode', 'uri')

INDICATOR_PATHS = ('udt:Indicator', 'udt:IndicatorString')


def attributes_of(source: ET.Element | None, names: tuple[str, ...]) -> dict[str, str]:
    if source is None:
        return {}
    return {name: source.get(name) for name in names if source.get(name)}


def copy_id(
    parent: ET.Element, name: str, source: ET.Element | None, with_scheme: bool = True
) -> ET.Element | None:
    value = text(source)
    if value is None:
        return None
    attributes = attributes_of(source, ID_ATTRIBUTES) if with_scheme else {}
    return basic(parent, name, value, **attributes)


def copy_code(parent: ET.Element, name: str, source: ET.Element | None) -> ET.Element | None:
    value = text(source)
    if value is None:
        return None
    return basic(parent, name, value, **attributes_of(source, CODE_ATTRIBUTES))


def copy_text(parent: ET.Element, name: str, source: ET.Element | None) -> ET.Element | None:
    value = text(source)
    if value is None:
        return None
    return basic(parent, name, value, **attributes_of(source, TEXT_ATTRIBUTES))


def read_decimal(ctx: MappingContext, source: ET.Element | None, locator: str | None = None) -> Decimal | None:
    """Read a decimal value; malformed numbers are recorded as errors."""
    raw = text(source)
    if raw is None:
        return None
    value = parse_decimal(raw)
    if value is None:
        ctx.errors.error(f"Invalid decimal value '{raw}'", locator)
    return value


def copy_amount(
    ctx: MappingContext,
    parent: ET.Element,
    name: str,
    source: ET.Element | None,
    locator: str | None = None,
) -> Decimal | None:
    """Copy an amount, defaulting currencyID to the document currency."""
    value = read_decimal(ctx, source, locator)
    if value is None:
        return None
    currency = source.get('currencyID') or ctx.currency
    basic(parent, name, value, currencyID=currency)
    return value


def copy_decimal(
    ctx: MappingContext,
    parent: ET.Element,
    name: str,
    source: ET.Element | None,
    locator: str | None = None,
) -> Decimal | None:
    """Copy a percentage or numeric without trailing zeros."""
    value = read_decimal(ctx, source, locator)
    if value is None:
        return None
    basic(parent, name, value)
    return value


def copy_binary(parent: ET.Element, name: str, source: ET.Element | None) -> ET.Element | None:
    value = text(source)
    if value is None:
        return None
    return basic(parent, name, value, **attributes_of(source, BINARY_ATTRIBUTES))


def read_indicator(
    ctx: MappingContext, container: ET.Element | None, locator: str | None = None
) -> bool | None:
    """Read a CII indicator ("true"/"false").

    Returns None when the indicator is missing or invalid; an invalid value
    is recorded as an error.
    """
    for path in INDICATOR_PATHS:
        element = find(container, path)
        if element is None:
            continue
        value = text(element)
        if value == "true":
            return True
        if value == "false":
            return False
        ctx.errors.error(f"Indicator must be 'true' or 'false' but is '{value}'", locator)
        return None
    return None


def require(ctx: MappingContext, value, term: str, locator: str | None = None) -> bool:
    """Record an error if a mandatory business term has no value."""
    if value is None or value == "":
        ctx.errors.error(f"Mandatory business term {term} is missing", locator)
        return False
    return True
