"""
CII date parsing.

CII dates are strings qualified by a UN/EDIFACT 2379 format code. The
supported qualifiers and their layouts:

    2    DDMMYY
    3    MMDDYY
    4    DDMMCCYY
    101  YYMMDD
    102  CCYYMMDD (assumed when no qualifier is given)
    103  YYWWD    ISO week date
    105  YYDDD    day of year

Two-digit years are read as 2000-2099.
"""

import re
from datetime import date, timedelta
from xml.etree import ElementTree as ET

from ..cii.reader import find, text
from .context import MappingContext

DEFAULT_DATE_FORMAT = "102"

# qualifier → (display pattern, regex)
DATE_FORMATS = {
    "2": ("ddMMyy", re.compile(r"(?P<day>\d{2})(?P<month>\d{2})(?P<yy>\d{2})")),
    "3": ("MMddyy", re.compile(r"(?P<month>\d{2})(?P<day>\d{2})(?P<yy>\d{2})")),
    "4": ("ddMMyyyy", re.compile(r"(?P<day>\d{2})(?P<month>\d{2})(?P<year>\d{4})")),
    "101": ("yyMMdd", re.compile(r"(?P<yy>\d{2})(?P<month>\d{2})(?P<day>\d{2})")),
    "102": ("yyyyMMdd", re.compile(r"(?P<year>\d{4})(?P<month>\d{2})(?P<day>\d{2})")),
    "103": ("YYwwe", re.compile(r"(?P<yy>\d{2})(?P<week>\d{2})(?P<weekday>\d)")),
    "105": ("yyDDD", re.compile(r"(?P<yy>\d{2})(?P<doy>\d{3})")),
}

# Date string elements, in the order they are looked for
_DATE_STRING_PATHS = ('udt:DateTimeString', 'qdt:DateTimeString', 'udt:DateString')


class DateFormatError(ValueError):
    """Raised for unsupported qualifiers and unparsable date strings."""

    pass


def parse_cii_date(value: str, format_code: str | None = None) -> date:
    """Parse a CII date string according to its format qualifier.

    Raises:
        DateFormatError: if the qualifier is unknown or the value does not
            match it
    """
    code = (format_code or DEFAULT_DATE_FORMAT).strip()
    if code not in DATE_FORMATS:
        raise DateFormatError(f"Unsupported date format '{code}'")

    pattern, regex = DATE_FORMATS[code]
    match = regex.fullmatch(value.strip())
    if match is None:
        raise DateFormatError(f"Failed to parse the date '{value}' using format '{pattern}'")

    parts = match.groupdict()
    year = int(parts["year"]) if "year" in parts else 2000 + int(parts["yy"])
    try:
        if "week" in parts:
            return date.fromisocalendar(year, int(parts["week"]), int(parts["weekday"]))
        if "doy" in parts:
            day_of_year = int(parts["doy"])
            result = date(year, 1, 1) + timedelta(days=day_of_year - 1)
            if day_of_year < 1 or result.year != year:
                raise ValueError(f"day {day_of_year} is outside of {year}")
            return result
        return date(year, int(parts["month"]), int(parts["day"]))
    except ValueError:
        raise DateFormatError(
            f"Failed to parse the date '{value}' using format '{pattern}'"
        ) from None


def _date_string(container: ET.Element) -> ET.Element | None:
    for path in _DATE_STRING_PATHS:
        element = find(container, path)
        if element is not None:
            return element
    return None


def convert_date(
    ctx: MappingContext, container: ET.Element | None, locator: str | None = None
) -> str | None:
    """Convert a CII date container (e.g. ram:IssueDateTime) to YYYY-MM-DD.

    Returns None when there is no date; parse failures are recorded as
    errors and also yield None.
    """
    if container is None:
        return None
    element = _date_string(container)
    value = text(element)
    if value is None:
        return None
    try:
        return parse_cii_date(value, element.get("format")).isoformat()
    except DateFormatError as e:
        ctx.errors.error(str(e), locator)
        return None
