"""
Document level header: identification, dates, type, notes, currencies and
the invoicing period.
"""

from xml.etree import ElementTree as ET

from ..cii.reader import CIIDocument, find, findall, text
from ..ubl.builder import aggregate, basic
from .context import DOCUMENT_PATH, SETTLEMENT_PATH, MappingContext
from .dates import convert_date
from .values import copy_code, copy_id, copy_text, require

# CII due date type code (UNTDID 2475) → UBL period description code (UNTDID 2005)
PERIOD_DESCRIPTION_CODES = {
    "5": "3",
    "29": "35",
    "72": "432",
}


def format_note(note: ET.Element) -> str | None:
    """Join the content lines of a CII note, prefixed by #SubjectCode#."""
    lines = [value for value in (text(c) for c in findall(note, 'ram:Content')) if value]
    if not lines:
        return None
    content = "\n".join(lines)
    subject_code = text(note, 'ram:SubjectCode')
    if subject_code:
        content = f"#{subject_code}#{content}"
    return content


def map_notes(parent: ET.Element, container: ET.Element | None) -> None:
    for note in findall(container, 'ram:IncludedNote'):
        basic(parent, 'Note', format_note(note))


def _document_context(ctx: MappingContext, cii: CIIDocument) -> tuple[str | None, str | None]:
    # BT-24, BT-23
    customization = text(cii.context, 'ram:GuidelineSpecifiedDocumentContextParameter/ram:ID')
    profile = text(cii.context, 'ram:BusinessProcessSpecifiedDocumentContextParameter/ram:ID')
    config = ctx.config
    if config.customization_id and (config.override_document_context or not customization):
        customization = config.customization_id
    if config.profile_id and (config.override_document_context or not profile):
        profile = config.profile_id
    return customization, profile


def _due_date(ctx: MappingContext, settlement: ET.Element | None) -> str | None:
    for terms in findall(settlement, 'ram:SpecifiedTradePaymentTerms'):
        due = convert_date(
            ctx,
            find(terms, 'ram:DueDateDateTime'),
            f"{SETTLEMENT_PATH}/SpecifiedTradePaymentTerms/DueDateDateTime",
        )
        if due:
            return due
    return None


def _tax_point_date(ctx: MappingContext, settlement: ET.Element | None) -> str | None:
    for tax in findall(settlement, 'ram:ApplicableTradeTax'):
        tax_point = convert_date(
            ctx,
            find(tax, 'ram:TaxPointDate'),
            f"{SETTLEMENT_PATH}/ApplicableTradeTax/TaxPointDate",
        )
        if tax_point:
            return tax_point
    return None


def map_period(
    ctx: MappingContext,
    parent: ET.Element,
    period: ET.Element | None,
    locator: str,
    description_code: str | None = None,
) -> None:
    """Map a CII billing period (BG-14, BG-26) to cac:InvoicePeriod."""
    start = convert_date(ctx, find(period, 'ram:StartDateTime'), f"{locator}/StartDateTime")
    end = convert_date(ctx, find(period, 'ram:EndDateTime'), f"{locator}/EndDateTime")
    if start is None and end is None and description_code is None:
        return
    invoice_period = aggregate(parent, 'InvoicePeriod')
    basic(invoice_period, 'StartDate', start)
    basic(invoice_period, 'EndDate', end)
    basic(invoice_period, 'DescriptionCode', description_code)


def map_header(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    document = cii.exchanged_document
    agreement = cii.agreement
    settlement = cii.settlement

    if ctx.config.emit_ubl_version_id:
        basic(root, 'UBLVersionID', ctx.shape.version_id)

    customization, profile = _document_context(ctx, cii)
    basic(root, 'CustomizationID', customization)
    basic(root, 'ProfileID', profile)

    # BT-1
    invoice_id = copy_id(root, 'ID', find(document, 'ram:ID'), with_scheme=False)
    require(ctx, invoice_id, "BT-1 (Invoice number)", f"{DOCUMENT_PATH}/ID")

    # BT-2
    issue_date = convert_date(ctx, find(document, 'ram:IssueDateTime'), f"{DOCUMENT_PATH}/IssueDateTime")
    basic(root, 'IssueDate', issue_date)
    require(ctx, issue_date, "BT-2 (Invoice issue date)", f"{DOCUMENT_PATH}/IssueDateTime")

    # BT-9, credit notes carry it in the payment means
    due_date = _due_date(ctx, settlement)
    if ctx.is_invoice:
        basic(root, 'DueDate', due_date)
    else:
        ctx.due_date = due_date

    # BT-3
    type_code = copy_code(root, ctx.kind.type_code_name, find(document, 'ram:TypeCode'))
    require(ctx, type_code, "BT-3 (Invoice type code)", f"{DOCUMENT_PATH}/TypeCode")

    # BG-1
    map_notes(root, document)

    # BT-7
    basic(root, 'TaxPointDate', _tax_point_date(ctx, settlement))

    # BT-5
    ctx.currency = text(settlement, 'ram:InvoiceCurrencyCode')
    copy_code(root, 'DocumentCurrencyCode', find(settlement, 'ram:InvoiceCurrencyCode'))
    require(ctx, ctx.currency, "BT-5 (Invoice currency code)", f"{SETTLEMENT_PATH}/InvoiceCurrencyCode")

    # BT-6
    copy_code(root, 'TaxCurrencyCode', find(settlement, 'ram:TaxCurrencyCode'))

    # BT-19
    accounts = findall(settlement, 'ram:ReceivableSpecifiedTradeAccountingAccount')
    if accounts:
        copy_text(root, 'AccountingCost', find(accounts[0], 'ram:ID'))

    # BT-10
    copy_text(root, 'BuyerReference', find(agreement, 'ram:BuyerReference'))

    # BG-14, BT-8
    description_code = None
    for tax in findall(settlement, 'ram:ApplicableTradeTax'):
        due_date_type = text(tax, 'ram:DueDateTypeCode')
        if due_date_type:
            description_code = PERIOD_DESCRIPTION_CODES.get(due_date_type)
            if description_code is None:
                ctx.errors.warning(
                    f"Unsupported VAT point date code '{due_date_type}'",
                    f"{SETTLEMENT_PATH}/ApplicableTradeTax/DueDateTypeCode",
                )
            break
    map_period(
        ctx,
        root,
        find(settlement, 'ram:BillingSpecifiedPeriod'),
        f"{SETTLEMENT_PATH}/BillingSpecifiedPeriod",
        description_code,
    )
