"""
Referenced documents: order, preceding invoices, despatch and receiving
advice, tender, contract, project and additional supporting documents,
including embedded attachments.
"""

from xml.etree import ElementTree as ET

from ..cii.reader import CIIDocument, find, findall, text
from ..ubl.builder import aggregate, basic
from .context import AGREEMENT_PATH, DELIVERY_PATH, SETTLEMENT_PATH, MappingContext
from .dates import convert_date
from .values import ID_ATTRIBUTES, copy_binary, copy_text

# Document type codes that may appear on a UBL document reference
VALID_DOCUMENT_TYPE_CODES = frozenset({"50", "130", "916"})

# Tender or lot reference (BT-17)
ORIGINATOR_TYPE_CODE = "50"


def map_document_reference(
    ctx: MappingContext,
    parent: ET.Element,
    name: str,
    reference: ET.Element,
    locator: str,
    with_type_code: bool = True,
) -> ET.Element | None:
    """Map a CII ReferencedDocument to a UBL DocumentReference.

    References without an issuer assigned ID are skipped, as UBL requires
    the ID.
    """
    issuer_id = find(reference, 'ram:IssuerAssignedID')
    document_id = text(issuer_id)
    if document_id is None:
        return None

    element = aggregate(parent, name)
    attributes = {a: issuer_id.get(a) for a in ID_ATTRIBUTES if issuer_id.get(a)}
    reference_type = text(reference, 'ram:ReferenceTypeCode')
    if reference_type:
        attributes['schemeID'] = reference_type
    basic(element, 'ID', document_id, **attributes)

    if with_type_code:
        type_code = text(reference, 'ram:TypeCode')
        if type_code in VALID_DOCUMENT_TYPE_CODES:
            basic(element, 'DocumentTypeCode', type_code)

    basic(element, 'IssueDate', convert_date(
        ctx, find(reference, 'ram:FormattedIssueDateTime'), f"{locator}/FormattedIssueDateTime"
    ))

    for description in findall(reference, 'ram:Name'):
        copy_text(element, 'DocumentDescription', description)

    binary = find(reference, 'ram:AttachmentBinaryObject')
    uri = text(reference, 'ram:URIID')
    if text(binary) or uri:
        attachment = aggregate(element, 'Attachment')
        copy_binary(attachment, 'EmbeddedDocumentBinaryObject', binary)
        if uri:
            basic(aggregate(attachment, 'ExternalReference'), 'URI', uri)

    return element


def _map_order_reference(ctx: MappingContext, agreement: ET.Element | None, root: ET.Element) -> None:
    # BT-13, BT-14
    order_id = text(agreement, 'ram:BuyerOrderReferencedDocument/ram:IssuerAssignedID')
    sales_order_id = text(agreement, 'ram:SellerOrderReferencedDocument/ram:IssuerAssignedID')
    if order_id is None and sales_order_id is None:
        return

    if order_id is None:
        # OrderReference/ID is mandatory in UBL
        order_id = ctx.config.default_order_ref_id
        if not order_id:
            ctx.errors.warning(
                "Seller order reference without buyer order reference and no default order "
                "reference ID, OrderReference omitted",
                f"{AGREEMENT_PATH}/SellerOrderReferencedDocument",
            )
            return

    order_reference = aggregate(root, 'OrderReference')
    basic(order_reference, 'ID', order_id)
    basic(order_reference, 'SalesOrderID', sales_order_id)


def _map_project_reference(ctx: MappingContext, agreement: ET.Element | None, root: ET.Element) -> None:
    # BT-11
    project_id = text(agreement, 'ram:SpecifiedProcuringProject/ram:ID')
    if project_id is None:
        return
    if ctx.shape.supports_project_reference(ctx.kind):
        basic(aggregate(root, 'ProjectReference'), 'ID', project_id)
    else:
        reference = aggregate(root, 'AdditionalDocumentReference')
        basic(reference, 'ID', project_id)
        basic(reference, 'DocumentTypeCode', ORIGINATOR_TYPE_CODE)


def map_references(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    agreement = cii.agreement
    delivery = cii.delivery
    settlement = cii.settlement

    _map_order_reference(ctx, agreement, root)

    # BG-3
    for preceding in findall(settlement, 'ram:InvoiceReferencedDocument'):
        billing_reference = aggregate(root, 'BillingReference')
        map_document_reference(
            ctx,
            billing_reference,
            'InvoiceDocumentReference',
            preceding,
            f"{SETTLEMENT_PATH}/InvoiceReferencedDocument",
            with_type_code=False,
        )

    # BT-16
    despatch = find(delivery, 'ram:DespatchAdviceReferencedDocument')
    if despatch is not None:
        map_document_reference(
            ctx, root, 'DespatchDocumentReference', despatch,
            f"{DELIVERY_PATH}/DespatchAdviceReferencedDocument", with_type_code=False,
        )

    # BT-15
    receiving = find(delivery, 'ram:ReceivingAdviceReferencedDocument')
    if receiving is not None:
        map_document_reference(
            ctx, root, 'ReceiptDocumentReference', receiving,
            f"{DELIVERY_PATH}/ReceivingAdviceReferencedDocument", with_type_code=False,
        )

    # BT-12
    contract = find(agreement, 'ram:ContractReferencedDocument')
    if contract is not None:
        map_document_reference(
            ctx, root, 'ContractDocumentReference', contract,
            f"{AGREEMENT_PATH}/ContractReferencedDocument", with_type_code=False,
        )

    # BT-17, BG-24
    locator = f"{AGREEMENT_PATH}/AdditionalReferencedDocument"
    for additional in findall(agreement, 'ram:AdditionalReferencedDocument'):
        if text(additional, 'ram:TypeCode') == ORIGINATOR_TYPE_CODE:
            map_document_reference(
                ctx, root, 'OriginatorDocumentReference', additional, locator,
                with_type_code=False,
            )
        else:
            map_document_reference(ctx, root, 'AdditionalDocumentReference', additional, locator)

    _map_project_reference(ctx, agreement, root)
