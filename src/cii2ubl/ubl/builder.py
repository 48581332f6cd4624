"""
UBL element construction.

UBL is defined by XSD sequences, so the position of a child matters. Elements
are inserted at their schema position regardless of the order in which the
mapping code creates them. Basic components with no value are never created,
and aggregates left without children are removed by prune_empty().
"""

from xml.etree import ElementTree as ET

from ..numeric import format_decimal

CBC_NS = 'urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2'
CAC_NS = 'urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2'

_PARTY = (
    'EndpointID', 'PartyIdentification', 'PartyName', 'PostalAddress',
    'PartyTaxScheme', 'PartyLegalEntity', 'Contact',
)

_DOCUMENT_REFERENCE = (
    'ID', 'CopyIndicator', 'UUID', 'IssueDate', 'IssueTime', 'DocumentTypeCode',
    'DocumentType', 'DocumentDescription', 'Attachment', 'ValidityPeriod',
)

_ALLOWANCE_CHARGE = (
    'ID', 'ChargeIndicator', 'AllowanceChargeReasonCode', 'AllowanceChargeReason',
    'MultiplierFactorNumeric', 'PrepaidIndicator', 'SequenceNumeric', 'Amount',
    'BaseAmount', 'AccountingCostCode', 'AccountingCost', 'PerUnitAmount',
    'TaxCategory', 'TaxTotal',
)

_LINE_TAIL = (
    'InvoicePeriod', 'OrderLineReference', 'DespatchLineReference',
    'ReceiptLineReference', 'BillingReference', 'DocumentReference',
    'PricingReference', 'OriginatorParty', 'Delivery', 'PaymentTerms',
)

# Child sequence per complex type (subset used by EN 16931)
TYPE_ORDER: dict[str, tuple[str, ...]] = {
    'Invoice': (
        'UBLExtensions', 'UBLVersionID', 'CustomizationID', 'ProfileID',
        'ProfileExecutionID', 'ID', 'CopyIndicator', 'UUID', 'IssueDate',
        'IssueTime', 'DueDate', 'InvoiceTypeCode', 'Note', 'TaxPointDate',
        'DocumentCurrencyCode', 'TaxCurrencyCode', 'PricingCurrencyCode',
        'PaymentCurrencyCode', 'AccountingCostCode', 'AccountingCost',
        'LineCountNumeric', 'BuyerReference', 'InvoicePeriod', 'OrderReference',
        'BillingReference', 'DespatchDocumentReference', 'ReceiptDocumentReference',
        'StatementDocumentReference', 'OriginatorDocumentReference',
        'ContractDocumentReference', 'AdditionalDocumentReference',
        'ProjectReference', 'Signature', 'AccountingSupplierParty',
        'AccountingCustomerParty', 'PayeeParty', 'BuyerCustomerParty',
        'SellerSupplierParty', 'TaxRepresentativeParty', 'Delivery',
        'DeliveryTerms', 'PaymentMeans', 'PaymentTerms', 'PrepaidPayment',
        'AllowanceCharge', 'TaxExchangeRate', 'PricingExchangeRate',
        'PaymentExchangeRate', 'TaxTotal', 'WithholdingTaxTotal',
        'LegalMonetaryTotal', 'InvoiceLine',
    ),
    'CreditNote': (
        'UBLExtensions', 'UBLVersionID', 'CustomizationID', 'ProfileID',
        'ProfileExecutionID', 'ID', 'CopyIndicator', 'UUID', 'IssueDate',
        'IssueTime', 'TaxPointDate', 'CreditNoteTypeCode', 'Note',
        'DocumentCurrencyCode', 'TaxCurrencyCode', 'PricingCurrencyCode',
        'PaymentCurrencyCode', 'AccountingCostCode', 'AccountingCost',
        'LineCountNumeric', 'BuyerReference', 'InvoicePeriod',
        'DiscrepancyResponse', 'OrderReference', 'BillingReference',
        'DespatchDocumentReference', 'ReceiptDocumentReference',
        'ContractDocumentReference', 'AdditionalDocumentReference',
        'StatementDocumentReference', 'OriginatorDocumentReference',
        'ProjectReference', 'Signature', 'AccountingSupplierParty',
        'AccountingCustomerParty', 'PayeeParty', 'BuyerCustomerParty',
        'SellerSupplierParty', 'TaxRepresentativeParty', 'Delivery',
        'DeliveryTerms', 'PaymentMeans', 'PaymentTerms', 'TaxExchangeRate',
        'PricingExchangeRate', 'PaymentExchangeRate', 'AllowanceCharge',
        'TaxTotal', 'LegalMonetaryTotal', 'CreditNoteLine',
    ),
    'InvoiceLine': (
        'ID', 'UUID', 'Note', 'InvoicedQuantity', 'LineExtensionAmount',
        'TaxPointDate', 'AccountingCostCode', 'AccountingCost',
        'PaymentPurposeCode', 'FreeOfChargeIndicator',
    ) + _LINE_TAIL + ('AllowanceCharge', 'TaxTotal', 'WithholdingTaxTotal', 'Item', 'Price'),
    'CreditNoteLine': (
        'ID', 'UUID', 'Note', 'CreditedQuantity', 'LineExtensionAmount',
        'TaxPointDate', 'AccountingCostCode', 'AccountingCost',
        'PaymentPurposeCode', 'FreeOfChargeIndicator', 'InvoicePeriod',
        'OrderLineReference', 'DiscrepancyResponse', 'DespatchLineReference',
        'ReceiptLineReference', 'BillingReference', 'DocumentReference',
        'PricingReference', 'OriginatorParty', 'Delivery', 'TaxTotal',
        'AllowanceCharge', 'Item', 'Price',
    ),
    'Period': (
        'StartDate', 'StartTime', 'EndDate', 'EndTime', 'DurationMeasure',
        'DescriptionCode', 'Description',
    ),
    'OrderReference': (
        'ID', 'SalesOrderID', 'CopyIndicator', 'UUID', 'IssueDate', 'IssueTime',
        'CustomerReference', 'OrderTypeCode', 'DocumentReference',
    ),
    'BillingReference': (
        'InvoiceDocumentReference', 'SelfBilledInvoiceDocumentReference',
        'CreditNoteDocumentReference', 'SelfBilledCreditNoteDocumentReference',
        'DebitNoteDocumentReference', 'ReminderDocumentReference',
        'AdditionalDocumentReference', 'BillingReferenceLine',
    ),
    'DocumentReference': _DOCUMENT_REFERENCE,
    'Attachment': ('EmbeddedDocumentBinaryObject', 'ExternalReference'),
    'ExternalReference': ('URI', 'DocumentHash', 'HashAlgorithmMethod', 'ExpiryDate'),
    'ProjectReference': ('ID', 'UUID', 'IssueDate', 'WorkPhaseReference'),
    'SupplierParty': ('CustomerAssignedAccountID', 'AdditionalAccountID', 'Party'),
    'CustomerParty': (
        'CustomerAssignedAccountID', 'SupplierAssignedAccountID',
        'AdditionalAccountID', 'Party',
    ),
    'Party': _PARTY,
    'PartyIdentification': ('ID',),
    'PartyName': ('Name',),
    'Address': (
        'ID', 'AddressTypeCode', 'AddressFormatCode', 'Postbox', 'Floor', 'Room',
        'StreetName', 'AdditionalStreetName', 'BlockName', 'BuildingName',
        'BuildingNumber', 'InhouseMail', 'Department', 'MarkAttention', 'MarkCare',
        'PlotIdentification', 'CitySubdivisionName', 'CityName', 'PostalZone',
        'CountrySubentity', 'CountrySubentityCode', 'Region', 'District',
        'TimezoneOffset', 'AddressLine', 'Country', 'LocationCoordinate',
    ),
    'AddressLine': ('Line',),
    'Country': ('IdentificationCode', 'Name'),
    'PartyTaxScheme': (
        'RegistrationName', 'CompanyID', 'TaxLevelCode', 'ExemptionReasonCode',
        'ExemptionReason', 'RegistrationAddress', 'TaxScheme',
    ),
    'PartyLegalEntity': (
        'RegistrationName', 'CompanyID', 'RegistrationDate',
        'RegistrationExpirationDate', 'CompanyLegalFormCode', 'CompanyLegalForm',
        'SoleProprietorshipIndicator', 'CompanyLiquidationStatusCode',
        'CorporateStockAmount', 'FullyPaidSharesIndicator', 'RegistrationAddress',
    ),
    'Contact': ('ID', 'Name', 'Telephone', 'Telefax', 'ElectronicMail', 'Note'),
    'TaxScheme': ('ID', 'Name', 'TaxTypeCode', 'CurrencyCode'),
    'Delivery': (
        'ID', 'Quantity', 'MinimumQuantity', 'MaximumQuantity',
        'ActualDeliveryDate', 'ActualDeliveryTime', 'LatestDeliveryDate',
        'LatestDeliveryTime', 'ReleaseID', 'TrackingID', 'DeliveryAddress',
        'DeliveryLocation', 'AlternativeDeliveryLocation', 'RequestedDeliveryPeriod',
        'PromisedDeliveryPeriod', 'EstimatedDeliveryPeriod', 'CarrierParty',
        'DeliveryParty',
    ),
    'Location': (
        'ID', 'Description', 'Conditions', 'CountrySubentity',
        'CountrySubentityCode', 'LocationTypeCode', 'InformationURI', 'Name',
        'ValidityPeriod', 'Address',
    ),
    'PaymentMeans': (
        'ID', 'PaymentMeansCode', 'PaymentDueDate', 'PaymentChannelCode',
        'InstructionID', 'InstructionNote', 'PaymentID', 'CardAccount',
        'PayerFinancialAccount', 'PayeeFinancialAccount', 'CreditAccount',
        'PaymentMandate', 'TradeFinancing',
    ),
    'CardAccount': (
        'PrimaryAccountNumberID', 'NetworkID', 'CardTypeCode',
        'ValidityStartDate', 'ExpiryDate', 'IssuerID', 'IssueNumberID', 'CV2ID',
        'CardChipCode', 'ChipApplicationID', 'HolderName',
    ),
    'FinancialAccount': (
        'ID', 'Name', 'AliasName', 'AccountTypeCode', 'AccountFormatCode',
        'CurrencyCode', 'PaymentNote', 'FinancialInstitutionBranch', 'Country',
    ),
    'Branch': ('ID', 'Name', 'FinancialInstitution', 'Address'),
    'PaymentMandate': (
        'ID', 'MandateTypeCode', 'MaximumPaymentInstructionsNumeric',
        'MaximumPaidAmount', 'SignatureID', 'PayerParty', 'PayerFinancialAccount',
    ),
    'PaymentTerms': ('ID', 'PaymentMeansID', 'PrepaidPaymentReferenceID', 'Note'),
    'AllowanceCharge': _ALLOWANCE_CHARGE,
    'TaxCategory': (
        'ID', 'Name', 'Percent', 'BaseUnitMeasure', 'PerUnitAmount',
        'TaxExemptionReasonCode', 'TaxExemptionReason', 'TierRange',
        'TierRatePercent', 'TaxScheme',
    ),
    'TaxTotal': (
        'TaxAmount', 'RoundingAmount', 'TaxEvidenceIndicator',
        'TaxIncludedIndicator', 'TaxSubtotal',
    ),
    'TaxSubtotal': (
        'TaxableAmount', 'TaxAmount', 'CalculationSequenceNumeric',
        'TransactionCurrencyTaxAmount', 'Percent', 'BaseUnitMeasure',
        'PerUnitAmount', 'TierRange', 'TierRatePercent', 'TaxCategory',
    ),
    'MonetaryTotal': (
        'LineExtensionAmount', 'TaxExclusiveAmount', 'TaxInclusiveAmount',
        'AllowanceTotalAmount', 'ChargeTotalAmount', 'PrepaidAmount',
        'PayableRoundingAmount', 'PayableAmount', 'PayableAlternativeAmount',
    ),
    'OrderLineReference': ('LineID', 'SalesOrderLineID', 'UUID', 'LineStatusCode', 'OrderReference'),
    'Item': (
        'Description', 'PackQuantity', 'PackSizeNumeric', 'CatalogueIndicator',
        'Name', 'HazardousRiskIndicator', 'AdditionalInformation', 'Keyword',
        'BrandName', 'ModelName', 'BuyersItemIdentification',
        'SellersItemIdentification', 'ManufacturersItemIdentification',
        'StandardItemIdentification', 'CatalogueItemIdentification',
        'AdditionalItemIdentification', 'CatalogueDocumentReference',
        'ItemSpecificationDocumentReference', 'OriginCountry',
        'CommodityClassification', 'TransactionConditions', 'HazardousItem',
        'ClassifiedTaxCategory', 'AdditionalItemProperty',
    ),
    'ItemIdentification': ('ID', 'ExtendedID', 'BarcodeSymbologyID'),
    'CommodityClassification': (
        'NatureCode', 'CargoTypeCode', 'CommodityCode', 'ItemClassificationCode',
    ),
    'ItemProperty': ('ID', 'Name', 'NameCode', 'TestMethod', 'Value'),
    'Price': (
        'PriceAmount', 'BaseQuantity', 'PriceChangeReason', 'PriceTypeCode',
        'PriceType', 'OrderableUnitFactorRate', 'ValidityPeriod', 'PriceList',
        'AllowanceCharge',
    ),
}

# Element name → complex type, where they differ
ELEMENT_TYPES: dict[str, str] = {
    'InvoicePeriod': 'Period',
    'InvoiceDocumentReference': 'DocumentReference',
    'DespatchDocumentReference': 'DocumentReference',
    'ReceiptDocumentReference': 'DocumentReference',
    'OriginatorDocumentReference': 'DocumentReference',
    'ContractDocumentReference': 'DocumentReference',
    'AdditionalDocumentReference': 'DocumentReference',
    'AccountingSupplierParty': 'SupplierParty',
    'AccountingCustomerParty': 'CustomerParty',
    'PayeeParty': 'Party',
    'TaxRepresentativeParty': 'Party',
    'DeliveryParty': 'Party',
    'PostalAddress': 'Address',
    'DeliveryLocation': 'Location',
    'OriginCountry': 'Country',
    'PayeeFinancialAccount': 'FinancialAccount',
    'PayerFinancialAccount': 'FinancialAccount',
    'FinancialInstitutionBranch': 'Branch',
    'ClassifiedTaxCategory': 'TaxCategory',
    'LegalMonetaryTotal': 'MonetaryTotal',
    'BuyersItemIdentification': 'ItemIdentification',
    'SellersItemIdentification': 'ItemIdentification',
    'StandardItemIdentification': 'ItemIdentification',
    'AdditionalItemProperty': 'ItemProperty',
}


def local_name(element: ET.Element) -> str:
    """Strip the namespace from an element tag."""
    tag = element.tag
    return tag.rsplit('}', 1)[1] if '}' in tag else tag


def _child_order(parent: ET.Element) -> tuple[str, ...] | None:
    name = local_name(parent)
    return TYPE_ORDER.get(ELEMENT_TYPES.get(name, name))


def _insert(parent: ET.Element, child: ET.Element) -> ET.Element:
    order = _child_order(parent)
    if order is None:
        parent.append(child)
        return child

    def rank(element: ET.Element) -> int:
        name = local_name(element)
        return order.index(name) if name in order else len(order)

    child_rank = rank(child)
    for index, existing in enumerate(parent):
        if rank(existing) > child_rank:
            parent.insert(index, child)
            return child
    parent.append(child)
    return child


def _clean_attributes(attributes: dict) -> dict[str, str]:
    return {key: str(value) for key, value in attributes.items() if value not in (None, '')}


def aggregate(parent: ET.Element, name: str) -> ET.Element:
    """Create a cac: aggregate under parent at its schema position."""
    return _insert(parent, ET.Element(f'{{{CAC_NS}}}{name}'))


def basic(parent: ET.Element, name: str, value, **attributes) -> ET.Element | None:
    """Create a cbc: component with text value.

    Nothing is created when the value is None or empty. Decimal values are
    formatted without trailing zeros. Attributes with empty values are
    dropped.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        value = format_decimal(value)
    if value == '':
        return None
    element = ET.Element(f'{{{CBC_NS}}}{name}', _clean_attributes(attributes))
    element.text = value
    return _insert(parent, element)


def has_content(element: ET.Element) -> bool:
    """True if the element has text or at least one child."""
    return len(element) > 0 or bool(element.text and element.text.strip())


def prune_empty(element: ET.Element) -> None:
    """Remove aggregates without content, deepest first."""
    for child in list(element):
        prune_empty(child)
        if not has_content(child):
            element.remove(child)
