"""
Test fixtures for CII → UBL conversion.

This module provides sample CII D16B documents:
- A complete EN 16931 invoice (two lines, allowance, attachment, SEPA transfer)
- A credit note referring to that invoice
- A skeleton with only the mandatory containers
"""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent

CII_NAMESPACE_DECLARATIONS = (
    'xmlns:rsm="urn:un:unece:uncefact:data:standard:CrossIndustryInvoice:100" '
    'xmlns:ram="urn:un:unece:uncefact:data:standard:ReusableAggregateBusinessInformationEntity:100" '
    'xmlns:qdt="urn:un:unece:uncefact:data:standard:QualifiedDataType:100" '
    'xmlns:udt="urn:un:unece:uncefact:data:standard:UnqualifiedDataType:100"'
)


def load_fixture(name: str) -> str:
    """Load a fixture file as string."""
    filepath = FIXTURES_DIR / name
    return filepath.read_text(encoding="utf-8")


def get_invoice_sample() -> str:
    """Get the CII invoice sample XML."""
    return load_fixture("cii_invoice.xml")


def get_credit_note_sample() -> str:
    """Get the CII credit note sample XML."""
    return load_fixture("cii_credit_note.xml")


def build_cii(
    document: str = "",
    lines: str = "",
    agreement: str = "",
    delivery: str = "",
    settlement: str = "",
) -> str:
    """Build a CII document from fragments of its main containers."""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rsm:CrossIndustryInvoice {CII_NAMESPACE_DECLARATIONS}>
  <rsm:ExchangedDocument>{document}</rsm:ExchangedDocument>
  <rsm:SupplyChainTradeTransaction>
    {lines}
    <ram:ApplicableHeaderTradeAgreement>{agreement}</ram:ApplicableHeaderTradeAgreement>
    <ram:ApplicableHeaderTradeDelivery>{delivery}</ram:ApplicableHeaderTradeDelivery>
    <ram:ApplicableHeaderTradeSettlement>{settlement}</ram:ApplicableHeaderTradeSettlement>
  </rsm:SupplyChainTradeTransaction>
</rsm:CrossIndustryInvoice>
"""


def build_line(
    line_id: str = "1",
    quantity: str = "1",
    net_price: str = "10.00",
    line_total: str = "10.00",
    agreement_extra: str = "",
) -> str:
    """Build one IncludedSupplyChainTradeLineItem."""
    return f"""
    <ram:IncludedSupplyChainTradeLineItem>
      <ram:AssociatedDocumentLineDocument>
        <ram:LineID>{line_id}</ram:LineID>
      </ram:AssociatedDocumentLineDocument>
      <ram:SpecifiedTradeProduct>
        <ram:Name>Item {line_id}</ram:Name>
      </ram:SpecifiedTradeProduct>
      <ram:SpecifiedLineTradeAgreement>
        {agreement_extra}
        <ram:NetPriceProductTradePrice>
          <ram:ChargeAmount>{net_price}</ram:ChargeAmount>
        </ram:NetPriceProductTradePrice>
      </ram:SpecifiedLineTradeAgreement>
      <ram:SpecifiedLineTradeDelivery>
        <ram:BilledQuantity unitCode="C62">{quantity}</ram:BilledQuantity>
      </ram:SpecifiedLineTradeDelivery>
      <ram:SpecifiedLineTradeSettlement>
        <ram:ApplicableTradeTax>
          <ram:TypeCode>VAT</ram:TypeCode>
          <ram:CategoryCode>S</ram:CategoryCode>
          <ram:RateApplicablePercent>19</ram:RateApplicablePercent>
        </ram:ApplicableTradeTax>
        <ram:SpecifiedTradeSettlementLineMonetarySummation>
          <ram:LineTotalAmount>{line_total}</ram:LineTotalAmount>
        </ram:SpecifiedTradeSettlementLineMonetarySummation>
      </ram:SpecifiedLineTradeSettlement>
    </ram:IncludedSupplyChainTradeLineItem>
"""


# Empty containers only: converts, but with errors for every mandatory term
SKELETON_CII = build_cii()

# Expected values of the UBL created from cii_invoice.xml
EXPECTED_INVOICE = {
    "id": "INV-2024-0042",
    "issue_date": "2024-03-15",
    "due_date": "2024-03-29",
    "type_code": "380",
    "currency": "EUR",
    "seller_name": "Muster IT GmbH",
    "buyer_name": "Beispiel AG",
    "line_total": "1300",
    "tax_exclusive": "1200",
    "tax_inclusive": "1428",
    "payable": "1428",
    "tax_amount": "228",
}
