"""Tests for document totals and tax totals."""

from cii2ubl.ubl.document import NAMESPACES as NS

ROUNDING = "<ram:RoundingAmount>0.00</ram:RoundingAmount>"
TAX_TOTAL = '<ram:TaxTotalAmount currencyID="EUR">228.00</ram:TaxTotalAmount>'


class TestRoundingAmount:
    """A zero rounding amount is left out."""

    def test_zero_omitted(self, invoice_xml, convert):
        document, _ = convert(invoice_xml)
        assert document.find("cac:LegalMonetaryTotal/cbc:PayableRoundingAmount") is None

    def test_non_zero_kept(self, invoice_xml, convert):
        document, errors = convert(invoice_xml.replace(ROUNDING, "<ram:RoundingAmount>0.01</ram:RoundingAmount>"))
        rounding = document.find("cac:LegalMonetaryTotal/cbc:PayableRoundingAmount")
        assert rounding.text == "0.01"
        assert rounding.get("currencyID") == "EUR"
        assert not errors.has_errors()

    def test_element_order(self, invoice_xml, convert):
        document, _ = convert(invoice_xml.replace(ROUNDING, "<ram:RoundingAmount>-0.40</ram:RoundingAmount>"))
        names = [child.tag.split("}")[1] for child in document.find("cac:LegalMonetaryTotal")]
        assert names == [
            "LineExtensionAmount",
            "TaxExclusiveAmount",
            "TaxInclusiveAmount",
            "AllowanceTotalAmount",
            "PayableRoundingAmount",
            "PayableAmount",
        ]


class TestMonetaryTotals:
    def test_currency_defaults_to_document_currency(self, invoice_xml, convert):
        document, _ = convert(invoice_xml)
        for amount in document.find("cac:LegalMonetaryTotal"):
            assert amount.get("currencyID") == "EUR"

    def test_prepaid_amount(self, invoice_xml, convert):
        xml = invoice_xml.replace(
            "<ram:DuePayableAmount>1428.00</ram:DuePayableAmount>",
            "<ram:TotalPrepaidAmount>428.00</ram:TotalPrepaidAmount>"
            "<ram:DuePayableAmount>1000.00</ram:DuePayableAmount>",
        )
        document, _ = convert(xml)
        assert document.findtext("cac:LegalMonetaryTotal/cbc:PrepaidAmount") == "428"
        assert document.findtext("cac:LegalMonetaryTotal/cbc:PayableAmount") == "1000"

    def test_invalid_amount(self, invoice_xml, convert):
        xml = invoice_xml.replace(
            "<ram:GrandTotalAmount>1428.00</ram:GrandTotalAmount>",
            "<ram:GrandTotalAmount>1.428,00</ram:GrandTotalAmount>",
        )
        document, errors = convert(xml)
        assert document.find("cac:LegalMonetaryTotal/cbc:TaxInclusiveAmount") is None
        messages = [d.message for d in errors.errors]
        assert messages == [
            "Invalid decimal value '1.428,00'",
            "Mandatory business term BT-112 (Invoice total amount with VAT) is missing",
        ]


class TestTaxTotals:
    def test_missing_tax_total_amount(self, invoice_xml, convert):
        document, errors = convert(invoice_xml.replace(TAX_TOTAL, ""))
        tax_total = document.find("cac:TaxTotal")
        assert tax_total.findtext("cbc:TaxAmount", namespaces=NS) == "0"
        assert tax_total.find("cac:TaxSubtotal", NS) is not None
        assert len(errors.warnings) == 1
        assert not errors.has_errors()

    def test_tax_currency_total(self, invoice_xml, convert):
        xml = invoice_xml.replace(
            TAX_TOTAL,
            '<ram:TaxTotalAmount currencyID="USD">250.00</ram:TaxTotalAmount>' + TAX_TOTAL,
        )
        document, _ = convert(xml)
        totals = document.findall("cac:TaxTotal")
        assert [t.find("cbc:TaxAmount", NS).get("currencyID") for t in totals] == ["USD", "EUR"]
        assert totals[0].find("cac:TaxSubtotal", NS) is None
        assert totals[1].find("cac:TaxSubtotal", NS) is not None

    def test_exemption_reason(self, invoice_xml, convert):
        xml = invoice_xml.replace(
            "<ram:DueDateTypeCode>5</ram:DueDateTypeCode>",
            "<ram:ExemptionReason>Not exempt</ram:ExemptionReason>"
            "<ram:DueDateTypeCode>5</ram:DueDateTypeCode>",
        )
        document, _ = convert(xml)
        assert document.findtext(
            "cac:TaxTotal/cac:TaxSubtotal/cac:TaxCategory/cbc:TaxExemptionReason"
        ) == "Not exempt"
