"""Tests for seller, buyer, payee and tax representative mapping."""

import pytest

from cii2ubl.ubl.document import NAMESPACES as NS

SELLER_DESCRIPTION = "<ram:Description>Registered at the district court Berlin</ram:Description>"
CURRENCY = "<ram:InvoiceCurrencyCode>EUR</ram:InvoiceCurrencyCode>"
BUYER_REFERENCE = "<ram:BuyerReference>REF-4711</ram:BuyerReference>"


def identifications(party):
    return [
        (element.text, element.get("schemeID"))
        for element in party.findall("cac:PartyIdentification/cbc:ID", NS)
    ]


class TestSeller:
    """Tests for the seller party (BG-4)."""

    @pytest.fixture
    def seller(self, invoice_xml, convert):
        document, _ = convert(invoice_xml)
        return document.find("cac:AccountingSupplierParty/cac:Party")

    def test_all_identifiers(self, seller):
        assert identifications(seller) == [("4000001000005", "0088"), ("SELLER-1", None)]

    def test_global_id_without_scheme_dropped(self, invoice_xml, convert):
        xml = invoice_xml.replace(
            "<ram:ID>SELLER-1</ram:ID>",
            "<ram:ID>SELLER-1</ram:ID><ram:GlobalID>NOSCHEME</ram:GlobalID>",
        )
        document, _ = convert(xml)
        seller = document.find("cac:AccountingSupplierParty/cac:Party")
        assert identifications(seller) == [("4000001000005", "0088"), ("SELLER-1", None)]

    def test_endpoint(self, seller):
        endpoint = seller.find("cbc:EndpointID", NS)
        assert endpoint.text == "invoice@muster.example"
        assert endpoint.get("schemeID") == "EM"

    def test_names(self, seller):
        assert seller.findtext("cac:PartyName/cbc:Name", namespaces=NS) == "Muster IT"
        assert seller.findtext("cac:PartyLegalEntity/cbc:RegistrationName", namespaces=NS) == "Muster IT GmbH"
        company_id = seller.find("cac:PartyLegalEntity/cbc:CompanyID", NS)
        assert company_id.text == "HRB 12345"
        assert company_id.get("schemeID") == "0002"

    def test_address(self, seller):
        address = seller.find("cac:PostalAddress", NS)
        assert address.findtext("cbc:StreetName", namespaces=NS) == "Hauptstr. 1"
        assert address.findtext("cbc:AdditionalStreetName", namespaces=NS) == "Building B"
        assert address.findtext("cbc:CityName", namespaces=NS) == "Berlin"
        assert address.findtext("cbc:PostalZone", namespaces=NS) == "10115"
        assert address.findtext("cac:Country/cbc:IdentificationCode", namespaces=NS) == "DE"

    def test_vat_registration_uses_configured_scheme(self, seller):
        assert seller.findtext("cac:PartyTaxScheme/cbc:CompanyID", namespaces=NS) == "DE123456789"
        assert seller.findtext("cac:PartyTaxScheme/cac:TaxScheme/cbc:ID", namespaces=NS) == "VAT"

    def test_contact(self, seller):
        contact = seller.find("cac:Contact", NS)
        assert contact.findtext("cbc:Name", namespaces=NS) == "Max Muster"
        assert contact.findtext("cbc:Telephone", namespaces=NS) == "+49 30 123456"
        assert contact.findtext("cbc:ElectronicMail", namespaces=NS) == "max@muster.example"

    def test_element_order(self, seller):
        names = [child.tag.split("}")[1] for child in seller]
        assert names == [
            "EndpointID",
            "PartyIdentification",
            "PartyIdentification",
            "PartyName",
            "PostalAddress",
            "PartyTaxScheme",
            "PartyLegalEntity",
            "Contact",
        ]

    def test_custom_vat_scheme(self, invoice_xml, convert):
        document, _ = convert(invoice_xml, vat_scheme="TVA")
        assert document.findtext(
            "cac:AccountingSupplierParty/cac:Party/cac:PartyTaxScheme/cac:TaxScheme/cbc:ID"
        ) == "TVA"

    def test_missing_seller(self, invoice_xml, convert):
        start = invoice_xml.index("<ram:SellerTradeParty>")
        end = invoice_xml.index("</ram:SellerTradeParty>") + len("</ram:SellerTradeParty>")
        document, errors = convert(invoice_xml[:start] + invoice_xml[end:])
        assert document.find("cac:AccountingSupplierParty") is None
        assert any("BT-27" in d.message for d in errors.errors)


class TestCompanyLegalForm:
    """CompanyLegalForm is repeatable from UBL 2.3 on."""

    @pytest.fixture
    def two_descriptions(self, invoice_xml):
        return invoice_xml.replace(
            SELLER_DESCRIPTION,
            SELLER_DESCRIPTION + "<ram:Description>Share capital 25000 EUR</ram:Description>",
        )

    @pytest.mark.parametrize("version,expected", [("2.1", 1), ("2.2", 1), ("2.3", 2), ("2.4", 2)])
    def test_cardinality(self, two_descriptions, convert, version, expected):
        document, errors = convert(two_descriptions, ubl_version=version)
        forms = document.findall(
            "cac:AccountingSupplierParty/cac:Party/cac:PartyLegalEntity/cbc:CompanyLegalForm"
        )
        assert len(forms) == expected
        assert forms[0].text == "Registered at the district court Berlin"
        assert not errors.has_errors()


class TestBuyer:
    """Tests for the buyer party (BG-7)."""

    def test_buyer(self, invoice_xml, convert):
        document, _ = convert(invoice_xml)
        buyer = document.find("cac:AccountingCustomerParty/cac:Party")
        assert identifications(buyer) == [("CUST-77", None)]
        assert buyer.find("cac:PartyName", NS) is None
        assert buyer.findtext("cac:PostalAddress/cbc:CityName", namespaces=NS) == "München"
        assert buyer.find("cbc:EndpointID", NS).get("schemeID") == "9930"

    def test_missing_buyer_name(self, invoice_xml, convert):
        _, errors = convert(invoice_xml.replace("<ram:Name>Beispiel AG</ram:Name>", ""))
        assert [d.message for d in errors.errors] == ["Mandatory business term BT-44 (Buyer name) is missing"]

    def test_single_identifier_prefers_global_id(self, invoice_xml, convert):
        xml = invoice_xml.replace(
            "<ram:ID>CUST-77</ram:ID>",
            '<ram:ID>CUST-77</ram:ID><ram:GlobalID schemeID="0088">4000001000029</ram:GlobalID>',
        )
        document, _ = convert(xml)
        buyer = document.find("cac:AccountingCustomerParty/cac:Party")
        assert identifications(buyer) == [("4000001000029", "0088")]


class TestPayeeAndTaxRepresentative:
    """Tests for optional parties."""

    def test_payee(self, invoice_xml, convert):
        xml = invoice_xml.replace(
            CURRENCY,
            CURRENCY
            + "<ram:PayeeTradeParty>"
            "<ram:ID>P-1</ram:ID>"
            '<ram:GlobalID schemeID="0088">4000001000036</ram:GlobalID>'
            "<ram:Name>Factoring AG</ram:Name>"
            "</ram:PayeeTradeParty>",
        )
        document, errors = convert(xml)
        payee = document.find("cac:PayeeParty")
        assert identifications(payee) == [("4000001000036", "0088")]
        assert payee.findtext("cac:PartyName/cbc:Name", namespaces=NS) == "Factoring AG"
        assert payee.find("cac:PartyLegalEntity", NS) is None
        assert list(errors) == []

    def test_payee_without_name(self, invoice_xml, convert):
        xml = invoice_xml.replace(
            CURRENCY, CURRENCY + "<ram:PayeeTradeParty><ram:ID>P-1</ram:ID></ram:PayeeTradeParty>"
        )
        _, errors = convert(xml)
        assert any("BT-59" in d.message for d in errors.errors)

    def test_tax_representative(self, invoice_xml, convert):
        xml = invoice_xml.replace(
            BUYER_REFERENCE,
            BUYER_REFERENCE
            + "<ram:SellerTaxRepresentativeTradeParty>"
            "<ram:Name>Steuer Vertreter GmbH</ram:Name>"
            "<ram:PostalTradeAddress><ram:CountryID>DE</ram:CountryID></ram:PostalTradeAddress>"
            '<ram:SpecifiedTaxRegistration><ram:ID schemeID="VA">DE111111111</ram:ID></ram:SpecifiedTaxRegistration>'
            "</ram:SellerTaxRepresentativeTradeParty>",
        )
        document, errors = convert(xml)
        representative = document.find("cac:TaxRepresentativeParty")
        assert representative.findtext("cac:PartyName/cbc:Name", namespaces=NS) == "Steuer Vertreter GmbH"
        assert representative.findtext("cac:PartyTaxScheme/cbc:CompanyID", namespaces=NS) == "DE111111111"
        assert list(errors) == []
