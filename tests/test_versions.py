"""Tests for UBL version shaping and element ordering."""

from decimal import Decimal
from xml.etree import ElementTree as ET

import pytest

from cii2ubl.config import ConversionConfig, UnsupportedUBLVersionError
from cii2ubl.converter import CIIToUBLConverter
from cii2ubl.ubl.builder import aggregate, basic, local_name, prune_empty
from cii2ubl.ubl.document import CREDIT_NOTE_NS, INVOICE_NS, DocumentKind
from cii2ubl.ubl.versions import VERSION_SHAPES, get_version_shape


class TestVersionShapes:
    """Tests for get_version_shape."""

    @pytest.mark.parametrize("version", ["2.1", "2.2", "2.3", "2.4"])
    def test_supported(self, version):
        assert get_version_shape(version).version_id == version

    @pytest.mark.parametrize("version", ["2.0", "3", "", "latest"])
    def test_unsupported(self, version):
        with pytest.raises(UnsupportedUBLVersionError):
            get_version_shape(version)

    def test_converter_rejects_unsupported_version(self):
        with pytest.raises(UnsupportedUBLVersionError):
            CIIToUBLConverter(ConversionConfig(ubl_version="2.5"))

    def test_cardinalities(self):
        assert not VERSION_SHAPES["2.1"].multiple_company_legal_forms
        assert not VERSION_SHAPES["2.2"].multiple_card_accounts
        assert VERSION_SHAPES["2.3"].multiple_company_legal_forms
        assert VERSION_SHAPES["2.4"].multiple_card_accounts

    def test_credit_note_project_reference(self):
        assert not VERSION_SHAPES["2.1"].supports_project_reference(DocumentKind.CREDIT_NOTE)
        assert VERSION_SHAPES["2.1"].supports_project_reference(DocumentKind.INVOICE)
        assert VERSION_SHAPES["2.2"].supports_project_reference(DocumentKind.CREDIT_NOTE)

    def test_create_document(self):
        invoice = get_version_shape("2.3").create_document(DocumentKind.INVOICE)
        credit_note = get_version_shape("2.3").create_document(DocumentKind.CREDIT_NOTE)
        assert invoice.root.tag == f"{{{INVOICE_NS}}}Invoice"
        assert credit_note.root.tag == f"{{{CREDIT_NOTE_NS}}}CreditNote"
        assert invoice.version == "2.3"


class TestBuilder:
    """Elements land at their schema position."""

    def test_schema_order_independent_of_creation_order(self):
        root = get_version_shape("2.1").create_document(DocumentKind.INVOICE).root
        basic(root, "DocumentCurrencyCode", "EUR")
        basic(root, "ID", "1")
        aggregate(root, "LegalMonetaryTotal")
        basic(root, "IssueDate", "2024-03-15")
        basic(root, "CustomizationID", "urn:x")

        names = [local_name(child) for child in root]
        assert names == ["CustomizationID", "ID", "IssueDate", "DocumentCurrencyCode", "LegalMonetaryTotal"]

    def test_repeated_elements_stay_in_creation_order(self):
        root = get_version_shape("2.1").create_document(DocumentKind.INVOICE).root
        basic(root, "Note", "first")
        basic(root, "ID", "1")
        basic(root, "Note", "second")
        assert [child.text for child in root] == ["1", "first", "second"]

    def test_basic_skips_empty_values(self):
        parent = ET.Element("Parent")
        assert basic(parent, "Name", None) is None
        assert basic(parent, "Name", "") is None
        assert len(parent) == 0

    def test_basic_formats_decimals_and_drops_empty_attributes(self):
        parent = ET.Element("Parent")
        element = basic(parent, "Amount", Decimal("100.00"), currencyID="EUR", other=None)
        assert element.text == "100"
        assert element.attrib == {"currencyID": "EUR"}

    def test_prune_empty(self):
        root = get_version_shape("2.1").create_document(DocumentKind.INVOICE).root
        delivery = aggregate(root, "Delivery")
        aggregate(delivery, "DeliveryLocation")
        basic(root, "ID", "1")
        prune_empty(root)
        assert [local_name(child) for child in root] == ["ID"]
