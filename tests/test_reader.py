"""Tests for the CII reader."""

import pytest

from cii2ubl.cii import CIIReadError, parse_cii, read_cii
from cii2ubl.diagnostics import ErrorCollector

from fixtures import FIXTURES_DIR, SKELETON_CII


class TestParseCII:
    """Tests for parse_cii."""

    def test_parse_content(self, invoice_xml):
        cii = parse_cii(invoice_xml.encode("utf-8"))
        assert cii.type_code == "380"
        assert cii.agreement is not None
        assert cii.delivery is not None
        assert cii.settlement is not None
        assert len(cii.line_items) == 2

    def test_parse_file(self):
        cii = parse_cii(FIXTURES_DIR / "cii_credit_note.xml")
        assert cii.type_code == "381"
        assert len(cii.line_items) == 1

    def test_skeleton(self):
        cii = parse_cii(SKELETON_CII.encode("utf-8"))
        assert cii.type_code is None
        assert cii.context is None
        assert cii.line_items == []

    def test_malformed_xml(self):
        with pytest.raises(CIIReadError, match="Malformed XML"):
            parse_cii(b"<rsm:CrossIndustryInvoice")

    def test_wrong_root(self):
        with pytest.raises(CIIReadError, match="not a CrossIndustryInvoice"):
            parse_cii(b"<Invoice xmlns='urn:oasis:names:specification:ubl:schema:xsd:Invoice-2'/>")

    def test_missing_file(self, tmp_path):
        with pytest.raises(CIIReadError, match="Cannot read"):
            parse_cii(tmp_path / "missing.xml")


class TestReadCII:
    """read_cii records failures instead of raising."""

    def test_failure_recorded(self, tmp_path):
        errors = ErrorCollector()
        path = tmp_path / "broken.xml"
        path.write_text("not xml", encoding="utf-8")

        assert read_cii(path, errors) is None
        assert errors.has_errors()
        assert errors.errors[0].locator == str(path)

    def test_success(self, credit_note_xml):
        errors = ErrorCollector()
        assert read_cii(credit_note_xml, errors) is not None
        assert len(errors) == 0
