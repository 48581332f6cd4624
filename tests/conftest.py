"""Test fixtures and utilities."""

from pathlib import Path

import pytest

from cii2ubl.cii import parse_cii
from cii2ubl.config import ConversionConfig
from cii2ubl.converter import CIIToUBLConverter
from cii2ubl.diagnostics import ErrorCollector

from fixtures import get_credit_note_sample, get_invoice_sample


@pytest.fixture
def invoice_xml() -> str:
    """CII invoice sample."""
    return get_invoice_sample()


@pytest.fixture
def credit_note_xml() -> str:
    """CII credit note sample."""
    return get_credit_note_sample()


@pytest.fixture
def errors() -> ErrorCollector:
    """A fresh diagnostics collector."""
    return ErrorCollector()


@pytest.fixture
def converter() -> CIIToUBLConverter:
    """Converter with default configuration (UBL 2.1)."""
    return CIIToUBLConverter(ConversionConfig())


@pytest.fixture
def convert():
    """Convert CII XML text, returning (document, errors).

    Keyword arguments are passed to ConversionConfig.
    """

    def _convert(xml: str, **config_values):
        collector = ErrorCollector()
        converter = CIIToUBLConverter(ConversionConfig(**config_values))
        document = converter.convert(parse_cii(xml.encode("utf-8")), collector)
        return document, collector

    return _convert


@pytest.fixture
def invoice_file(tmp_path: Path, invoice_xml: str) -> Path:
    """CII invoice sample written to a temporary file."""
    path = tmp_path / "invoice.xml"
    path.write_text(invoice_xml, encoding="utf-8")
    return path
