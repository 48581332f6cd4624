"""
CII → UBL: EN 16931 invoice syntax conversion.

Maps a UN/CEFACT Cross Industry Invoice (D16B) onto an OASIS UBL Invoice or
CreditNote (UBL 2.1 to 2.4), business term by business term, collecting
diagnostics instead of failing on the first problem.
"""

__version__ = "0.1.0"
