"""
CLI runner module.

Converts CII files, directories or glob patterns into UBL files named
<basename><suffix>.xml in the target directory.
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
