"""
Diagnostics collected during a conversion.

Mapping problems never abort a conversion. They are appended, in the order
they are found, to an ErrorCollector owned by the caller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Severity(str, Enum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Diagnostic:
    """A single conversion finding.

    Attributes:
        severity: ERROR blocks success, WARNING and INFO do not
        message: Human-readable description
        locator: Path of the offending source element, if known
    """

    severity: Severity
    message: str
    locator: str | None = None

    def __str__(self) -> str:
        if self.locator:
            return f"[{self.severity.value}] {self.locator}: {self.message}"
        return f"[{self.severity.value}] {self.message}"


class ErrorCollector:
    """Ordered, append-only list of diagnostics for one conversion.

    Entries are never deduplicated. A collector must not be shared between
    concurrent conversions.
    """

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def add(self, severity: Severity, message: str, locator: str | None = None) -> Diagnostic:
        diagnostic = Diagnostic(severity=severity, message=message, locator=locator)
        self._items.append(diagnostic)
        return diagnostic

    def error(self, message: str, locator: str | None = None) -> Diagnostic:
        return self.add(Severity.ERROR, message, locator)

    def warning(self, message: str, locator: str | None = None) -> Diagnostic:
        return self.add(Severity.WARNING, message, locator)

    def info(self, message: str, locator: str | None = None) -> Diagnostic:
        return self.add(Severity.INFO, message, locator)

    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._items)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.WARNING]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ErrorCollector({len(self._items)} diagnostics)"
