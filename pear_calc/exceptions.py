"""
exceptions.py – Calculation error taxonomy.

Every failure raised while deriving emissions for a single entry is a
``CalculationError``.  Callers that reduce many entries (``calculate_all``)
catch these per entry, so one malformed entry never blocks the rest of a
module.

Hierarchy
─────────
    CalculationError
    ├── UnknownFuelType
    ├── UnknownTransportType
    ├── UnknownAircraftType
    ├── UnknownRoomType
    ├── MissingRequiredField
    └── InvalidDivisor
"""
from __future__ import annotations

from typing import Any


class CalculationError(Exception):
    """Base class for all single-entry calculation failures."""

    error_code = "PEAR_CALC_000"

    def __init__(
        self,
        message: str,
        *,
        entry_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.entry_id = entry_id
        self.context = context or {}

    def __str__(self) -> str:
        if self.entry_id:
            return f"[{self.error_code}] {self.message} (entry {self.entry_id})"
        return f"[{self.error_code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": type(self).__name__,
            "error_code": self.error_code,
            "message": self.message,
            "entry_id": self.entry_id,
            "context": self.context,
        }


class UnknownFuelType(CalculationError):
    """The fuel type has no emission factor in the reference table."""

    error_code = "PEAR_CALC_001"


class UnknownTransportType(CalculationError):
    """The transport type / rail type has no emission factor."""

    error_code = "PEAR_CALC_002"


class UnknownAircraftType(CalculationError):
    """The aircraft type has no performance profile."""

    error_code = "PEAR_CALC_003"


class UnknownRoomType(CalculationError):
    """The room type has no energy-consumption profile."""

    error_code = "PEAR_CALC_004"


class MissingRequiredField(CalculationError):
    """A field required by the selected calculation method is absent."""

    error_code = "PEAR_CALC_005"

    def __init__(self, field_name: str, message: str | None = None, **kwargs: Any) -> None:
        context = kwargs.pop("context", None) or {}
        context.setdefault("field", field_name)
        super().__init__(message or f"{field_name} is required", context=context, **kwargs)
        self.field_name = field_name


class InvalidDivisor(CalculationError):
    """A divisor (e.g. price per gallon) is zero or negative."""

    error_code = "PEAR_CALC_006"
