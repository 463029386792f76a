"""Custom exception hierarchy for the strength engine."""

from __future__ import annotations


class StrengthEngineError(Exception):
    """Base exception for all strength_engine errors."""


class TaxonomyError(StrengthEngineError):
    """An upstream taxonomy string (pattern, split tag, goal...) has no mapping."""

    def __init__(self, field_name: str, value: object, record_id: str | None = None) -> None:
        where = f" on record {record_id!r}" if record_id else ""
        super().__init__(f"Unknown {field_name} value {value!r}{where}")
        self.field_name = field_name
        self.value = value
        self.record_id = record_id


class CatalogError(StrengthEngineError):
    """A catalog, history or check-in record is structurally malformed."""
