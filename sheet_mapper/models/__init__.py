"""Domain models for the sheet -> object mapper.

Bindings (what to read), outcomes (what happened per field / row), schema-less
records and the aggregated read result.
"""

from .binding import Binding, BindingSet
from .outcome import FieldOutcome, OutcomeStatus, RowOutcome, SkipReason
from .read_result import ReadResult
from .record import CellKind, CellValue, Record

__all__ = [
    # Binding models
    "Binding",
    "BindingSet",
    # Outcome models
    "FieldOutcome",
    "OutcomeStatus",
    "RowOutcome",
    "SkipReason",
    "ReadResult",
    # Schema-less records
    "CellKind",
    "CellValue",
    "Record",
]
