"""sheet-mapper: materialize spreadsheet rows into typed objects."""

from sheet_mapper.excel.source import InMemorySheetSource, SheetSource, SourceNotFoundError
from sheet_mapper.mapping.binder import BindingError
from sheet_mapper.models import Binding, BindingSet, Record
from sheet_mapper.services.reader import SheetReader

__all__ = [
    "Binding",
    "BindingSet",
    "BindingError",
    "InMemorySheetSource",
    "Record",
    "SheetReader",
    "SheetSource",
    "SourceNotFoundError",
]

__version__ = "0.1.0"
