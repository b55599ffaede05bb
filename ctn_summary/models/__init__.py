"""Domain models for the shipment CTN summary generator."""

from .error_record import ErrorRecord
from .grid import MergeRegion, SheetGrid
from .line_item import LineItem
from .processed_file import FileStatus, ProcessedFile
from .processing_result import FileStat, ProcessingResult
from .summary import ProcessedSummary, ReferenceDetail, WarehouseEntry

__all__ = [
    # Sheet models
    "MergeRegion",
    "SheetGrid",
    "LineItem",
    # Result models
    "ProcessedSummary",
    "ReferenceDetail",
    "WarehouseEntry",
    # Status / batch models
    "ErrorRecord",
    "FileStatus",
    "ProcessedFile",
    "FileStat",
    "ProcessingResult",
]
