"""Partition table detection and decoding."""

from .decoder import TableDecoder
from .detector import FormatDetector
from .errors import (
    MalformedStructure,
    PartitionLocatorError,
    ReadError,
    SourceUnavailable,
)
from .structures import (
    DiskLayoutVariant,
    GPTHeader,
    LegacyPartitionEntry,
    LegacyTable,
    SECTOR_SIZE,
)

__all__ = [
    "DiskLayoutVariant",
    "FormatDetector",
    "GPTHeader",
    "LegacyPartitionEntry",
    "LegacyTable",
    "MalformedStructure",
    "PartitionLocatorError",
    "ReadError",
    "SECTOR_SIZE",
    "SourceUnavailable",
    "TableDecoder",
]
