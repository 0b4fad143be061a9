"""Exceptions raised while locating and decoding partition tables."""

from typing import Optional


class PartitionLocatorError(Exception):
    """Base class for all ptlocator errors"""


class SourceUnavailable(PartitionLocatorError):
    """The disk image could not be opened."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open disk image {path}: {reason}")


class ReadError(PartitionLocatorError):
    """
    A seek or read did not yield the bytes a structure needs.

    Attributes:
        structure: Name of the structure being read (e.g. "MBR")
        offset: Absolute byte offset of the structure
        expected: Number of bytes required
        received: Number of bytes actually read, None if the I/O call failed
    """

    def __init__(self, structure: str, offset: int, expected: int,
                 received: Optional[int] = None, reason: str = ""):
        self.structure = structure
        self.offset = offset
        self.expected = expected
        self.received = received

        if received is not None:
            detail = f"expected {expected} bytes, got {received}"
        else:
            detail = reason or "I/O error"
        super().__init__(f"Error reading {structure} at offset {offset}: {detail}")


class MalformedStructure(PartitionLocatorError):
    """A decoded structure violates an invariant of its format."""

    def __init__(self, structure: str, offset: int, reason: str):
        self.structure = structure
        self.offset = offset
        self.reason = reason
        super().__init__(f"Malformed {structure} at offset {offset}: {reason}")
