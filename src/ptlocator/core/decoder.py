import logging
from typing import BinaryIO

from .errors import MalformedStructure
from .reader import read_exact
from .structures import (
    GPTHeader,
    GPT_HEADER_OFFSET,
    GPT_HEADER_SIZE,
    GPT_SIGNATURE,
    LegacyTable,
    MBR_OFFSET,
    MBR_SIZE,
)


class TableDecoder:
    """
    Decodes the partition table structure of a known layout variant.

    Each call seeks to the structure's fixed offset and reads it afresh.
    Failures abort the call; no partial structure is returned.
    """

    def __init__(self, verify_signature: bool = False):
        """
        Args:
            verify_signature: Reject GPT headers whose signature is not "EFI PART"
        """
        self.verify_signature = verify_signature
        self.logger = logging.getLogger(__name__)

    def decode_legacy(self, source: BinaryIO) -> LegacyTable:
        """
        Decode the MBR at sector 0.

        All four partition entries are returned, including empty slots.

        Raises:
            ReadError: If fewer than 512 bytes are available
        """
        data = read_exact(source, MBR_OFFSET, MBR_SIZE, "MBR")
        table = LegacyTable.from_bytes(data)

        used = sum(1 for p in table.partitions if not p.is_empty)
        self.logger.info(f"Decoded MBR with {used} used partition slot(s)")
        return table

    def decode_gpt(self, source: BinaryIO) -> GPTHeader:
        """
        Decode the GPT header at sector 1.

        The partition entry array is not read.

        Raises:
            ReadError: If the header lies past the end of the source or is truncated
            MalformedStructure: If signature verification is on and fails
        """
        data = read_exact(source, GPT_HEADER_OFFSET, GPT_HEADER_SIZE, "GPT header")
        header = GPTHeader.from_bytes(data)

        if not header.has_valid_signature:
            if self.verify_signature:
                raise MalformedStructure(
                    "GPT header", GPT_HEADER_OFFSET,
                    f"bad signature {header.signature!r}, expected {GPT_SIGNATURE!r}"
                )
            self.logger.warning(f"GPT header signature is {header.signature!r}")

        self.logger.info(
            f"Decoded GPT header: {header.number_of_partitions} entries "
            f"at LBA {header.partition_entry_lba}"
        )
        return header
