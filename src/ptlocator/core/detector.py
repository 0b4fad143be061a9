import logging
from typing import BinaryIO

from .reader import read_exact
from .structures import (
    DiskLayoutVariant,
    LegacyTable,
    MBR_OFFSET,
    MBR_SIZE,
)


class FormatDetector:
    """
    Classifies a disk image from its first sector.

    A boot sector without the 0xAA55 signature is unrecognized. Otherwise a
    protective partition (type 0xEE) in slot 0 marks a GPT disk, and anything
    else is a classic MBR. Slots 1-3 are never consulted.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def detect(self, source: BinaryIO) -> DiskLayoutVariant:
        """
        Determine which partitioning scheme governs the image.

        Args:
            source: Seekable binary stream positioned anywhere

        Returns:
            Detected layout variant

        Raises:
            ReadError: If the first 512 bytes cannot be read
        """
        sector = read_exact(source, MBR_OFFSET, MBR_SIZE, "MBR")
        mbr = LegacyTable.from_bytes(sector)

        if not mbr.has_boot_signature:
            self.logger.info(f"No boot signature (found 0x{mbr.boot_signature:04X})")
            return DiskLayoutVariant.UNRECOGNIZED

        if mbr.partitions[0].is_gpt_protective:
            self.logger.info("Found protective MBR, disk uses GPT")
            return DiskLayoutVariant.PROTECTED_GPT

        self.logger.info("Found MBR Partition Table")
        return DiskLayoutVariant.LEGACY_MBR
