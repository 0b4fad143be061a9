"""
On-disk structures for MBR and GPT partition tables.

Every structure is decoded field by field from fixed byte offsets with an
explicit little-endian format, so the layout never depends on in-memory
struct packing.

Layouts:
    MBR (sector 0, 512 bytes)
        0x000  bootstrap code      446 bytes
        0x1BE  partition entries   4 x 16 bytes
        0x1FE  boot signature      u16 (0xAA55)

    GPT header (sector 1, 92 bytes)
        0x00 signature (8)   0x08 revision   0x0C header size   0x10 CRC32
        0x14 reserved        0x18 current LBA   0x20 backup LBA
        0x28 first usable LBA   0x30 last usable LBA   0x38 disk GUID (16)
        0x48 partition entry LBA   0x50 number of entries
        0x54 entry size      0x58 entry array CRC32
"""

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

SECTOR_SIZE = 512

MBR_OFFSET = 0
MBR_SIZE = 512
BOOTSTRAP_SIZE = 446
PARTITION_TABLE_OFFSET = 446
PARTITION_ENTRY_SIZE = 16
PARTITION_ENTRY_COUNT = 4
BOOT_SIGNATURE_OFFSET = 510
BOOT_SIGNATURE = 0xAA55

BOOTABLE_FLAG = 0x80
EMPTY_PARTITION_TYPE = 0x00
GPT_PROTECTIVE_TYPE = 0xEE

GPT_HEADER_LBA = 1
GPT_HEADER_OFFSET = GPT_HEADER_LBA * SECTOR_SIZE
GPT_HEADER_SIZE = 92
GPT_SIGNATURE = b'EFI PART'

# boot flag, start CHS, type, end CHS, start LBA, sector count
_PARTITION_ENTRY = struct.Struct('<B3sB3sII')
_BOOT_SIGNATURE = struct.Struct('<H')
_GPT_HEADER = struct.Struct('<8sIIIIQQQQ16sQIII')


class DiskLayoutVariant(Enum):
    """Partitioning scheme governing a disk image"""
    LEGACY_MBR = "mbr"
    PROTECTED_GPT = "gpt"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class LegacyPartitionEntry:
    """One of the four primary partition slots of an MBR."""
    boot_flag: int
    start_chs: bytes
    partition_type: int
    end_chs: bytes
    start_lba: int
    total_sectors: int

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "LegacyPartitionEntry":
        """
        Decode a 16-byte partition entry.

        Args:
            data: Buffer holding the entry
            offset: Position of the entry within ``data``

        Raises:
            struct.error: If fewer than 16 bytes are available at ``offset``
        """
        (boot_flag, start_chs, partition_type,
         end_chs, start_lba, total_sectors) = _PARTITION_ENTRY.unpack_from(data, offset)
        return cls(
            boot_flag=boot_flag,
            start_chs=start_chs,
            partition_type=partition_type,
            end_chs=end_chs,
            start_lba=start_lba,
            total_sectors=total_sectors,
        )

    @property
    def is_bootable(self) -> bool:
        return self.boot_flag == BOOTABLE_FLAG

    @property
    def is_empty(self) -> bool:
        return self.partition_type == EMPTY_PARTITION_TYPE

    @property
    def is_gpt_protective(self) -> bool:
        return self.partition_type == GPT_PROTECTIVE_TYPE

    @property
    def start_offset(self) -> int:
        return self.start_lba * SECTOR_SIZE

    @property
    def size_bytes(self) -> int:
        return self.total_sectors * SECTOR_SIZE


@dataclass(frozen=True)
class LegacyTable:
    """Master Boot Record occupying sector 0."""
    bootstrap_code: bytes
    partitions: Tuple[LegacyPartitionEntry, ...]
    boot_signature: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "LegacyTable":
        """
        Decode a 512-byte boot sector.

        All four partition slots are returned, empty ones included.

        Raises:
            struct.error: If ``data`` is shorter than 512 bytes
        """
        if len(data) < MBR_SIZE:
            raise struct.error(f"MBR requires {MBR_SIZE} bytes, got {len(data)}")

        partitions = tuple(
            LegacyPartitionEntry.from_bytes(data, PARTITION_TABLE_OFFSET + i * PARTITION_ENTRY_SIZE)
            for i in range(PARTITION_ENTRY_COUNT)
        )
        (boot_signature,) = _BOOT_SIGNATURE.unpack_from(data, BOOT_SIGNATURE_OFFSET)

        return cls(
            bootstrap_code=bytes(data[:BOOTSTRAP_SIZE]),
            partitions=partitions,
            boot_signature=boot_signature,
        )

    @property
    def has_boot_signature(self) -> bool:
        return self.boot_signature == BOOT_SIGNATURE


@dataclass(frozen=True)
class GPTHeader:
    """GUID Partition Table header found at LBA 1."""
    signature: bytes
    revision: int
    header_size: int
    header_crc32: int
    reserved: int
    current_lba: int
    backup_lba: int
    first_usable_lba: int
    last_usable_lba: int
    disk_guid: bytes
    partition_entry_lba: int
    number_of_partitions: int
    partition_entry_size: int
    partition_entry_array_crc32: int

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "GPTHeader":
        """
        Decode the 92 defined bytes of a GPT header.

        The signature is stored as found; checking it is left to the caller.

        Raises:
            struct.error: If fewer than 92 bytes are available at ``offset``
        """
        return cls(*_GPT_HEADER.unpack_from(data, offset))

    @property
    def has_valid_signature(self) -> bool:
        return self.signature == GPT_SIGNATURE

    @property
    def revision_str(self) -> str:
        # 0x00010000 is revision 1.0
        return f"{self.revision >> 16}.{self.revision & 0xFFFF}"
