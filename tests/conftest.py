"""
Shared fixtures for building disk images in memory.

Images are assembled with struct.pack_into at the documented on-disk offsets
so the tests do not depend on the decoder's own layout tables.
"""

import struct
from typing import List, Optional

import pytest


def make_partition_entry(
    *,
    boot_flag: int = 0x00,
    start_chs: bytes = b"\x00\x00\x00",
    partition_type: int = 0x00,
    end_chs: bytes = b"\x00\x00\x00",
    start_lba: int = 0,
    total_sectors: int = 0,
) -> bytes:
    buf = bytearray(16)
    buf[0] = boot_flag
    buf[1:4] = start_chs
    buf[4] = partition_type
    buf[5:8] = end_chs
    struct.pack_into("<I", buf, 8, start_lba)
    struct.pack_into("<I", buf, 12, total_sectors)
    return bytes(buf)


def make_mbr(entries: Optional[List[bytes]] = None, *, signature: bytes = b"\x55\xAA",
             bootstrap: bytes = b"") -> bytes:
    buf = bytearray(512)
    buf[: len(bootstrap)] = bootstrap
    for i, entry in enumerate(entries or []):
        buf[446 + i * 16: 446 + (i + 1) * 16] = entry
    buf[510:512] = signature
    return bytes(buf)


def make_protective_mbr() -> bytes:
    return make_mbr([
        make_partition_entry(partition_type=0xEE, start_lba=1, total_sectors=0xFFFFFFFF),
    ])


def make_gpt_header(
    *,
    signature: bytes = b"EFI PART",
    revision: int = 0x00010000,
    header_size: int = 92,
    header_crc32: int = 0,
    current_lba: int = 1,
    backup_lba: int = 0,
    first_usable_lba: int = 34,
    last_usable_lba: int = 0,
    disk_guid: bytes = b"\x00" * 16,
    partition_entry_lba: int = 2,
    number_of_partitions: int = 128,
    partition_entry_size: int = 128,
    partition_entry_array_crc32: int = 0,
) -> bytes:
    buf = bytearray(92)
    buf[0:8] = signature
    struct.pack_into("<III", buf, 8, revision, header_size, header_crc32)
    struct.pack_into("<QQQQ", buf, 24, current_lba, backup_lba, first_usable_lba, last_usable_lba)
    buf[56:72] = disk_guid
    struct.pack_into("<Q", buf, 72, partition_entry_lba)
    struct.pack_into("<III", buf, 80, number_of_partitions, partition_entry_size,
                     partition_entry_array_crc32)
    return bytes(buf)


DISK_GUID = bytes(range(0x10, 0x20))


@pytest.fixture
def mbr_image() -> bytes:
    """Classic MBR with a bootable NTFS partition and a Linux partition."""
    entries = [
        make_partition_entry(boot_flag=0x80, start_chs=b"\x20\x21\x00", partition_type=0x07,
                             end_chs=b"\xFE\xFF\xFF", start_lba=2048, total_sectors=204800),
        make_partition_entry(partition_type=0x83, start_lba=206848, total_sectors=409600),
    ]
    return make_mbr(entries, bootstrap=b"\xFA\x33\xC0\x8E\xD0")


@pytest.fixture
def gpt_image() -> bytes:
    """Protective MBR followed by a GPT header and padding to LBA 34."""
    header = make_gpt_header(
        backup_lba=2047,
        last_usable_lba=2014,
        disk_guid=DISK_GUID,
    )
    image = make_protective_mbr() + header
    return image + b"\x00" * (34 * 512 - len(image))


@pytest.fixture
def write_image(tmp_path):
    """Write image bytes to a file and return its path."""
    def _write(data: bytes, name: str = "disk.img") -> str:
        path = tmp_path / name
        path.write_bytes(data)
        return str(path)
    return _write
