"""Bounded reads from a seekable disk image source."""

import logging
from typing import BinaryIO

from .errors import ReadError

logger = logging.getLogger(__name__)


def read_exact(source: BinaryIO, offset: int, size: int, structure: str) -> bytes:
    """
    Read exactly ``size`` bytes at absolute ``offset``.

    Short reads are retried until the data is complete or the source reports
    end of file, so raw unbuffered streams behave like regular files.

    Args:
        source: Seekable binary stream (file, BytesIO, raw device)
        offset: Absolute byte offset to seek to
        size: Number of bytes required
        structure: Structure name used in error messages

    Returns:
        The requested bytes

    Raises:
        ReadError: If the seek or read fails, or end of file comes first
    """
    buf = bytearray()
    try:
        source.seek(offset)
        while len(buf) < size:
            chunk = source.read(size - len(buf))
            if not chunk:
                break
            buf += chunk
    except (OSError, ValueError) as e:
        raise ReadError(structure, offset, size, reason=str(e)) from e

    # Seeking past EOF succeeds on regular files; the short read catches it
    if len(buf) < size:
        raise ReadError(structure, offset, size, received=len(buf))

    logger.debug(f"Read {size} bytes of {structure} at offset {offset}")
    return bytes(buf)
