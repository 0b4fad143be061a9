"""
ptlocator - Central Application Controller

Coordinates one detect-then-decode pass over a disk image and collects the
outcome in a DiskReport for rendering.
"""

import io
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from .core import (
    DiskLayoutVariant,
    FormatDetector,
    GPTHeader,
    LegacyTable,
    MalformedStructure,
    ReadError,
    SourceUnavailable,
    TableDecoder,
)
from .utils import hexlify, partition_type_name

DEFAULT_CONFIG: Dict[str, Any] = {
    "log_level": "WARNING",
    "log_dir": None,
    "verify_gpt_signature": False,
}


@dataclass
class DiskReport:
    """Result of analyzing a single disk image."""
    image_path: str
    variant: DiskLayoutVariant
    image_size: Optional[int] = None
    legacy_table: Optional[LegacyTable] = None
    gpt_header: Optional[GPTHeader] = None
    error: Optional[str] = None
    analyzed_at: datetime = field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary for serialization"""
        result: Dict[str, Any] = {
            "image_path": self.image_path,
            "image_size": self.image_size,
            "variant": self.variant.value,
            "analyzed_at": self.analyzed_at.isoformat(),
            "error": self.error,
        }

        if self.legacy_table is not None:
            result["mbr"] = {
                "boot_signature": f"0x{self.legacy_table.boot_signature:04X}",
                "partitions": [
                    {
                        "slot": i + 1,
                        "boot_flag": p.boot_flag,
                        "bootable": p.is_bootable,
                        "type": p.partition_type,
                        "type_name": partition_type_name(p.partition_type),
                        "start_chs": hexlify(p.start_chs),
                        "end_chs": hexlify(p.end_chs),
                        "start_lba": p.start_lba,
                        "total_sectors": p.total_sectors,
                    }
                    for i, p in enumerate(self.legacy_table.partitions)
                ],
            }

        if self.gpt_header is not None:
            h = self.gpt_header
            result["gpt"] = {
                "signature": h.signature.decode('ascii', errors='replace'),
                "revision": h.revision_str,
                "header_size": h.header_size,
                "header_crc32": f"0x{h.header_crc32:08X}",
                "current_lba": h.current_lba,
                "backup_lba": h.backup_lba,
                "first_usable_lba": h.first_usable_lba,
                "last_usable_lba": h.last_usable_lba,
                "disk_guid": hexlify(h.disk_guid),
                "partition_entry_lba": h.partition_entry_lba,
                "number_of_partitions": h.number_of_partitions,
                "partition_entry_size": h.partition_entry_size,
                "partition_entry_array_crc32": f"0x{h.partition_entry_array_crc32:08X}",
            }

        return result


class PartitionLocatorApp:
    """
    Main application class.

    Owns configuration and logging, and runs the FormatDetector and
    TableDecoder over one image at a time.
    """

    def __init__(self, config_path: Optional[Path] = None,
                 overrides: Optional[Dict[str, Any]] = None):
        """
        Initialize the application.

        Args:
            config_path: Optional path to JSON configuration file
            overrides: Settings that take precedence over the file (CLI flags)
        """
        self.config = self._load_config(config_path)
        if overrides:
            self.config.update({k: v for k, v in overrides.items() if v is not None})

        self.logger = self._setup_logging()
        self.detector = FormatDetector()
        self.decoder = TableDecoder(verify_signature=bool(self.config.get("verify_gpt_signature")))

    def _load_config(self, config_path: Optional[Path]) -> Dict[str, Any]:
        """
        Load application configuration.

        Args:
            config_path: Path to JSON configuration file

        Returns:
            Configuration dictionary with defaults
        """
        config = dict(DEFAULT_CONFIG)

        if config_path and Path(config_path).exists():
            try:
                with open(config_path, 'r') as f:
                    user_config = json.load(f)
                if not isinstance(user_config, dict):
                    raise ValueError(f"expected a JSON object, got {type(user_config).__name__}")
                config.update(user_config)
            except (OSError, ValueError) as e:
                logging.getLogger("ptlocator").warning(
                    f"Failed to load config from {config_path}: {e}"
                )

        return config

    def _setup_logging(self) -> logging.Logger:
        """
        Configure the ptlocator logger.

        The console handler is attached once per process. A file handler is
        attached once per distinct log directory, so a later instance with a
        new ``log_dir`` still gets its own log file.

        Returns:
            Configured logger instance
        """
        level_name = str(self.config.get("log_level", "WARNING")).upper()
        log_level = getattr(logging, level_name, logging.WARNING)

        logger = logging.getLogger("ptlocator")
        logger.setLevel(log_level)

        if not getattr(logger, "_ptlocator_configured", False):
            console_handler = RichHandler(
                console=Console(stderr=True),
                show_path=False,
                markup=False,
            )
            logger.addHandler(console_handler)
            logger._ptlocator_configured = True

        log_dir = self.config.get("log_dir")
        if log_dir:
            self._attach_file_handler(logger, Path(log_dir))

        return logger

    def _attach_file_handler(self, logger: logging.Logger, log_dir: Path) -> None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_dir = log_dir.resolve()

        for handler in logger.handlers:
            if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename).parent == log_dir:
                return

        log_file = log_dir / f"ptlocator_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    def analyze(self, image_path: str) -> DiskReport:
        """
        Detect and decode the partition table of a disk image file.

        Args:
            image_path: Path to disk image file or raw device

        Returns:
            DiskReport for the image

        Raises:
            SourceUnavailable: If the image cannot be opened
            ReadError: If the first sector cannot be read
        """
        try:
            source = open(image_path, 'rb')
        except OSError as e:
            raise SourceUnavailable(str(image_path), e.strerror or str(e)) from e

        with source:
            return self.analyze_stream(source, name=str(image_path))

    def analyze_stream(self, source: BinaryIO, name: str = "<stream>") -> DiskReport:
        """
        Detect and decode the partition table of an open seekable stream.

        The stream is borrowed, not closed. Decode failures after detection
        are recorded on the report rather than raised.

        Args:
            source: Seekable binary stream
            name: Label used in the report and log messages

        Returns:
            DiskReport for the stream

        Raises:
            ReadError: If the first sector cannot be read
        """
        self.logger.info(f"Analyzing disk image: {name}")

        variant = self.detector.detect(source)
        report = DiskReport(image_path=name, variant=variant, image_size=self._source_size(source))

        try:
            if variant == DiskLayoutVariant.LEGACY_MBR:
                report.legacy_table = self.decoder.decode_legacy(source)
            elif variant == DiskLayoutVariant.PROTECTED_GPT:
                report.gpt_header = self.decoder.decode_gpt(source)
            else:
                self.logger.info(f"Unknown disk format or missing boot signature: {name}")
        except (ReadError, MalformedStructure) as e:
            self.logger.error(str(e))
            report.error = str(e)

        return report

    def _source_size(self, source: BinaryIO) -> Optional[int]:
        try:
            return source.seek(0, io.SEEK_END)
        except (OSError, ValueError):
            self.logger.debug("Source size unavailable")
            return None
