"""Sector-level access to a block device or disk image."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

SECTOR_SIZE = 512
MAX_ROW = 32
MAX_COL = 16
MAX_INPUT_LEN = 128
MAX_SECTOR = 2048
MAX_MATCHES = 100


class BlockIOError(OSError):
    """Raised when a sector cannot be read from or written to the device."""


@dataclass
class SectorState:
    """The sector being edited, its contents and the cursor inside it."""

    sector: int = 0
    cursor_x: int = 0
    cursor_y: int = 0
    buffer: bytearray = field(default_factory=lambda: bytearray(SECTOR_SIZE))

    def cursor_index(self) -> int:
        """Byte offset of the cursor within the sector."""
        return self.cursor_y * MAX_COL + self.cursor_x


class BlockDevice:
    """A device or image file opened for reading and writing whole sectors."""

    def __init__(self, path):
        self.path = os.fspath(path)
        try:
            self._fd: int | None = os.open(
                self.path, os.O_RDWR | getattr(os, "O_BINARY", 0)
            )
        except OSError as exc:
            raise BlockIOError(f"Failed to open device: {exc.strerror}") from exc

    @property
    def closed(self) -> bool:
        return self._fd is None

    def _descriptor(self) -> int:
        if self._fd is None:
            raise BlockIOError("Device is closed")
        return self._fd

    def _seek(self, fd: int, sector: int) -> None:
        if sector < 0:
            raise BlockIOError(f"Invalid sector number {sector}")
        try:
            os.lseek(fd, sector * SECTOR_SIZE, os.SEEK_SET)
        except OSError as exc:
            raise BlockIOError(f"lseek failed: {exc.strerror}") from exc

    def read_sector(self, sector: int) -> bytearray:
        """Read one whole sector; a short read is an error."""
        fd = self._descriptor()
        self._seek(fd, sector)
        try:
            data = os.read(fd, SECTOR_SIZE)
        except OSError as exc:
            raise BlockIOError(f"read failed: {exc.strerror}") from exc
        if len(data) != SECTOR_SIZE:
            raise BlockIOError(
                f"Partial read: expected {SECTOR_SIZE} bytes, got {len(data)} bytes"
            )
        return bytearray(data)

    def write_sector(self, sector: int, data) -> None:
        """Write one whole sector; a short write is an error."""
        if len(data) != SECTOR_SIZE:
            raise ValueError(
                f"Sector data must be {SECTOR_SIZE} bytes, got {len(data)}"
            )
        fd = self._descriptor()
        self._seek(fd, sector)
        try:
            written = os.write(fd, bytes(data))
        except OSError as exc:
            raise BlockIOError(f"Failed to write sector: {exc.strerror}") from exc
        if written != SECTOR_SIZE:
            raise BlockIOError(
                f"Partial write: expected {SECTOR_SIZE} bytes, wrote {written} bytes"
            )

    def close(self) -> None:
        """Close the device; closing twice is harmless."""
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> "BlockDevice":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()