"""
File I/O service for reading merge snapshots and writing results.

Handles:
- Encoding detection
- Binary detection
- Line ending detection
- Atomic writes with optional backups
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional

import chardet


class LineEnding(Enum):
    """Line ending style."""
    LF = auto()      # Unix: \n
    CRLF = auto()    # Windows: \r\n
    CR = auto()      # Old Mac: \r
    MIXED = auto()   # Mixed endings
    NONE = auto()    # No line endings


@dataclass
class FileContent:
    """Container for file content with metadata."""
    content: str
    encoding: str
    line_ending: LineEnding
    bom: bool
    size: int

    @property
    def line_count(self) -> int:
        if not self.content:
            return 0
        return self.content.count('\n') + (0 if self.content.endswith('\n') else 1)


@dataclass
class ReadResult:
    """Result of a file read operation."""
    success: bool
    content: Optional[FileContent] = None
    error: Optional[str] = None
    is_binary: bool = False

    @property
    def text(self) -> str:
        return self.content.content if self.content else ""


@dataclass
class WriteResult:
    """Result of a file write operation."""
    success: bool
    bytes_written: int = 0
    backup_path: Optional[Path] = None
    error: Optional[str] = None


class FileIOService:
    """Service for safe file I/O operations."""

    # Binary file signatures (magic bytes)
    BINARY_SIGNATURES = [
        b'\x00',           # Null byte (strong indicator)
        b'\x89PNG',        # PNG
        b'\xff\xd8\xff',   # JPEG
        b'GIF8',           # GIF
        b'PK\x03\x04',     # ZIP
        b'\x1f\x8b',       # GZIP
        b'%PDF',           # PDF
        b'\x7fELF',        # ELF
    ]

    BOMS = [
        (b'\xef\xbb\xbf', 'utf-8-sig'),
        (b'\xff\xfe', 'utf-16-le'),
        (b'\xfe\xff', 'utf-16-be'),
    ]

    def __init__(
        self,
        default_encoding: str = 'utf-8',
        fallback_encoding: str = 'latin-1',
        binary_check_size: int = 8192,
        max_text_size: int = 50 * 1024 * 1024
    ):
        self.default_encoding = default_encoding
        self.fallback_encoding = fallback_encoding
        self.binary_check_size = binary_check_size
        self.max_text_size = max_text_size

    def read_file(self, path: Path | str, encoding: Optional[str] = None) -> ReadResult:
        """
        Read a text file with automatic encoding detection.

        Line endings are kept as they are so offsets match the file.

        Args:
            path: Path to the file
            encoding: Force specific encoding (auto-detect if None)

        Returns:
            ReadResult with content or error information
        """
        path = Path(path)

        if not path.exists():
            return ReadResult(success=False, error=f"File not found: {path}")
        if not path.is_file():
            return ReadResult(success=False, error=f"Not a file: {path}")

        try:
            raw_content = path.read_bytes()
        except PermissionError:
            return ReadResult(success=False, error=f"Permission denied: {path}")
        except OSError as e:
            return ReadResult(success=False, error=f"OS error: {e}")

        size = len(raw_content)
        if size > self.max_text_size:
            return ReadResult(
                success=False,
                error=f"File too large ({size / 1024 / 1024:.2f} MB). "
                      f"Max size is {self.max_text_size / 1024 / 1024:.2f} MB."
            )

        bom_encoding = self._detect_bom(raw_content)
        if bom_encoding is None and self.is_binary(raw_content[:self.binary_check_size]):
            return ReadResult(success=False, is_binary=True, error=f"File appears to be binary: {path}")

        detected_encoding = encoding or bom_encoding or self._detect_encoding(raw_content)

        try:
            content = raw_content.decode(detected_encoding)
        except (UnicodeDecodeError, LookupError) as e:
            logging.warning(f"FileIOService - Decoding {path} as {detected_encoding} failed: {e}")
            content = raw_content.decode(self.fallback_encoding, errors='replace')
            detected_encoding = self.fallback_encoding

        return ReadResult(
            success=True,
            content=FileContent(
                content=content,
                encoding=detected_encoding,
                line_ending=self.detect_line_ending(content),
                bom=bom_encoding is not None,
                size=size
            )
        )

    def write_text(
        self,
        path: Path | str,
        content: str,
        encoding: str = 'utf-8',
        create_backup: bool = False,
        backup_extension: str = '.orig'
    ) -> WriteResult:
        """
        Write text atomically, optionally keeping a backup of the old file.

        Content is written to a temporary file in the target directory and
        moved into place, so readers never see a partial file.
        """
        path = Path(path)
        backup_path = None

        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            if create_backup and path.exists():
                backup_path = path.with_suffix(path.suffix + backup_extension)
                shutil.copy2(path, backup_path)

            data = content.encode(encoding)
            fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
            try:
                with os.fdopen(fd, 'wb') as f:
                    f.write(data)
                os.replace(temp_name, path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise

            return WriteResult(success=True, bytes_written=len(data), backup_path=backup_path)

        except (OSError, UnicodeEncodeError) as e:
            logging.error(f"FileIOService - Failed to write {path}: {e}")
            return WriteResult(success=False, error=str(e))

    def is_binary(self, chunk: bytes) -> bool:
        """Check if a leading sample of a file looks binary."""
        for sig in self.BINARY_SIGNATURES:
            if chunk.startswith(sig):
                return True

        if b'\x00' in chunk:
            return True

        non_text = sum(1 for b in chunk if b < 9 or (13 < b < 32))
        return len(chunk) > 0 and non_text / len(chunk) > 0.3

    def _detect_bom(self, content: bytes) -> Optional[str]:
        for bom, encoding in self.BOMS:
            if content.startswith(bom):
                return encoding
        return None

    def _detect_encoding(self, content: bytes) -> str:
        """Detect encoding of content."""
        if not content:
            return self.default_encoding

        result = chardet.detect(content)

        if result['confidence'] > 0.7 and result['encoding']:
            encoding = result['encoding'].lower()
            if encoding == 'ascii':
                return 'utf-8'  # ASCII is subset of UTF-8
            return encoding

        return self.default_encoding

    @staticmethod
    def detect_line_ending(content: str) -> LineEnding:
        """Detect line ending style in content."""
        crlf_count = content.count('\r\n')
        lf_count = content.count('\n') - crlf_count
        cr_count = content.count('\r') - crlf_count

        total = crlf_count + lf_count + cr_count
        if total == 0:
            return LineEnding.NONE
        if crlf_count == total:
            return LineEnding.CRLF
        if lf_count == total:
            return LineEnding.LF
        if cr_count == total:
            return LineEnding.CR
        return LineEnding.MIXED
