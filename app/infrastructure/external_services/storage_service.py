"""Local file storage for uploaded Excel models

Files live under ``{PUBLIC_DIR}/{EXCEL_UPLOAD_SUBDIR}`` and are named
``{epochMillis}_{16 hex chars}_{baseName}``. For each base name at most two
generations are kept: the current file and one backup.
"""

import logging
import os
import re
import secrets
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, List, Optional

from ...core.config import settings


logger = logging.getLogger(__name__)

_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")
_GENERATION_NAME = re.compile(r"^(\d+)_(?:[0-9a-f]{16}_)?(.+)$")
CHUNK_SIZE = 1024 * 1024
TEMP_SUFFIX = ".part"


def sanitize_filename(name: str) -> str:
    """Replace characters outside ``[A-Za-z0-9._-]`` with ``_`` and collapse runs"""
    return _REPEATED_UNDERSCORES.sub("_", _DISALLOWED_CHARS.sub("_", name))


def generation_timestamp(filename: str) -> int:
    """Numeric timestamp prefix of a stored file; 0 when missing"""
    prefix = filename.split("_", 1)[0]
    return int(prefix) if prefix.isdigit() else 0


def stored_base_name(filename: str) -> str:
    """Base name a stored file was uploaded under.

    Files without the ``{timestamp}_`` prefix are their own base name.
    """
    match = _GENERATION_NAME.match(filename)
    return match.group(2) if match else filename


class FileTooLargeError(Exception):
    pass


class EmptyFileError(Exception):
    pass


@dataclass(frozen=True)
class StoredFile:
    filename: str
    size: int
    public_path: str
    backup_file: Optional[str] = None
    deleted: tuple = ()

    @property
    def backup_available(self) -> bool:
        return self.backup_file is not None


class ExcelStorageService:

    def __init__(self, public_dir: Optional[str] = None, subdir: Optional[str] = None,
                 max_file_size: Optional[int] = None):
        self.public_dir = Path(public_dir or settings.PUBLIC_DIR).resolve()
        self.subdir = (subdir or settings.EXCEL_UPLOAD_SUBDIR).strip("/")
        self.upload_dir = self.public_dir / self.subdir
        self.max_file_size = max_file_size or settings.MAX_EXCEL_FILE_SIZE
        # base name -> [lock, holders and waiters]; entries are dropped when unused
        self._locks: Dict[str, list] = {}
        self._locks_guard = threading.Lock()

    def initialize(self) -> None:
        """Create the upload directory. Called once at startup."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Excel upload directory ready at %s", self.upload_dir)

    @contextmanager
    def _locked(self, base_name: str) -> Iterator[None]:
        with self._locks_guard:
            entry = self._locks.setdefault(base_name, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[base_name]

    def list_generations(self, base_name: str) -> List[str]:
        """Stored files for a base name, newest first"""
        if not self.upload_dir.is_dir():
            return []
        related = [
            entry.name for entry in os.scandir(self.upload_dir)
            if entry.is_file() and not entry.name.startswith(".")
            and stored_base_name(entry.name) == base_name
        ]
        related.sort(key=generation_timestamp, reverse=True)
        return related

    def _write_temp(self, source: BinaryIO) -> Path:
        temp_path = self.upload_dir / f".{secrets.token_hex(8)}{TEMP_SUFFIX}"
        written = 0
        try:
            with open(temp_path, "wb") as out:
                while True:
                    chunk = source.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_file_size:
                        raise FileTooLargeError(
                            f"File exceeds the {self.max_file_size // (1024 * 1024)}MB limit"
                        )
                    out.write(chunk)
            if written == 0:
                raise EmptyFileError("Uploaded file is empty")
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
        return temp_path

    def save_new_generation(self, source: BinaryIO, base_name: str) -> StoredFile:
        """Store ``source`` as the current generation of ``base_name``.

        The bytes go to a hidden temp file first. Retiring stale generations
        and the final rename happen under a per-base-name lock, so two uploads
        of the same name cannot interleave their scan and delete steps.
        """
        temp_path = self._write_temp(source)
        try:
            with self._locked(base_name):
                existing = self.list_generations(base_name)
                backup = existing[0] if existing else None
                deleted = []
                for stale in existing[1:]:
                    try:
                        (self.upload_dir / stale).unlink()
                        deleted.append(stale)
                        logger.info("Deleted old version: %s", stale)
                    except OSError as e:
                        logger.error("Failed to delete old version %s: %s", stale, e)

                # Keep timestamps strictly increasing so recency ordering holds
                # for uploads landing in the same millisecond.
                timestamp = int(time.time() * 1000)
                if backup:
                    timestamp = max(timestamp, generation_timestamp(backup) + 1)
                filename = f"{timestamp}_{secrets.token_hex(8)}_{base_name}"
                final_path = self.upload_dir / filename
                os.replace(temp_path, final_path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

        if backup:
            logger.info("Keeping as backup: %s", backup)
        return StoredFile(
            filename=filename,
            size=final_path.stat().st_size,
            public_path=f"/{self.subdir}/{filename}",
            backup_file=backup,
            deleted=tuple(deleted),
        )

    def resolve_public_path(self, url: Optional[str]) -> Optional[Path]:
        """Map a stored ``/uploads/...`` style URL to an existing file inside the public dir"""
        if not url:
            return None
        candidate = (self.public_dir / url.lstrip("/")).resolve()
        if candidate != self.public_dir and self.public_dir not in candidate.parents:
            logger.warning("Rejected asset path outside public dir: %s", url)
            return None
        return candidate if candidate.is_file() else None
