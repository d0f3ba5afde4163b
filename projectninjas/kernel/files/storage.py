"""
Content store for uploaded artifacts.

Artifacts live flat inside one content directory. Rows in project_files
record the artifact's name relative to that directory, never an absolute
path.
"""

import asyncio
import re
import secrets
import shutil
import time
import uuid
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Optional, Union

from projectninjas.exceptions import StorageError
from projectninjas.logging_config import get_logger

logger = get_logger(__name__)

TEMP_SUFFIX = ".part"
FALLBACK_FILENAME = "file"

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^A-Za-z0-9._-]")

COPY_CHUNK_SIZE = 1024 * 1024


def base_name(name: Optional[str]) -> str:
    """Last path component of a client-supplied name, for either separator."""
    if not name:
        return ""
    return PurePosixPath(name.replace("\\", "/")).name


def sanitize_filename(name: Optional[str]) -> str:
    """
    Reduce a client-supplied filename to a safe artifact name component.

    >>> sanitize_filename("../../etc/My Report (v2).pdf")
    'My_Report_v2.pdf'
    """
    cleaned = _WHITESPACE.sub("_", base_name(name))
    cleaned = _DISALLOWED.sub("", cleaned)
    cleaned = cleaned.lstrip(".")
    return cleaned or FALLBACK_FILENAME


def generate_artifact_name(original_name: Optional[str]) -> str:
    """`<epoch-millis>-<random 9 digits>-<sanitised name>`"""
    millis = int(time.time() * 1000)
    nonce = secrets.randbelow(10 ** 9)
    return f"{millis}-{nonce:09d}-{sanitize_filename(original_name)}"


class ContentStore:
    """
    Filesystem operations on the content directory.

    Blocking calls are offloaded with asyncio.to_thread by the async helpers;
    the sync helpers are meant to run inside a worker thread already.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve(self, stored_name: str) -> Path:
        """
        Absolute path of a stored artifact.

        Raises:
            StorageError: If the name would escape the content directory
        """
        path = (self.root / stored_name).resolve()
        if path.parent != self.root:
            raise StorageError("Invalid artifact path.")
        return path

    def exists(self, stored_name: str) -> bool:
        return self.resolve(stored_name).is_file()

    async def receive(self, source: BinaryIO) -> Path:
        """Copy an upload stream to a fresh temporary artifact."""
        self.ensure_root()
        temp_path = self.root / f"{uuid.uuid4().hex}{TEMP_SUFFIX}"
        try:
            await asyncio.to_thread(self._copy_stream, source, temp_path)
        except OSError as e:
            self.discard(temp_path)
            raise StorageError() from e
        except BaseException:
            self.discard(temp_path)
            raise
        return temp_path

    @staticmethod
    def _copy_stream(source: BinaryIO, destination: Path) -> None:
        source.seek(0)
        with destination.open("xb") as out:
            shutil.copyfileobj(source, out, COPY_CHUNK_SIZE)

    def write_bytes(self, stored_name: str, data: bytes) -> Path:
        """Write a new artifact. Existing artifacts are never overwritten."""
        path = self.resolve(stored_name)
        with path.open("xb") as out:
            try:
                out.write(data)
            except BaseException:
                self.discard(path)
                raise
        return path

    def adopt(self, temp_path: Path, stored_name: str) -> Path:
        """Move a temporary artifact to its final name unchanged."""
        path = self.resolve(stored_name)
        if path.exists():
            raise StorageError("Artifact name collision.")
        temp_path.replace(path)
        return path

    def discard(self, path: Path) -> None:
        """Remove a working file, logging instead of raising on failure."""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(
                "Failed to remove artifact",
                extra={"path": str(path), "error": str(e)},
            )

    def remove(self, stored_name: str) -> bool:
        """
        Remove a stored artifact after its row is gone.

        Returns False if the artifact was already missing or could not be
        removed; both cases are logged.
        """
        try:
            path = self.resolve(stored_name)
            path.unlink()
        except FileNotFoundError:
            logger.warning("Artifact already missing", extra={"file_path": stored_name})
            return False
        except (OSError, StorageError) as e:
            logger.warning(
                "Failed to remove artifact",
                extra={"file_path": stored_name, "error": str(e)},
            )
            return False
        return True
