"""Read-only access to the parts of an OOXML package (a ZIP archive)."""

import io
import logging
import zipfile
import zlib
from pathlib import Path

from slidereel.errors import InvalidPackage, PackagePartError

logger = logging.getLogger(__name__)


class PackageArchive:
    """An opened .pptx package, addressed by part name.

    Use as a context manager so the underlying ZIP handle is released once
    extraction completes or fails:

        with PackageArchive(data) as archive:
            xml = archive.read_text("ppt/presentation.xml")
    """

    def __init__(self, data: bytes):
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data), "r")
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError, TypeError) as e:
            raise InvalidPackage(f"Not a valid ZIP archive: {e}") from e
        self._names = [info.filename for info in self._zip.infolist() if not info.is_dir()]
        self._name_set = set(self._names)
        logger.debug(f"Opened package with {len(self._names)} entries")

    @classmethod
    def from_path(cls, path: str | Path) -> "PackageArchive":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return cls(path.read_bytes())

    def __enter__(self) -> "PackageArchive":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def has_entry(self, path: str) -> bool:
        return path in self._name_set

    def read_binary(self, path: str) -> bytes:
        """Return the raw bytes of a part.

        Raises KeyError if absent, PackagePartError if the entry is corrupt,
        encrypted or uses an unsupported compression method.
        """
        if path not in self._name_set:
            raise KeyError(f"No such entry in package: {path}")
        try:
            return self._zip.read(path)
        except (zipfile.BadZipFile, zlib.error, EOFError, RuntimeError, NotImplementedError) as e:
            raise PackagePartError(f"Could not read {path}: {e}") from e

    def read_text(self, path: str) -> str:
        """Return a part decoded as UTF-8."""
        return self.read_binary(path).decode("utf-8")

    def list_entries(self, prefix: str = "") -> list[str]:
        """Entry names starting with `prefix`, in archive enumeration order.

        Archive order carries no meaning for slide order.
        """
        return [n for n in self._names if n.startswith(prefix)]
