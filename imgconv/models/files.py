"""File objects exchanged between the form and the conversion core."""

import asyncio
import io
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional, Union, overload

FileSource = Union[bytes, bytearray, Path, BinaryIO]


class SelectedFile:
    """A file picked by the user: declared name and size plus its bytes.

    The source can be in-memory bytes, a path on disk or an open binary
    stream. Reads go through the event loop's executor so a slow disk only
    suspends the flow that asked for the bytes.
    """

    def __init__(self, name: str, size: int, source: FileSource) -> None:
        self.name = name
        self.size = size
        self._source = source

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "SelectedFile":
        return cls(name=name, size=len(data), source=bytes(data))

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SelectedFile":
        path = Path(path)
        return cls(name=path.name, size=path.stat().st_size, source=path)

    @property
    def supports_binary_read(self) -> bool:
        """Whether the source can be read as raw bytes."""
        source = self._source
        if isinstance(source, (bytes, bytearray, Path)):
            return True
        if isinstance(source, io.TextIOBase) or not hasattr(source, "read"):
            return False
        readable = getattr(source, "readable", None)
        return readable() if callable(readable) else True

    async def slice(self, start: int, end: int) -> bytes:
        """Read ``[start, end)`` from the source."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read_range, start, end)

    async def read(self) -> bytes:
        """Read the whole source."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read_range, 0, None)

    def _read_range(self, start: int, end: Optional[int]) -> bytes:
        source = self._source
        length = None if end is None else max(0, end - start)

        if isinstance(source, (bytes, bytearray)):
            return bytes(source[start:end])

        if isinstance(source, Path):
            with open(source, "rb") as fh:
                fh.seek(start)
                return fh.read() if length is None else fh.read(length)

        if hasattr(source, "seek"):
            source.seek(start)
        data = source.read() if length is None else source.read(length)
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("File source did not return bytes")
        return bytes(data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, size={self.size})"


class AttachedFile(SelectedFile):
    """A converted file ready to be submitted in place of the original."""

    def __init__(
        self,
        name: str,
        data: bytes,
        mimetype: str,
        last_modified: Optional[int] = None,
    ) -> None:
        super().__init__(name=name, size=len(data), source=bytes(data))
        self.mimetype = mimetype
        self.last_modified = (
            last_modified if last_modified is not None else int(time.time() * 1000)
        )

    @property
    def data(self) -> bytes:
        return self._source


class FileCollection(Sequence):
    """Ordered, read-only view of the files held by a file input."""

    def __init__(self, files: Optional[Iterable[SelectedFile]] = None) -> None:
        self._files: List[SelectedFile] = list(files or [])

    def add(self, file: SelectedFile) -> None:
        self._files.append(file)

    @overload
    def __getitem__(self, index: int) -> SelectedFile: ...

    @overload
    def __getitem__(self, index: slice) -> List[SelectedFile]: ...

    def __getitem__(self, index):
        return self._files[index]

    def __len__(self) -> int:
        return len(self._files)

    def __repr__(self) -> str:
        return f"FileCollection({self._files!r})"


@dataclass
class FileInput:
    """A file selection control: accept declaration, size limit and value."""

    name: str
    accept: str = ""
    max_filesize: int = 0
    files: FileCollection = field(default_factory=FileCollection)
    enabled: bool = False

    def clear(self) -> None:
        """Drop the current value."""
        self.files = FileCollection()

    def widen_accept(self, *mimetypes: str) -> None:
        """Append mimetypes to the accept declaration, skipping duplicates."""
        current = [item.strip() for item in self.accept.split(",") if item.strip()]
        for mimetype in mimetypes:
            if mimetype not in current:
                current.append(mimetype)
        self.accept = ", ".join(current)
