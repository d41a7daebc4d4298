"""Building ``multipart/form-data`` request bodies."""

from __future__ import annotations

import dataclasses
import re
import secrets
from dataclasses import dataclass
from typing import Optional

TEXT_PLAIN = "text/plain"
APPLICATION_OCTET_STREAM = "application/octet-stream"

_TCHARS = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_MIME_RE = re.compile(
    rf"^{_TCHARS}/{_TCHARS}"
    rf'(\s*;\s*{_TCHARS}=({_TCHARS}|"([^"\\]|\\.)*"))*\s*$'
)


def _parse_mime(raw: str) -> str:
    text = str(raw).strip()
    if not _MIME_RE.match(text):
        raise ValueError(f"Failed to parse '{raw}' as a Mime type")
    return text


def _quote(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\r", "%0D")
        .replace("\n", "%0A")
    )


@dataclass(frozen=True)
class Part:
    """One section of a multipart form."""

    data: bytes
    file_name: Optional[str] = None
    mime_type: str = APPLICATION_OCTET_STREAM

    @classmethod
    def text(cls, text) -> Part:
        """A part holding text, sent as ``text/plain``."""
        return cls(str(text).encode("utf-8"), None, TEXT_PLAIN)

    @classmethod
    def from_bytes(cls, data) -> Part:
        """A part holding raw bytes, sent as ``application/octet-stream``."""
        return cls(bytes(data), None, APPLICATION_OCTET_STREAM)

    def with_file_name(self, file_name) -> Part:
        """A copy of this part carrying the given file name."""
        return dataclasses.replace(self, file_name=str(file_name))

    def with_mime_type(self, mime_type) -> Part:
        """A copy of this part with the given mime type; raises ValueError if invalid."""
        return dataclasses.replace(self, mime_type=_parse_mime(mime_type))


class MultipartForm:
    """A multipart form made of named parts."""

    def __init__(self, boundary: Optional[str] = None) -> None:
        self._boundary = boundary or secrets.token_hex(16)
        self._parts: list[tuple[str, Part]] = []

    def add_text(self, name, text) -> MultipartForm:
        """Add a text part under ``name``."""
        return self.add_part(name, Part.text(text))

    def add_part(self, name, part: Part) -> MultipartForm:
        """Add ``part`` under ``name``."""
        self._parts.append((str(name), part))
        return self

    def content_type(self) -> str:
        """The content type header value this form is sent with."""
        return f"multipart/form-data; boundary={self._boundary}"

    def body(self) -> bytes:
        """The encoded form body."""
        delimiter = f"--{self._boundary}".encode("ascii")
        chunks = []
        for name, part in self._parts:
            disposition = f'form-data; name="{_quote(name)}"'
            if part.file_name is not None:
                disposition += f'; filename="{_quote(part.file_name)}"'
            headers = (
                f"Content-Disposition: {disposition}\r\n"
                f"Content-Type: {part.mime_type}\r\n\r\n"
            )
            chunks += [delimiter, b"\r\n", headers.encode("utf-8"), part.data, b"\r\n"]
        chunks += [delimiter, b"--\r\n"]
        return b"".join(chunks)