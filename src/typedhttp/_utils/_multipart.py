import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from .constants import CONTENT_TYPE_OCTET_STREAM, MULTIPART_BOUNDARY_PREFIX

CRLF = "\r\n"

FileLocation = Union[str, Path]


@dataclass(frozen=True)
class MultipartPayload:
    """Form fields and files for a ``multipart/form-data`` upload.

    Every file is attached under the same form field, ``file_field_name``.
    Parameter values are sent as their ``str()`` representation.
    """

    file_field_name: str
    parameters: Optional[Mapping[str, Any]] = None
    file_locations: Optional[Sequence[FileLocation]] = None

    @property
    def string_value(self) -> str:
        """Summary of the payload used in diagnostic log lines."""
        components: list[str] = []

        if self.parameters:
            params = ", ".join(f"{key}: {value}" for key, value in self.parameters.items())
            components.append(f"parameters: [{params}]")

        components.append(f"fileKeyName: {self.file_field_name}")

        if self.file_locations:
            names = ", ".join(Path(location).name for location in self.file_locations)
            components.append(f"files: [{names}]")

        return ", ".join(components)

    def __str__(self) -> str:
        return self.string_value


def generate_boundary() -> str:
    return f"{MULTIPART_BOUNDARY_PREFIX}{uuid.uuid4()}"


def mime_type_for_path(path: FileLocation) -> str:
    """Guess the MIME type from the file extension.

    Unknown extensions resolve to ``application/octet-stream``.
    """
    content_type, _ = mimetypes.guess_type(str(path), strict=False)
    return content_type or CONTENT_TYPE_OCTET_STREAM


def build_multipart_body(payload: MultipartPayload, boundary: str) -> bytes:
    """Serialize the payload into a multipart body.

    Parameters come first, then files in the given order, then the closing
    delimiter. Any file that cannot be read raises ``OSError`` and no body is
    produced.

    Args:
        payload: Form fields and file locations to serialize.
        boundary: Boundary token, without the leading dashes.

    Returns:
        bytes: The complete request body.
    """
    delimiter = f"--{boundary}{CRLF}".encode()
    body = bytearray()

    for key, value in (payload.parameters or {}).items():
        body += delimiter
        body += f'Content-Disposition: form-data; name="{key}"{CRLF}{CRLF}'.encode()
        body += f"{value}{CRLF}".encode()

    for location in payload.file_locations or ():
        path = Path(location)
        file_data = path.read_bytes()

        body += delimiter
        body += (
            f"Content-Disposition: form-data; "
            f'name="{payload.file_field_name}"; filename="{path.name}"{CRLF}'
        ).encode()
        body += f"Content-Type: {mime_type_for_path(path)}{CRLF}{CRLF}".encode()
        body += file_data
        body += CRLF.encode()

    body += f"--{boundary}--{CRLF}".encode()
    return bytes(body)
