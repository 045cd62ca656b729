from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional, Tuple

import httpx

from rest_navigator.core.endpoint import Endpoint
from rest_navigator.core.http import Cancellation, HttpHeader, HttpMethod

DEFAULT_BINARY_TYPE = "application/octet-stream"


def _guess_content_type(filename: Optional[str], content_type: Optional[str]) -> str:
    return (
        content_type
        or (mimetypes.guess_type(filename)[0] if filename else None)
        or DEFAULT_BINARY_TYPE
    )


class BlobEndpoint(Endpoint):
    """Binary resource that can be downloaded, uploaded and deleted."""

    async def probe(self, cancellation: Optional[Cancellation] = None) -> None:
        await self.send(HttpMethod.OPTIONS, cancellation=cancellation)

    @property
    def download_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.GET)

    async def download(self, cancellation: Optional[Cancellation] = None) -> bytes:
        response = await self.send(HttpMethod.GET, cancellation=cancellation)
        return response.content

    @property
    def upload_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.PUT)

    async def upload(
        self,
        data: bytes,
        content_type: str = DEFAULT_BINARY_TYPE,
        cancellation: Optional[Cancellation] = None,
    ) -> None:
        await self.send(
            HttpMethod.PUT,
            cancellation=cancellation,
            headers={HttpHeader.CONTENT_TYPE: content_type},
            content=data,
        )

    @property
    def delete_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.DELETE)

    async def delete(self, cancellation: Optional[Cancellation] = None) -> None:
        await self.send(HttpMethod.DELETE, cancellation=cancellation)


class UploadEndpoint(Endpoint):
    """
    Accepts binary uploads via POST.
    - `form_field` set: multipart/form-data with the data in that field
    - `form_field` unset: the data is the raw request body
    """

    def __init__(self, referrer: Endpoint, uri: str, form_field: Optional[str] = None):
        super().__init__(referrer, uri)
        self.form_field = form_field

    @property
    def upload_allowed(self) -> Optional[bool]:
        return self.is_method_allowed(HttpMethod.POST)

    def _multipart(
        self, data: bytes, filename: Optional[str], content_type: str
    ) -> Tuple[bytes, str]:
        # Let httpx render the multipart body and its boundary.
        request = httpx.Request(
            HttpMethod.POST,
            self.uri,
            files={self.form_field: (filename or "upload", data, content_type)},
        )
        return request.read(), request.headers[HttpHeader.CONTENT_TYPE]

    async def upload(
        self,
        data: bytes,
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
        cancellation: Optional[Cancellation] = None,
    ) -> None:
        ctype = _guess_content_type(filename, content_type)
        if self.form_field:
            body, ctype = self._multipart(data, filename, ctype)
        else:
            body = data
        await self.send(
            HttpMethod.POST,
            cancellation=cancellation,
            headers={HttpHeader.CONTENT_TYPE: ctype},
            content=body,
        )

    async def upload_file(
        self,
        file_path: str,
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
        cancellation: Optional[Cancellation] = None,
    ) -> None:
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")
        await self.upload(
            path.read_bytes(),
            filename=filename or path.name,
            content_type=content_type,
            cancellation=cancellation,
        )


__all__ = ["BlobEndpoint", "UploadEndpoint", "DEFAULT_BINARY_TYPE"]
