import pytest
import respx
from httpx import Response
from rest_navigator.core.errors import NotFoundError
from rest_navigator.endpoints.raw import BlobEndpoint, UploadEndpoint

URI = "http://localhost/endpoint"


@pytest.mark.asyncio
async def test_blob_probe(entry):
    endpoint = BlobEndpoint(entry, "endpoint")
    async with respx.mock:
        respx.options(URI).mock(return_value=Response(200, headers={"Allow": "PUT"}))
        await endpoint.probe()

    assert endpoint.download_allowed is False
    assert endpoint.upload_allowed is True
    assert endpoint.delete_allowed is False


@pytest.mark.asyncio
async def test_blob_download(entry):
    endpoint = BlobEndpoint(entry, "endpoint")
    async with respx.mock:
        respx.get(URI).mock(
            return_value=Response(
                200, content=b"\x00data", headers={"Content-Type": "application/octet-stream"}
            )
        )
        assert await endpoint.download() == b"\x00data"


@pytest.mark.asyncio
async def test_blob_download_missing(entry):
    endpoint = BlobEndpoint(entry, "endpoint")
    async with respx.mock:
        respx.get(URI).mock(return_value=Response(404))
        with pytest.raises(NotFoundError):
            await endpoint.download()


@pytest.mark.asyncio
async def test_blob_upload(entry):
    endpoint = BlobEndpoint(entry, "endpoint")
    async with respx.mock:
        route = respx.put(URI).mock(return_value=Response(204))
        await endpoint.upload(b"data", "mime/type")

    request = route.calls[0].request
    assert request.content == b"data"
    assert request.headers["Content-Type"] == "mime/type"


@pytest.mark.asyncio
async def test_blob_delete(entry):
    endpoint = BlobEndpoint(entry, "endpoint")
    async with respx.mock:
        route = respx.delete(URI).mock(return_value=Response(204))
        await endpoint.delete()

    assert route.called


@pytest.mark.asyncio
async def test_upload_raw(entry):
    endpoint = UploadEndpoint(entry, "endpoint")
    async with respx.mock:
        route = respx.post(URI).mock(return_value=Response(204))
        await endpoint.upload(b"data", content_type="mime/type")

    request = route.calls[0].request
    assert request.content == b"data"
    assert request.headers["Content-Type"] == "mime/type"


@pytest.mark.asyncio
async def test_upload_raw_default_content_type(entry):
    endpoint = UploadEndpoint(entry, "endpoint")
    async with respx.mock:
        route = respx.post(URI).mock(return_value=Response(204))
        await endpoint.upload(b"data")

    assert route.calls[0].request.headers["Content-Type"] == "application/octet-stream"


@pytest.mark.asyncio
async def test_upload_multipart(entry):
    endpoint = UploadEndpoint(entry, "endpoint", form_field="data")
    async with respx.mock:
        route = respx.post(URI).mock(return_value=Response(204))
        await endpoint.upload(b"data", filename="file.dat", content_type="mime/type")

    request = route.calls[0].request
    assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
    body = request.content
    assert b'name="data"; filename="file.dat"' in body
    assert b"Content-Type: mime/type" in body
    assert b"\r\n\r\ndata\r\n" in body


@pytest.mark.asyncio
async def test_upload_file(entry, tmp_path):
    path = tmp_path / "notes.txt"
    path.write_bytes(b"hello")
    endpoint = UploadEndpoint(entry, "endpoint", form_field="file")
    async with respx.mock:
        route = respx.post(URI).mock(return_value=Response(204))
        await endpoint.upload_file(str(path))

    body = route.calls[0].request.content
    assert b'filename="notes.txt"' in body
    assert b"Content-Type: text/plain" in body
    assert b"hello" in body


@pytest.mark.asyncio
async def test_upload_file_missing(entry, tmp_path):
    endpoint = UploadEndpoint(entry, "endpoint")
    with pytest.raises(FileNotFoundError):
        await endpoint.upload_file(str(tmp_path / "missing.bin"))


@pytest.mark.asyncio
async def test_upload_allowed(entry):
    endpoint = UploadEndpoint(entry, "endpoint")
    async with respx.mock:
        respx.post(URI).mock(return_value=Response(204, headers={"Allow": "POST"}))
        await endpoint.upload(b"data")

    assert endpoint.upload_allowed is True
