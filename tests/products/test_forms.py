import io

import pytest
from starlette.datastructures import UploadFile

from catalogue.products.exceptions import UploadLimitException
from catalogue.products.forms import _read_upload


@pytest.mark.asyncio
async def test_read_upload_stops_after_limit_when_size_unknown():
    upload = UploadFile(file=io.BytesIO(b"x" * 1000), filename="big.png")
    assert upload.size is None

    with pytest.raises(UploadLimitException) as exc_info:
        await _read_upload(upload, max_bytes=16)

    assert exc_info.value.code == "file_too_large"
    assert exc_info.value.status_code == 413
    assert upload.file.tell() == 17


@pytest.mark.asyncio
async def test_read_upload_rejects_known_size_without_reading():
    upload = UploadFile(file=io.BytesIO(b"x" * 1000), size=1000, filename="big.png")

    with pytest.raises(UploadLimitException):
        await _read_upload(upload, max_bytes=16)

    assert upload.file.tell() == 0


@pytest.mark.asyncio
async def test_read_upload_keeps_file_at_limit():
    upload = UploadFile(file=io.BytesIO(b"y" * 16), size=16, filename="ok.jpg")
    image = await _read_upload(upload, max_bytes=16)
    assert image.content == b"y" * 16
    assert image.size_bytes == 16
    assert image.mime_type == "application/octet-stream"
