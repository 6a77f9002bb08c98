from fastapi import UploadFile

from backend.errors import UploadTooLargeError


def ensure_upload_size(size: int | None, limit: int) -> None:
    if size is not None and size > limit:
        raise UploadTooLargeError(size, limit)


async def read_upload(upload: UploadFile, limit: int) -> bytes:
    # reject before any upstream call; the multipart body is already spooled by now
    ensure_upload_size(upload.size, limit)
    data = await upload.read()
    ensure_upload_size(len(data), limit)
    return data
