from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, File, Form, UploadFile

from backend.errors import DOMAIN_ERRORS, to_http_exception
from backend.utils.uploads import read_upload

from .controller import TASKS, ProcessingController

logger = logging.getLogger(__name__)

router = APIRouter()
controller = ProcessingController()


@router.post("/process")
async def process(
    task: str | None = Form(None),
    file: UploadFile | None = File(None),
    text: str | None = Form(None),
):
    logger.info("Task received: %s", task)
    try:
        controller.ensure_configured(task)
        if task not in TASKS:
            raise ValueError("Invalid task specified")
        if task == "transcribe":
            if file is None:
                raise ValueError("No file uploaded")
            audio = await read_upload(file, controller.settings.max_upload_bytes)
            return await asyncio.to_thread(controller.transcribe, file.filename or "audio", audio)
        return await asyncio.to_thread(controller.summarize, text)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
