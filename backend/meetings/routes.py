from __future__ import annotations

import asyncio

from fastapi import APIRouter, Body, File, Header, Query, UploadFile

from backend.errors import DOMAIN_ERRORS, to_http_exception
from backend.models.meeting_model import PollCreate, ShareOptions
from backend.utils.uploads import read_upload

from .controller import MeetingController

router = APIRouter()
controller = MeetingController()


def _ok(data) -> dict:
    return {"success": True, "data": data}


@router.post("/meetings")
def create_meeting(payload: dict = Body(...)):
    try:
        return _ok(controller.create_meeting(payload).to_response())
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc


@router.get("/meetings")
def list_meetings(user_id: str | None = Query(None, alias="userId")):
    try:
        meetings = controller.list_meetings(user_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return _ok([meeting.to_response() for meeting in meetings])


@router.put("/meetings")
def update_meeting(payload: dict = Body(...)):
    try:
        return _ok(controller.update_meeting(payload).to_response())
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc


@router.delete("/meetings")
def delete_meeting(meeting_id: str | None = Query(None, alias="id")):
    try:
        meeting = controller.delete_meeting(meeting_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return _ok({"_id": meeting.id})


@router.get("/meetings/{meeting_id}")
def get_meeting(meeting_id: str):
    try:
        return _ok(controller.get_meeting(meeting_id).to_response())
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc


@router.post("/meetings/{meeting_id}/polls")
def add_poll(meeting_id: str, payload: PollCreate):
    try:
        return _ok(controller.add_poll(meeting_id, payload).to_response())
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc


@router.post("/meetings/{meeting_id}/presentation")
async def upload_presentation(meeting_id: str, file: UploadFile | None = File(None)):
    try:
        if file is None:
            raise ValueError("No file uploaded")
        data = await read_upload(file, controller.settings.max_upload_bytes)
        meeting = await asyncio.to_thread(
            controller.attach_presentation, meeting_id, file.filename or "presentation", data, file.content_type
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return _ok(meeting.to_response())


@router.post("/meetings/{meeting_id}/recording")
async def process_recording(meeting_id: str, file: UploadFile | None = File(None)):
    try:
        if file is None:
            raise ValueError("No file uploaded")
        audio = await read_upload(file, controller.settings.max_upload_bytes)
        meeting = await asyncio.to_thread(
            controller.process_recording, meeting_id, file.filename or "recording", audio, file.content_type
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return _ok(meeting.to_response())


@router.post("/meetings/{meeting_id}/calendar")
def schedule_in_calendar(
    meeting_id: str,
    authorization: str | None = Header(None),
    payload: dict | None = Body(None),
):
    time_zone = (payload or {}).get("timeZone") or "UTC"
    try:
        meeting = controller.schedule_in_calendar(meeting_id, authorization, time_zone)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return _ok(meeting.to_response())


@router.post("/meetings/{meeting_id}/share")
def share_meeting(meeting_id: str, options: ShareOptions | None = Body(None)):
    try:
        return _ok(controller.share(meeting_id, options))
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
