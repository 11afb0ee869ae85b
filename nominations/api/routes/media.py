"""Supporting-material routes -- image attachments and extra details."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from nominations.api.deps import get_session
from nominations.api.models import MediaItemResponse, MediaUploadResponse
from nominations.models import MediaAttachment
from nominations.session import NominationSession

logger = logging.getLogger("nominations.api.media")

router = APIRouter(prefix="/api/sessions/{session_id}/media", tags=["media"])


async def read_attachment(upload: UploadFile, max_bytes: int) -> MediaAttachment:
    """Read an upload without buffering more than one byte past the size cap.

    An oversized file keeps ``max_bytes + 1`` bytes so the store still
    rejects it as too large. Non-image bodies are not read at all.
    """
    content_type = upload.content_type or "application/octet-stream"
    data = b""
    if content_type.startswith("image/"):
        data = await upload.read(max_bytes + 1)
    return MediaAttachment(
        filename=upload.filename or "upload",
        content_type=content_type,
        data=data,
    )


def _media_items(session: NominationSession) -> list[MediaItemResponse]:
    return [
        MediaItemResponse(filename=m.filename, content_type=m.content_type, size=m.size)
        for m in session.store.media
    ]


@router.get("", response_model=list[MediaItemResponse])
async def list_media(session: NominationSession = Depends(get_session)) -> list[MediaItemResponse]:
    return _media_items(session)


@router.post("", response_model=MediaUploadResponse)
async def upload_media(
    files: list[UploadFile] = File(...),
    session: NominationSession = Depends(get_session),
) -> MediaUploadResponse:
    """Attach images. Invalid files are reported, valid ones are kept."""
    max_bytes = session.store.max_media_bytes
    attachments = [await read_attachment(upload, max_bytes) for upload in files]
    result = session.add_media(attachments)
    return MediaUploadResponse(
        accepted=result.accepted,
        rejected=result.rejected,
        message=result.message,
        media=_media_items(session),
    )


@router.delete("/{index}", response_model=list[MediaItemResponse])
async def remove_media(
    index: int,
    session: NominationSession = Depends(get_session),
) -> list[MediaItemResponse]:
    try:
        session.store.remove_media(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _media_items(session)
