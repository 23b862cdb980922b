import logging

from fastapi import APIRouter, Depends, File, Header, HTTPException, Query, UploadFile

from scribe.models.audio import AudioPayload
from scribe.models.transcription import (
    Segment,
    TranscriptionActionResponse,
    TranscriptionListItem,
    TranscriptionMetadataUpdate,
    TranscriptionRecord,
    TranscriptionStatusResponse,
)
from scribe.services.playback import find_segment_at
from scribe.services.store import (
    delete_transcription,
    get_transcription,
    get_user_with_team,
    list_transcriptions,
    update_transcription,
)
from scribe.services.submission import submit_transcription

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transcriptions", tags=["transcriptions"])


async def current_user(x_user_id: int | None = Header(default=None)) -> dict:
    """Resolve the signed-in user from the ``X-User-Id`` header and require a team."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    user = await get_user_with_team(x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Unknown user")
    if not user["team_id"]:
        raise HTTPException(status_code=403, detail="User is not part of a team")
    return user


async def _get_or_404(transcription_id: int, team_id: int) -> TranscriptionRecord:
    record = await get_transcription(transcription_id, team_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Transcription not found")
    return record


@router.post("", response_model=TranscriptionActionResponse)
async def create_transcription(
    file: UploadFile = File(...),
    user: dict = Depends(current_user),
):
    """Upload an audio file and transcribe it. Errors are reported in the body."""
    data = await file.read()
    payload = AudioPayload(
        data=data,
        mime_type=file.content_type or "",
        filename=file.filename or "audio",
    )
    logger.info("Upload %s (%s, %d bytes) from user %s", payload.filename, payload.mime_type, payload.size, user["id"])
    return await submit_transcription(payload, user_id=user["id"], team_id=user["team_id"])


@router.get("", response_model=list[TranscriptionListItem])
async def list_team_transcriptions(
    limit: int = Query(default=50, ge=1, le=200),
    user: dict = Depends(current_user),
):
    """Transcription history for the user's team."""
    return await list_transcriptions(user["team_id"], limit=limit)


@router.get("/{transcription_id}", response_model=TranscriptionRecord)
async def get_team_transcription(transcription_id: int, user: dict = Depends(current_user)):
    return await _get_or_404(transcription_id, user["team_id"])


@router.get("/{transcription_id}/status", response_model=TranscriptionStatusResponse)
async def get_transcription_status(transcription_id: int, user: dict = Depends(current_user)):
    record = await _get_or_404(transcription_id, user["team_id"])
    return TranscriptionStatusResponse(id=record.id, status=record.status, error_log=record.error_log)


@router.get("/{transcription_id}/segment", response_model=Segment | None)
async def get_segment_at(
    transcription_id: int,
    t: float = Query(ge=0),
    user: dict = Depends(current_user),
):
    """Segment active at playback time ``t`` seconds, or null between segments."""
    record = await _get_or_404(transcription_id, user["team_id"])
    return find_segment_at(record.segments, t)


@router.patch("/{transcription_id}", response_model=TranscriptionRecord)
async def update_team_transcription(
    transcription_id: int,
    body: TranscriptionMetadataUpdate,
    user: dict = Depends(current_user),
):
    record = await update_transcription(transcription_id, user["team_id"], body)
    if record is None:
        raise HTTPException(status_code=404, detail="Transcription not found")
    return record


@router.delete("/{transcription_id}")
async def delete_team_transcription(transcription_id: int, user: dict = Depends(current_user)):
    if not await delete_transcription(transcription_id, user["team_id"]):
        raise HTTPException(status_code=404, detail="Transcription not found")
    return {"id": transcription_id, "deleted": True}
