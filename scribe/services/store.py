"""Persistence for transcription records and the user/team lookup."""

import json
import logging
from datetime import UTC, datetime

from scribe.database import get_db
from scribe.models.transcription import (
    Segment,
    TranscriptionCreate,
    TranscriptionListItem,
    TranscriptionMetadataUpdate,
    TranscriptionRecord,
)

logger = logging.getLogger(__name__)


def _load_segments(raw: str | None, transcription_id: int) -> list[Segment]:
    try:
        return [Segment.model_validate(seg) for seg in json.loads(raw or "[]")]
    except (json.JSONDecodeError, ValueError):
        logger.warning("Failed to parse segments for transcription %s", transcription_id)
        return []


def _row_to_record(row) -> TranscriptionRecord:
    return TranscriptionRecord(
        id=row["id"],
        team_id=row["team_id"],
        user_id=row["user_id"],
        file_name=row["file_name"],
        original_text=row["original_text"],
        segments=_load_segments(row["segments"], row["id"]),
        duration=row["duration"],
        language=row["language"],
        file_type=row["file_type"] or "",
        file_size=row["file_size"] or 0,
        status=row["status"],
        error_log=row["error_log"],
        name=row["name"],
        notes=row["notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


async def get_user_with_team(user_id: int) -> dict | None:
    """Return ``{"id", "email", "team_id"}`` for a user, or None if unknown."""
    db = await get_db()
    row = await db.fetch_one("SELECT id, email, team_id FROM users WHERE id = ?", (user_id,))
    if not row:
        return None
    return {"id": row["id"], "email": row["email"], "team_id": row["team_id"]}


async def save_transcription(data: TranscriptionCreate) -> TranscriptionRecord:
    db = await get_db()
    now = datetime.now(UTC).isoformat()
    segments_json = json.dumps([seg.model_dump() for seg in data.segments])

    transcription_id = await db.insert(
        """INSERT INTO transcriptions (
            team_id, user_id, file_name, original_text, segments, duration,
            language, file_type, file_size, status, error_log, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (
            data.team_id,
            data.user_id,
            data.file_name,
            data.original_text,
            segments_json,
            data.duration,
            data.language,
            data.file_type,
            data.file_size,
            data.status,
            data.error_log,
            now,
            now,
        ),
    )
    await db.commit()
    logger.info("Saved transcription %s (%s) for team %s", transcription_id, data.status, data.team_id)

    return TranscriptionRecord(id=transcription_id, created_at=now, updated_at=now, **data.model_dump())


async def list_transcriptions(team_id: int, limit: int = 50) -> list[TranscriptionListItem]:
    """Transcription history for a team, newest first."""
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT id, file_name, name, duration, language, status, created_at FROM transcriptions"
        " WHERE team_id = ? ORDER BY created_at DESC, id DESC LIMIT ?",
        (team_id, limit),
    )
    return [
        TranscriptionListItem(
            id=row["id"],
            file_name=row["file_name"],
            name=row["name"],
            duration=row["duration"],
            language=row["language"],
            status=row["status"],
            created_at=row["created_at"],
        )
        for row in rows
    ]


async def get_transcription(transcription_id: int, team_id: int) -> TranscriptionRecord | None:
    db = await get_db()
    row = await db.fetch_one(
        "SELECT * FROM transcriptions WHERE id = ? AND team_id = ?",
        (transcription_id, team_id),
    )
    if not row:
        return None
    return _row_to_record(row)


async def update_transcription(
    transcription_id: int,
    team_id: int,
    metadata: TranscriptionMetadataUpdate,
) -> TranscriptionRecord | None:
    """Update user-editable metadata (name, notes).

    Only fields set on ``metadata`` are written; an explicit None clears the field.
    """
    existing = await get_transcription(transcription_id, team_id)
    if existing is None:
        return None

    updates = metadata.model_dump(exclude_unset=True)
    db = await get_db()
    now = datetime.now(UTC).isoformat()
    await db.execute(
        "UPDATE transcriptions SET name = ?, notes = ?, updated_at = ? WHERE id = ? AND team_id = ?",
        (
            updates.get("name", existing.name),
            updates.get("notes", existing.notes),
            now,
            transcription_id,
            team_id,
        ),
    )
    await db.commit()
    return await get_transcription(transcription_id, team_id)


async def delete_transcription(transcription_id: int, team_id: int) -> bool:
    db = await get_db()
    row = await db.fetch_one(
        "SELECT id FROM transcriptions WHERE id = ? AND team_id = ?",
        (transcription_id, team_id),
    )
    if not row:
        return False

    await db.execute(
        "DELETE FROM transcriptions WHERE id = ? AND team_id = ?",
        (transcription_id, team_id),
    )
    await db.commit()
    logger.info("Deleted transcription %s", transcription_id)
    return True
