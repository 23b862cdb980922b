"""Tests for transcription persistence and the user/team lookup."""

from scribe.models.transcription import Segment, TranscriptionCreate, TranscriptionMetadataUpdate
from scribe.services.store import (
    delete_transcription,
    get_transcription,
    get_user_with_team,
    list_transcriptions,
    save_transcription,
    update_transcription,
)


def _create(team_id: int, user_id: int, file_name: str = "standup.mp3", **overrides) -> TranscriptionCreate:
    fields = {
        "team_id": team_id,
        "user_id": user_id,
        "file_name": file_name,
        "original_text": "We shipped it.",
        "segments": [Segment(id=0, start=0.0, end=1.234, text="We shipped it.", tokens=[1, 2, 3])],
        "duration": 1,
        "language": "en",
        "file_type": "audio/mpeg",
        "file_size": 2048,
        "status": "complete",
    }
    fields.update(overrides)
    return TranscriptionCreate(**fields)


async def test_get_user_with_team(team_user):
    user = await get_user_with_team(team_user["id"])
    assert user == {"id": team_user["id"], "email": "ada@acme.test", "team_id": team_user["team_id"]}


async def test_get_user_without_team(lone_user):
    user = await get_user_with_team(lone_user["id"])
    assert user is not None
    assert user["team_id"] is None


async def test_get_unknown_user(db):
    assert await get_user_with_team(9999) is None


async def test_save_and_get_roundtrip(team_user):
    saved = await save_transcription(_create(team_user["team_id"], team_user["id"]))
    assert saved.id > 0
    assert saved.created_at

    fetched = await get_transcription(saved.id, team_user["team_id"])
    assert fetched is not None
    assert fetched.original_text == "We shipped it."
    assert fetched.segments[0].end == 1.234
    assert fetched.segments[0].tokens == [1, 2, 3]
    assert fetched.status == "complete"
    assert fetched.error_log is None


async def test_partial_record_keeps_error_log(team_user):
    saved = await save_transcription(_create(
        team_user["team_id"],
        team_user["id"],
        status="partial",
        error_log="Failed to transcribe segment 2: timeout",
    ))
    fetched = await get_transcription(saved.id, team_user["team_id"])
    assert fetched.status == "partial"
    assert fetched.error_log == "Failed to transcribe segment 2: timeout"


async def test_get_is_scoped_to_team(team_user):
    saved = await save_transcription(_create(team_user["team_id"], team_user["id"]))
    assert await get_transcription(saved.id, team_user["team_id"] + 1) is None


async def test_list_newest_first(team_user):
    first = await save_transcription(_create(team_user["team_id"], team_user["id"], file_name="a.mp3"))
    second = await save_transcription(_create(team_user["team_id"], team_user["id"], file_name="b.mp3"))

    items = await list_transcriptions(team_user["team_id"])
    assert [item.id for item in items] == [second.id, first.id]
    assert items[0].file_name == "b.mp3"


async def test_list_respects_limit(team_user):
    for i in range(3):
        await save_transcription(_create(team_user["team_id"], team_user["id"], file_name=f"{i}.mp3"))
    assert len(await list_transcriptions(team_user["team_id"], limit=2)) == 2


async def test_update_metadata(team_user):
    saved = await save_transcription(_create(team_user["team_id"], team_user["id"]))

    updated = await update_transcription(
        saved.id, team_user["team_id"], TranscriptionMetadataUpdate(name="Standup")
    )
    assert updated.name == "Standup"
    assert updated.notes is None

    updated = await update_transcription(
        saved.id, team_user["team_id"], TranscriptionMetadataUpdate(notes="Action items at 0:45")
    )
    assert updated.name == "Standup"
    assert updated.notes == "Action items at 0:45"


async def test_update_explicit_none_clears(team_user):
    saved = await save_transcription(_create(team_user["team_id"], team_user["id"]))
    await update_transcription(
        saved.id, team_user["team_id"], TranscriptionMetadataUpdate(name="Standup", notes="Bring coffee")
    )

    updated = await update_transcription(saved.id, team_user["team_id"], TranscriptionMetadataUpdate(name=None))
    assert updated.name is None
    assert updated.notes == "Bring coffee"


async def test_update_missing(team_user):
    result = await update_transcription(404, team_user["team_id"], TranscriptionMetadataUpdate(name="x"))
    assert result is None


async def test_delete(team_user):
    saved = await save_transcription(_create(team_user["team_id"], team_user["id"]))
    assert await delete_transcription(saved.id, team_user["team_id"]) is True
    assert await get_transcription(saved.id, team_user["team_id"]) is None
    assert await delete_transcription(saved.id, team_user["team_id"]) is False
