"""Upload pipeline: validate, chunk, transcribe each chunk, merge, persist.

Chunks are transcribed one after another in order. A failed chunk is recorded
as a warning and the remaining chunks are still attempted; the submission only
fails outright when no chunk could be transcribed.
"""

import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from scribe.config import ALLOWED_AUDIO_TYPES, MAX_FILE_SIZE
from scribe.errors import (
    InvalidInput,
    NoTranscriptsAvailable,
    PersistenceError,
    ProviderError,
    ScribeError,
)
from scribe.models.audio import AudioPayload, Chunk
from scribe.models.transcription import (
    ChunkTranscript,
    TranscriptionActionResponse,
    TranscriptionCreate,
    TranscriptionRecord,
)
from scribe.services.chunker import split_payload
from scribe.services.merger import combine_transcripts
from scribe.services.store import save_transcription
from scribe.services.transcription import get_transcription_client

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to process transcription. Please try again."


class SubmissionStage(str, Enum):
    """Pipeline progress. Stages advance in declaration order up to DONE.

    FAILED is entered from whichever stage raised: VALIDATING or CHUNKING on
    bad input, TRANSCRIBING when no chunk succeeded, PERSISTING when the store
    fails.
    """

    VALIDATING = "validating"
    CHUNKING = "chunking"
    TRANSCRIBING = "transcribing"
    MERGING = "merging"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


class ChunkTranscriber(Protocol):
    async def transcribe(self, chunk: Chunk, filename: str) -> ChunkTranscript: ...


SaveRecord = Callable[[TranscriptionCreate], Awaitable[TranscriptionRecord]]


@dataclass
class ChunkOutcome:
    index: int
    transcript: ChunkTranscript | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.transcript is not None


@dataclass
class SubmissionResult:
    record: TranscriptionRecord
    warnings: list[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.warnings)

    @property
    def status(self) -> str:
        return self.record.status


def validate_payload(payload: AudioPayload) -> None:
    if payload.mime_type not in ALLOWED_AUDIO_TYPES:
        raise InvalidInput(
            "Invalid file type. Please upload a supported audio file (MP3, WAV, MP4, M4A, etc.)."
        )
    if payload.size == 0:
        raise InvalidInput("Uploaded file is empty.")
    if payload.size > MAX_FILE_SIZE:
        raise InvalidInput(f"File size too large. Maximum size is {MAX_FILE_SIZE // (1024 * 1024)}MB.")


def build_record(
    transcript: ChunkTranscript,
    payload: AudioPayload,
    *,
    user_id: int,
    team_id: int,
    warnings: list[str],
) -> TranscriptionCreate:
    """Shape a merged transcript for storage: millisecond timestamps, whole-second duration."""
    return TranscriptionCreate(
        team_id=team_id,
        user_id=user_id,
        file_name=payload.filename,
        original_text=transcript.text,
        segments=[
            seg.model_copy(update={"start": round(seg.start, 3), "end": round(seg.end, 3)})
            for seg in transcript.segments
        ],
        duration=math.floor(transcript.duration + 0.5),
        language=transcript.language,
        file_type=payload.mime_type,
        file_size=payload.size,
        status="partial" if warnings else "complete",
        error_log="\n".join(warnings) if warnings else None,
    )


class SubmissionPipeline:
    """Runs one upload through every stage; ``stage`` reflects progress."""

    def __init__(
        self,
        payload: AudioPayload,
        *,
        user_id: int,
        team_id: int,
        client: ChunkTranscriber | None = None,
        save: SaveRecord | None = None,
    ) -> None:
        self.payload = payload
        self.user_id = user_id
        self.team_id = team_id
        self.client = client or get_transcription_client()
        self.save = save or save_transcription
        self.stage = SubmissionStage.VALIDATING
        self.outcomes: list[ChunkOutcome] = []

    def _enter(self, stage: SubmissionStage) -> None:
        logger.info("Submission %s: %s -> %s", self.payload.filename, self.stage.value, stage.value)
        self.stage = stage

    async def run(self) -> SubmissionResult:
        try:
            return await self._run()
        except Exception:
            self._enter(SubmissionStage.FAILED)
            raise

    async def _run(self) -> SubmissionResult:
        validate_payload(self.payload)

        self._enter(SubmissionStage.CHUNKING)
        chunks = split_payload(self.payload)

        self._enter(SubmissionStage.TRANSCRIBING)
        for chunk in chunks:
            self.outcomes.append(await self._transcribe_chunk(chunk, len(chunks)))

        transcripts = [outcome.transcript for outcome in self.outcomes if outcome.ok]
        warnings = [outcome.error for outcome in self.outcomes if not outcome.ok]
        if not transcripts:
            raise NoTranscriptsAvailable("Failed to transcribe any part of the audio file")

        self._enter(SubmissionStage.MERGING)
        combined = combine_transcripts(transcripts)

        self._enter(SubmissionStage.PERSISTING)
        data = build_record(
            combined,
            self.payload,
            user_id=self.user_id,
            team_id=self.team_id,
            warnings=warnings,
        )
        try:
            record = await self.save(data)
        except Exception as e:
            logger.error("Failed to save transcription for %s: %s", self.payload.filename, e)
            raise PersistenceError("Failed to save transcription") from e

        self._enter(SubmissionStage.DONE)
        return SubmissionResult(record=record, warnings=warnings)

    async def _transcribe_chunk(self, chunk: Chunk, total: int) -> ChunkOutcome:
        name = chunk.display_name(self.payload.filename)
        logger.info("Transcribing chunk %d/%d (%d bytes)", chunk.index + 1, total, chunk.size)
        try:
            transcript = await self.client.transcribe(chunk, name)
        except ProviderError as e:
            logger.warning("Error processing chunk %d: %s", chunk.index, e.message)
            return ChunkOutcome(
                index=chunk.index,
                error=f"Failed to transcribe segment {chunk.index + 1}: {e.message}",
            )
        except Exception as e:
            logger.exception("Unexpected error processing chunk %d", chunk.index)
            return ChunkOutcome(
                index=chunk.index,
                error=f"Failed to transcribe segment {chunk.index + 1}: {e}",
            )
        return ChunkOutcome(index=chunk.index, transcript=transcript)


async def process_submission(
    payload: AudioPayload,
    *,
    user_id: int,
    team_id: int,
    client: ChunkTranscriber | None = None,
    save: SaveRecord | None = None,
) -> SubmissionResult:
    """Run the full pipeline for one upload.

    Raises:
        InvalidInput, PayloadTooLarge, NoTranscriptsAvailable, PersistenceError
    """
    pipeline = SubmissionPipeline(payload, user_id=user_id, team_id=team_id, client=client, save=save)
    return await pipeline.run()


async def submit_transcription(
    payload: AudioPayload,
    *,
    user_id: int,
    team_id: int,
    client: ChunkTranscriber | None = None,
    save: SaveRecord | None = None,
) -> TranscriptionActionResponse:
    """Upload action: never raises, reports failures and warnings in the response."""
    try:
        result = await process_submission(
            payload, user_id=user_id, team_id=team_id, client=client, save=save
        )
    except ScribeError as e:
        logger.error("Transcription processing error: %s", e.message)
        return TranscriptionActionResponse(error=e.message)
    except Exception:
        logger.exception("Unexpected error while processing %s", payload.filename)
        return TranscriptionActionResponse(error=GENERIC_FAILURE_MESSAGE)

    if result.is_partial:
        return TranscriptionActionResponse(
            success="Transcription completed with some errors",
            error="\n".join(result.warnings),
            transcription=result.record,
        )
    return TranscriptionActionResponse(
        success="Transcription completed successfully",
        transcription=result.record,
    )
