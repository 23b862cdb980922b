"""Speech-to-text for a single audio chunk.

Talks to Groq Whisper through its OpenAI-compatible ``/audio/transcriptions``
endpoint and asks for ``verbose_json`` so every response carries per-segment
timestamps. Returns a synthetic transcript when dummy mode is on.
"""

import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from scribe.config import (
    DUMMY_MODE,
    TRANSCRIPTION_API_KEY,
    TRANSCRIPTION_BASE_URL,
    TRANSCRIPTION_MODEL,
    TRANSCRIPTION_TIMEOUT,
)
from scribe.errors import ProviderError
from scribe.models.audio import Chunk
from scribe.models.transcription import ChunkTranscript, Segment

logger = logging.getLogger(__name__)

RESPONSE_FORMAT = "verbose_json"

# Synthetic speech layout used in dummy mode: seconds per segment, segments per chunk
_DUMMY_SEGMENT_SECONDS = 5.0
_DUMMY_SEGMENTS = 2


def parse_verbose_response(raw: Any) -> ChunkTranscript:
    """Normalize a provider response (SDK object or plain dict) into a ChunkTranscript.

    Raises:
        ProviderError: if ``text`` or ``segments`` is missing or malformed.
    """
    if hasattr(raw, "model_dump"):
        raw = raw.model_dump()
    if not isinstance(raw, dict):
        raise ProviderError(f"Unexpected transcription response type: {type(raw).__name__}")

    if raw.get("text") is None:
        raise ProviderError("Transcription response is missing 'text'")
    if raw.get("segments") is None:
        raise ProviderError("Transcription response is missing 'segments'")

    try:
        return ChunkTranscript(
            text=raw["text"],
            segments=[Segment.model_validate(seg) for seg in raw["segments"]],
            language=raw.get("language"),
        )
    except (ValidationError, TypeError) as e:
        raise ProviderError(f"Malformed transcription response: {e}") from e


class TranscriptionClient:
    def __init__(
        self,
        api_key: str = TRANSCRIPTION_API_KEY,
        base_url: str = TRANSCRIPTION_BASE_URL,
        model: str = TRANSCRIPTION_MODEL,
        timeout: float = TRANSCRIPTION_TIMEOUT,
    ) -> None:
        self.model = model
        self._openai = (
            AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
            if api_key
            else None
        )

    def available(self) -> bool:
        return self._openai is not None

    async def transcribe(self, chunk: Chunk, filename: str) -> ChunkTranscript:
        """Transcribe one chunk. A single attempt, no retries.

        Raises:
            ProviderError: on any API, timeout or connection failure, or a
                malformed response.
        """
        if DUMMY_MODE:
            return _dummy_transcript(chunk)
        if not self.available():
            logger.error("Transcription API key is not configured, cannot transcribe %s", filename)
            raise ProviderError("Transcription API key is not configured")

        try:
            response = await self._openai.audio.transcriptions.create(
                file=(filename, chunk.data, chunk.mime_type),
                model=self.model,
                response_format=RESPONSE_FORMAT,
            )
        except OpenAIError as e:
            message = getattr(e, "message", None) or str(e) or "Unknown transcription error"
            logger.error("Transcription error for %s: %s", filename, message)
            raise ProviderError(message) from e

        transcript = parse_verbose_response(response)
        logger.info(
            "Transcribed %s: %d segments, language=%s",
            filename, len(transcript.segments), transcript.language,
        )
        return transcript


def _dummy_transcript(chunk: Chunk) -> ChunkTranscript:
    """Deterministic stand-in transcript used in dummy mode."""
    segments = []
    for i in range(_DUMMY_SEGMENTS):
        start = i * _DUMMY_SEGMENT_SECONDS
        segments.append(Segment(
            id=i,
            start=start,
            end=start + _DUMMY_SEGMENT_SECONDS,
            text=f" Part {chunk.index + 1}, sentence {i + 1}.",
        ))
    return ChunkTranscript(
        text="".join(seg.text for seg in segments).strip(),
        segments=segments,
        language="en",
    )


_client: TranscriptionClient | None = None


def get_transcription_client() -> TranscriptionClient:
    global _client
    if _client is None:
        _client = TranscriptionClient()
    return _client
