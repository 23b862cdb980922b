from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TranscriptionStatus = Literal["complete", "partial"]


class Segment(BaseModel):
    """One provider-recognized span of speech. Unknown provider fields are kept."""

    model_config = ConfigDict(extra="allow")

    id: int = 0
    start: float
    end: float
    text: str
    tokens: list[int] = Field(default_factory=list)
    temperature: float = 0.0
    avg_logprob: float = 0.0
    compression_ratio: float = 0.0
    no_speech_prob: float = 0.0


class ChunkTranscript(BaseModel):
    """Verbose provider response for one chunk (provider-local timeline)."""

    text: str
    segments: list[Segment]
    language: str | None = None

    @property
    def duration(self) -> float:
        if not self.segments:
            return 0.0
        return max(segment.end for segment in self.segments)


class CombinedTranscript(ChunkTranscript):
    """Transcript spanning the whole payload, on one global timeline."""


class TranscriptionCreate(BaseModel):
    team_id: int
    user_id: int
    file_name: str
    original_text: str
    segments: list[Segment]
    duration: int  # seconds
    language: str | None = None
    file_type: str
    file_size: int
    status: TranscriptionStatus
    error_log: str | None = None


class TranscriptionRecord(TranscriptionCreate):
    id: int
    name: str | None = None
    notes: str | None = None
    created_at: str
    updated_at: str | None = None


class TranscriptionListItem(BaseModel):
    id: int
    file_name: str
    name: str | None = None
    duration: int
    language: str | None = None
    status: TranscriptionStatus
    created_at: str


class TranscriptionMetadataUpdate(BaseModel):
    name: str | None = None
    notes: str | None = None


class TranscriptionStatusResponse(BaseModel):
    id: int
    status: TranscriptionStatus
    error_log: str | None = None


class TranscriptionActionResponse(BaseModel):
    """Result of an upload. ``success`` and ``error`` coexist on partial success."""

    error: str | None = None
    success: str | None = None
    transcription: TranscriptionRecord | None = None
