"""Stitch per-chunk transcripts into one transcript on a single timeline."""

from functools import reduce
from typing import NamedTuple, Sequence

from scribe.errors import NoTranscriptsAvailable
from scribe.models.transcription import ChunkTranscript, CombinedTranscript, Segment


class _MergeState(NamedTuple):
    texts: tuple[str, ...]
    segments: tuple[Segment, ...]
    offset: float


def _rebase(segment: Segment, offset: float) -> Segment:
    return segment.model_copy(update={"start": segment.start + offset, "end": segment.end + offset})


def _fold(state: _MergeState, transcript: ChunkTranscript) -> _MergeState:
    rebased = tuple(_rebase(seg, state.offset) for seg in transcript.segments)
    # Next chunk starts where this chunk's last segment ended, in chunk-local time.
    # A chunk with no segments leaves the offset untouched.
    offset = transcript.segments[-1].end if transcript.segments else state.offset
    return _MergeState(state.texts + (transcript.text,), state.segments + rebased, offset)


def combine_transcripts(transcripts: Sequence[ChunkTranscript]) -> ChunkTranscript:
    """Merge transcripts of consecutive chunks, in order.

    A single transcript is returned as is. Otherwise texts are space-joined and
    every segment is shifted by the running offset; the language comes from the
    first transcript.

    Raises:
        NoTranscriptsAvailable: if ``transcripts`` is empty.
    """
    if not transcripts:
        raise NoTranscriptsAvailable("No transcriptions to combine")

    if len(transcripts) == 1:
        return transcripts[0]

    state = reduce(_fold, transcripts, _MergeState((), (), 0.0))
    return CombinedTranscript(
        text=" ".join(state.texts).strip(),
        segments=list(state.segments),
        language=transcripts[0].language,
    )
