"""Split uploaded audio into pieces the speech-to-text provider accepts.

Cuts are plain byte offsets; a boundary may fall mid-word or mid-frame.
"""

import logging

from scribe.config import CHUNK_SIZE, MAX_FILE_SIZE, PROVIDER_SIZE_LIMIT
from scribe.errors import PayloadTooLarge
from scribe.models.audio import AudioPayload, Chunk

logger = logging.getLogger(__name__)


def split_payload(
    payload: AudioPayload,
    *,
    max_size: int = MAX_FILE_SIZE,
    chunk_size: int = CHUNK_SIZE,
    provider_limit: int = PROVIDER_SIZE_LIMIT,
) -> list[Chunk]:
    """Partition ``payload`` into ordered, contiguous chunks.

    Payloads within the provider limit come back as a single chunk sharing the
    payload's bytes. Larger ones are cut every ``chunk_size`` bytes; only the
    last chunk may be shorter.

    Raises:
        PayloadTooLarge: if the payload is bigger than ``max_size``.
    """
    if payload.size > max_size:
        raise PayloadTooLarge(
            f"File size exceeds maximum limit of {max_size // (1024 * 1024)}MB"
        )

    if payload.size <= provider_limit:
        return [Chunk(index=0, start=0, end=payload.size, mime_type=payload.mime_type, data=payload.data)]

    chunks = []
    offset = 0
    while offset < payload.size:
        end = min(offset + chunk_size, payload.size)
        chunks.append(Chunk(
            index=len(chunks),
            start=offset,
            end=end,
            mime_type=payload.mime_type,
            data=payload.data[offset:end],
        ))
        offset = end

    logger.info("Split %s (%d bytes) into %d chunks", payload.filename, payload.size, len(chunks))
    return chunks
