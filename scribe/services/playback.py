from typing import Sequence

from scribe.models.transcription import Segment


def find_segment_at(segments: Sequence[Segment], current_time: float) -> Segment | None:
    """Return the segment being spoken at ``current_time`` (seconds), if any.

    Bounds are inclusive; where segments touch, the earlier one wins.
    """
    for segment in segments:
        if segment.start <= current_time <= segment.end:
            return segment
    return None
