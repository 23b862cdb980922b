from dataclasses import dataclass, field


@dataclass
class AudioPayload:
    """An uploaded audio file held in memory for the duration of one submission."""

    data: bytes
    mime_type: str
    filename: str
    size: int = field(init=False)

    def __post_init__(self) -> None:
        self.size = len(self.data)


@dataclass
class Chunk:
    """A contiguous byte range ``[start, end)`` of an ``AudioPayload``."""

    index: int
    start: int
    end: int
    mime_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return self.end - self.start

    def display_name(self, filename: str) -> str:
        return f"chunk_{self.index}_{filename}"
