"""Error taxonomy for the submission pipeline.

Only ``ProviderError`` is recoverable: the orchestrator collects it per chunk
and carries on. Every other category aborts the submission.
"""


class ScribeError(Exception):
    """Base class for errors surfaced to the caller as a single message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(ScribeError):
    """Upload rejected before any work (unsupported type, empty or oversized)."""


class PayloadTooLarge(ScribeError):
    """Payload exceeds the absolute size ceiling; raised before chunking."""


class ProviderError(ScribeError):
    """The speech-to-text provider failed or returned a malformed response."""


class NoTranscriptsAvailable(ScribeError):
    """Nothing to merge: every chunk failed, or no transcripts were given."""


class PersistenceError(ScribeError):
    """The transcription record could not be stored."""
