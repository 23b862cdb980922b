import os

from dotenv import load_dotenv

load_dotenv()

MIB = 1024 * 1024

# Speech-to-text provider (Groq Whisper through its OpenAI-compatible endpoint)
TRANSCRIPTION_API_KEY = os.getenv("TRANSCRIPTION_API_KEY", "") or os.getenv("GROQ_API_KEY", "")
TRANSCRIPTION_BASE_URL = os.getenv("TRANSCRIPTION_BASE_URL", "https://api.groq.com/openai/v1")
TRANSCRIPTION_MODEL = os.getenv("TRANSCRIPTION_MODEL", "distil-whisper-large-v3-en")
TRANSCRIPTION_TIMEOUT = float(os.getenv("TRANSCRIPTION_TIMEOUT", "600"))

# Demo/Debug mode (explicit)
DUMMY_MODE = os.getenv("DUMMY_MODE", "false").lower() in ("1", "true", "yes", "on")

# Upload and chunking limits
MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE_MB", "500")) * MIB
CHUNK_SIZE = int(os.getenv("CHUNK_SIZE_MB", "20")) * MIB
PROVIDER_SIZE_LIMIT = int(os.getenv("PROVIDER_SIZE_LIMIT_MB", "25")) * MIB

ALLOWED_AUDIO_TYPES = (
    "audio/mpeg",  # .mp3, .mpga
    "audio/wav",
    "audio/mp4",
    "audio/x-m4a",
    "audio/webm",
    "audio/x-aiff",
    "audio/aac",
    "audio/ogg",
)

DATABASE_PATH = os.getenv("DATABASE_PATH", "scribe.db")

DATABASE_URL = os.getenv("DATABASE_URL", "")
DATABASE_MAX_CONNECTIONS = int(os.getenv("DATABASE_MAX_CONNECTIONS", "5"))
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "true").lower() == "true"
