"""All magic numbers and configuration constants."""

API_BASE_URL = "https://api.elevenlabs.io"   # overridable via ELEVENLABS_BASE_URL
API_KEY_ENV = "ELEVENLABS_API_KEY"
BASE_URL_ENV = "ELEVENLABS_BASE_URL"
DEFAULT_MODEL_ID = "eleven_multilingual_v2"
DEFAULT_OUTPUT_FORMAT = "mp3_44100_128"
REQUEST_TIMEOUT = 60                # seconds per HTTP request
TTS_RETRY_COUNT = 3                 # max attempts per TTS job
TTS_RETRY_BASE_DELAY = 1.0          # seconds, base delay for exponential backoff
DEFAULT_VOICE_SETTINGS = {
    "stability": 0.5,
    "similarity_boost": 0.75,
    "style": 0.0,
    "speed": 1.0,
    "use_speaker_boost": True,
}
EMPHASIS_LEVELS = ("none", "reduced", "moderate", "strong")
PAUSE_MARKER = "[pause:{}]"         # inline pause marker for provider text
SSML_VERSION = "1.1"
SSML_NAMESPACE = "http://www.w3.org/2001/10/synthesis"
SSML_INDENT = 2
JOB_INDEX_WIDTH = 3                 # zero-padded ordinal in output filenames
AUDIO_EXTENSION = "mp3"
OUTPUT_DIR = "output"
VERSION = "0.1.0"
