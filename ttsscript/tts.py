"""ElevenLabs text-to-speech client and batch generation with retry logic."""

import logging
import os
import time

import requests

from ttsscript.constants import (
    API_BASE_URL,
    API_KEY_ENV,
    BASE_URL_ENV,
    DEFAULT_MODEL_ID,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_VOICE_SETTINGS,
    REQUEST_TIMEOUT,
    TTS_RETRY_BASE_DELAY,
    TTS_RETRY_COUNT,
)
from ttsscript.errors import ConfigurationError, TTSRequestError
from ttsscript.manifest import BatchManifest

logger = logging.getLogger(__name__)


class ElevenLabsClient:
    """Minimal client for the text-to-speech and voices endpoints.

    The API key defaults to the ELEVENLABS_API_KEY environment variable.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model_id: str = DEFAULT_MODEL_ID,
        output_format: str = DEFAULT_OUTPUT_FORMAT,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.api_key = api_key or os.environ.get(API_KEY_ENV, "")
        if not self.api_key:
            raise ConfigurationError(f"{API_KEY_ENV} environment variable is required")
        self.base_url = (base_url or os.environ.get(BASE_URL_ENV) or API_BASE_URL).rstrip("/")
        self.model_id = model_id
        self.output_format = output_format
        self.timeout = timeout

    def _headers(self, accept: str = "application/json") -> dict[str, str]:
        return {"xi-api-key": self.api_key, "Accept": accept}

    @staticmethod
    def _check(response) -> None:
        if response.status_code >= 400:
            raise TTSRequestError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

    def text_to_speech(
        self,
        voice_id: str,
        text: str,
        model_id: str | None = None,
        voice_settings: dict | None = None,
        output_format: str | None = None,
    ) -> bytes:
        """Generate speech for text with one voice. Returns the audio bytes."""
        response = requests.post(
            f"{self.base_url}/v1/text-to-speech/{voice_id}",
            params={"output_format": output_format or self.output_format},
            json={
                "text": text,
                "model_id": model_id or self.model_id,
                "voice_settings": voice_settings or DEFAULT_VOICE_SETTINGS,
            },
            headers=self._headers(accept="audio/mpeg"),
            timeout=self.timeout,
        )
        self._check(response)
        return response.content

    def list_voices(self) -> list[dict]:
        response = requests.get(
            f"{self.base_url}/v1/voices",
            headers=self._headers(),
            timeout=self.timeout,
        )
        self._check(response)
        return response.json().get("voices", [])


def _retryable(error: Exception) -> bool:
    if isinstance(error, TTSRequestError):
        code = error.status_code
        return code is None or code == 429 or code >= 500
    return isinstance(error, requests.RequestException)


def generate_single(
    client: ElevenLabsClient,
    text: str,
    voice_id: str,
    output_path: str,
    model_id: str | None = None,
) -> None:
    """Generate one audio file with retry logic.

    Retries on network errors, 429/5xx responses, and empty audio with
    exponential backoff. Other HTTP errors are raised immediately.
    """
    last_error = None
    for attempt in range(TTS_RETRY_COUNT):
        try:
            audio = client.text_to_speech(voice_id, text, model_id=model_id)
            if audio:
                with open(output_path, "wb") as f:
                    f.write(audio)
                return
            last_error = TTSRequestError(f"TTS returned no audio for: {text[:50]}...")
        except (TTSRequestError, requests.RequestException) as e:
            if not _retryable(e):
                raise
            last_error = e

        if attempt < TTS_RETRY_COUNT - 1:
            delay = TTS_RETRY_BASE_DELAY * (2 ** attempt)
            logger.warning("TTS attempt %d failed (%s), retrying in %.1fs", attempt + 1, last_error, delay)
            time.sleep(delay)

    raise last_error


def generate_jobs(
    client: ElevenLabsClient,
    manifest: BatchManifest,
    model_id: str | None = None,
) -> tuple[list[str], list[str]]:
    """Generate audio for every manifest entry.

    Existing non-empty files are kept (resumability). A failed entry is
    logged and does not stop the batch. Returns (generated_paths, failed_paths).
    """
    os.makedirs(manifest.output_dir, exist_ok=True)
    total = len(manifest.entries)
    generated = []
    failed = []

    for i, entry in enumerate(manifest.entries):
        output_path = manifest.path_for(entry)

        if os.path.exists(output_path) and os.path.getsize(output_path) > 0:
            print(f"  [skip] Job {i + 1}/{total}: {entry.output_file}")
            generated.append(output_path)
            continue

        print(f"  Generating job {i + 1}/{total}: {entry.output_file}")
        try:
            generate_single(client, entry.text, entry.voice_id, output_path, model_id=model_id)
        except (TTSRequestError, requests.RequestException, OSError) as e:
            logger.error("Job %d (%s) failed: %s", i + 1, entry.output_file, e)
            failed.append(output_path)
            continue
        generated.append(output_path)

    return generated, failed
