"""Exception types raised by script loading, compilation, and TTS generation."""


class TTSScriptError(Exception):
    """Base class for all ttsscript errors."""


class ScriptFormatError(TTSScriptError):
    """Script document could not be parsed into a Script."""


class PronunciationError(TTSScriptError):
    """Pronunciation rule is missing a term or language."""


class CompilationError(TTSScriptError):
    """Compiling a script for a language failed.

    slide_index/segment_index are 0-based and None when the error is not
    tied to one segment.
    """

    def __init__(self, message: str, slide_index: int | None = None, segment_index: int | None = None):
        super().__init__(message)
        self.slide_index = slide_index
        self.segment_index = segment_index


class UnknownLanguageError(CompilationError):
    """Requested language does not appear anywhere in the script."""

    def __init__(self, language: str, available: list[str]):
        listed = ", ".join(available) if available else "none"
        super().__init__(f"language '{language}' not in script (available: {listed})")
        self.language = language
        self.available = available


class InvalidDurationError(CompilationError):
    """Pause duration spec could not be parsed."""


class InvalidEmphasisError(CompilationError):
    """Emphasis level is not one of the supported values."""


class TTSRequestError(TTSScriptError):
    """Remote text-to-speech request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(TTSScriptError):
    """Required configuration, such as the API key, is missing."""
