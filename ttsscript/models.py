"""Data models for scripts, compiled segments, and TTS jobs."""

from dataclasses import dataclass, field

from ttsscript.constants import EMPHASIS_LEVELS
from ttsscript.durations import parse_duration
from ttsscript.errors import InvalidDurationError


@dataclass
class Segment:
    text: dict[str, str]                         # language code -> localized text
    voice: str | dict[str, str] = ""             # one voice id, or language -> voice id
    pause_before: str | int = ""                 # "500ms", "1.5s", or int milliseconds
    pause_after: str | int = ""
    emphasis: str = "none"                       # none / reduced / moderate / strong
    rate: str = ""                               # SSML prosody rate, e.g. "slow", "90%"
    pitch: str = ""                              # SSML prosody pitch, e.g. "+5%"
    pronunciations: dict[str, dict[str, str]] = field(default_factory=dict)

    def voice_for(self, language: str) -> str:
        """Return the explicit voice override for a language, or ""."""
        if isinstance(self.voice, dict):
            return self.voice.get(language, "")
        return self.voice or ""


@dataclass
class Slide:
    title: str = ""
    segments: list[Segment] = field(default_factory=list)
    notes: str = ""                              # speaker notes, never rendered


@dataclass(frozen=True)
class ValidationIssue:
    category: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class Script:
    title: str = ""
    description: str = ""
    default_language: str = ""
    default_voices: dict[str, str] = field(default_factory=dict)
    pronunciations: dict[str, dict[str, str]] = field(default_factory=dict)
    slides: list[Slide] = field(default_factory=list)

    def slide_count(self) -> int:
        return len(self.slides)

    def segment_count(self) -> int:
        return sum(len(slide.segments) for slide in self.slides)

    def languages(self) -> set[str]:
        """All language codes used by segment text, voice maps, and default voices."""
        langs = set(self.default_voices)
        for slide in self.slides:
            for seg in slide.segments:
                langs.update(seg.text)
                if isinstance(seg.voice, dict):
                    langs.update(seg.voice)
        return langs

    def validate(self) -> list[ValidationIssue]:
        """Check the script for authoring problems.

        Never raises; an empty list means the script is valid. Voice ids are
        not checked against any remote catalog.
        """
        issues = []

        if not isinstance(self.title, str) or not self.title.strip():
            issues.append(ValidationIssue("title", "script has no title"))

        if not self.slides:
            issues.append(ValidationIssue("slides", "script has no slides"))

        if self.default_language and self.default_language not in self.default_voices:
            issues.append(ValidationIssue(
                "voice",
                f"default language '{self.default_language}' has no default voice",
            ))

        issues.extend(_pronunciation_issues(self.pronunciations, "script"))

        for i, slide in enumerate(self.slides):
            if not slide.segments:
                issues.append(ValidationIssue("segments", f"slide {i + 1} has no segments"))

            for j, seg in enumerate(slide.segments):
                where = f"slide {i + 1}, segment {j + 1}"

                if any(not isinstance(text, str) for text in seg.text.values()):
                    issues.append(ValidationIssue("text", f"{where} has non-string text"))
                elif not any(text.strip() for text in seg.text.values()):
                    issues.append(ValidationIssue("text", f"{where} has no text"))
                if any(not lang.strip() for lang in seg.text):
                    issues.append(ValidationIssue("text", f"{where} has an empty language code"))

                if (seg.emphasis or "none") not in EMPHASIS_LEVELS:
                    issues.append(ValidationIssue(
                        "emphasis", f"{where} has unknown emphasis '{seg.emphasis}'",
                    ))

                for attr in ("pause_before", "pause_after"):
                    try:
                        parse_duration(getattr(seg, attr))
                    except InvalidDurationError:
                        issues.append(ValidationIssue(
                            "pause", f"{where} has invalid {attr} '{getattr(seg, attr)}'",
                        ))

                issues.extend(_pronunciation_issues(seg.pronunciations, where))

        return issues


def _pronunciation_issues(table: dict[str, dict[str, str]], where: str) -> list[ValidationIssue]:
    issues = []
    for term, by_lang in table.items():
        if not term:
            issues.append(ValidationIssue("pronunciation", f"{where} has a pronunciation with an empty term"))
            continue
        for lang, replacement in by_lang.items():
            if not lang.strip():
                issues.append(ValidationIssue(
                    "pronunciation", f"{where} pronunciation '{term}' has an empty language code",
                ))
            elif not isinstance(replacement, str) or not replacement:
                issues.append(ValidationIssue(
                    "pronunciation", f"{where} pronunciation '{term}' has an empty replacement for '{lang}'",
                ))
    return issues


@dataclass(frozen=True)
class CompiledSegment:
    slide_index: int
    segment_index: int
    slide_title: str
    position: int                                # ordinal within one compile output
    text: str                                    # after pronunciation substitution
    original_text: str
    voice_id: str                                # "" when no voice resolves
    language: str
    pause_before_ms: int = 0
    pause_after_ms: int = 0
    emphasis: str = "none"
    rate: str = ""
    pitch: str = ""
    fallback: bool = False                       # text taken from the default language


@dataclass(frozen=True)
class SkippedSegment:
    slide_index: int
    segment_index: int
    slide_title: str
    reason: str


@dataclass
class CompileResult:
    """Output of one compile run: compiled segments plus skipped ones."""

    language: str
    segments: list[CompiledSegment] = field(default_factory=list)
    skipped: list[SkippedSegment] = field(default_factory=list)

    @property
    def skip_count(self) -> int:
        return len(self.skipped)

    def __iter__(self):
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __getitem__(self, index):
        return self.segments[index]


@dataclass(frozen=True)
class TTSJob:
    index: int                                   # ordinal among emitted jobs
    slide_index: int
    segment_index: int
    slide_title: str
    text: str
    voice_id: str
    pause_before_ms: int = 0
    pause_after_ms: int = 0


@dataclass
class JobBatch:
    """Jobs emitted by the provider formatter plus segments dropped for lack of a voice."""

    jobs: list[TTSJob] = field(default_factory=list)
    skipped: list[CompiledSegment] = field(default_factory=list)

    @property
    def skip_count(self) -> int:
        return len(self.skipped)

    def __iter__(self):
        return iter(self.jobs)

    def __len__(self) -> int:
        return len(self.jobs)

    def __getitem__(self, index):
        return self.jobs[index]
