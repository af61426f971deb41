"""Compile a script into per-language segments ready for formatting."""

import logging

from ttsscript.constants import EMPHASIS_LEVELS, PAUSE_MARKER
from ttsscript.durations import format_duration, parse_duration
from ttsscript.errors import InvalidDurationError, InvalidEmphasisError, UnknownLanguageError
from ttsscript.models import (
    CompiledSegment,
    CompileResult,
    Script,
    Segment,
    SkippedSegment,
)
from ttsscript.pronunciation import PronunciationResolver

logger = logging.getLogger(__name__)


def resolve_text(segment: Segment, language: str, default_language: str) -> tuple[str | None, bool]:
    """Return (text, used_fallback) for a language, or (None, False) if unresolvable."""
    text = segment.text.get(language)
    if isinstance(text, str) and text:
        return text, False
    if default_language and default_language != language:
        text = segment.text.get(default_language)
        if isinstance(text, str) and text:
            return text, True
    return None, False


def resolve_voice(segment: Segment, script: Script, language: str, fallback: bool = False) -> str:
    """Pick the voice for a segment.

    Order: segment override, default voice for the language, and (only when
    the text itself fell back to the default language) the default
    language's voice. Returns "" when nothing matches.
    """
    voice = segment.voice_for(language)
    if voice:
        return voice
    voice = script.default_voices.get(language, "")
    if voice:
        return voice
    if fallback:
        return script.default_voices.get(script.default_language, "")
    return ""


class Compiler:
    """Compile scripts into CompiledSegments for one language at a time.

    Each compiler carries its own pronunciation overlay. compile() does not
    mutate the compiler or the script, so one compiler may serve several
    concurrent compiles once its overlay is set up.
    """

    def __init__(
        self,
        pronunciations: dict[str, dict[str, str]] | None = None,
        default_pause_after_segment: str | int = "",
        default_pause_after_slide: str | int = "",
    ):
        self._resolver = PronunciationResolver()
        for term, by_lang in (pronunciations or {}).items():
            for language, replacement in by_lang.items():
                self._resolver.add_pronunciation(term, language, replacement)
        # Fail early on bad defaults rather than on the first compile
        self._default_segment_pause_ms = parse_duration(default_pause_after_segment)
        self._default_slide_pause_ms = parse_duration(default_pause_after_slide)

    @property
    def resolver(self) -> PronunciationResolver:
        return self._resolver

    def add_pronunciation(self, term: str, language: str, replacement: str) -> None:
        self._resolver.add_pronunciation(term, language, replacement)

    def add_pronunciations(self, language: str, rules: dict[str, str]) -> None:
        self._resolver.add_pronunciations(language, rules)

    def copy(self) -> "Compiler":
        clone = Compiler(
            default_pause_after_segment=self._default_segment_pause_ms,
            default_pause_after_slide=self._default_slide_pause_ms,
        )
        clone._resolver = self._resolver.copy()
        return clone

    def compile(self, script: Script, language: str) -> CompileResult:
        """Compile script for language.

        Raises UnknownLanguageError if the language is not used by the
        script, InvalidDurationError / InvalidEmphasisError on bad segment
        data. Segments without text for the language or the default language
        are skipped and reported in CompileResult.skipped.
        """
        available = script.languages()
        if language not in available:
            raise UnknownLanguageError(language, sorted(available))

        resolver = self._resolver.with_base(script.pronunciations)
        result = CompileResult(language=language)

        for slide_idx, slide in enumerate(script.slides):
            last_idx = len(slide.segments) - 1
            for seg_idx, seg in enumerate(slide.segments):
                where = f"slide {slide_idx + 1}, segment {seg_idx + 1}"

                original, fallback = resolve_text(seg, language, script.default_language)
                if original is None:
                    logger.warning("Skipping %s: no text for '%s'", where, language)
                    result.skipped.append(SkippedSegment(
                        slide_index=slide_idx,
                        segment_index=seg_idx,
                        slide_title=slide.title,
                        reason=f"no text for '{language}' or default language",
                    ))
                    continue

                text_language = script.default_language if fallback else language
                text = resolver.resolve(original, text_language, seg.pronunciations)
                voice_id = resolve_voice(seg, script, language, fallback)

                try:
                    pause_before = parse_duration(seg.pause_before)
                    pause_after = parse_duration(seg.pause_after)
                except InvalidDurationError as e:
                    raise InvalidDurationError(f"{where}: {e}", slide_idx, seg_idx) from e

                if pause_after == 0:
                    pause_after = self._default_segment_pause_ms
                if seg_idx == last_idx:
                    pause_after = max(pause_after, self._default_slide_pause_ms)

                emphasis = seg.emphasis or "none"
                if emphasis not in EMPHASIS_LEVELS:
                    raise InvalidEmphasisError(
                        f"{where}: unknown emphasis '{seg.emphasis}'", slide_idx, seg_idx,
                    )

                result.segments.append(CompiledSegment(
                    slide_index=slide_idx,
                    segment_index=seg_idx,
                    slide_title=slide.title,
                    position=len(result.segments),
                    text=text,
                    original_text=original,
                    voice_id=voice_id,
                    language=language,
                    pause_before_ms=pause_before,
                    pause_after_ms=pause_after,
                    emphasis=emphasis,
                    rate=seg.rate,
                    pitch=seg.pitch,
                    fallback=fallback,
                ))

        return result


def group_by_voice(segments) -> dict[str, list[CompiledSegment]]:
    groups = {}
    for seg in segments:
        groups.setdefault(seg.voice_id, []).append(seg)
    return groups


def group_by_slide(segments) -> dict[int, list[CompiledSegment]]:
    groups = {}
    for seg in segments:
        groups.setdefault(seg.slide_index, []).append(seg)
    return groups


def combine_text(segments, marker: str = PAUSE_MARKER) -> str:
    """Join segment texts into one string with inline pause markers."""
    parts = []
    for i, seg in enumerate(segments):
        if i > 0 and seg.pause_before_ms > 0:
            parts.append(marker.format(format_duration(seg.pause_before_ms)))
        parts.append(seg.text)
        if seg.pause_after_ms > 0:
            parts.append(marker.format(format_duration(seg.pause_after_ms)))
    return " ".join(parts)
