"""Load and save script documents as JSON."""

import json
import logging
import os

from ttsscript.errors import ScriptFormatError
from ttsscript.models import Script, Segment, Slide

logger = logging.getLogger(__name__)


def _require_mapping(value, where: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ScriptFormatError(f"{where} must be an object, got {type(value).__name__}")
    return value


def _or_empty(value):
    return "" if value is None else value


def _require_str(value, where: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ScriptFormatError(f"{where} must be a string, got {type(value).__name__}")
    return value


def _string_map(value, where: str) -> dict[str, str]:
    """Decode an object whose values must all be strings (null is not allowed)."""
    result = {}
    for key, item in _require_mapping(value, where).items():
        if not isinstance(item, str):
            raise ScriptFormatError(f"{where}['{key}'] must be a string, got {type(item).__name__}")
        result[key] = item
    return result


def _parse_pronunciations(value, where: str) -> dict[str, dict[str, str]]:
    table = _require_mapping(value, where)
    result = {}
    for term, by_lang in table.items():
        result[term] = _string_map(by_lang, f"{where}['{term}']")
    return result


def _parse_segment(data, where: str) -> Segment:
    data = _require_mapping(data, where)
    if "text" not in data:
        raise ScriptFormatError(f"{where} is missing 'text'")

    voice = data.get("voice", "")
    if voice is None:
        voice = ""
    elif isinstance(voice, dict):
        voice = _string_map(voice, f"{where}.voice")
    elif not isinstance(voice, str):
        raise ScriptFormatError(f"{where}.voice must be a string or an object")

    return Segment(
        text=_string_map(data["text"], f"{where}.text"),
        voice=voice,
        pause_before=_or_empty(data.get("pause_before")),
        pause_after=_or_empty(data.get("pause_after")),
        emphasis=_require_str(data.get("emphasis"), f"{where}.emphasis") or "none",
        rate=_require_str(data.get("rate"), f"{where}.rate"),
        pitch=_require_str(data.get("pitch"), f"{where}.pitch"),
        pronunciations=_parse_pronunciations(data.get("pronunciations"), f"{where}.pronunciations"),
    )


def parse_script(data: str | bytes | dict) -> Script:
    """Parse a script from JSON text or an already-decoded dict."""
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ScriptFormatError(f"parsing script JSON: {e}") from e

    data = _require_mapping(data, "script")
    slides_data = data.get("slides") or []
    if not isinstance(slides_data, list):
        raise ScriptFormatError("script.slides must be a list")

    slides = []
    for i, slide_data in enumerate(slides_data):
        where = f"slides[{i}]"
        slide_data = _require_mapping(slide_data, where)
        segments_data = slide_data.get("segments") or []
        if not isinstance(segments_data, list):
            raise ScriptFormatError(f"{where}.segments must be a list")
        slides.append(Slide(
            title=_require_str(slide_data.get("title"), f"{where}.title"),
            notes=_require_str(slide_data.get("notes"), f"{where}.notes"),
            segments=[
                _parse_segment(seg, f"{where}.segments[{j}]")
                for j, seg in enumerate(segments_data)
            ],
        ))

    return Script(
        title=_require_str(data.get("title"), "script.title"),
        description=_require_str(data.get("description"), "script.description"),
        default_language=_require_str(data.get("default_language"), "script.default_language"),
        default_voices=_string_map(data.get("default_voices"), "script.default_voices"),
        pronunciations=_parse_pronunciations(data.get("pronunciations"), "script.pronunciations"),
        slides=slides,
    )


def load_script(path: str) -> Script:
    """Load a script from a JSON file."""
    with open(path, encoding="utf-8") as f:
        text = f.read()
    script = parse_script(text)
    logger.info("Loaded script %r from %s (%d slides)", script.title, path, script.slide_count())
    return script


def _segment_to_dict(seg: Segment) -> dict:
    data = {"text": dict(seg.text)}
    if seg.voice:
        data["voice"] = dict(seg.voice) if isinstance(seg.voice, dict) else seg.voice
    for key in ("pause_before", "pause_after", "rate", "pitch"):
        value = getattr(seg, key)
        if value not in ("", None):
            data[key] = value
    if seg.emphasis and seg.emphasis != "none":
        data["emphasis"] = seg.emphasis
    if seg.pronunciations:
        data["pronunciations"] = {t: dict(m) for t, m in seg.pronunciations.items()}
    return data


def script_to_dict(script: Script) -> dict:
    """Convert a script to a JSON-ready dict, omitting empty optional fields."""
    data = {}
    if script.title:
        data["title"] = script.title
    if script.description:
        data["description"] = script.description
    if script.default_language:
        data["default_language"] = script.default_language
    if script.default_voices:
        data["default_voices"] = dict(script.default_voices)
    if script.pronunciations:
        data["pronunciations"] = {t: dict(m) for t, m in script.pronunciations.items()}

    slides = []
    for slide in script.slides:
        slide_data = {}
        if slide.title:
            slide_data["title"] = slide.title
        if slide.notes:
            slide_data["notes"] = slide.notes
        slide_data["segments"] = [_segment_to_dict(seg) for seg in slide.segments]
        slides.append(slide_data)
    data["slides"] = slides
    return data


def save_script(script: Script, path: str) -> str:
    """Write script JSON to path. Returns the path."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(script_to_dict(script), f, indent=2, ensure_ascii=False)
    return path
