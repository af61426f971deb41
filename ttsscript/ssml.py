"""Format compiled segments as an SSML document.

Output targets W3C SSML 1.1 as accepted by Google Cloud TTS, Amazon Polly,
and Azure. Each slide becomes a <p>, each segment an <s>; pauses become
<break> elements and emphasis/prosody wrap the segment text.
"""

import re
from xml.sax.saxutils import escape

from ttsscript.constants import SSML_INDENT, SSML_NAMESPACE, SSML_VERSION
from ttsscript.durations import format_duration
from ttsscript.formatter import Formatter

_XML_ENTITIES = {"'": "&apos;", '"': "&quot;"}
# Characters XML 1.0 cannot carry: C0 controls other than tab, LF and CR,
# lone surrogates, U+FFFE and U+FFFF
_XML_INVALID_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def escape_ssml(text: str) -> str:
    """Escape &, <, >, ' and " for use in SSML text or attribute values.

    Control characters that XML cannot carry are dropped.
    """
    return escape(_XML_INVALID_RE.sub("", text), _XML_ENTITIES)


def _comment(text: str) -> str:
    # "--" is not allowed inside XML comments
    return re.sub(r"-{2,}", "-", _XML_INVALID_RE.sub("", text))


def _attrs(**attrs) -> str:
    return "".join(
        f' {name.replace("_", "-")}="{escape_ssml(str(value))}"'
        for name, value in attrs.items()
        if value
    )


def ssml_break(duration: str) -> str:
    return f"<break{_attrs(time=duration)}/>"


def ssml_prosody(text: str, rate: str = "", pitch: str = "", volume: str = "") -> str:
    attrs = _attrs(rate=rate, pitch=pitch, volume=volume)
    if not attrs:
        return text
    return f"<prosody{attrs}>{text}</prosody>"


def ssml_emphasis(text: str, level: str) -> str:
    if not level or level == "none":
        return text
    return f"<emphasis{_attrs(level=level)}>{text}</emphasis>"


def ssml_say_as(text: str, interpret_as: str, format: str = "") -> str:
    return f"<say-as{_attrs(interpret_as=interpret_as, format=format)}>{text}</say-as>"


def ssml_phoneme(text: str, alphabet: str, ph: str) -> str:
    return f"<phoneme{_attrs(alphabet=alphabet, ph=ph)}>{text}</phoneme>"


def ssml_sub(text: str, alias: str) -> str:
    return f"<sub{_attrs(alias=alias)}>{text}</sub>"


class SSMLFormatter(Formatter):
    def __init__(
        self,
        version: str = SSML_VERSION,
        include_comments: bool = True,
        indent: int = SSML_INDENT,
    ):
        self.version = version
        self.include_comments = include_comments
        self.indent = indent

    def _segment_line(self, seg) -> str:
        content = escape_ssml(seg.text)
        content = ssml_emphasis(content, seg.emphasis)
        content = ssml_prosody(content, rate=seg.rate, pitch=seg.pitch)
        return f"<s>{content}</s>"

    def format(self, segments, language: str) -> str:
        """Render segments as a complete SSML document.

        An empty sequence yields an empty <speak> element.
        """
        pad = " " * self.indent
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f"<speak{_attrs(version=self.version, xmlns=SSML_NAMESPACE)}"
            f' xml:lang="{escape_ssml(language)}">',
        ]

        current_slide = None
        for seg in segments:
            if seg.slide_index != current_slide:
                if current_slide is not None:
                    lines.append(f"{pad}</p>")
                current_slide = seg.slide_index
                if self.include_comments:
                    label = f"Slide {seg.slide_index + 1}"
                    if seg.slide_title:
                        label += f": {seg.slide_title}"
                    lines.append(f"{pad}<!-- {_comment(label)} -->")
                lines.append(f"{pad}<p>")

            if seg.pause_before_ms > 0:
                lines.append(f"{pad * 2}{ssml_break(format_duration(seg.pause_before_ms))}")
            lines.append(f"{pad * 2}{self._segment_line(seg)}")
            if seg.pause_after_ms > 0:
                lines.append(f"{pad * 2}{ssml_break(format_duration(seg.pause_after_ms))}")

        if current_slide is not None:
            lines.append(f"{pad}</p>")
        lines.append("</speak>")
        return "\n".join(lines) + "\n"
