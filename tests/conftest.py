"""Shared fixtures for ttsscript tests."""

import pytest

from ttsscript.models import Script, Segment, Slide


@pytest.fixture
def welcome_script():
    """One slide, one bilingual segment, English default voice only."""
    return Script(
        title="Welcome",
        default_language="en",
        default_voices={"en": "V1"},
        slides=[
            Slide(title="Welcome", segments=[
                Segment(text={"en": "Hello", "es": "Hola"}, pause_after="500ms"),
            ]),
        ],
    )


@pytest.fixture
def course_script():
    """Two slides, two languages, pronunciations and mixed segment settings."""
    return Script(
        title="Introduction to the API",
        description="A short multilingual course",
        default_language="en",
        default_voices={"en": "voice-en", "es": "voice-es"},
        pronunciations={
            "API": {"en": "A P I", "es": "A P I"},
            "SDK": {"en": "S D K"},
        },
        slides=[
            Slide(title="Welcome", segments=[
                Segment(
                    text={"en": "Welcome to the API course.", "es": "Bienvenidos al curso de API."},
                    pause_after="800ms",
                ),
                Segment(
                    text={"en": "Install the SDK first.", "es": "Instale el SDK primero."},
                    emphasis="strong",
                ),
            ]),
            Slide(title="Features", notes="keep it short", segments=[
                Segment(
                    text={"en": "It is fast."},
                    pause_before="300ms",
                    pause_after="1s",
                    voice={"en": "voice-narrator"},
                    rate="90%",
                ),
                Segment(
                    text={"en": "Thanks for listening.", "es": "Gracias por escuchar."},
                    emphasis="moderate",
                ),
            ]),
        ],
    )
