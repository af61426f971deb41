"""Tests for the provider job formatter."""

from ttsscript.compiler import Compiler
from ttsscript.jobs import ProviderJobFormatter, combine_for_single_request, group_by_voice
from ttsscript.models import CompiledSegment


def _seg(i, voice="V1", text="Hi", before=0, after=0):
    return CompiledSegment(
        slide_index=0, segment_index=i, slide_title="S", position=i,
        text=text, original_text=text, voice_id=voice, language="en",
        pause_before_ms=before, pause_after_ms=after,
    )


def test_welcome_english_one_job(welcome_script):
    batch = ProviderJobFormatter().format(Compiler().compile(welcome_script, "en"), "en")
    assert len(batch) == 1
    job = batch[0]
    assert job.text == "Hello"
    assert job.voice_id == "V1"
    assert job.pause_after_ms == 500
    assert batch.skip_count == 0


def test_welcome_spanish_skipped_for_missing_voice(welcome_script):
    batch = ProviderJobFormatter().format(Compiler().compile(welcome_script, "es"), "es")
    assert len(batch) == 0
    assert batch.skip_count == 1
    assert batch.skipped[0].text == "Hola"


def test_jobs_plus_skips_equals_input():
    segments = [_seg(i, voice="" if i % 3 == 0 else "V1") for i in range(10)]
    batch = ProviderJobFormatter().format(segments)
    assert len(batch) + batch.skip_count == len(segments)
    assert [job.index for job in batch] == list(range(len(batch)))
    assert [job.segment_index for job in batch] == [1, 2, 4, 5, 7, 8]


def test_empty_input():
    batch = ProviderJobFormatter().format([])
    assert len(batch) == 0
    assert batch.skip_count == 0


def test_format_script(course_script):
    batch = ProviderJobFormatter().format_script(course_script, "en")
    assert len(batch) == 4
    assert batch[0].text == "Welcome to the A P I course."


def test_pause_markers():
    formatter = ProviderJobFormatter(use_pause_markers=True)
    batch = formatter.format([_seg(0, before=250, after=1000)])
    assert batch[0].text == "[pause:250ms] Hi [pause:1s]"


def test_no_pause_markers_by_default():
    batch = ProviderJobFormatter().format([_seg(0, before=250, after=1000)])
    assert batch[0].text == "Hi"


def test_formatter_does_not_mutate_segments():
    segments = [_seg(0, after=500), _seg(1, voice="")]
    snapshot = list(segments)
    ProviderJobFormatter(use_pause_markers=True).format(segments)
    assert segments == snapshot


def test_combine_and_group():
    batch = ProviderJobFormatter().format([
        _seg(0, voice="A", text="One"),
        _seg(1, voice="B", text="Two"),
        _seg(2, voice="A", text="Three"),
    ])
    assert combine_for_single_request(batch) == "One Two Three"
    groups = group_by_voice(batch)
    assert [job.text for job in groups["A"]] == ["One", "Three"]
    assert [job.text for job in groups["B"]] == ["Two"]
