"""Format compiled segments into TTS jobs for batch submission."""

import logging

from ttsscript.constants import PAUSE_MARKER
from ttsscript.durations import format_duration
from ttsscript.formatter import Formatter
from ttsscript.models import JobBatch, TTSJob

logger = logging.getLogger(__name__)


class ProviderJobFormatter(Formatter):
    """One TTSJob per compiled segment that has a voice.

    Segments without a voice are returned in JobBatch.skipped so that
    len(batch) + batch.skip_count always equals the input length.
    """

    def __init__(self, use_pause_markers: bool = False, pause_marker: str = PAUSE_MARKER):
        self.use_pause_markers = use_pause_markers
        self.pause_marker = pause_marker

    def _job_text(self, seg) -> str:
        text = seg.text
        if not self.use_pause_markers:
            return text
        if seg.pause_before_ms > 0:
            text = self.pause_marker.format(format_duration(seg.pause_before_ms)) + " " + text
        if seg.pause_after_ms > 0:
            text = text + " " + self.pause_marker.format(format_duration(seg.pause_after_ms))
        return text

    def format(self, segments, language: str = "") -> JobBatch:
        batch = JobBatch()
        for seg in segments:
            if not seg.voice_id:
                logger.warning(
                    "Skipping slide %d, segment %d: no voice for '%s'",
                    seg.slide_index + 1, seg.segment_index + 1, seg.language,
                )
                batch.skipped.append(seg)
                continue

            batch.jobs.append(TTSJob(
                index=len(batch.jobs),
                slide_index=seg.slide_index,
                segment_index=seg.segment_index,
                slide_title=seg.slide_title,
                text=self._job_text(seg),
                voice_id=seg.voice_id,
                pause_before_ms=seg.pause_before_ms,
                pause_after_ms=seg.pause_after_ms,
            ))
        return batch


def combine_for_single_request(jobs) -> str:
    """Join job texts for one API call. Per-job voices are lost."""
    return " ".join(job.text for job in jobs)


def group_by_voice(jobs) -> dict[str, list[TTSJob]]:
    groups = {}
    for job in jobs:
        groups.setdefault(job.voice_id, []).append(job)
    return groups
