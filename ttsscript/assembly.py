"""Join generated job audio into one file per slide, with pauses as silence."""

import logging
import os

from pydub import AudioSegment

from ttsscript.manifest import BatchConfig, BatchManifest, ManifestEntry

logger = logging.getLogger(__name__)


def concatenate_slide(
    entries: list[ManifestEntry],
    audio_files: list[AudioSegment],
) -> AudioSegment:
    """Concatenate one slide's clips.

    Pause-before is inserted between clips (not at the very start), and
    pause-after follows every clip.
    """
    result = AudioSegment.silent(duration=0)
    for i, (entry, audio) in enumerate(zip(entries, audio_files)):
        if i > 0 and entry.pause_before_ms > 0:
            result += AudioSegment.silent(duration=entry.pause_before_ms)
        result += audio
        if entry.pause_after_ms > 0:
            result += AudioSegment.silent(duration=entry.pause_after_ms)
    return result


def assemble_slides(manifest: BatchManifest, config: BatchConfig) -> list[str]:
    """Write one audio file per slide from the manifest's generated clips.

    Entries whose clip is missing are left out with a warning. Returns the
    written slide file paths in slide order.
    """
    paths = []
    for slide_index, entries in sorted(manifest.slide_entries().items()):
        present = []
        audio_files = []
        for entry in entries:
            clip_path = manifest.path_for(entry)
            if not os.path.exists(clip_path) or os.path.getsize(clip_path) == 0:
                logger.warning("Slide %d: missing clip %s", slide_index + 1, entry.output_file)
                continue
            present.append(entry)
            audio_files.append(AudioSegment.from_file(clip_path, format=config.extension))

        if not present:
            logger.warning("Slide %d: no clips to assemble", slide_index + 1)
            continue

        slide_audio = concatenate_slide(present, audio_files)
        output_path = os.path.join(manifest.output_dir, config.slide_filename(slide_index, manifest.language))
        slide_audio.export(output_path, format=config.extension)
        print(f"  Slide {slide_index + 1}: {output_path} ({len(present)} segments)")
        paths.append(output_path)

    return paths
