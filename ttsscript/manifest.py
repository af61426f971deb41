"""Batch manifests: deterministic output filenames for TTS jobs."""

import json
import os
from dataclasses import asdict, dataclass, field

from ttsscript.constants import AUDIO_EXTENSION, JOB_INDEX_WIDTH


@dataclass
class BatchConfig:
    output_dir: str
    file_prefix: str = ""
    file_suffix: str = ""
    include_language: bool = True
    extension: str = AUDIO_EXTENSION

    def filename_for(self, job, language: str, index_width: int = JOB_INDEX_WIDTH) -> str:
        """Output filename for a job, relative to output_dir.

        "003_slide02_seg01_en.mp3": the zero-padded job index keeps names
        unique and sorted in job order. index_width must cover the largest
        index in the batch; generate_manifest widens it as needed.
        """
        name = f"{job.index:0{index_width}d}_slide{job.slide_index + 1:02d}_seg{job.segment_index + 1:02d}"
        if self.file_prefix:
            name = f"{self.file_prefix}_{name}"
        if self.include_language and language:
            name = f"{name}_{language}"
        if self.file_suffix:
            name = f"{name}_{self.file_suffix}"
        return f"{name}.{self.extension}"

    def slide_filename(self, slide_index: int, language: str) -> str:
        name = f"slide{slide_index + 1:02d}"
        if self.file_prefix:
            name = f"{self.file_prefix}_{name}"
        if self.include_language and language:
            name = f"{name}_{language}"
        return f"{name}.{self.extension}"


@dataclass(frozen=True)
class ManifestEntry:
    index: int
    output_file: str                 # relative to BatchManifest.output_dir
    slide_index: int
    segment_index: int
    slide_title: str
    text: str
    voice_id: str
    pause_before_ms: int = 0
    pause_after_ms: int = 0


@dataclass
class BatchManifest:
    output_dir: str
    language: str
    entries: list[ManifestEntry] = field(default_factory=list)

    def path_for(self, entry: ManifestEntry) -> str:
        return os.path.join(self.output_dir, entry.output_file)

    def slide_entries(self) -> dict[int, list[ManifestEntry]]:
        """Entries grouped by slide, in job order."""
        groups = {}
        for entry in self.entries:
            groups.setdefault(entry.slide_index, []).append(entry)
        return groups

    def to_dict(self) -> dict:
        return {
            "output_dir": self.output_dir,
            "language": self.language,
            "entries": [asdict(entry) for entry in self.entries],
        }


def generate_manifest(jobs, config: BatchConfig, language: str) -> BatchManifest:
    """Pair each job with its output file. Pure: touches no files."""
    jobs = list(jobs)
    width = max([JOB_INDEX_WIDTH] + [len(str(job.index)) for job in jobs])
    manifest = BatchManifest(output_dir=config.output_dir, language=language)
    for job in jobs:
        manifest.entries.append(ManifestEntry(
            index=job.index,
            output_file=config.filename_for(job, language, width),
            slide_index=job.slide_index,
            segment_index=job.segment_index,
            slide_title=job.slide_title,
            text=job.text,
            voice_id=job.voice_id,
            pause_before_ms=job.pause_before_ms,
            pause_after_ms=job.pause_after_ms,
        ))
    return manifest


def write_manifest(manifest: BatchManifest, path: str | None = None) -> str:
    """Write manifest JSON (default: <output_dir>/manifest_<lang>.json). Returns the path."""
    if path is None:
        path = os.path.join(manifest.output_dir, f"manifest_{manifest.language}.json")
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(manifest.to_dict(), f, indent=2, ensure_ascii=False)
    return path
