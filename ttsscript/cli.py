"""CLI interface with subcommand routing and batch generation."""

import argparse
import json
import logging
import os
import shutil
import sys

from ttsscript.assembly import assemble_slides
from ttsscript.compiler import Compiler
from ttsscript.constants import DEFAULT_MODEL_ID, OUTPUT_DIR, VERSION
from ttsscript.errors import CompilationError, ConfigurationError, ScriptFormatError, TTSRequestError
from ttsscript.jobs import ProviderJobFormatter
from ttsscript.manifest import BatchConfig, generate_manifest, write_manifest
from ttsscript.script import load_script
from ttsscript.ssml import SSMLFormatter
from ttsscript.tts import ElevenLabsClient, generate_jobs

# Issues in these categories are reported but do not fail validation
ADVISORY_CATEGORIES = {"voice"}


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    raise SystemExit(1)


def _check_ffmpeg():
    """Verify ffmpeg is installed."""
    if not shutil.which("ffmpeg"):
        print("Error: ffmpeg is required for --per-slide but was not found.", file=sys.stderr)
        print("Install with: brew install ffmpeg", file=sys.stderr)
        raise SystemExit(1)


def _load(path: str):
    if not os.path.exists(path):
        _fail(f"File not found: {path}")
    try:
        return load_script(path)
    except ScriptFormatError as e:
        _fail(f"Could not load script {path}: {e}")


def _language(args, script) -> str:
    return args.lang or script.default_language or "en"


def _truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


def _compile(script, language: str):
    try:
        return Compiler().compile(script, language)
    except CompilationError as e:
        _fail(f"Failed to compile script: {e}")


def _print_issues(issues) -> None:
    for issue in issues:
        marker = "warn" if issue.category in ADVISORY_CATEGORIES else "error"
        print(f"  [{marker}] {issue.category}: {issue.message}")


def cmd_info(args):
    """Show script summary and validation issues."""
    script = _load(args.script)
    print(f"Script:    {script.title or '(untitled)'}")
    if script.description:
        print(f"About:     {script.description}")
    print(f"Default:   {script.default_language or '(none)'}")
    print(f"Languages: {', '.join(sorted(script.languages())) or '(none)'}")
    print(f"Slides: {script.slide_count()}, Segments: {script.segment_count()}")
    issues = script.validate()
    if issues:
        print("Issues:")
        _print_issues(issues)


def cmd_validate(args):
    """Validate a script; exit 1 on any non-advisory issue."""
    script = _load(args.script)
    issues = script.validate()
    if not issues:
        print(f"{args.script}: OK")
        return
    print(f"{args.script}: {len(issues)} issue(s)")
    _print_issues(issues)
    if any(issue.category not in ADVISORY_CATEGORIES for issue in issues):
        raise SystemExit(1)


def cmd_ssml(args):
    """Export the script as SSML."""
    script = _load(args.script)
    language = _language(args, script)
    result = _compile(script, language)
    ssml = SSMLFormatter(include_comments=not args.no_comments).format(result, language)

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(ssml)
        print(f"SSML saved: {args.out}")
    else:
        sys.stdout.write(ssml)

    if result.skip_count:
        print(f"Skipped {result.skip_count} segment(s) with no '{language}' text", file=sys.stderr)


def cmd_generate(args):
    """Compile, format, and generate audio for every job."""
    script = _load(args.script)

    blocking = [i for i in script.validate() if i.category not in ADVISORY_CATEGORIES]
    if blocking:
        print("Error: Script validation failed:", file=sys.stderr)
        for issue in blocking:
            print(f"  - {issue.message}", file=sys.stderr)
        raise SystemExit(1)

    if args.per_slide and not args.dry_run:
        _check_ffmpeg()

    language = _language(args, script)
    print(f"Script: {script.title}")
    print(f"Language: {language}")
    print(f"Slides: {script.slide_count()}, Segments: {script.segment_count()}")

    result = _compile(script, language)
    batch = ProviderJobFormatter(use_pause_markers=args.pause_markers).format(result)

    print(f"Generated {len(batch)} TTS jobs")
    if result.skip_count:
        print(f"Skipped {result.skip_count} segment(s) with no '{language}' text")
    if batch.skip_count:
        print(f"Skipped {batch.skip_count} segment(s) with no voice configured")

    config = BatchConfig(args.output, file_prefix=args.prefix)
    manifest = generate_manifest(batch, config, language)

    if args.dry_run:
        print("\nDry run - would generate:")
        for entry in manifest.entries:
            print(f"  {manifest.path_for(entry)}")
            print(f"    Text: {_truncate(entry.text, 60)}")
            print(f"    Voice: {entry.voice_id}")
        if args.per_slide:
            print("\nPer-slide output:")
            for slide_index in sorted(manifest.slide_entries()):
                name = config.slide_filename(slide_index, language)
                print(f"  Slide {slide_index + 1}: {os.path.join(args.output, name)}")
        return

    try:
        client = ElevenLabsClient(model_id=args.model)
    except ConfigurationError as e:
        _fail(str(e))

    os.makedirs(args.output, exist_ok=True)
    print()
    generated, failed = generate_jobs(client, manifest, model_id=args.model)

    if not args.no_manifest:
        path = write_manifest(manifest)
        print(f"\nManifest saved: {path}")

    if args.per_slide:
        print("\nConcatenating per-slide audio...")
        assemble_slides(manifest, config)

    print(f"\nDone! Generated {len(generated)} audio files.")
    if failed:
        print(f"{len(failed)} job(s) failed; re-run to retry them.", file=sys.stderr)
        raise SystemExit(1)


def cmd_voices(args):
    """List voices available to the API key."""
    try:
        client = ElevenLabsClient()
        voices = client.list_voices()
    except (ConfigurationError, TTSRequestError) as e:
        _fail(str(e))

    filter_str = args.filter.lower() if args.filter else None
    if filter_str:
        voices = [v for v in voices if filter_str in v.get("name", "").lower()]
    if not voices:
        print("No matching voices found.")
        return
    if args.json:
        print(json.dumps(voices, indent=2))
        return
    print("Available voices:")
    for v in voices:
        print(f"  {v.get('voice_id', ''):<24} {v.get('name', '')}")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="ttsscript",
        description="Compile multilingual TTS scripts and generate audio with ElevenLabs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # info
    info_parser = subparsers.add_parser("info", help="Show script summary")
    info_parser.add_argument("script", help="Path to the script JSON file")
    info_parser.set_defaults(func=cmd_info)

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate a script")
    validate_parser.add_argument("script", help="Path to the script JSON file")
    validate_parser.set_defaults(func=cmd_validate)

    # ssml
    ssml_parser = subparsers.add_parser("ssml", help="Export a script as SSML")
    ssml_parser.add_argument("script", help="Path to the script JSON file")
    ssml_parser.add_argument("--lang", help="Language code (default: script default language)")
    ssml_parser.add_argument("-o", "--out", help="Write SSML to this file instead of stdout")
    ssml_parser.add_argument("--no-comments", action="store_true", help="Omit slide title comments")
    ssml_parser.set_defaults(func=cmd_ssml)

    # generate
    gen_parser = subparsers.add_parser("generate", help="Generate TTS audio for a script")
    gen_parser.add_argument("script", help="Path to the script JSON file")
    gen_parser.add_argument("--lang", help="Language code (default: script default language)")
    gen_parser.add_argument("--output", default=OUTPUT_DIR, help="Output directory")
    gen_parser.add_argument("--model", default=DEFAULT_MODEL_ID, help="ElevenLabs model ID")
    gen_parser.add_argument("--prefix", default="", help="Prefix for output filenames")
    gen_parser.add_argument("--dry-run", action="store_true", help="Show what would be generated")
    gen_parser.add_argument("--per-slide", action="store_true", help="Also write one file per slide (requires ffmpeg)")
    gen_parser.add_argument("--no-manifest", action="store_true", help="Do not write manifest JSON")
    gen_parser.add_argument("--pause-markers", action="store_true", help="Embed [pause:X] markers in job text")
    gen_parser.set_defaults(func=cmd_generate)

    # voices
    voices_parser = subparsers.add_parser("voices", help="List available voices")
    voices_parser.add_argument("--filter", help="Filter voices by name substring")
    voices_parser.add_argument("--json", action="store_true", help="Print raw JSON")
    voices_parser.set_defaults(func=cmd_voices)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    args.func(args)
