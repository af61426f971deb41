"""Tests for CLI subcommands."""

import json
from unittest.mock import MagicMock, patch

import pytest

from ttsscript.cli import main
from ttsscript.constants import API_KEY_ENV
from ttsscript.script import save_script


def _write(script, tmp_path, name="script.json"):
    return save_script(script, str(tmp_path / name))


def test_cli_no_command_prints_help(capsys):
    main([])
    assert "usage" in capsys.readouterr().out


def test_cli_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main(["info", str(tmp_path / "nope.json")])
    assert "File not found" in capsys.readouterr().err


def test_cli_bad_json(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(SystemExit):
        main(["validate", str(path)])
    assert "Could not load script" in capsys.readouterr().err


def test_cli_info(course_script, tmp_path, capsys):
    main(["info", _write(course_script, tmp_path)])
    out = capsys.readouterr().out
    assert "Introduction to the API" in out
    assert "Languages: en, es" in out
    assert "Slides: 2, Segments: 4" in out


def test_cli_validate_ok(course_script, tmp_path, capsys):
    main(["validate", _write(course_script, tmp_path)])
    assert "OK" in capsys.readouterr().out


def test_cli_validate_fails(course_script, tmp_path, capsys):
    course_script.title = ""
    course_script.slides[0].segments[0].pause_after = "soon"
    with pytest.raises(SystemExit) as exc_info:
        main(["validate", _write(course_script, tmp_path)])
    assert exc_info.value.code == 1
    out = capsys.readouterr().out
    assert "2 issue(s)" in out
    assert "[error] pause" in out


def test_cli_validate_voice_issue_is_advisory(course_script, tmp_path, capsys):
    course_script.default_voices = {"es": "voice-es"}
    main(["validate", _write(course_script, tmp_path)])
    assert "[warn] voice" in capsys.readouterr().out


def test_cli_ssml_stdout(welcome_script, tmp_path, capsys):
    main(["ssml", _write(welcome_script, tmp_path)])
    out = capsys.readouterr().out
    assert out.startswith("<?xml")
    assert "<s>Hello</s>" in out


def test_cli_ssml_to_file(course_script, tmp_path):
    out_path = tmp_path / "course_es.ssml"
    main(["ssml", _write(course_script, tmp_path), "--lang", "es", "-o", str(out_path), "--no-comments"])
    content = out_path.read_text(encoding="utf-8")
    assert 'xml:lang="es"' in content
    assert "<!--" not in content


def test_cli_ssml_unknown_language(welcome_script, tmp_path, capsys):
    with pytest.raises(SystemExit):
        main(["ssml", _write(welcome_script, tmp_path), "--lang", "fr"])
    assert "language 'fr' not in script" in capsys.readouterr().err


def test_cli_generate_dry_run(course_script, tmp_path, capsys):
    out_dir = tmp_path / "out"
    main(["generate", _write(course_script, tmp_path), "--output", str(out_dir), "--dry-run", "--per-slide"])
    out = capsys.readouterr().out
    assert "Generated 4 TTS jobs" in out
    assert "000_slide01_seg01_en.mp3" in out
    assert "Voice: voice-narrator" in out
    assert "slide02_en.mp3" in out
    assert not out_dir.exists()


def test_cli_generate_reports_voice_skips(welcome_script, tmp_path, capsys):
    main(["generate", _write(welcome_script, tmp_path), "--lang", "es",
          "--output", str(tmp_path / "out"), "--dry-run"])
    out = capsys.readouterr().out
    assert "Generated 0 TTS jobs" in out
    assert "Skipped 1 segment(s) with no voice configured" in out


def test_cli_generate_rejects_invalid_script(course_script, tmp_path, capsys):
    course_script.slides[0].segments[0].emphasis = "loud"
    with pytest.raises(SystemExit):
        main(["generate", _write(course_script, tmp_path), "--dry-run"])
    assert "validation failed" in capsys.readouterr().err


def test_cli_generate_requires_api_key(welcome_script, tmp_path, monkeypatch, capsys):
    monkeypatch.delenv(API_KEY_ENV, raising=False)
    with pytest.raises(SystemExit):
        main(["generate", _write(welcome_script, tmp_path), "--output", str(tmp_path / "out")])
    assert API_KEY_ENV in capsys.readouterr().err


@patch("ttsscript.tts.time.sleep")
@patch("ttsscript.tts.requests.post")
def test_cli_generate(mock_post, mock_sleep, course_script, tmp_path, monkeypatch, capsys):
    monkeypatch.setenv(API_KEY_ENV, "test-key")
    response = MagicMock(status_code=200, content=b"ID3fake")
    mock_post.return_value = response
    out_dir = tmp_path / "out"

    main(["generate", _write(course_script, tmp_path), "--output", str(out_dir), "--prefix", "intro"])

    assert mock_post.call_count == 4
    assert (out_dir / "intro_000_slide01_seg01_en.mp3").read_bytes() == b"ID3fake"
    manifest = json.loads((out_dir / "manifest_en.json").read_text(encoding="utf-8"))
    assert len(manifest["entries"]) == 4
    assert "Done! Generated 4 audio files." in capsys.readouterr().out


@patch("ttsscript.tts.time.sleep")
@patch("ttsscript.tts.requests.post")
def test_cli_generate_exits_on_failed_jobs(mock_post, mock_sleep, welcome_script, tmp_path, monkeypatch):
    monkeypatch.setenv(API_KEY_ENV, "test-key")
    mock_post.return_value = MagicMock(status_code=401, text="unauthorized")
    out_dir = tmp_path / "out"
    with pytest.raises(SystemExit) as exc_info:
        main(["generate", _write(welcome_script, tmp_path), "--output", str(out_dir), "--no-manifest"])
    assert exc_info.value.code == 1
    assert not (out_dir / "manifest_en.json").exists()


@patch("ttsscript.tts.requests.get")
def test_cli_voices(mock_get, monkeypatch, capsys):
    monkeypatch.setenv(API_KEY_ENV, "test-key")
    mock_get.return_value = MagicMock(status_code=200)
    mock_get.return_value.json.return_value = {"voices": [
        {"voice_id": "V1", "name": "Rachel"},
        {"voice_id": "V2", "name": "Adam"},
    ]}
    main(["voices", "--filter", "rach"])
    out = capsys.readouterr().out
    assert "Rachel" in out
    assert "Adam" not in out
