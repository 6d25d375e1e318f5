"""Tests for transcript path derivation and the fail-open loader.

WHY: The loader is the only part of the pipeline that talks to the outside
world. Every way the outside world can fail (missing file, HTTP error,
garbage body, bad timestamps) has to end in an empty transcript and a log
line, never an exception.

HOW: Path derivation is checked against literal input/output pairs. The
loader is driven with httpx.MockTransport for URLs and tmp_path files for
local sources; caplog checks the logged reason.
"""

import asyncio
import json
import logging

import httpx
import pytest

from caption_timeline.transcript import (
    TranscriptLoadError,
    load_transcript,
    parse_transcript,
    read_transcript,
    resolve_location,
    subtitles_path_for,
)

from conftest import SAMPLE_CAPTIONS


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _load(src, handler=None, **kwargs):
    async def _go():
        if handler is None:
            return await load_transcript(src, **kwargs)
        async with _client(handler) as client:
            return await load_transcript(src, client=client, **kwargs)

    return asyncio.run(_go())


def _serve(status=200, text=None):
    def handler(request):
        body = json.dumps(SAMPLE_CAPTIONS) if text is None else text
        return httpx.Response(status, text=body)

    return handler


class TestSubtitlesPath:

    @pytest.mark.parametrize("src,expected", [
        ("/uploads/clip.mp4", "/subs/clip.json"),
        ("/uploads/clip.mkv", "/subs/clip.json"),
        ("/uploads/clip.mov", "/subs/clip.json"),
        ("/uploads/clip.webm", "/subs/clip.json"),
        ("uploads/nested/talk.mp4", "subs/nested/talk.json"),
    ])
    def test_known_extensions(self, src, expected):
        assert subtitles_path_for(src) == expected

    def test_only_trailing_suffix_swapped(self):
        assert subtitles_path_for("/uploads/clip.mp4.mov") == "/subs/clip.mp4.json"

    @pytest.mark.parametrize("src,expected", [
        ("/uploads/clip.avi", "/subs/clip.avi"),
        ("/uploads/clip.MP4", "/subs/clip.MP4"),
        ("/uploads/clip", "/subs/clip"),
    ])
    def test_unknown_extension_kept(self, src, expected):
        assert subtitles_path_for(src) == expected

    def test_only_first_uploads_occurrence_replaced(self):
        assert subtitles_path_for("/uploads/user_uploads/a.mp4") == "/subs/user_uploads/a.json"
        assert subtitles_path_for("/media/uploads/uploads/a.mp4") == "/media/subs/uploads/a.json"

    def test_path_without_uploads(self):
        assert subtitles_path_for("/media/clip.mp4") == "/media/clip.json"

    def test_url_query_string_survives(self):
        src = "https://cdn.example.com/uploads/a.webm?v=2"
        assert subtitles_path_for(src) == "https://cdn.example.com/subs/a.json?v=2"

    def test_url_suffix_in_query_not_swapped(self):
        src = "https://cdn.example.com/uploads/play?file=a.mp4"
        assert subtitles_path_for(src) == "https://cdn.example.com/subs/play?file=a.mp4"


class TestResolveLocation:

    def test_no_base_url_returns_path(self):
        assert resolve_location("/subs/a.json") == "/subs/a.json"

    def test_root_relative_joined_under_base(self):
        assert (resolve_location("/subs/a.json", "https://cdn.example.com/media/")
                == "https://cdn.example.com/media/subs/a.json")

    def test_base_without_trailing_slash(self):
        assert (resolve_location("subs/a.json", "https://cdn.example.com/media")
                == "https://cdn.example.com/media/subs/a.json")

    def test_absolute_url_unchanged(self):
        url = "https://other.example.com/subs/a.json"
        assert resolve_location(url, "https://cdn.example.com") == url


class TestParseTranscript:

    def test_valid(self, sample_words):
        assert parse_transcript(SAMPLE_CAPTIONS) == sample_words

    def test_empty_array_is_valid(self):
        assert parse_transcript([]) == ()

    @pytest.mark.parametrize("data", [
        {"captions": []},
        [{"text": "a"}],
        [{"startMs": 0}],
        [{"text": 1, "startMs": 0}],
        [{"text": "a", "startMs": "0"}],
        [{"text": "a", "startMs": -5}],
    ])
    def test_rejects_wrong_shape(self, data):
        with pytest.raises(TranscriptLoadError) as info:
            parse_transcript(data, "x.json")
        assert info.value.malformed
        assert info.value.location == "x.json"

    def test_rejects_non_finite_start(self):
        with pytest.raises(TranscriptLoadError, match="invalid value"):
            parse_transcript([{"text": "a", "startMs": float("nan")}])


class TestLoadTranscript:

    def test_remote_success(self, sample_words):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return _serve()(request)

        words = _load("https://cdn.example.com/uploads/clip.mp4", handler, base_url=None)
        assert words == sample_words
        assert seen == ["https://cdn.example.com/subs/clip.json"]

    def test_base_url_join(self, sample_words):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return _serve()(request)

        words = _load("/uploads/clip.mp4", handler, base_url="https://cdn.example.com")
        assert words == sample_words
        assert seen == ["https://cdn.example.com/subs/clip.json"]

    def test_http_error_is_empty(self, caplog):
        with caplog.at_level(logging.ERROR, logger="caption_timeline.transcript.loader"):
            words = _load("https://cdn.example.com/uploads/clip.mp4", _serve(404), base_url=None)
        assert words == ()
        assert "Error fetching subtitles https://cdn.example.com/subs/clip.json" in caplog.text
        assert "HTTP 404" in caplog.text

    def test_transport_error_is_empty(self, caplog):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with caplog.at_level(logging.ERROR, logger="caption_timeline.transcript.loader"):
            words = _load("https://cdn.example.com/uploads/clip.mp4", handler, base_url=None)
        assert words == ()
        assert "request failed" in caplog.text

    def test_invalid_json_is_empty(self, caplog):
        with caplog.at_level(logging.WARNING, logger="caption_timeline.transcript.loader"):
            words = _load("https://cdn.example.com/uploads/clip.mp4",
                          _serve(text="<html>oops</html>"), base_url=None)
        assert words == ()
        assert "Ignoring malformed transcript" in caplog.text

    def test_wrong_shape_is_empty(self):
        words = _load("https://cdn.example.com/uploads/clip.mp4",
                      _serve(text=json.dumps({"words": SAMPLE_CAPTIONS})), base_url=None)
        assert words == ()

    def test_negative_start_is_empty(self):
        bad = [{"text": "a", "startMs": -1}]
        words = _load("https://cdn.example.com/uploads/clip.mp4",
                      _serve(text=json.dumps(bad)), base_url=None)
        assert words == ()

    def test_local_file(self, media_tree, sample_words):
        assert _load(str(media_tree), base_url=None) == sample_words

    def test_missing_local_file_is_empty(self, tmp_path, caplog):
        src = str(tmp_path / "uploads" / "gone.mp4")
        with caplog.at_level(logging.ERROR, logger="caption_timeline.transcript.loader"):
            assert _load(src, base_url=None) == ()
        assert "unreadable file" in caplog.text

    def test_non_utf8_local_file_is_empty(self, media_tree, caplog):
        transcript = media_tree.parent.parent / "subs" / "clip.json"
        transcript.write_bytes(b'[{"text": "\xff\xfe", "startMs": 0}]')
        with caplog.at_level(logging.WARNING, logger="caption_timeline.transcript.loader"):
            assert _load(str(media_tree), base_url=None) == ()
        assert "Ignoring malformed transcript" in caplog.text
        assert "not UTF-8" in caplog.text

    def test_deeply_nested_json_is_empty(self, media_tree):
        transcript = media_tree.parent.parent / "subs" / "clip.json"
        transcript.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
        assert _load(str(media_tree), base_url=None) == ()

    def test_explicit_subtitles_override(self, tmp_path, sample_words):
        custom = tmp_path / "words.json"
        custom.write_text(json.dumps(SAMPLE_CAPTIONS), encoding="utf-8")
        words = _load("/nowhere/uploads/clip.mp4", base_url=None, subtitles=str(custom))
        assert words == sample_words

    def test_read_transcript_raises(self, tmp_path):
        with pytest.raises(TranscriptLoadError) as info:
            asyncio.run(read_transcript(str(tmp_path / "missing.json")))
        assert not info.value.malformed
