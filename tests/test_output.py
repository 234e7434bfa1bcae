"""Tests for output module."""

import json

import httpx
import pytest

from collector.http import Response
from collector.output import StreamingOutputWriter, response_record


@pytest.fixture
def make_response(make_request):
    def _make(url: str = "http://a.test/page", body: str = "<p>Hello</p>", depth: int = 2) -> Response:
        return Response(
            status_code=200,
            body=body.encode(),
            request=make_request(url, depth=depth),
            headers=httpx.Headers({"Content-Type": "text/html"}),
        )
    return _make


@pytest.fixture
def response(make_response):
    return make_response()


class TestResponseRecord:
    def test_fields(self, response):
        """Records summarize the response and its request."""
        assert response_record(response) == {
            "url": "http://a.test/page",
            "status": 200,
            "depth": 2,
            "content_length": 12,
            "content_type": "text/html",
            "content": "<p>Hello</p>",
        }

    def test_without_content(self, response):
        """include_content=False leaves the body out but keeps its length."""
        record = response_record(response, include_content=False)

        assert "content" not in record
        assert record["content_length"] == 12


class TestStreamingOutputWriter:
    def test_creates_file_and_directory(self, tmp_path, response):
        """Should create output file and parent directories."""
        output_file = tmp_path / "subdir" / "output.jsonl"
        with StreamingOutputWriter(output_file) as writer:
            writer.write(response)

        assert output_file.exists()

    def test_writes_jsonl_format(self, tmp_path, make_response):
        """Should write one JSON object per response."""
        output_file = tmp_path / "output.jsonl"
        with StreamingOutputWriter(output_file) as writer:
            writer.write(make_response("http://a.test/1"))
            writer.write(make_response("http://a.test/2", depth=3))

        lines = output_file.read_text().strip().split("\n")
        records = [json.loads(line) for line in lines]
        assert [(r["url"], r["depth"]) for r in records] == [
            ("http://a.test/1", 2),
            ("http://a.test/2", 3),
        ]

    def test_include_content_false_excludes_content(self, tmp_path, response):
        """include_content=False should drop the body."""
        output_file = tmp_path / "output.jsonl"
        with StreamingOutputWriter(output_file, include_content=False) as writer:
            writer.write(response)

        record = json.loads(output_file.read_text())
        assert "content" not in record
        assert record["status"] == 200

    def test_keeps_non_ascii(self, tmp_path, make_response):
        """Non-ASCII text is written as is."""
        output_file = tmp_path / "output.jsonl"
        with StreamingOutputWriter(output_file) as writer:
            writer.write(make_response(body="<p>こんにちは</p>"))

        assert "こんにちは" in output_file.read_text(encoding="utf-8")

    def test_count_property(self, tmp_path, make_response):
        """count tracks written records."""
        output_file = tmp_path / "output.jsonl"
        with StreamingOutputWriter(output_file) as writer:
            assert writer.count == 0
            writer.write(make_response("http://a.test/1"))
            writer.write(make_response("http://a.test/2"))
            assert writer.count == 2

    def test_write_without_context_manager_raises(self, tmp_path, response):
        """Should raise RuntimeError if used without context manager."""
        writer = StreamingOutputWriter(tmp_path / "output.jsonl")
        with pytest.raises(RuntimeError):
            writer.write(response)

    def test_flushes_after_each_write(self, tmp_path, make_response):
        """Records are readable before the writer is closed."""
        output_file = tmp_path / "output.jsonl"
        with StreamingOutputWriter(output_file) as writer:
            writer.write(make_response("http://a.test/1"))
            assert "a.test/1" in output_file.read_text()
