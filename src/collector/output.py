"""Streaming JSONL output for collected responses."""

import json
from pathlib import Path
from typing import TextIO

from .http import Response


def response_record(response: Response, include_content: bool = True) -> dict:
    """Summarize a Response as a JSON-serializable dict."""
    request = response.request
    record = {
        "url": str(request.url),
        "status": response.status_code,
        "depth": request.depth,
        "content_length": len(response.body),
        "content_type": response.headers.get("content-type", ""),
    }
    if include_content:
        record["content"] = response.text
    return record


class StreamingOutputWriter:
    """Writes one JSON record per Response, flushing after every line."""

    def __init__(
        self,
        output_path: str | Path,
        include_content: bool = True,
    ):
        self.output_path = Path(output_path)
        self.include_content = include_content
        self._file: TextIO | None = None
        self._count = 0

    def __enter__(self) -> "StreamingOutputWriter":
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.output_path, "w", encoding="utf-8")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._file is not None:
            self._file.close()
            self._file = None

    def write(self, response: Response):
        """Append the record for a Response to the output file."""
        if self._file is None:
            raise RuntimeError("StreamingOutputWriter must be used as context manager")

        record = response_record(response, include_content=self.include_content)
        self._file.write(json.dumps(record, ensure_ascii=False) + "\n")
        self._file.flush()
        self._count += 1

    @property
    def count(self) -> int:
        """Number of records written."""
        return self._count
