"""Filesystem side effects for session records and logs."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Literal, Mapping

from .records import iso_timestamp

FileKind = Literal["start", "result", "logs"]

_SUFFIXES: dict[str, str] = {
    "start": "start.json",
    "result": "result.json",
    "logs": "logs.txt",
}


def session_file_name(session_id: str, kind: FileKind) -> str:
    """Return the file name used for ``kind`` output of a session."""

    return f"session-{session_id}-{_SUFFIXES[kind]}"


def write_record(directory: Path | str, file_name: str, content: Mapping[str, Any]) -> Path:
    """Write ``content`` as indented JSON, creating ``directory`` if needed.

    Existing files are overwritten. Filesystem errors propagate to the caller.
    """

    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / file_name
    path.write_text(json.dumps(dict(content), indent=2, default=str), encoding="utf-8")
    return path


def append_log(
    path: Path | str,
    log_line: Any,
    *,
    clock: Callable[[], datetime] | None = None,
) -> None:
    """Append a timestamped JSON log line to ``path``, ignoring any failure."""

    try:
        timestamp = iso_timestamp((clock or (lambda: datetime.now(timezone.utc)))())
        line = f"[{timestamp}] {json.dumps(log_line, default=str)}\n"
        with Path(path).open("a", encoding="utf-8") as handle:
            handle.write(line)
    except Exception:  # logs are best-effort
        pass


class SessionLogSink:
    """Logging callback handed to the browser driver.

    Lines emitted while no path is bound are dropped, both before the
    session id is known and after ``unbind``.
    """

    def __init__(self, path: Path | None = None, *, clock: Callable[[], datetime] | None = None) -> None:
        self.path = path
        self._clock = clock

    def bind(self, path: Path) -> None:
        self.path = path

    def unbind(self) -> None:
        self.path = None

    def __call__(self, log_line: Any) -> None:
        if self.path is None:
            return
        append_log(self.path, log_line, clock=self._clock)


__all__ = [
    "FileKind",
    "SessionLogSink",
    "append_log",
    "session_file_name",
    "write_record",
]
