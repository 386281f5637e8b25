"""Output records and writers."""

from .records import ResultRecord, StartRecord, iso_timestamp
from .writer import SessionLogSink, append_log, session_file_name, write_record

__all__ = [
    "ResultRecord",
    "SessionLogSink",
    "StartRecord",
    "append_log",
    "iso_timestamp",
    "session_file_name",
    "write_record",
]
