"""Remote browser session adapters."""

from .session import (
    BrowserSdkUnavailableError,
    BrowserSession,
    BrowserSessionError,
    FakeBrowserSession,
    LogCallback,
    SessionFactory,
    SessionSettings,
    StagehandSession,
)

__all__ = [
    "BrowserSdkUnavailableError",
    "BrowserSession",
    "BrowserSessionError",
    "FakeBrowserSession",
    "LogCallback",
    "SessionFactory",
    "SessionSettings",
    "StagehandSession",
]
