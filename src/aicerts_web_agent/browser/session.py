"""Remote browser sessions driven by Stagehand on Browserbase."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Protocol

from .utils import result_to_dict

LogCallback = Callable[[Any], None]


class BrowserSessionError(RuntimeError):
    """Base class for browser session errors."""


class BrowserSdkUnavailableError(BrowserSessionError):
    """Raised when the Stagehand or Browserbase SDK cannot be imported."""


@dataclass(slots=True, frozen=True)
class SessionSettings:
    """Everything needed to provision a session and configure its agent."""

    api_key: str
    project_id: str
    region: str
    model_name: str
    model_api_key: str
    block_ads: bool = True


class BrowserSession(Protocol):
    """Minimal session API used by the orchestrator."""

    session_id: str | None

    async def init(self) -> str:
        ...

    async def live_url(self) -> str:
        ...

    async def execute(self, instruction: str, *, system_prompt: str) -> dict[str, Any]:
        ...

    async def close(self) -> None:
        ...


SessionFactory = Callable[[SessionSettings, LogCallback], BrowserSession]


class StagehandSession:
    """Browser session backed by the Stagehand and Browserbase SDKs."""

    def __init__(
        self,
        settings: SessionSettings,
        log_callback: LogCallback | None = None,
        *,
        stagehand_factory: Callable[..., Any] | None = None,
        browserbase_factory: Callable[..., Any] | None = None,
    ) -> None:
        self._settings = settings
        self._log_callback = log_callback
        self._stagehand_factory = stagehand_factory or self._default_stagehand_factory
        self._browserbase_factory = browserbase_factory or self._default_browserbase_factory
        self._browserbase = self._browserbase_factory(api_key=settings.api_key)
        self._stagehand = self._stagehand_factory(**self._stagehand_options())
        self.session_id: str | None = None

    @staticmethod
    def _default_stagehand_factory(**options: Any) -> Any:
        try:
            import stagehand
        except ImportError as exc:  # pragma: no cover - depends on environment
            raise BrowserSdkUnavailableError(
                "stagehand package is not installed; install it with: pip install 'stagehand>=0.5.14,<0.6'"
            ) from exc

        try:
            from stagehand import Stagehand, StagehandConfig
        except ImportError as exc:
            version = getattr(stagehand, "__version__", "unknown")
            raise BrowserSdkUnavailableError(
                f"installed stagehand {version} does not provide the 0.5.x StagehandConfig API; "
                "install 'stagehand>=0.5.14,<0.6'"
            ) from exc

        return Stagehand(StagehandConfig(**options))

    @staticmethod
    def _default_browserbase_factory(*, api_key: str) -> Any:
        try:
            from browserbase import AsyncBrowserbase
        except ImportError as exc:  # pragma: no cover - depends on environment
            raise BrowserSdkUnavailableError(
                "browserbase package is not installed; install it with: pip install browserbase"
            ) from exc

        return AsyncBrowserbase(api_key=api_key)

    def _stagehand_options(self) -> dict[str, Any]:
        settings = self._settings
        return {
            "env": "BROWSERBASE",
            "api_key": settings.api_key,
            "project_id": settings.project_id,
            "model_name": settings.model_name,
            "model_api_key": settings.model_api_key,
            "browserbase_session_create_params": {
                "projectId": settings.project_id,
                "region": settings.region,
                "browserSettings": {"blockAds": settings.block_ads},
            },
            "logger": self._log_callback,
            "use_rich_logging": False,
        }

    async def init(self) -> str:
        await self._stagehand.init()
        session_id = getattr(self._stagehand, "session_id", None)
        if not session_id:
            raise BrowserSessionError("Browserbase did not return a session id")
        self.session_id = str(session_id)
        return self.session_id

    async def live_url(self) -> str:
        if self.session_id is None:
            raise BrowserSessionError("Session has not been initialized")
        debug = await self._browserbase.sessions.debug(self.session_id)
        return debug.debugger_fullscreen_url

    async def execute(self, instruction: str, *, system_prompt: str) -> dict[str, Any]:
        agent = self._stagehand.agent(instructions=system_prompt)
        result = await agent.execute(instruction)
        return result_to_dict(result)

    async def close(self) -> None:
        await self._stagehand.close()


class FakeBrowserSession:
    """Test double that simulates a remote session without network access."""

    def __init__(
        self,
        settings: SessionSettings,
        log_callback: LogCallback | None = None,
        *,
        session_id: str = "fake-session",
        live_url: str = "https://www.browserbase.com/devtools/fake",
        result: dict[str, Any] | None = None,
        log_lines: Iterable[Any] | None = None,
        execute_error: BaseException | None = None,
        close_error: BaseException | None = None,
    ) -> None:
        self.settings = settings
        self._log_callback = log_callback
        self._session_id = session_id
        self._live_url = live_url
        self._result = dict(result or {"success": True, "message": "done", "completed": True})
        self._log_lines = list(log_lines or [])
        self._execute_error = execute_error
        self._close_error = close_error
        self.session_id: str | None = None
        self.calls: list[tuple[str, ...]] = []

    def _emit(self, line: Any) -> None:
        if self._log_callback is not None:
            self._log_callback(line)

    async def init(self) -> str:
        self.calls.append(("init",))
        self._emit({"category": "init", "message": "creating session"})
        self.session_id = self._session_id
        return self.session_id

    async def live_url(self) -> str:
        self.calls.append(("live_url",))
        return self._live_url

    async def execute(self, instruction: str, *, system_prompt: str) -> dict[str, Any]:
        self.calls.append(("execute", instruction, system_prompt))
        for line in self._log_lines:
            self._emit(line)
        if self._execute_error is not None:
            raise self._execute_error
        return dict(self._result)

    async def close(self) -> None:
        self.calls.append(("close",))
        if self._close_error is not None:
            raise self._close_error

    @property
    def close_count(self) -> int:
        return sum(1 for call in self.calls if call[0] == "close")
