from __future__ import annotations

import asyncio
import sys
import types
from types import SimpleNamespace
from typing import Any

import pytest
from pydantic import BaseModel

from aicerts_web_agent.browser import (
    BrowserSdkUnavailableError,
    BrowserSessionError,
    FakeBrowserSession,
    SessionSettings,
    StagehandSession,
)
from aicerts_web_agent.browser.utils import result_to_dict

SETTINGS = SessionSettings(
    api_key="bb-key",
    project_id="bb-project",
    region="eu-central-1",
    model_name="google/gemini-2.5-pro",
    model_api_key="model-key",
)


class StubAgentResult(BaseModel):
    success: bool
    message: str
    actions: list[dict[str, Any]] = []


class StubAgent:
    def __init__(self, instructions: str) -> None:
        self.instructions = instructions
        self.executed: list[str] = []

    async def execute(self, instruction: str) -> StubAgentResult:
        self.executed.append(instruction)
        return StubAgentResult(success=True, message=f"did {instruction}")


class StubStagehand:
    def __init__(self, **options: Any) -> None:
        self.options = options
        self.session_id: str | None = None
        self.agents: list[StubAgent] = []
        self.closed = 0

    async def init(self) -> None:
        self.session_id = "sess-123"

    def agent(self, *, instructions: str) -> StubAgent:
        agent = StubAgent(instructions)
        self.agents.append(agent)
        return agent

    async def close(self) -> None:
        self.closed += 1


class StubSessions:
    def __init__(self) -> None:
        self.requested: list[str] = []

    async def debug(self, session_id: str) -> SimpleNamespace:
        self.requested.append(session_id)
        return SimpleNamespace(debugger_fullscreen_url=f"https://live.example/{session_id}")


class StubBrowserbase:
    def __init__(self, *, api_key: str) -> None:
        self.api_key = api_key
        self.sessions = StubSessions()


def _make_session(callback=None, stagehand_cls=StubStagehand):
    created: dict[str, Any] = {}

    def stagehand_factory(**options: Any):
        created["stagehand"] = stagehand_cls(**options)
        return created["stagehand"]

    def browserbase_factory(*, api_key: str):
        created["browserbase"] = StubBrowserbase(api_key=api_key)
        return created["browserbase"]

    session = StagehandSession(
        SETTINGS,
        callback,
        stagehand_factory=stagehand_factory,
        browserbase_factory=browserbase_factory,
    )
    return session, created


def test_stagehand_options_carry_settings() -> None:
    def callback(line: Any) -> None:
        return None

    _, created = _make_session(callback)
    options = created["stagehand"].options

    assert options["env"] == "BROWSERBASE"
    assert options["api_key"] == "bb-key"
    assert options["project_id"] == "bb-project"
    assert options["model_name"] == "google/gemini-2.5-pro"
    assert options["model_api_key"] == "model-key"
    assert options["logger"] is callback
    params = options["browserbase_session_create_params"]
    assert params["region"] == "eu-central-1"
    assert params["browserSettings"] == {"blockAds": True}
    assert created["browserbase"].api_key == "bb-key"


def test_full_session_lifecycle() -> None:
    session, created = _make_session()

    async def scenario():
        session_id = await session.init()
        live_url = await session.live_url()
        result = await session.execute("open example.com", system_prompt="be brief")
        await session.close()
        return session_id, live_url, result

    session_id, live_url, result = asyncio.run(scenario())

    assert session_id == "sess-123"
    assert session.session_id == "sess-123"
    assert live_url == "https://live.example/sess-123"
    assert result == {"success": True, "message": "did open example.com", "actions": []}
    stagehand = created["stagehand"]
    assert stagehand.agents[0].instructions == "be brief"
    assert stagehand.closed == 1


def test_init_without_session_id_fails() -> None:
    class NoIdStagehand(StubStagehand):
        async def init(self) -> None:
            return None

    session, _ = _make_session(stagehand_cls=NoIdStagehand)

    with pytest.raises(BrowserSessionError):
        asyncio.run(session.init())


def test_live_url_requires_init() -> None:
    session, _ = _make_session()

    with pytest.raises(BrowserSessionError):
        asyncio.run(session.live_url())


def test_result_to_dict_variants() -> None:
    assert result_to_dict(None) == {}
    assert result_to_dict({"a": 1}) == {"a": 1}
    assert result_to_dict(SimpleNamespace(a=1, _hidden=2)) == {"a": 1}
    with pytest.raises(TypeError):
        result_to_dict(42)


def test_fake_session_records_calls_and_emits_logs() -> None:
    emitted: list[Any] = []
    fake = FakeBrowserSession(SETTINGS, emitted.append, log_lines=[{"message": "step"}])

    async def scenario():
        await fake.init()
        await fake.execute("go", system_prompt="prompt")
        await fake.close()

    asyncio.run(scenario())

    assert [call[0] for call in fake.calls] == ["init", "execute", "close"]
    assert {"message": "step"} in emitted
    assert fake.close_count == 1


def test_incompatible_stagehand_version_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    newer = types.ModuleType("stagehand")
    newer.__version__ = "4.2.1"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "stagehand", newer)

    with pytest.raises(BrowserSdkUnavailableError) as excinfo:
        StagehandSession(SETTINGS, browserbase_factory=StubBrowserbase)

    message = str(excinfo.value)
    assert "4.2.1" in message
    assert "StagehandConfig" in message
    assert "not installed" not in message
