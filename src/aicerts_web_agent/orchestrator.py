"""Drive one agent instruction through a remote browser session."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Callable

from .browser import BrowserSession, SessionFactory, SessionSettings, StagehandSession
from .config import AgentSettings, CLIOptions, resolve_secrets
from .output import ResultRecord, SessionLogSink, StartRecord, session_file_name, write_record

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionRun:
    """Where a finished session left its output."""

    session_id: str
    live_url: str
    start_path: Path
    result_path: Path
    log_path: Path


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@asynccontextmanager
async def closing_session(session: BrowserSession) -> AsyncIterator[BrowserSession]:
    """Yield ``session`` and close it on every exit path.

    Errors raised by ``close`` are logged and dropped so they never replace
    the exception that ended the block.
    """

    try:
        yield session
    finally:
        try:
            await session.close()
        except Exception as exc:
            logger.debug(
                "Ignoring error while closing browser session",
                extra={"session_id": session.session_id, "error": str(exc)},
            )


async def run_agent(
    instruction: str,
    options: CLIOptions,
    *,
    settings: AgentSettings | None = None,
    session_factory: SessionFactory | None = None,
    clock: Callable[[], datetime] | None = None,
) -> SessionRun:
    """Run ``instruction`` in a fresh remote browser and persist its records.

    Secrets are resolved before any session is built. The start record is
    written in the background while the agent runs and is always on disk
    before the result record is written.
    """

    secrets = resolve_secrets(options, settings)
    clock = clock or _utcnow

    session_settings = SessionSettings(
        api_key=secrets.api_key,
        project_id=secrets.project_id,
        region=options.region,
        model_name=options.model,
        model_api_key=secrets.model_api_key,
    )
    log_sink = SessionLogSink(clock=clock)
    factory = session_factory or StagehandSession
    session = factory(session_settings, log_sink)
    output_dir = Path(options.output_dir)

    try:
        async with closing_session(session):
            session_id = await session.init()

            output_dir.mkdir(parents=True, exist_ok=True)
            log_path = output_dir / session_file_name(session_id, "logs")
            log_sink.bind(log_path)

            live_url = await session.live_url()
            logger.info(
                "Browser session started",
                extra={
                    "session_id": session_id,
                    "live_url": live_url,
                    "region": options.region,
                    "model": options.model,
                },
            )

            start_record = StartRecord(
                instruction=instruction,
                session_id=session_id,
                session_live_url=live_url,
                started_at=clock(),
            )
            start_task = asyncio.create_task(
                asyncio.to_thread(
                    write_record,
                    output_dir,
                    session_file_name(session_id, "start"),
                    start_record.to_payload(),
                )
            )

            try:
                agent_result = await session.execute(instruction, system_prompt=options.system_prompt)
            except Exception:
                with contextlib.suppress(Exception):
                    await start_task
                raise

            start_path = await start_task
            result_record = ResultRecord(agent_result=agent_result, completed_at=clock())
            result_path = write_record(
                output_dir,
                session_file_name(session_id, "result"),
                result_record.to_payload(),
            )
            logger.info(
                "Agent execution finished",
                extra={"session_id": session_id, "result_path": str(result_path)},
            )
    finally:
        # close has run; anything the driver emits now is dropped
        log_sink.unbind()

    return SessionRun(
        session_id=session_id,
        live_url=live_url,
        start_path=start_path,
        result_path=result_path,
        log_path=log_path,
    )


__all__ = ["SessionRun", "closing_session", "run_agent"]
