from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from window_engine.api_server.controller import Controller
from window_engine.api_server.events import EventHub
from window_engine.engine.config import EngineConfig


def test_state_event_logging(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "events.ndjson"
    config = EngineConfig(state_event_log_path=log_path)

    async def _run() -> None:
        ctl = Controller(EventHub(), config)
        await ctl.create_window("", 100, 200, 1, "<title>A</title>", 1)
        await ctl.pointer_down("window-engine-1-titlebar", 0, 0, actor="tester")
        await ctl.pointer_move(5, 5)
        await ctl.pointer_up(5, 5)
        await ctl.close(1)

    asyncio.run(_run())

    lines = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines() if line.strip()]
    event_types = [e["event"] for e in lines]
    assert event_types == ["window.created", "window.activated", "window.closed"]
    assert lines[0]["actor"] == "api"
    assert lines[0]["data"]["title"] == "A"
    assert lines[1]["actor"] == "tester"
    assert all("ts" in e for e in lines)


def test_state_event_log_failure_does_not_break_commands(tmp_path: Path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")
    config = EngineConfig(state_event_log_path=blocker / "events.ndjson")

    async def _run() -> None:
        ctl = Controller(EventHub(), config)
        win = await ctl.create_window("", 100, 200, 1, "", 1)
        assert win["id"] == 1

    asyncio.run(_run())
