from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from ..engine.config import EngineConfig
from ..engine.errors import DuplicateWindowError, UnknownWindowError
from .controller import Controller
from .events import EventHub
from .schemas import (
    EngineStateModel,
    PointerClick,
    PointerDown,
    PointerPosition,
    PointerResult,
    WindowCreate,
    WindowSpec,
    WindowState,
)


def make_app(config: Optional[EngineConfig] = None) -> FastAPI:
    app = FastAPI(title="Window Engine API", version="v1")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost", "http://127.0.0.1", "*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    events = EventHub()
    ctl = Controller(events, config)
    app.state.controller = ctl
    app.state.events = events

    # ----- Routes -----
    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    @app.get("/state", response_model=EngineStateModel)
    async def state() -> EngineStateModel:
        return EngineStateModel.model_validate(await ctl.get_state())

    @app.get("/document", response_class=HTMLResponse)
    async def document() -> HTMLResponse:
        return HTMLResponse(await ctl.render_document())

    @app.get("/windows/{win_id}", response_model=WindowState)
    async def get_window(win_id: int) -> WindowState:
        try:
            return WindowState.model_validate(await ctl.get_window(win_id))
        except KeyError:
            raise HTTPException(status_code=404, detail="window not found")

    @app.post("/windows", response_model=WindowState)
    async def create_window(payload: WindowCreate) -> WindowState:
        try:
            win = await ctl.create_window(
                payload.style, payload.height, payload.width, payload.mode, payload.content, payload.id
            )
        except DuplicateWindowError as exc:
            raise HTTPException(status_code=409, detail=str(exc))
        return WindowState.model_validate(win)

    @app.post("/windows/{win_id}/modify", response_model=WindowState)
    async def modify_window(win_id: int, payload: WindowSpec) -> WindowState:
        try:
            win = await ctl.modify_window(
                payload.style, payload.height, payload.width, payload.mode, payload.content, win_id
            )
        except UnknownWindowError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return WindowState.model_validate(win)

    @app.post("/windows/{win_id}/close")
    async def close(win_id: int) -> Dict[str, Any]:
        await ctl.close(win_id)
        return {"ok": True}

    @app.post("/windows/{win_id}/activate", response_model=WindowState)
    async def activate(win_id: int) -> WindowState:
        try:
            win = await ctl.activate(win_id)
        except UnknownWindowError:
            raise HTTPException(status_code=404, detail="window not found")
        return WindowState.model_validate(win)

    @app.post("/pointer/down", response_model=PointerResult)
    async def pointer_down(payload: PointerDown) -> PointerResult:
        win_id = await ctl.pointer_down(payload.target, payload.x, payload.y)
        return PointerResult(window_id=win_id)

    @app.post("/pointer/move", response_model=PointerResult)
    async def pointer_move(payload: PointerPosition) -> PointerResult:
        win_id = await ctl.pointer_move(payload.x, payload.y)
        return PointerResult(window_id=win_id)

    @app.post("/pointer/up", response_model=PointerResult)
    async def pointer_up(payload: PointerPosition) -> PointerResult:
        win_id = await ctl.pointer_up(payload.x, payload.y)
        return PointerResult(window_id=win_id)

    @app.post("/pointer/click", response_model=PointerResult)
    async def pointer_click(payload: PointerClick) -> PointerResult:
        action = await ctl.click(payload.target)
        return PointerResult(action=action)

    @app.websocket("/ws")
    async def ws(websocket: WebSocket) -> None:
        await websocket.accept()
        await events.add(websocket)
        try:
            while True:
                # Keep connection alive; client messages are ignored
                await websocket.receive_text()
        except WebSocketDisconnect:
            await events.remove(websocket)

    return app


app = make_app()
