from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class RectModel(BaseModel):
    x: float
    y: float
    w: float
    h: float


class CapabilitiesModel(BaseModel):
    modal: bool
    minimizable: bool
    maximizable: bool


class WindowSpec(BaseModel):
    style: str = ""
    height: float = Field(gt=0)
    width: float = Field(gt=0)
    mode: int = 1
    content: str = ""


class WindowCreate(WindowSpec):
    id: int


class WindowState(BaseModel):
    id: int
    title: str
    mode: int
    capabilities: CapabilitiesModel
    rect: RectModel
    stack_priority: int
    backdrop_priority: Optional[int] = None
    modal: bool
    dragging: bool


class ViewportInfo(BaseModel):
    width: float
    height: float


class EngineStateModel(BaseModel):
    viewport: ViewportInfo
    stack_counter: int
    windows: List[WindowState]
    uptime_sec: float


class PointerDown(BaseModel):
    target: str
    x: float
    y: float


class PointerPosition(BaseModel):
    x: float = 0
    y: float = 0


class PointerClick(BaseModel):
    target: str


class PointerResult(BaseModel):
    ok: bool = True
    window_id: Optional[int] = None
    action: Optional[str] = None
