from __future__ import annotations


class WindowEngineError(Exception):
    """Base class for window lifecycle failures."""

    def __init__(self, window_id: int, message: str) -> None:
        super().__init__(message)
        self.window_id = window_id


class DuplicateWindowError(WindowEngineError):
    def __init__(self, window_id: int) -> None:
        super().__init__(window_id, f"Window with id {window_id} already exists.")


class UnknownWindowError(WindowEngineError):
    def __init__(self, window_id: int) -> None:
        super().__init__(window_id, f"Window with id {window_id} does not exist.")
