from __future__ import annotations

from enum import Enum
from typing import Callable, Optional, Sequence

from loguru import logger

from catalog import CatalogEntry
from resolver import ImageHandle, Loaded, ResolutionResult, resolve


ImageSink = Callable[[Optional[ImageHandle]], None]
TextSink = Callable[[str], None]
Resolver = Callable[[Optional[str]], ResolutionResult]


class ViewState(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    DISPLAYED = "displayed"
    ERROR_SHOWN = "error_shown"


class PosterPresenter:
    """Resolve the selected catalog entry and write the outcome to two sinks.

    Selections are handled to completion one at a time; a new selection
    restarts the cycle at ``RESOLVING``.
    """

    def __init__(
        self,
        catalog: Sequence[CatalogEntry],
        image_sink: ImageSink,
        text_sink: TextSink,
        resolver: Resolver = resolve,
        busy_callback: Optional[Callable[[bool], None]] = None,
    ) -> None:
        if not catalog:
            raise ValueError("catalog must contain at least one entry")
        self.catalog = tuple(catalog)
        self._image_sink = image_sink
        self._text_sink = text_sink
        self._resolver = resolver
        self._busy_callback = busy_callback
        self.state = ViewState.IDLE
        self.selected_index: Optional[int] = None
        self.last_result: Optional[ResolutionResult] = None

    def start(self) -> ResolutionResult:
        return self.select(0)

    def select(self, index: int) -> ResolutionResult:
        if index < 0 or index >= len(self.catalog):
            raise IndexError(f"selection {index} outside catalog of {len(self.catalog)} entries")
        entry = self.catalog[index]
        self.selected_index = index
        self.state = ViewState.RESOLVING
        logger.debug(f"Selected poster {index}: {entry.name}")
        if self._busy_callback:
            self._busy_callback(True)
        try:
            result = self._resolver(entry.url)
        finally:
            if self._busy_callback:
                self._busy_callback(False)
        self._render(result)
        return result

    def _render(self, result: ResolutionResult) -> None:
        if isinstance(result, Loaded):
            self._image_sink(result.image)
            self._text_sink(result.url)
            self.state = ViewState.DISPLAYED
        else:
            self._image_sink(None)
            self._text_sink(result.message)
            self.state = ViewState.ERROR_SHOWN
        self.last_result = result
