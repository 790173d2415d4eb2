"""
Search Workers (Debounce)
=========================
This module schedules search recomputation behind a short debounce.

Why is this file needed?
------------------------
1. Responsiveness: typing fires a change per keystroke. Ranking the corpus
   on each one is wasted work; only the input the user pauses on matters.
2. Single flight: every new input cancels the token of the previous one
   before scheduling. A cancelled task never publishes, so only the latest
   query's results are observable.

Classes:
    CancellationToken: flag shared between the scheduler and one task.
    DebouncedSearch: QTimer-driven scheduler emitting `results_ready`.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from mathwiki import config

logger = logging.getLogger(__name__)


class CancellationToken:
    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled


class DebouncedSearch(QObject):
    """
    Runs `compute(query, tags)` once input has been quiet for `delay_ms`.

    Only the most recent schedule() can emit `results_ready`.
    """
    results_ready = Signal(object)

    def __init__(
        self,
        compute: Callable[[str, frozenset[str]], Any],
        delay_ms: int = config.SEARCH_DEBOUNCE_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._compute = compute
        self._token: Optional[CancellationToken] = None
        self._pending: tuple[str, frozenset[str]] = ("", frozenset())

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(delay_ms)
        self._timer.timeout.connect(self._run)

    @property
    def is_pending(self) -> bool:
        return self._timer.isActive()

    def schedule(self, query: str, tags: frozenset[str]) -> CancellationToken:
        """Supersede any scheduled or running task with one for this input."""
        self.cancel()
        self._token = CancellationToken()
        self._pending = (query, frozenset(tags))
        self._timer.start()
        return self._token

    def cancel(self) -> None:
        self._timer.stop()
        if self._token is not None:
            self._token.cancel()
            self._token = None

    def _run(self) -> None:
        token = self._token
        if token is None or token.is_cancelled:
            return

        query, tags = self._pending
        logger.debug(f"Recomputing search for query='{query}', tags={sorted(tags)}")
        result = self._compute(query, tags)

        # A newer input may have arrived while computing
        if token.is_cancelled or token is not self._token:
            logger.debug("Search result superseded, dropped.")
            return

        self._token = None
        self.results_ready.emit(result)
