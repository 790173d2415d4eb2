"""
Derivation Playback
===================
Step cursor for a derivation shown one equation at a time.

Why is this file needed?
------------------------
The player view only draws; which step is current and whether playback is
running live here, announced through `step_changed` and `playing_changed`.
An external timer calls tick() to advance.
"""
from __future__ import annotations

from PySide6.QtCore import QObject, Signal


class DerivationPlayback(QObject):
    """Step cursor for a derivation, advanced by an external timer via tick()."""
    step_changed = Signal(int)
    playing_changed = Signal(bool)

    def __init__(self, step_count: int, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.step_count = max(step_count, 1)
        self._current_step = 0
        self._is_playing = False

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def is_at_end(self) -> bool:
        return self._current_step == self.step_count - 1

    def _set_step(self, index: int) -> None:
        if index != self._current_step:
            self._current_step = index
            self.step_changed.emit(index)

    def _set_playing(self, playing: bool) -> None:
        if playing != self._is_playing:
            self._is_playing = playing
            self.playing_changed.emit(playing)

    def play(self) -> None:
        self._set_playing(True)

    def pause(self) -> None:
        self._set_playing(False)

    def toggle(self) -> None:
        self._set_playing(not self._is_playing)

    def reset(self) -> None:
        self._set_step(0)
        self._set_playing(False)

    def seek(self, index: int) -> None:
        """Jump to a step (clamped) and stop playing."""
        self._set_step(min(max(index, 0), self.step_count - 1))
        self._set_playing(False)

    def tick(self) -> None:
        if not self._is_playing:
            return
        if self._current_step < self.step_count - 1:
            self._set_step(self._current_step + 1)
        else:
            self._set_playing(False)
