"""Drag state: window move/resize, drag-and-drop icons and the switch-on-edge toggle"""

import logging
from typing import Any, Set

logger = logging.getLogger(__name__)


class DragState:
    """DragState merges the three independent drag sources into `dragging`

    - window_dragging: a window is being moved or resized interactively
    - dnd_dragging: at least one window presents a drag-and-drop icon
    - switch_on_edge: the hotkey toggle is on, written by the TogglePulse only
    """

    window_dragging: bool = False
    switch_on_edge: bool = False
    dnd_windows: Set[Any]
    dragging: bool = False

    def __init__(self):
        self.dnd_windows = set()

    @property
    def dnd_dragging(self) -> bool:
        """Check if any window presents a drag icon"""
        return bool(self.dnd_windows)

    def _refresh(self):
        dragging = self.window_dragging or self.dnd_dragging or self.switch_on_edge
        if dragging != self.dragging:
            logger.debug("dragging: %s", dragging)
        self.dragging = dragging

    def set_window_dragging(self, value: bool):
        """Set by the move/resize started/finished events"""
        self.window_dragging = value
        self._refresh()

    def set_switch_on_edge(self, value: bool):
        """Set by the toggle hotkey"""
        self.switch_on_edge = value
        self._refresh()

    def add_dnd_window(self, window: Any):
        """Track a window presenting a drag icon"""
        self.dnd_windows.add(window)
        self._refresh()

    def remove_dnd_window(self, window: Any) -> bool:
        """Stop tracking a window, returns False if it wasn't tracked"""
        if window not in self.dnd_windows:
            return False
        self.dnd_windows.discard(window)
        self._refresh()
        return True
