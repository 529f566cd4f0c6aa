"""Interfaces to the windowing shell.

The controller never probes the host for functions at runtime, everything it
may call is listed in :class:`HostCapabilities`. A binding fills in what the
host supports, the rest stays as the no-op stand-ins below.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Callable, List, Optional

from PySide6.QtCore import QObject, Signal

from .cursor import Point
from .edges import Edge, EdgeHandler

logger = logging.getLogger(__name__)


class HostError(Exception):
    """Raised by host bindings when the host could not carry out a call"""


def refuse_edge(_edge: Edge, _callback: EdgeHandler) -> bool:
    """Stand-in for hosts without screen edges: nothing gets registered"""
    return False


def ignore_edge(_edge: Edge):
    """Stand-in for hosts without screen edges"""


def refuse_shortcut(
    _name: str, _text: str, _keys: str, _callback: Callable[[], None]
) -> bool:
    """Stand-in for hosts without global shortcuts: nothing gets registered"""
    return False


def no_osd(_icon: str, _text: str):
    """Stand-in for hosts without an OSD service"""
    raise HostError("on-screen display is not available")


def no_message(_text: str):
    """Stand-in for hosts without on-screen messages"""
    raise HostError("on-screen message is not available")


def no_switch():
    """Stand-in for hosts that can't switch desktops in a direction"""


def default_config(_key: str, default: Any) -> Any:
    """Stand-in for hosts without a config store"""
    return default


@dataclass
class HostCapabilities:
    """HostCapabilities lists everything the controller may ask the host to do"""

    register_screen_edge: Callable[[Edge, EdgeHandler], bool] = refuse_edge
    unregister_screen_edge: Callable[[Edge], None] = ignore_edge
    register_shortcut: Callable[[str, str, str, Callable[[], None]], bool] = (
        refuse_shortcut
    )
    show_osd: Callable[[str, str], None] = no_osd
    show_on_screen_message: Callable[[str], None] = no_message
    switch_desktop_left: Callable[[], None] = no_switch
    switch_desktop_right: Callable[[], None] = no_switch
    switch_desktop_up: Callable[[], None] = no_switch
    switch_desktop_down: Callable[[], None] = no_switch
    read_config: Callable[[str, Any], Any] = default_config
    _defaults: dict = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._defaults = {
            f.name: f.default for f in fields(self) if not f.name.startswith("_")
        }

    def has(self, name: str) -> bool:
        """Check if the host supplied the capability rather than a stand-in"""
        return getattr(self, name) is not self._defaults[name]


class HostWindow(QObject):
    """A window as seen by the controller, bindings emit the signals when the
    host reports the corresponding event"""

    move_resize_started = Signal()
    move_resize_finished = Signal()
    dnd_icon_changed = Signal()
    closed = Signal()

    def __init__(self, name: str = "", dnd_icon: Any = None):
        super().__init__()
        self.name = name
        self._dnd_icon = dnd_icon

    @property
    def dnd_icon(self) -> Any:
        """The drag-and-drop icon the window presents, None if there is none"""
        return self._dnd_icon

    def set_dnd_icon(self, icon: Any):
        """Update the drag-and-drop icon and notify"""
        self._dnd_icon = icon
        self.dnd_icon_changed.emit()

    def __repr__(self):
        return f"<HostWindow {self.name}>"


class HostWorkspace(QObject):
    """The shell's workspace: existing windows, window lifecycle, cursor position
    and configuration changes"""

    window_added = Signal(object)
    window_removed = Signal(object)
    cursor_pos_changed = Signal()
    config_changed = Signal()

    def __init__(self, windows: Optional[List[Any]] = None, cursor: Point = None):
        super().__init__()
        self._windows = list(windows or [])
        self._cursor = cursor or Point()

    def windows(self) -> List[Any]:
        """All existing windows in stacking order"""
        return list(self._windows)

    def cursor_pos(self) -> Point:
        """The current cursor position"""
        return self._cursor

    def add_window(self, window: Any):
        """Add a window and notify"""
        self._windows.append(window)
        self.window_added.emit(window)

    def remove_window(self, window: Any):
        """Remove a window and notify"""
        if window in self._windows:
            self._windows.remove(window)
        self.window_removed.emit(window)

    def move_cursor(self, pos: Point):
        """Move the cursor and notify"""
        self._cursor = pos
        self.cursor_pos_changed.emit()
