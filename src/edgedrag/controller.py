"""EdgeDrag controller: switches desktops when the cursor hits a screen edge while
something is being dragged"""

import logging
import time
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import EdgeDragConfig
from .cursor import CursorTracker, Point
from .drag import DragState
from .edges import Direction, Edge, EdgeHandler, EdgeRegistry, resolve_direction
from .host import HostCapabilities
from .notifier import Notifier
from .toggle import QUIET_GAP, TogglePulse

logger = logging.getLogger(__name__)

SHORTCUT_NAME = "EdgeDragToggleSwitchOnEdge"
SHORTCUT_TEXT = "EdgeDrag: Switch on edge (toggle)"
SHORTCUT_KEYS = "Meta+Alt+D"
TEXT_ON = "EdgeDrag: switch on edge on"
TEXT_OFF = "EdgeDrag: switch on edge off"

SWITCHES = {
    Direction.LEFT: "switch_desktop_left",
    Direction.RIGHT: "switch_desktop_right",
    Direction.UP: "switch_desktop_up",
    Direction.DOWN: "switch_desktop_down",
}

Dispatch = Callable[..., None]


def call_now(fn: Callable, *args):
    """Run the handler right away"""
    fn(*args)


class EdgeDragController:
    """EdgeDragController owns all the state and exposes the event handlers.

    A drag is active while a window is being moved/resized, a window presents a
    drag-and-drop icon or the switch-on-edge hotkey toggle is on. When a
    registered edge gets triggered during a drag the desktop is switched in the
    direction of the edge.

    :param HostCapabilities host: what the host can do
    :param fallback_edges: edges to register when none is configured, empty
                           leaves the controller idle until edges are assigned
    :param dispatch: runs a handler with arguments on behalf of a host signal,
                     the service uses it to serialize events onto its worker
    :param float quiet_gap: hotkey pulses closer than this are auto-repeat
    :param clock: returns the current time in seconds
    """

    host: HostCapabilities
    config: EdgeDragConfig
    cursor: CursorTracker
    drag: DragState
    toggle: TogglePulse
    registry: EdgeRegistry
    notifier: Notifier
    connections: Dict[Any, List[Tuple[Any, Callable]]]

    def __init__(
        self,
        host: HostCapabilities,
        fallback_edges: Sequence[Edge] = (),
        dispatch: Dispatch = call_now,
        quiet_gap: float = QUIET_GAP,
        clock: Callable[[], float] = time.time,
    ):
        self.host = host
        self.dispatch = dispatch
        self.config = EdgeDragConfig()
        self.cursor = CursorTracker()
        self.drag = DragState()
        self.toggle = TogglePulse(self.on_toggle_changed, quiet_gap, clock)
        self.registry = EdgeRegistry(
            register=self._register_edge,
            unregister=host.unregister_screen_edge,
            handler=self.on_edge,
            fallback=fallback_edges,
        )
        self.notifier = Notifier(host)
        self.connections = {}

    def start(self, windows: Iterable[Any] = (), cursor: Optional[Point] = None):
        """Load settings, register the hotkey and edges, track existing windows"""
        if cursor is not None:
            self.cursor = CursorTracker(cursor)
        self.load_config()
        self.register_shortcut()
        for window in windows:
            self.wire_window(window)
        self.registry.sync(self.config.edges)
        logger.info("loaded")

    def stop(self):
        """Unregister edges and disconnect from all windows"""
        self.registry.unregister_all()
        self.disconnect_all()

    def is_dragging(self) -> bool:
        """Check if any drag source is active"""
        return self.drag.dragging

    # configuration

    def load_config(self) -> EdgeDragConfig:
        """Re-read settings from the host"""
        self.config = EdgeDragConfig.load(self.host.read_config)
        self.notifier.enabled = self.config.show_osd
        return self.config

    def on_config_changed(self):
        """Handle a configuration change: re-register edges only if they differ"""
        self.load_config()
        self.registry.sync(self.config.edges)

    # hotkey

    def register_shortcut(self) -> bool:
        """Register the switch-on-edge hotkey with the host"""
        try:
            ok = self.host.register_shortcut(
                SHORTCUT_NAME,
                SHORTCUT_TEXT,
                SHORTCUT_KEYS,
                partial(self.dispatch, self.on_toggle_pulse),
            )
        except Exception:  # pylint: disable=broad-exception-caught
            logger.warning("failed to register shortcut %s", SHORTCUT_NAME, exc_info=True)
            return False
        if not ok:
            logger.info("shortcut %s not registered", SHORTCUT_NAME)
        return bool(ok)

    def on_toggle_pulse(self):
        """Handle a hotkey pulse"""
        self.toggle.pulse()

    def on_toggle_changed(self, active: bool):
        """Apply the switch-on-edge state and tell the user"""
        self.drag.set_switch_on_edge(active)
        self.notifier.show(TEXT_ON if active else TEXT_OFF)

    # windows

    def _connect(self, window: Any, signal_name: str, handler: Callable):
        signal = getattr(window, signal_name, None)
        if signal is None or not hasattr(signal, "connect"):
            return

        def slot(*_args):
            self.dispatch(handler, window)

        signal.connect(slot)
        self.connections[window].append((signal, slot))

    def _disconnect(self, slots: List[Tuple[Any, Callable]]):
        for signal, slot in slots:
            try:
                signal.disconnect(slot)
            except (RuntimeError, TypeError):
                logger.debug("signal %s already gone", signal)

    def disconnect_all(self):
        """Disconnect every signal connected by wire_window"""
        for slots in self.connections.values():
            self._disconnect(slots)
        self.connections = {}

    def wire_window(self, window: Any):
        """Start watching a window for move/resize and drag-and-drop, windows
        already watched are skipped"""
        if window in self.connections:
            return
        self.connections[window] = []
        self._connect(window, "move_resize_started", self.on_move_resize_started)
        self._connect(window, "move_resize_finished", self.on_move_resize_finished)
        self._connect(window, "dnd_icon_changed", self.on_dnd_icon_changed)
        self._connect(window, "closed", self.on_window_closed)
        if self.has_dnd_icon(window):
            self.drag.add_dnd_window(window)

    def release_window(self, window: Any):
        """Stop watching a window and forget it"""
        self._disconnect(self.connections.pop(window, ()))
        self.drag.remove_dnd_window(window)

    def has_dnd_icon(self, window: Any) -> bool:
        """Check if the window presents a drag icon, errors count as no"""
        try:
            return bool(getattr(window, "dnd_icon", None))
        except Exception:  # pylint: disable=broad-exception-caught
            logger.debug("failed to inspect dnd icon of %s", window, exc_info=True)
            return False

    def on_window_added(self, window: Any):
        """Handle a newly created window"""
        self.wire_window(window)

    def on_window_removed(self, window: Any):
        """Handle a window removed from the workspace"""
        self.release_window(window)

    def on_window_closed(self, window: Any):
        """Handle a closed window"""
        self.release_window(window)

    def on_dnd_icon_changed(self, window: Any):
        """Track or untrack the window depending on its current drag icon"""
        if self.has_dnd_icon(window):
            self.drag.add_dnd_window(window)
        else:
            self.drag.remove_dnd_window(window)

    def on_move_resize_started(self, _window: Any = None):
        """Handle a window starting interactive move/resize"""
        self.drag.set_window_dragging(True)

    def on_move_resize_finished(self, _window: Any = None):
        """Handle a window finishing interactive move/resize"""
        self.drag.set_window_dragging(False)

    # cursor and edges

    def on_cursor_moved(self, pos: Point):
        """Handle a cursor movement"""
        self.cursor.update(pos)

    def _register_edge(self, edge: Edge, callback: EdgeHandler) -> bool:
        return self.host.register_screen_edge(edge, partial(self.dispatch, callback))

    def on_edge(self, edge: Edge):
        """Handle a triggered edge: switch desktop if dragging"""
        if not self.is_dragging():
            return
        direction = resolve_direction(edge, self.cursor.last_delta)
        if direction is Direction.NONE:
            return
        self.switch(direction)

    def switch(self, direction: Direction):
        """Ask the host to switch the desktop in the direction"""
        name = SWITCHES[direction]
        if not self.host.has(name):
            logger.debug("host can't switch desktop %s", direction.value)
            return
        logger.debug("switching desktop %s", direction.value)
        try:
            getattr(self.host, name)()
        except Exception:  # pylint: disable=broad-exception-caught
            logger.warning("failed to switch desktop %s", direction.value, exc_info=True)
