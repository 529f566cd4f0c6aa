"""Test edgedrag.controller module"""

from edgedrag.controller import (
    SHORTCUT_KEYS,
    SHORTCUT_NAME,
    TEXT_OFF,
    TEXT_ON,
    EdgeDragController,
)
from edgedrag.cursor import Point
from edgedrag.edges import ALL_EDGES, Edge
from edgedrag.host import HostCapabilities, HostWindow
from edgedrag.notifier import OSD_ICON


class BrokenWindow:
    """A window whose drag icon can't be inspected"""

    @property
    def dnd_icon(self):
        """Always fails"""
        raise RuntimeError("window is gone")


class TestEdgeDragController:
    """Test the EdgeDragController class"""

    def setup_method(self):
        """Setup a controller on a fake host"""
        self.now = 100.0
        self.settings = {"BorderActivate": "6,2,0,4"}
        self.edges = {}
        self.shortcuts = {}

    def make_controller(self, mocker, **kwargs) -> EdgeDragController:
        """Create a controller with every capability mocked"""

        def register_edge(edge, callback):
            self.edges[edge] = callback
            return True

        def unregister_edge(edge):
            self.edges.pop(edge)

        def register_shortcut(name, _text, _keys, callback):
            self.shortcuts[name] = callback
            return True

        self.host = HostCapabilities(
            register_screen_edge=mocker.Mock(side_effect=register_edge),
            unregister_screen_edge=mocker.Mock(side_effect=unregister_edge),
            register_shortcut=mocker.Mock(side_effect=register_shortcut),
            show_osd=mocker.Mock(),
            show_on_screen_message=mocker.Mock(),
            switch_desktop_left=mocker.Mock(),
            switch_desktop_right=mocker.Mock(),
            switch_desktop_up=mocker.Mock(),
            switch_desktop_down=mocker.Mock(),
            read_config=lambda key, default: self.settings.get(key, default),
        )
        return EdgeDragController(self.host, clock=lambda: self.now, **kwargs)

    def trigger(self, edge: Edge):
        """Simulate the host firing an edge"""
        self.edges[edge](edge)

    def pulse(self):
        """Simulate the host firing the hotkey"""
        self.shortcuts[SHORTCUT_NAME]()

    def switches(self):
        """Count switch calls per direction"""
        return (
            self.host.switch_desktop_left.call_count,
            self.host.switch_desktop_right.call_count,
            self.host.switch_desktop_up.call_count,
            self.host.switch_desktop_down.call_count,
        )

    def test_start(self, mocker):
        """Test start registers the shortcut and the configured edges"""
        controller = self.make_controller(mocker)
        controller.start()
        args = self.host.register_shortcut.call_args[0]
        assert args[0] == SHORTCUT_NAME
        assert args[2] == SHORTCUT_KEYS
        assert controller.registry.edges == (Edge.LEFT, Edge.RIGHT, Edge.TOP, Edge.BOTTOM)
        assert set(self.edges) == {Edge.LEFT, Edge.RIGHT, Edge.TOP, Edge.BOTTOM}

    def test_start_without_edges(self, mocker):
        """Test nothing gets registered when no edge is configured"""
        self.settings = {}
        controller = self.make_controller(mocker)
        controller.start()
        assert controller.registry.edges == ()
        self.host.register_screen_edge.assert_not_called()

    def test_start_with_fallback(self, mocker):
        """Test the register-all variant"""
        self.settings = {}
        controller = self.make_controller(mocker, fallback_edges=ALL_EDGES)
        controller.start()
        assert controller.registry.edges == ALL_EDGES

    def test_start_with_duplicated_edges(self, mocker):
        """Test a duplicated edge is registered once and switches once"""
        self.settings = {"BorderActivate": "6,6"}
        window = HostWindow("w")
        controller = self.make_controller(mocker)
        controller.start([window])
        self.host.register_screen_edge.assert_called_once()
        assert controller.registry.edges == (Edge.LEFT,)
        # same config again, nothing to do
        controller.on_config_changed()
        self.host.register_screen_edge.assert_called_once()
        self.host.unregister_screen_edge.assert_not_called()
        window.move_resize_started.emit()
        self.trigger(Edge.LEFT)
        assert self.switches() == (1, 0, 0, 0)

    def test_move_then_left_edge(self, mocker):
        """Test a window move followed by the left edge switches left once"""
        window = HostWindow("w")
        controller = self.make_controller(mocker)
        controller.start([window])
        window.move_resize_started.emit()
        assert controller.is_dragging()
        self.trigger(Edge.LEFT)
        assert self.switches() == (1, 0, 0, 0)
        window.move_resize_finished.emit()
        assert not controller.is_dragging()
        self.trigger(Edge.LEFT)
        assert self.switches() == (1, 0, 0, 0)

    def test_no_drag_no_switch(self, mocker):
        """Test edges do nothing without a drag"""
        controller = self.make_controller(mocker)
        controller.start([HostWindow("w")])
        for edge in list(self.edges):
            self.trigger(edge)
        assert self.switches() == (0, 0, 0, 0)

    def test_hotkey_gates_switching(self, mocker):
        """Test the hotkey toggle alone enables switching"""
        controller = self.make_controller(mocker)
        controller.start()
        self.pulse()
        assert controller.is_dragging()
        self.host.show_osd.assert_called_once_with(OSD_ICON, TEXT_ON)
        self.trigger(Edge.TOP)
        assert self.switches() == (0, 0, 1, 0)

    def test_hotkey_off(self, mocker):
        """Test a second press after the quiet gap turns switching off"""
        controller = self.make_controller(mocker)
        controller.start()
        self.pulse()
        self.now += 0.35
        self.pulse()
        assert not controller.is_dragging()
        self.host.show_osd.assert_called_with(OSD_ICON, TEXT_OFF)
        self.trigger(Edge.TOP)
        assert self.switches() == (0, 0, 0, 0)

    def test_hotkey_auto_repeat(self, mocker):
        """Test auto-repeat keeps switching on without notifying again"""
        controller = self.make_controller(mocker)
        controller.start()
        for _ in range(5):
            self.pulse()
            self.now += 0.03
        assert controller.is_dragging()
        assert self.host.show_osd.call_count == 1

    def test_osd_setting(self, mocker):
        """Test ShowToggleOSD=false silences the toggle"""
        self.settings["ShowToggleOSD"] = "false"
        controller = self.make_controller(mocker)
        controller.start()
        self.pulse()
        assert controller.is_dragging()
        self.host.show_osd.assert_not_called()
        self.host.show_on_screen_message.assert_not_called()

    def test_config_change_adds_edge(self, mocker):
        """Test an edge added by configuration starts switching"""
        self.settings = {"BorderActivate": "6"}
        window = HostWindow("w")
        controller = self.make_controller(mocker)
        controller.start([window])
        window.move_resize_started.emit()
        assert Edge.RIGHT not in self.edges
        self.settings = {"BorderActivate": "6,2"}
        controller.on_config_changed()
        self.trigger(Edge.RIGHT)
        assert self.switches() == (0, 1, 0, 0)

    def test_config_change_without_edge_change(self, mocker):
        """Test an unrelated config change doesn't touch the edges"""
        controller = self.make_controller(mocker)
        controller.start()
        self.host.register_screen_edge.reset_mock()
        self.settings["ShowToggleOSD"] = "false"
        controller.on_config_changed()
        self.host.register_screen_edge.assert_not_called()
        self.host.unregister_screen_edge.assert_not_called()
        assert controller.notifier.enabled is False

    def test_dnd_windows(self, mocker):
        """Test windows presenting a drag icon count as dragging until they go"""
        existing = HostWindow("existing", dnd_icon="icon")
        controller = self.make_controller(mocker)
        controller.start([existing, HostWindow("plain")])
        assert controller.drag.dnd_dragging
        created = HostWindow("created", dnd_icon="icon")
        controller.on_window_added(created)
        existing.closed.emit()
        assert controller.is_dragging()
        controller.on_window_removed(created)
        assert not controller.is_dragging()
        # removing again is fine
        controller.on_window_removed(created)
        created.closed.emit()
        assert not controller.is_dragging()

    def test_windows_released(self, mocker):
        """Test closed and removed windows are disconnected and forgotten"""
        controller = self.make_controller(mocker)
        controller.start()
        for i in range(50):
            window = HostWindow(f"w{i}", dnd_icon="icon")
            controller.on_window_added(window)
            if i % 2:
                window.closed.emit()
            controller.on_window_removed(window)
            # a released window no longer reaches the controller
            window.move_resize_started.emit()
        assert len(controller.connections) == 0
        assert not controller.is_dragging()

    def test_window_wired_once(self, mocker):
        """Test a window seen at startup and added again is watched once"""
        dispatch = mocker.Mock()
        window = HostWindow("w")
        controller = self.make_controller(mocker, dispatch=dispatch)
        controller.start([window])
        controller.on_window_added(window)
        assert len(controller.connections[window]) == 4
        window.move_resize_started.emit()
        dispatch.assert_called_once_with(controller.on_move_resize_started, window)

    def test_dnd_icon_withdrawn(self, mocker):
        """Test a withdrawn drag icon stops tracking the window"""
        window = HostWindow("w")
        controller = self.make_controller(mocker)
        controller.start([window])
        window.set_dnd_icon("icon")
        assert controller.is_dragging()
        window.set_dnd_icon(None)
        assert not controller.is_dragging()

    def test_broken_window(self, mocker):
        """Test a window without signals and a failing drag icon is ignored"""
        controller = self.make_controller(mocker)
        controller.start([BrokenWindow(), object()])
        assert not controller.is_dragging()

    def test_corner_uses_cursor_movement(self, mocker):
        """Test a corner resolves by the last cursor movement"""
        self.settings = {"BorderActivate": "7"}
        controller = self.make_controller(mocker)
        controller.start(cursor=Point(50, 50))
        self.pulse()
        controller.on_cursor_moved(Point(48, 10))
        self.trigger(Edge.TOP_LEFT)
        assert self.switches() == (0, 0, 1, 0)
        controller.on_cursor_moved(Point(0, 5))
        self.trigger(Edge.TOP_LEFT)
        assert self.switches() == (1, 0, 1, 0)

    def test_missing_switch_capability(self, mocker):
        """Test a direction the host can't switch to is a no-op"""
        switch_right = mocker.Mock()
        host = HostCapabilities(switch_desktop_right=switch_right)
        assert not host.has("switch_desktop_left")
        controller = EdgeDragController(host)
        controller.drag.set_window_dragging(True)
        controller.on_edge(Edge.LEFT)
        switch_right.assert_not_called()
        controller.on_edge(Edge.RIGHT)
        switch_right.assert_called_once_with()

    def test_failing_switch(self, mocker):
        """Test a failing switch doesn't escape the handler"""
        controller = self.make_controller(mocker)
        controller.start()
        self.host.switch_desktop_down.side_effect = RuntimeError("boom")
        controller.drag.set_window_dragging(True)
        self.trigger(Edge.BOTTOM)
        self.host.switch_desktop_down.assert_called_once()

    def test_failing_shortcut(self, mocker):
        """Test a failing shortcut registration is not fatal"""
        controller = self.make_controller(mocker)
        self.host.register_shortcut.side_effect = RuntimeError("boom")
        controller.start()
        assert not controller.register_shortcut()
        assert controller.registry.edges

    def test_stop(self, mocker):
        """Test stop unregisters edges and disconnects windows"""
        window = HostWindow("w")
        controller = self.make_controller(mocker)
        controller.start([window])
        controller.stop()
        assert self.edges == {}
        window.move_resize_started.emit()
        assert not controller.is_dragging()

    def test_dispatch(self, mocker):
        """Test host signals go through the dispatcher"""
        dispatch = mocker.Mock()
        window = HostWindow("w")
        controller = self.make_controller(mocker, dispatch=dispatch)
        controller.start([window])
        window.move_resize_started.emit()
        dispatch.assert_called_once_with(controller.on_move_resize_started, window)
        self.trigger(Edge.LEFT)
        dispatch.assert_called_with(controller.registry.trigger, Edge.LEFT)
