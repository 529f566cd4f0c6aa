"""Defines the service that binds a host workspace to the EdgeDrag controller"""

import abc
import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .config import ConfigFile
from .controller import EdgeDragController
from .edges import Edge
from .host import HostCapabilities, HostWorkspace
from .worker import ThreadWorker

logger = logging.getLogger(__name__)


class Service(abc.ABC):
    """Service represents a long lived automation that can be turned on or off"""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Name of the service"""

    @property
    @abc.abstractmethod
    def is_running(self) -> bool:
        """Check if the service is running"""

    @abc.abstractmethod
    def start(self):
        """Start the service"""

    @abc.abstractmethod
    def stop(self):
        """Stop the service"""

    def toggle(self):
        """Toggle the service"""
        if self.is_running:
            self.stop()
        else:
            self.start()

    def restart(self):
        """Restart the service"""
        self.stop()
        self.start()

    @property
    def text(self) -> str:
        """Text describing the service and its status"""
        status = "running" if self.is_running else "stopped"
        return f"[{status}] {self.name}"


class EdgeDragService(Service, ThreadWorker):
    """EdgeDragService feeds workspace events into an EdgeDragController.

    Every event is queued onto the worker thread, so the controller sees them one
    at a time and in delivery order, no matter which thread the host emits from.

    :param HostWorkspace workspace: windows, cursor and config change signals
    :param HostCapabilities host: what the host can do
    :param ConfigFile config_file: polled for changes when given
    :param float config_poll_interval: seconds between polls, None disables polling
    :param fallback_edges: edges to register when none is configured
    """

    name = "EdgeDrag"
    _is_running = False
    controller: EdgeDragController
    workspace: HostWorkspace
    config_file: Optional[ConfigFile]
    _connections: List[Tuple[Any, Callable]]

    def __init__(
        self,
        workspace: HostWorkspace,
        host: HostCapabilities,
        config_file: ConfigFile = None,
        config_poll_interval: Optional[float] = 2.0,
        fallback_edges: Sequence[Edge] = (),
    ):
        self.workspace = workspace
        self.config_file = config_file
        self.config_poll_interval = config_poll_interval
        self.controller = EdgeDragController(
            host, fallback_edges=fallback_edges, dispatch=self.enqueue
        )
        self._connections = []

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start(self):
        if self._is_running:
            raise ValueError(f"Service {self.name} is already running")
        self._is_running = True
        self.start_worker()
        self._connect(
            self.workspace.window_added, self._queued(self.controller.on_window_added)
        )
        self._connect(
            self.workspace.window_removed, self._queued(self.controller.on_window_removed)
        )
        self._connect(self.workspace.cursor_pos_changed, self._on_cursor_pos_changed)
        self._connect(
            self.workspace.config_changed, self._queued(self.controller.on_config_changed)
        )
        self.enqueue(
            self.controller.start,
            self.workspace.windows(),
            self.workspace.cursor_pos(),
        )
        if self.config_file and self.config_poll_interval:
            self.periodic_call(self.config_poll_interval, self.check_config_file)

    def stop(self):
        if not self._is_running:
            return
        for signal, slot in self._connections:
            signal.disconnect(slot)
        self._connections = []
        self.enqueue(self.controller.stop)
        self.stop_worker()
        self._is_running = False

    def _connect(self, signal: Any, slot: Callable):
        signal.connect(slot)
        self._connections.append((signal, slot))

    def _queued(self, handler: Callable) -> Callable:
        def slot(*args):
            self.enqueue(handler, *args)

        return slot

    def _on_cursor_pos_changed(self):
        # sample the position now, the queue may lag behind the cursor
        self.enqueue(self.controller.on_cursor_moved, self.workspace.cursor_pos())

    def check_config_file(self):
        """Apply the configuration if the file changed since the last check"""
        if self.config_file.reload_if_changed():
            logger.info("%s changed", self.config_file.path)
            self.controller.on_config_changed()
