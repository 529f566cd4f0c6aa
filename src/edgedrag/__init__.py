"""EdgeDrag - switch virtual desktops by dragging things onto screen edges"""

from .config import ConfigFile, EdgeDragConfig, parse_edges
from .controller import EdgeDragController
from .cursor import CursorTracker, Delta, Point
from .drag import DragState
from .edges import ALL_EDGES, Direction, Edge, EdgeRegistry, resolve_direction
from .host import HostCapabilities, HostError, HostWindow, HostWorkspace
from .notifier import Notifier
from .toggle import QUIET_GAP, TogglePulse
