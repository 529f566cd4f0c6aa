"""Screen edges: identifiers, direction resolving and the registry that keeps the
host's edge registrations in sync with the configuration"""

import enum
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .cursor import Delta

logger = logging.getLogger(__name__)


class Edge(enum.IntEnum):
    """Screen edges, numbered the way KWin's ElectricBorder does so the values
    stored in kwinrc can be used as-is"""

    TOP = 0
    TOP_RIGHT = 1
    RIGHT = 2
    BOTTOM_RIGHT = 3
    BOTTOM = 4
    BOTTOM_LEFT = 5
    LEFT = 6
    TOP_LEFT = 7


class Direction(enum.Enum):
    """Desktop switching direction"""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    NONE = "none"


ALL_EDGES: Tuple[Edge, ...] = (
    Edge.LEFT,
    Edge.RIGHT,
    Edge.TOP,
    Edge.BOTTOM,
    Edge.TOP_LEFT,
    Edge.TOP_RIGHT,
    Edge.BOTTOM_LEFT,
    Edge.BOTTOM_RIGHT,
)

_SIDES = {
    Edge.LEFT: Direction.LEFT,
    Edge.RIGHT: Direction.RIGHT,
    Edge.TOP: Direction.UP,
    Edge.BOTTOM: Direction.DOWN,
}

# corner => (horizontal, vertical)
_CORNERS = {
    Edge.TOP_LEFT: (Direction.LEFT, Direction.UP),
    Edge.TOP_RIGHT: (Direction.RIGHT, Direction.UP),
    Edge.BOTTOM_LEFT: (Direction.LEFT, Direction.DOWN),
    Edge.BOTTOM_RIGHT: (Direction.RIGHT, Direction.DOWN),
}


def resolve_direction(edge, delta: Delta) -> Direction:
    """Map the triggered edge to a switching direction.

    Sides map directly. Corners pick the horizontal direction unless the last
    cursor movement was mostly vertical, a tie (including no movement at all)
    goes to the horizontal one.

    :param edge: the edge reported by the host, anything unknown yields NONE
    :param Delta delta: the most recent cursor movement
    """
    try:
        edge = Edge(edge)
    except ValueError:
        return Direction.NONE
    if edge in _SIDES:
        return _SIDES[edge]
    horizontal, vertical = _CORNERS[edge]
    if abs(delta.dx) >= abs(delta.dy):
        return horizontal
    return vertical


EdgeHandler = Callable[[Edge], None]
RegisterEdge = Callable[[Edge, EdgeHandler], bool]
UnregisterEdge = Callable[[Edge], None]


def unique_edges(edges: Iterable[Edge]) -> Tuple[Edge, ...]:
    """Drop duplicated edges, the first occurrence wins"""
    seen = set()
    result = []
    for edge in edges:
        if edge in seen:
            continue
        seen.add(edge)
        result.append(edge)
    return tuple(result)


class EdgeRegistry:
    """EdgeRegistry keeps the edges registered to the host equal to the configured
    ones, any change re-registers the whole set

    :param register: host function to register an edge, returns True on success
    :param unregister: host function to unregister an edge
    :param handler: called with the edge when a registered edge gets triggered
    :param fallback: edges to register when none is configured, empty means idle
    """

    edges: Tuple[Edge, ...]
    handlers: Dict[Edge, EdgeHandler]
    fallback: Tuple[Edge, ...]

    def __init__(
        self,
        register: RegisterEdge,
        unregister: UnregisterEdge,
        handler: EdgeHandler,
        fallback: Sequence[Edge] = (),
    ):
        self._register = register
        self._unregister = unregister
        self.handler = handler
        self.fallback = tuple(fallback)
        self.edges = ()
        self.handlers = {}

    def sync(self, configured: Sequence[Edge]) -> bool:
        """Re-register edges if the configured ones differ from the registered
        ones, returns True if a re-registration took place"""
        wanted = unique_edges(configured)
        if wanted == self.edges:
            return False
        self.register_all(wanted)
        return True

    def register_all(self, edges: Sequence[Edge]):
        """Unregister all edges then register the given ones"""
        self.unregister_all()
        edges = unique_edges(edges)
        if not edges:
            if not self.fallback:
                logger.info("edges: none (assign in Screen Edges)")
                return
            edges = self.fallback
        registered: List[Edge] = []
        for edge in edges:
            try:
                ok = self._register(edge, self.trigger)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.warning("failed to register edge %s", edge.name, exc_info=True)
                continue
            if not ok:
                logger.warning("edge %s was refused by the host", edge.name)
                continue
            registered.append(edge)
            self.handlers[edge] = self.handler
        self.edges = tuple(registered)
        logger.info(
            "edges: %s",
            ",".join(str(int(e)) for e in self.edges) if self.edges else "none",
        )

    def unregister_all(self):
        """Unregister every tracked edge, failures are ignored"""
        for edge in self.edges:
            try:
                self._unregister(edge)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.debug("failed to unregister edge %s", edge.name, exc_info=True)
        self.edges = ()
        self.handlers = {}

    def trigger(self, edge: Edge):
        """Dispatch a host edge callback to the handler bound to the edge"""
        handler: Optional[EdgeHandler] = self.handlers.get(edge)
        if handler is None:
            logger.debug("edge %s triggered but not registered", edge)
            return
        handler(edge)
