"""Cursor position tracking"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A cursor position"""

    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class Delta:
    """The movement between two cursor samples"""

    dx: int = 0
    dy: int = 0


class CursorTracker:
    """CursorTracker remembers the last cursor position and the movement leading to
    it, nothing older than that"""

    last_pos: Point
    last_delta: Delta

    def __init__(self, pos: Point = None):
        self.last_pos = pos or Point()
        self.last_delta = Delta()

    def update(self, pos: Point) -> Delta:
        """Record a new cursor position"""
        self.last_delta = Delta(pos.x - self.last_pos.x, pos.y - self.last_pos.y)
        self.last_pos = pos
        return self.last_delta
