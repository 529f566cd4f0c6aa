"""Configuration: reading the script settings from the KConfig store and turning the
raw values into something the controller can use directly"""

import logging
import os
import re
from configparser import ConfigParser
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from .edges import Edge

logger = logging.getLogger(__name__)

SCRIPT = "edgedrag-desktop-switcher"
GROUP = f"Script-{SCRIPT}"
KEY_SHOW_OSD = "ShowToggleOSD"
KEY_EDGES = "BorderActivate"
KEY_EDGES_LEGACY = "BorderConfig"
DEFAULT_KWINRC_PATH = os.path.join(
    os.getenv("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config"),
    "kwinrc",
)

ReadConfig = Callable[[str, Any], Any]

_TRUTHY = {"true", "yes", "on", "1"}
_FALSY = {"false", "no", "off", "0"}


def _to_edge(token: Any) -> Optional[Edge]:
    try:
        return Edge(int(token))
    except (TypeError, ValueError):
        logger.debug("ignoring edge token %r", token)
        return None


def parse_edges(raw: Any) -> Tuple[Edge, ...]:
    """Parse the configured edges.

    The raw value may be a string like "2,6", a list-like of numbers or a single
    number. Unparsable tokens are dropped, order and duplicates are kept.
    """
    try:
        if raw is None:
            return ()
        if isinstance(raw, (str, bytes)):
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8", errors="ignore")
            tokens = re.findall(r"\d+", raw)
        elif hasattr(raw, "__iter__"):
            tokens = list(raw)
        else:
            tokens = [raw]
        return tuple(e for e in map(_to_edge, tokens) if e is not None)
    except Exception:  # pylint: disable=broad-exception-caught
        logger.debug("failed to parse edges %r", raw, exc_info=True)
        return ()


def parse_bool(raw: Any, default: bool) -> bool:
    """Parse a KConfig boolean, unknown values keep the default"""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return bool(raw)
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value in _TRUTHY:
            return True
        if value in _FALSY:
            return False
    return default


@dataclass(frozen=True)
class EdgeDragConfig:
    """EdgeDragConfig holds the normalized settings"""

    show_osd: bool = True
    edges: Tuple[Edge, ...] = ()

    @classmethod
    def load(cls, read: ReadConfig) -> "EdgeDragConfig":
        """Load settings through the host's raw config reader"""
        try:
            show_osd = parse_bool(read(KEY_SHOW_OSD, True), True)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.debug("failed to read %s", KEY_SHOW_OSD, exc_info=True)
            show_osd = True
        try:
            raw = read(KEY_EDGES, None)
            if raw is None or raw == "":
                raw = read(KEY_EDGES_LEGACY, None)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.debug("failed to read %s", KEY_EDGES, exc_info=True)
            raw = None
        return cls(show_osd=show_osd, edges=parse_edges(raw))


def _new_parser() -> ConfigParser:
    # KConfig keys are case sensitive and may contain "%"
    parser = ConfigParser(interpolation=None, strict=False, allow_no_value=True)
    parser.optionxform = str
    return parser


class ConfigFile:
    """ConfigFile reads the script group of a KConfig file (kwinrc)

    :param str path: path to the file, defaults to $EDGEDRAG_KWINRC or ~/.config/kwinrc
    :param str group: the group holding the script settings
    """

    config: ConfigParser
    path: str
    group: str
    mtime: Optional[float] = None

    def __init__(self, path: str = None, group: str = GROUP):
        self.path = path or os.getenv("EDGEDRAG_KWINRC") or DEFAULT_KWINRC_PATH
        self.group = group
        self.load()

    def _stat_mtime(self) -> Optional[float]:
        try:
            return os.path.getmtime(self.path)
        except OSError:
            return None

    def load(self):
        """(Re)load the file, a missing or broken file reads as empty"""
        config = _new_parser()
        self.mtime = self._stat_mtime()
        if self.mtime is not None:
            try:
                config.read(self.path, encoding="utf-8")
            except Exception:  # pylint: disable=broad-exception-caught
                logger.warning("failed to read %s", self.path, exc_info=True)
                config = _new_parser()
        self.config = config

    def reload_if_changed(self) -> bool:
        """Reload the file if it was modified since the last load"""
        if self._stat_mtime() == self.mtime:
            return False
        logger.debug("%s changed, reloading", self.path)
        self.load()
        return True

    def read(self, key: str, default: Any = None) -> Any:
        """Read a raw value from the script group"""
        if not self.config.has_section(self.group):
            return default
        return self.config.get(self.group, key, fallback=default)
