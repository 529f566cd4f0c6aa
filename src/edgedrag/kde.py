"""KDE Plasma bindings: Plasma's OSD service and KWin's desktop switching shortcuts,
both reached over the session D-Bus"""

import logging
from functools import partial
from typing import Any

from PySide6.QtDBus import QDBusConnection, QDBusInterface, QDBusMessage

from .config import ConfigFile
from .host import HostCapabilities, HostError

logger = logging.getLogger(__name__)

OSD_SERVICE = ("org.kde.plasmashell", "/org/kde/osdService", "org.kde.osdService")
KWIN_SHORTCUTS = (
    "org.kde.kglobalaccel",
    "/component/kwin",
    "org.kde.kglobalaccel.Component",
)
SWITCH_LEFT = "Switch One Desktop to the Left"
SWITCH_RIGHT = "Switch One Desktop to the Right"
SWITCH_UP = "Switch One Desktop Up"
SWITCH_DOWN = "Switch One Desktop Down"


def call_dbus(service: str, path: str, interface: str, method: str, *args: Any) -> Any:
    """Call a method on the session bus, raise HostError on failure"""
    bus = QDBusConnection.sessionBus()
    if not bus.isConnected():
        raise HostError("session bus is not connected")
    iface = QDBusInterface(service, path, interface, bus)
    if not iface.isValid():
        raise HostError(f"{service} {path} is not available")
    reply = iface.call(method, *args)
    if reply.type() == QDBusMessage.MessageType.ErrorMessage:
        raise HostError(f"{interface}.{method}: {reply.errorMessage()}")
    logger.debug("dbus %s.%s%s done", interface, method, args)
    return reply.arguments()


def show_osd(icon: str, text: str):
    """Show a text with an icon through Plasma's OSD"""
    call_dbus(*OSD_SERVICE, "showText", icon, text)


def invoke_kwin_shortcut(name: str):
    """Invoke one of KWin's global shortcuts by its name"""
    call_dbus(*KWIN_SHORTCUTS, "invokeShortcut", name)


def kde_capabilities(config_file: ConfigFile = None) -> HostCapabilities:
    """Capabilities available from outside of KWin: OSD, desktop switching and
    reading kwinrc. Screen edges and shortcuts need to be supplied by the caller."""
    config_file = config_file or ConfigFile()
    return HostCapabilities(
        show_osd=show_osd,
        switch_desktop_left=partial(invoke_kwin_shortcut, SWITCH_LEFT),
        switch_desktop_right=partial(invoke_kwin_shortcut, SWITCH_RIGHT),
        switch_desktop_up=partial(invoke_kwin_shortcut, SWITCH_UP),
        switch_desktop_down=partial(invoke_kwin_shortcut, SWITCH_DOWN),
        read_config=config_file.read,
    )
