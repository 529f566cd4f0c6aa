"""Test edgedrag.kde module"""

import pytest

from edgedrag import kde
from edgedrag.config import ConfigFile
from edgedrag.host import HostError


@pytest.fixture(name="dbus")
def fixture_dbus(mocker):
    """Patch the session bus with a connected one and a valid interface"""
    bus = mocker.Mock()
    bus.isConnected.return_value = True
    connection = mocker.patch.object(kde, "QDBusConnection")
    connection.sessionBus.return_value = bus
    iface = mocker.Mock()
    iface.isValid.return_value = True
    iface.call.return_value.type.return_value = kde.QDBusMessage.MessageType.ReplyMessage
    iface_cls = mocker.patch.object(kde, "QDBusInterface", return_value=iface)
    return bus, iface_cls, iface


def test_show_osd(dbus):
    """Test the OSD call"""
    bus, iface_cls, iface = dbus
    kde.show_osd("icon", "hello")
    iface_cls.assert_called_once_with(*kde.OSD_SERVICE, bus)
    iface.call.assert_called_once_with("showText", "icon", "hello")


def test_invoke_kwin_shortcut(dbus):
    """Test invoking a KWin shortcut"""
    _, iface_cls, iface = dbus
    kde.invoke_kwin_shortcut(kde.SWITCH_UP)
    assert iface_cls.call_args[0][:3] == kde.KWIN_SHORTCUTS
    iface.call.assert_called_once_with("invokeShortcut", "Switch One Desktop Up")


def test_error_reply(dbus):
    """Test an error reply raises HostError"""
    _, _, iface = dbus
    iface.call.return_value.type.return_value = kde.QDBusMessage.MessageType.ErrorMessage
    iface.call.return_value.errorMessage.return_value = "no such method"
    with pytest.raises(HostError):
        kde.show_osd("icon", "hello")


def test_invalid_interface(dbus):
    """Test a missing service raises HostError"""
    _, _, iface = dbus
    iface.isValid.return_value = False
    with pytest.raises(HostError):
        kde.invoke_kwin_shortcut(kde.SWITCH_LEFT)


def test_disconnected_bus(dbus):
    """Test a disconnected bus raises HostError"""
    bus, _, _ = dbus
    bus.isConnected.return_value = False
    with pytest.raises(HostError):
        kde.show_osd("icon", "hello")


def test_kde_capabilities(dbus, tmp_path):
    """Test the capabilities filled in for KDE"""
    _, _, iface = dbus
    config_file = ConfigFile(str(tmp_path / "kwinrc"))
    host = kde.kde_capabilities(config_file)
    assert host.has("show_osd")
    assert host.has("switch_desktop_down")
    assert not host.has("register_screen_edge")
    host.switch_desktop_right()
    iface.call.assert_called_once_with("invokeShortcut", kde.SWITCH_RIGHT)
    assert host.read_config("BorderActivate", "none") == "none"
