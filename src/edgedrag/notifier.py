"""On-screen feedback for the switch-on-edge toggle"""

import logging

from .host import HostCapabilities

logger = logging.getLogger(__name__)

OSD_ICON = "preferences-system-windows"


class Notifier:
    """Notifier shows a short text through the shell's OSD service, falling back to
    the host's on-screen message, and gives up quietly if neither works

    :param HostCapabilities host: the host to show the text with
    :param bool enabled: whether to show anything at all (ShowToggleOSD)
    """

    def __init__(self, host: HostCapabilities, enabled: bool = True):
        self.host = host
        self.enabled = enabled

    def show(self, text: str):
        """Show the text if enabled"""
        if not self.enabled:
            return
        try:
            self.host.show_osd(OSD_ICON, text)
            return
        except Exception as err:  # pylint: disable=broad-exception-caught
            logger.debug("osd failed: %s", err)
        try:
            self.host.show_on_screen_message(text)
        except Exception as err:  # pylint: disable=broad-exception-caught
            logger.debug("on-screen message failed, dropping %r: %s", text, err)
