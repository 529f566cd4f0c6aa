"""Switch-on-edge toggle driven by a repeating hotkey"""

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)

QUIET_GAP = 0.3


class TogglePulse:
    """TogglePulse turns hotkey pulses into an on/off state.

    The host fires the hotkey once per key-down, auto-repeat included, and never
    tells about key-up. A pulse turns the state on if it was off, a pulse turns it
    off only if no other pulse arrived within the quiet gap before it. Every pulse
    refreshes the timestamp, so holding the key or re-pressing it within the gap
    keeps the state on.

    :param on_change: called with the new state on every transition
    :param quiet_gap: seconds of silence that separate two deliberate presses
    :param clock: returns the current time in seconds
    """

    active: bool = False
    last_pulse: float = 0

    def __init__(
        self,
        on_change: Callable[[bool], None],
        quiet_gap: float = QUIET_GAP,
        clock: Callable[[], float] = time.time,
    ):
        self.on_change = on_change
        self.quiet_gap = quiet_gap
        self.clock = clock

    def pulse(self):
        """Handle a hotkey pulse"""
        now = self.clock()
        if not self.active:
            self.active = True
            self.last_pulse = now
            logger.info("switch on edge: on")
            self.on_change(True)
            return
        if now - self.last_pulse >= self.quiet_gap:
            self.active = False
            logger.info("switch on edge: off")
            self.on_change(False)
        else:
            logger.debug("switch on edge: repeated pulse ignored")
        self.last_pulse = now
