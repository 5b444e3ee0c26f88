#!/usr/bin/env python3
"""
LED control for CGA gateways

The gateway reports booleans as text. Only the spellings below are
accepted; anything else is an error rather than a guess.
"""

import logging

from .router_api import ParseError, RouterAPI

_LOGGER = logging.getLogger(__name__)

TRUE_VALUES = ("1", "t", "T", "TRUE", "true", "True")
FALSE_VALUES = ("0", "f", "F", "FALSE", "false", "False")


def parse_bool(value: str) -> bool:
    """Parse a textual boolean, raising ParseError on anything unknown"""
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ParseError(value)


def format_bool(value: bool) -> str:
    return "true" if value else "false"


class LedController:
    """Reads and switches the gateway LED on an authenticated session"""

    def __init__(self, api: RouterAPI):
        self.api = api

    def get_led_state(self) -> bool:
        """Current LED state"""
        response = self.api.get_set_device()
        return parse_bool(response.data.led)

    def apply_led_state(self, desired: bool) -> bool:
        """
        Switch the LED to ``desired`` if it is not already there

        Args:
            desired: True for on, False for off

        Returns:
            True if a write was sent, False if the LED already matched

        Raises:
            ParseError: Gateway reported an unrecognised LED value
            RouterAPIError: Read or write failed
        """
        response = self.api.get_set_device()
        current = parse_bool(response.data.led)

        if current == desired:
            _LOGGER.debug("LED already %s, nothing to do", format_bool(desired))
            return False

        _LOGGER.debug("Switching LED from %s to %s",
                      format_bool(current), format_bool(desired))
        self.api.set_device_sdevice(format_bool(desired),
                                    response.data.http_state,
                                    response.token)
        return True
