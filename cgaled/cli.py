#!/usr/bin/env python3
"""
CGA Gateway LED Tool

Logs into the gateway, switches the LED on or off, then logs out.

Usage:
    cga-led -p mypassword -l true      # LED on
    cga-led -p mypassword -l false     # LED off
    cga-led --status                   # Show LED state only

Environment Variables:
    ROUTER_IP           Gateway IP address
    ROUTER_USERNAME     Username
    ROUTER_PASSWORD     Password
"""

import argparse
import logging
import sys
from typing import List, Optional

from .router_api import (DEFAULT_ROUTER_IP, DEFAULT_TIMEOUT, ParseError, RouterAPI,
                         RouterAPIError)
from .router_auth import AuthManager
from .router_config import ConfigError, RouterConfig
from .router_led import LedController, format_bool, parse_bool

_LOGGER = logging.getLogger(__name__)


def led_argument(value: str) -> bool:
    """argparse type for the LED switch"""
    lowered = value.lower()
    if lowered == 'on':
        return True
    if lowered == 'off':
        return False
    try:
        return parse_bool(value)
    except ParseError:
        raise argparse.ArgumentTypeError(
            f"invalid LED value {value!r}, use true/false or on/off") from None


def timeout_argument(value: str) -> float:
    """argparse type for a positive number of seconds"""
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout {value!r}") from None
    if not seconds > 0:
        raise argparse.ArgumentTypeError(f"timeout must be greater than 0, got {value}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cga-led',
        description="Switch the LED of a CGA gateway on or off.")
    parser.add_argument('-a', '--address',
                        help=f"Address of API (default: $ROUTER_IP or {DEFAULT_ROUTER_IP})")
    parser.add_argument('-u', '--username',
                        help="Username for API (default: $ROUTER_USERNAME or admin)")
    parser.add_argument('-p', '--password',
                        help="Password for API (default: $ROUTER_PASSWORD or prompt)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('-l', '--led', type=led_argument, default=False,
                      help="Turn led on (true) or off (false) (default: false)")
    mode.add_argument('--status', action='store_true',
                      help="Only print the current LED state")
    parser.add_argument('--https', action='store_true',
                        help="Use HTTPS instead of HTTP")
    parser.add_argument('--timeout', type=timeout_argument, default=DEFAULT_TIMEOUT,
                        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT:g})")
    parser.add_argument('--logout-on-error', action='store_true',
                        help="Try to log out if the LED step fails")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable debug logging")
    return parser


def run(config: RouterConfig, desired: Optional[bool],
        logout_on_error: bool = False) -> Optional[bool]:
    """
    Login, apply (or read) the LED state, logout

    Args:
        config: Gateway settings and credentials
        desired: LED state to apply, or None to only read it
        logout_on_error: Log out if the LED step fails

    Returns:
        The LED state read when ``desired`` is None, otherwise whether a
        write was sent

    Raises:
        RouterAPIError: First failure of any phase
    """
    with RouterAPI(config.address, use_https=config.use_https,
                   timeout=config.timeout) as api:
        auth = AuthManager(api)
        led = LedController(api)

        print(f"[*] Logging in as '{config.credentials.username}' to {config.address}...")
        auth.login(config.credentials)
        print("[✓] Authentication successful")

        try:
            if desired is None:
                result = led.get_led_state()
                print(f"[✓] LED is {'on' if result else 'off'}")
            else:
                result = led.apply_led_state(desired)
                if result:
                    print(f"[✓] LED switched {'on' if desired else 'off'}")
                else:
                    print(f"[✓] LED already {'on' if desired else 'off'}")
        except RouterAPIError:
            if logout_on_error:
                try:
                    auth.logout()
                except RouterAPIError as e:
                    _LOGGER.warning("Logout after failure also failed: %s", e)
            raise

        auth.logout()
        print("[✓] Logged out")

    return result


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the cga-led console script"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        config = RouterConfig.load(
            address=args.address,
            username=args.username,
            password=args.password,
            use_https=args.https,
            timeout=args.timeout)
        desired = None if args.status else args.led
        _LOGGER.debug("Desired LED state: %s",
                      'read only' if desired is None else format_bool(desired))
        run(config, desired, logout_on_error=args.logout_on_error)
    except (ConfigError, RouterAPIError) as e:
        _LOGGER.debug("Run failed", exc_info=True)
        print(f"[!] {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\n[!] Interrupted by user", file=sys.stderr)
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
