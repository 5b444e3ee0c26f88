#!/usr/bin/env python3
"""
Configuration for CGA Gateway tools

Settings come from command-line values, then environment variables:
    ROUTER_IP: Gateway IP address (default: 192.168.100.1)
    ROUTER_USERNAME: Username (default: admin)
    ROUTER_PASSWORD: Password (prompted for when missing)
"""

import getpass
import os
import sys
from dataclasses import dataclass, field
from typing import Optional

from .router_api import DEFAULT_ROUTER_IP, DEFAULT_TIMEOUT

DEFAULT_USERNAME = "admin"


class ConfigError(Exception):
    """Configuration is incomplete"""


@dataclass(frozen=True)
class Credentials:
    """Login credentials, fixed for the lifetime of a run"""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class RouterConfig:
    """Everything needed to talk to one gateway"""

    credentials: Credentials
    address: str = DEFAULT_ROUTER_IP
    use_https: bool = False
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def load(cls, address: Optional[str] = None,
             username: Optional[str] = None,
             password: Optional[str] = None,
             use_https: bool = False,
             timeout: float = DEFAULT_TIMEOUT,
             interactive: Optional[bool] = None) -> 'RouterConfig':
        """
        Build a config from explicit values, falling back to environment

        Args:
            address: Gateway address, overrides ROUTER_IP
            username: Username, overrides ROUTER_USERNAME
            password: Password, overrides ROUTER_PASSWORD
            use_https: Use HTTPS instead of HTTP
            timeout: Per-request timeout in seconds
            interactive: Prompt for a missing password (default: stdin is a tty)

        Returns:
            RouterConfig instance

        Raises:
            ConfigError: If no password is available or timeout is not positive
        """
        if not timeout > 0:
            raise ConfigError(f"Timeout must be greater than 0, got {timeout:g}")

        address = address or os.getenv('ROUTER_IP') or DEFAULT_ROUTER_IP
        username = username or os.getenv('ROUTER_USERNAME') or DEFAULT_USERNAME
        if password is None:
            password = os.getenv('ROUTER_PASSWORD')

        if password is None:
            if interactive is None:
                interactive = sys.stdin.isatty()
            if not interactive:
                raise ConfigError("Password is required. "
                                  "Pass --password or set ROUTER_PASSWORD.")
            password = getpass.getpass(f"Password for {username}@{address}: ")

        return cls(
            credentials=Credentials(username=username, password=password),
            address=address,
            use_https=use_https,
            timeout=timeout,
        )
