"""Client for the management API of CGA home gateways."""

from .router_api import (
    ApiError,
    DecodeError,
    DeviceToken,
    HostToken,
    ParseError,
    RouterAPI,
    RouterAPIError,
    TransportError,
)
from .router_auth import AuthManager, derive_challenge
from .router_config import ConfigError, Credentials, RouterConfig
from .router_led import LedController

__all__ = [
    "ApiError",
    "AuthManager",
    "ConfigError",
    "Credentials",
    "DecodeError",
    "DeviceToken",
    "HostToken",
    "LedController",
    "ParseError",
    "RouterAPI",
    "RouterAPIError",
    "RouterConfig",
    "TransportError",
    "derive_challenge",
]
