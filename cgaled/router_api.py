#!/usr/bin/env python3
"""
CGA Gateway Router API Wrapper

Thin transport over the undocumented JSON management API of Arris /
Vodafone Station "CGA" home gateways.

Every endpoint answers with a JSON envelope carrying an ``error`` field.
A response is only successful when that field is the literal ``"ok"``,
whatever the HTTP status code says.

Usage:
    from cgaled.router_api import RouterAPI

    with RouterAPI(router_ip="192.168.100.1") as api:
        state = api.get_set_device()
        print(f"LED: {state.data.led}")
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, NewType, Optional, Type, TypeVar

import requests
import urllib3

_LOGGER = logging.getLogger(__name__)

# CSRF tokens handed out by different endpoints are not interchangeable
DeviceToken = NewType("DeviceToken", str)
HostToken = NewType("HostToken", str)

DEFAULT_ROUTER_IP = "192.168.100.1"
DEFAULT_TIMEOUT = 10.0

API_OK = "ok"
SEEK_SALT_PASSWORD = "seeksalthash"

ENDPOINT_SESSION_LOGIN = "/api/v1/session/login"
ENDPOINT_SESSION_MENU = "/api/v1/session/menu"
ENDPOINT_SESSION_LOGOUT = "/api/v1/session/logout"
ENDPOINT_SET_DEVICE = "/api/v1/set_device"
ENDPOINT_SET_DEVICE_SDEVICE = "/api/v1/set_device/Sdevice"
ENDPOINT_HOST_TABLE = "/api/v1/host/hostTbl"


# ============================================================================
# Errors
# ============================================================================

class RouterAPIError(Exception):
    """Base class for all gateway API failures"""


class TransportError(RouterAPIError):
    """Connection, timeout or HTTP-level failure"""


class DecodeError(RouterAPIError):
    """Response body is not the expected JSON envelope"""


class ApiError(RouterAPIError):
    """Envelope ``error`` field was something other than ``ok``"""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"api response was not ok: error '{code}', message '{message}'")


class ParseError(RouterAPIError):
    """Device reported a value in a representation we do not understand"""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"cannot parse {value!r} as a boolean")


# ============================================================================
# Response envelopes
# ============================================================================

def _field(payload: Dict[str, Any], name: str) -> str:
    value = payload.get(name, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"field '{name}' is not a string: {value!r}")
    return value


@dataclass(frozen=True)
class GenericResponse:
    """Envelope shared by most endpoints"""

    error: str
    message: str = ""
    token: str = ""

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "GenericResponse":
        return cls(
            error=_field(payload, "error"),
            message=_field(payload, "message"),
            token=_field(payload, "token"),
        )


@dataclass(frozen=True)
class LoginResponse:
    """Login envelope; the salt probe fills in ``salt`` and ``saltwebui``"""

    error: str
    message: str = ""
    salt: str = ""
    saltwebui: str = ""

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "LoginResponse":
        return cls(
            error=_field(payload, "error"),
            message=_field(payload, "message"),
            salt=_field(payload, "salt"),
            saltwebui=_field(payload, "saltwebui"),
        )


@dataclass(frozen=True)
class DeviceState:
    """
    Device settings as reported by ``/api/v1/set_device``

    ``http_state`` is opaque and must be echoed back unchanged on write.
    """

    led: str
    http_state: str


@dataclass(frozen=True)
class SetDeviceResponse:
    """Device settings envelope with the token that authorizes a write"""

    error: str
    message: str = ""
    token: DeviceToken = DeviceToken("")
    data: DeviceState = DeviceState(led="", http_state="")

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "SetDeviceResponse":
        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise DecodeError(f"field 'data' is not an object: {data!r}")
        return cls(
            error=_field(payload, "error"),
            message=_field(payload, "message"),
            token=DeviceToken(_field(payload, "token")),
            data=DeviceState(
                led=_field(data, "led"),
                http_state=_field(data, "http_state"),
            ),
        )


Envelope = TypeVar("Envelope", GenericResponse, LoginResponse, SetDeviceResponse)


# ============================================================================
# Transport
# ============================================================================

class RouterAPI:
    """API wrapper for a CGA gateway, bound to one cookie session"""

    def __init__(self, router_ip: str = DEFAULT_ROUTER_IP,
                 use_https: bool = False,
                 timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        """
        Initialize Router API

        Args:
            router_ip: Gateway IP address or hostname
            use_https: Use HTTPS instead of HTTP (certificate not verified)
            timeout: Per-request timeout in seconds
            session: Optional pre-built requests session
        """
        self.router_ip = router_ip
        self.base_url = f"{'https' if use_https else 'http'}://{router_ip}"
        self.use_https = use_https
        self.timeout = timeout

        # One session for the whole run so server-set cookies stick
        self.session = session or requests.Session()
        if use_https:
            # Gateways ship self-signed certificates
            self.session.verify = False
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def __enter__(self) -> "RouterAPI":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session"""
        self.session.close()

    def _request(self, method: str, endpoint: str,
                 token: Optional[str] = None, **kwargs) -> requests.Response:
        """Make HTTP request with the headers the web UI sends"""
        headers = kwargs.pop('headers', {})
        headers.setdefault('User-Agent', 'Mozilla/5.0')
        headers.setdefault('X-Requested-With', 'XMLHttpRequest')
        if token:
            headers['X-Csrf-Token'] = token

        url = f"{self.base_url}{endpoint}"
        kwargs.setdefault('timeout', self.timeout)

        _LOGGER.debug("%s %s", method, url)
        try:
            return self.session.request(method, url, headers=headers, **kwargs)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {endpoint} failed: {e}") from e

    def call(self, method: str, endpoint: str, response_type: Type[Envelope],
             data: Optional[Dict[str, str]] = None,
             token: Optional[str] = None) -> Envelope:
        """
        Send a request and decode the JSON envelope

        Args:
            method: HTTP method
            endpoint: Path below the base URL
            response_type: Envelope class to decode into
            data: Optional form fields, sent URL-encoded
            token: Optional CSRF token for the X-Csrf-Token header

        Returns:
            Decoded envelope of type ``response_type``

        Raises:
            TransportError: Request could not be completed
            DecodeError: Body is not a JSON object of the expected shape
            ApiError: Envelope error field is not ``ok``
        """
        response = self._request(method, endpoint, token=token, data=data)

        try:
            payload = response.json()
        except ValueError as e:
            if not response.ok:
                try:
                    response.raise_for_status()
                except requests.exceptions.HTTPError as http_error:
                    raise TransportError(
                        f"{method} {endpoint} failed: {http_error}") from http_error
            raise DecodeError(f"{method} {endpoint} returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise DecodeError(f"{method} {endpoint} returned {type(payload).__name__}, "
                              "expected a JSON object")

        envelope = response_type.from_json(payload)
        if envelope.error != API_OK:
            _LOGGER.debug("%s %s rejected: %s", method, endpoint, envelope.error)
            raise ApiError(envelope.error, envelope.message)

        return envelope

    # ========================================================================
    # Session endpoints
    # ========================================================================

    def session_login(self, username: str, password: str) -> LoginResponse:
        """
        POST a login form

        ``logout=true`` makes the gateway drop any active session before
        the attempt. Sending ``seeksalthash`` as password only returns the
        login salts.
        """
        form = {
            'username': username,
            'password': password,
            'logout': 'true',
        }
        return self.call('POST', ENDPOINT_SESSION_LOGIN, LoginResponse, data=form)

    def session_menu(self) -> GenericResponse:
        """Query the menu endpoint - only succeeds with a valid session"""
        return self.call('GET', ENDPOINT_SESSION_MENU, GenericResponse)

    def session_logout(self, token: HostToken) -> GenericResponse:
        """Terminate the session, authorized by a host table token"""
        return self.call('POST', ENDPOINT_SESSION_LOGOUT, GenericResponse, token=token)

    # ========================================================================
    # Device endpoints
    # ========================================================================

    def get_set_device(self) -> SetDeviceResponse:
        """Query set_device endpoint - LED and http_state plus a write token"""
        return self.call('GET', ENDPOINT_SET_DEVICE, SetDeviceResponse)

    def set_device_sdevice(self, led: str, http_state: str,
                           token: DeviceToken) -> GenericResponse:
        """Write device settings, echoing ``http_state`` from the last read"""
        form = {
            'led': led,
            'http_state': http_state,
        }
        return self.call('POST', ENDPOINT_SET_DEVICE_SDEVICE, GenericResponse,
                         data=form, token=token)

    def get_host_table(self) -> HostToken:
        """Query hostTbl endpoint and return the token it hands out"""
        response = self.call('GET', ENDPOINT_HOST_TABLE, GenericResponse)
        return HostToken(response.token)
