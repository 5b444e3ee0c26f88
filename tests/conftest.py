"""Pytest configuration and fixtures for CGA gateway tests."""

from typing import Any
from unittest.mock import Mock
from urllib.parse import urlsplit

import pytest
import requests

from cgaled.router_api import RouterAPI

SALT = "abcd1234"
SALT_WEBUI = "efgh5678"
PASSWORD = "password"
DERIVED_PASSWORD = "75ed05681ada7fd25017af268998330e"


def make_response(payload: Any = None, status_code: int = 200) -> Mock:
    """Create a mock requests.Response; a None payload is an invalid JSON body."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    if payload is None:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1")
    else:
        response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Server Error"
        )
    return response


class FakeGateway:
    """Answers session.request calls from per-endpoint response queues.

    Each route holds a list of responses served in order; the last one is
    repeated once the queue runs dry.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Any]] = {
            ("POST", "/api/v1/session/login"): [
                {"error": "ok", "message": "", "salt": SALT, "saltwebui": SALT_WEBUI},
                {"error": "ok", "message": "all good"},
            ],
            ("GET", "/api/v1/session/menu"): [{"error": "ok", "message": ""}],
            ("GET", "/api/v1/set_device"): [
                {
                    "error": "ok",
                    "message": "",
                    "token": "device-token",
                    "data": {"led": "true", "http_state": "state-42"},
                }
            ],
            ("POST", "/api/v1/set_device/Sdevice"): [{"error": "ok", "message": ""}],
            ("GET", "/api/v1/host/hostTbl"): [
                {"error": "ok", "message": "", "token": "host-token"}
            ],
            ("POST", "/api/v1/session/logout"): [{"error": "ok", "message": ""}],
        }
        self.session = Mock(spec=requests.Session)
        self.session.request.side_effect = self._handle

    def set(self, method: str, path: str, *responses: Any) -> None:
        """Replace the response queue of one endpoint."""
        self.routes[(method, path)] = list(responses)

    def _handle(self, method: str, url: str, **kwargs: Any) -> Any:
        queue = self.routes[(method, urlsplit(url).path)]
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, Mock):
            return item
        return make_response(item)

    @property
    def calls(self) -> list[tuple[str, str]]:
        """(method, path) of every request made, in order."""
        return [
            (call.args[0], urlsplit(call.args[1]).path)
            for call in self.session.request.call_args_list
        ]

    def requests_to(self, method: str, path: str) -> list[Any]:
        """Full call records for one endpoint."""
        return [
            call
            for call in self.session.request.call_args_list
            if call.args[0] == method and urlsplit(call.args[1]).path == path
        ]


@pytest.fixture
def gateway() -> FakeGateway:
    """Fixture providing a gateway that accepts the happy path."""
    return FakeGateway()


@pytest.fixture
def api(gateway: FakeGateway) -> RouterAPI:
    """Fixture providing a RouterAPI wired to the fake gateway."""
    return RouterAPI(router_ip="192.168.100.1", session=gateway.session)
