#!/usr/bin/env python3
"""
Authentication and Session Management for CGA Gateway API

Handles the salted challenge-response login and session logout.
"""

import hashlib
import logging

from .router_api import DecodeError, RouterAPI, SEEK_SALT_PASSWORD
from .router_config import Credentials

_LOGGER = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 1000
PBKDF2_KEY_LENGTH = 16


def compute_pbkdf2_hash(password: bytes, salt: bytes) -> str:
    """Hex-encoded PBKDF2-HMAC-SHA256 with the gateway's parameters"""
    key = hashlib.pbkdf2_hmac('sha256', password, salt,
                              PBKDF2_ITERATIONS, PBKDF2_KEY_LENGTH)
    return key.hex()


def derive_challenge(password: str, salt: str, saltwebui: str) -> str:
    """
    Compute the password the gateway expects on the second login

    The web UI hashes twice: the first hash goes into the second round as
    its hex string, not as raw bytes.

    Args:
        password: Plain text password
        salt: ``salt`` from the probe login
        saltwebui: ``saltwebui`` from the probe login

    Returns:
        32 character lowercase hex string
    """
    first = compute_pbkdf2_hash(password.encode('utf-8'), salt.encode('utf-8'))
    return compute_pbkdf2_hash(first.encode('utf-8'), saltwebui.encode('utf-8'))


class AuthManager:
    """Logs a RouterAPI session in and out"""

    def __init__(self, api: RouterAPI):
        self.api = api

    def login(self, credentials: Credentials) -> None:
        """
        Establish an authenticated session

        1. Probe login with ``seeksalthash`` to obtain the salts
        2. Derive the real password from the salts
        3. Login with the derived password
        4. Hit the menu endpoint to confirm the session

        Args:
            credentials: Username and plain text password

        Raises:
            RouterAPIError: First failing step, unchanged
        """
        _LOGGER.debug("Requesting login salts for %s", credentials.username)
        challenge = self.api.session_login(credentials.username, SEEK_SALT_PASSWORD)
        if not challenge.salt or not challenge.saltwebui:
            raise DecodeError("login response did not contain salt and saltwebui")

        derived = derive_challenge(credentials.password, challenge.salt,
                                   challenge.saltwebui)

        _LOGGER.debug("Logging in as %s", credentials.username)
        self.api.session_login(credentials.username, derived)

        self.api.session_menu()
        _LOGGER.debug("Session established on %s", self.api.router_ip)

    def logout(self) -> None:
        """
        Terminate the session

        The logout token has to come from a fresh host table read; tokens
        from login or set_device are rejected.
        """
        token = self.api.get_host_table()
        self.api.session_logout(token)
        _LOGGER.debug("Logged out of %s", self.api.router_ip)
