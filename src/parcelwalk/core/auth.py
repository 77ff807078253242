"""
auth.py
- Token managers that attach (or don't) an Authorization header to outgoing requests.
- The strategy is picked once, when a ConnectionInfo is built, and then
  installed as the session's requests auth hook.
"""

from loguru import logger
from requests.auth import AuthBase, HTTPBasicAuth


class NoToken(AuthBase):
    """Sends requests unauthenticated."""

    def apply(self, request):
        return request

    def __call__(self, request):
        return self.apply(request)

    def __repr__(self):
        return "NoToken()"


class HttpBasic(AuthBase):
    """Adds an HTTP basic Authorization header."""

    def __init__(self, username, password):
        self.username = username
        self._basic = HTTPBasicAuth(username, password)

    def apply(self, request):
        return self._basic(request)

    def __call__(self, request):
        return self.apply(request)

    def __repr__(self):
        # Never include the password.
        return f"HttpBasic(username={self.username!r})"


def token_manager_for(username=None, password=None):
    """
    Choose the auth strategy for a set of credentials.

    Basic auth is used only when both a username and a password are given;
    anything else falls back to unauthenticated requests.
    """
    if username is not None and password is not None:
        logger.debug(f"[auth] Using HTTP basic auth for user {username}")
        return HttpBasic(username, password)
    if username is not None or password is not None:
        logger.warning("[auth] Incomplete credentials supplied, sending requests unauthenticated")
    return NoToken()
