"""
Authentication helpers for the DAVClient.
"""
from typing import Iterable
from typing import Optional
from typing import Set

from requests.auth import AuthBase


class HTTPBearerAuth(AuthBase):
    """Sends the password as an OAuth2-style bearer token"""

    def __init__(self, password: str) -> None:
        self.password = password

    def __eq__(self, other: object) -> bool:
        return self.password == getattr(other, "password", None)

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __call__(self, r):
        r.headers["Authorization"] = f"Bearer {self.password}"
        return r


def extract_auth_types(header: str) -> Set[str]:
    """
    Takes a WWW-Authenticate header from the server and figures out
    what authentication schemes it offers.

    >>> sorted(extract_auth_types('Basic realm="x", Digest realm="x"'))
    ['basic', 'digest']
    """
    # https://developer.mozilla.org/en-US/docs/Web/HTTP/Headers/WWW-Authenticate#syntax
    return {h.split()[0] for h in header.lower().split(",") if h.strip()}


def select_auth_type(
    auth_types: Iterable[str], has_username: bool, has_password: bool
) -> Optional[str]:
    """
    Digest is preferred over basic when a username is given.  Bearer
    is chosen when there is a password but no username.
    """
    auth_types = set(auth_types)
    if has_username and "digest" in auth_types:
        return "digest"
    if has_username and "basic" in auth_types:
        return "basic"
    if has_password and "bearer" in auth_types:
        return "bearer"
    return None
