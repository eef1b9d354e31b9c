"""client/auth.py

Authorization header helpers for Reqform.
"""

import base64

__all__ = ["build_basic_auth_header", "build_bearer_auth_header"]


def build_basic_auth_header(username: str, password: str) -> str:
    """
    Build a Basic Authorization header value.

    Args:
        username: Username for authentication.
        password: Password for authentication.

    Returns:
        ``Basic <base64(username:password)>``.
    """
    token = f"{username}:{password}".encode("utf-8")
    return f"Basic {base64.b64encode(token).decode('ascii')}"


def build_bearer_auth_header(token: str) -> str:
    """Build a Bearer Authorization header value."""
    return f"Bearer {token}"
