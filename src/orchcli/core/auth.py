"""Authentication helpers for the orchestrator REST API.

This module centralizes creation of the HTTP session used by every catalog
call and applies small but important normalization rules (such as sanitizing
the API endpoint) to avoid malformed request URLs.
"""

from urllib.parse import urlsplit

import requests

ACCESS_TOKEN_ENV = "MT_GW_TOKEN"
DEFAULT_API_ENDPOINT = "https://api.kind.internal/"
USER_AGENT = "orch-cli"


class AuthError(RuntimeError):
    """Raised when a session cannot be set up (missing token, bad endpoint)."""


def _sanitize_endpoint(endpoint: str | None) -> str:
    """
    Normalize an API endpoint URL.

    - Removes query strings and fragments (e.g. '?o=123')
    - Removes trailing slashes

    Raises AuthError if the value is empty or not an http(s) URL.
    """
    if not endpoint or not endpoint.strip():
        raise AuthError("API endpoint is not set. Use --api-endpoint or ORCH_API_ENDPOINT.")
    endpoint = endpoint.strip().split("?", 1)[0].split("#", 1)[0]
    parts = urlsplit(endpoint)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise AuthError(f"Invalid API endpoint '{endpoint}': expected http(s)://host[:port]/")
    return endpoint.rstrip("/")


def get_session(
    api_endpoint: str | None,
    *,
    token: str | None = None,
    no_auth: bool = False,
) -> tuple[requests.Session, str]:
    """
    Create a configured requests Session and return it with the clean endpoint.

    Unless ``no_auth`` is set, an access token is required; it is sent as a
    bearer token on every request.
    """
    endpoint = _sanitize_endpoint(api_endpoint)
    session = requests.Session()
    session.headers.update({"Accept": "application/json", "User-Agent": USER_AGENT})

    if not no_auth:
        if not token:
            raise AuthError(
                f"Not logged in - no access token present. Set {ACCESS_TOKEN_ENV} "
                "or pass --token (use --noauth to skip authentication)."
            )
        session.headers["Authorization"] = f"Bearer {token}"

    return session, endpoint
