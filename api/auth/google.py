"""
Google ID token verification.

`google.oauth2.id_token` fetches Google's signing certs over HTTP with the
blocking `requests` transport, so verification runs in the threadpool.
"""

from __future__ import annotations

from typing import Any

from fastapi.concurrency import run_in_threadpool
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token


class GoogleTokenError(RuntimeError):
    pass


def _verify(token: str, client_id: str) -> dict[str, Any]:
    return google_id_token.verify_oauth2_token(token, google_requests.Request(), client_id)


async def verify_id_token(token: str, *, client_id: str) -> dict[str, Any]:
    """
    Verify signature, expiry and audience; return the token claims.
    """
    if not client_id:
        raise GoogleTokenError("GOOGLE_CLIENT_ID is not configured.")

    try:
        id_info = await run_in_threadpool(_verify, token, client_id)
    except Exception as exc:
        # ValueError for bad tokens, TransportError for network failures.
        raise GoogleTokenError(str(exc) or type(exc).__name__) from exc

    if not str(id_info.get("sub") or "").strip():
        raise GoogleTokenError("Token has no subject.")
    if not str(id_info.get("email") or "").strip():
        raise GoogleTokenError("Token has no email.")
    # The admin allow-list matches on email, so it must be Google-verified.
    if id_info.get("email_verified") is False:
        raise GoogleTokenError("Email is not verified.")
    return id_info
