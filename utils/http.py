# -*- coding: utf-8 -*-
"""HTTP session helpers shared by the RPC transport."""
from __future__ import annotations

from typing import Any, Dict, Optional

import requests

DEFAULT_HEADERS = {
    "User-Agent": "Katana-CLI/1.0",
    "Content-Type": "application/json",
}


def build_session(headers: Optional[Dict[str, str]] = None) -> requests.Session:
    """Return a ``requests.Session`` carrying the default headers (plus ``headers``)."""
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    if headers:
        session.headers.update(headers)
    return session


def request_kwargs(timeout: float) -> Dict[str, Any]:
    """
    Per-request keyword arguments handed to the web3 HTTP provider.

    web3 sends its own headers per request unless ``headers`` is given here,
    and per-request headers win over the session's.
    """
    return {"timeout": max(0.1, float(timeout)), "headers": dict(DEFAULT_HEADERS)}
