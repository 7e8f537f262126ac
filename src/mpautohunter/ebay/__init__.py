from __future__ import annotations

from typing import Any

import httpx


def response_detail(resp: httpx.Response) -> Any:
    """Parsed JSON body of an upstream error response, else its text (None when empty)."""
    try:
        return resp.json()
    except ValueError:
        return resp.text or None
