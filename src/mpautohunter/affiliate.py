"""eBay Partner Network link building.

The query parameters appended here (names, order and values) are what the
EPN click tracker expects, so they must not be reordered or re-encoded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

from .errors import ValidationError

# Fixed EPN protocol constants
MKEVT = "1"   # event: click
MKCID = "1"   # click context: EPN
TOOLID = "10001"

_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class AffiliateParams:
    campaign_id: str
    mkevt: str = MKEVT
    mkcid: str = MKCID
    toolid: str = TOOLID


def _encode(value: str) -> str:
    return quote(value, safe="")


def build_affiliate_url(
    item_url: str,
    params: AffiliateParams,
    custom_id: str | None = None,
) -> str:
    """Append EPN tracking parameters to an item URL.

    Raises:
        ValidationError: item_url is not an absolute http(s) URL.
    """
    parts = urlsplit(item_url or "")
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValidationError(f"Invalid item URL: {item_url!r}")

    sep = "&" if "?" in item_url else "?"
    url = (
        f"{item_url}{sep}"
        f"mkevt={params.mkevt}&mkcid={params.mkcid}"
        f"&campid={_encode(params.campaign_id)}&toolid={params.toolid}"
    )
    if custom_id:
        url += f"&customid={_encode(custom_id)}"
    return url


def decode_url(raw_url: str) -> str:
    """Strictly percent-decode a URL-encoded string."""
    if _BAD_ESCAPE_RE.search(raw_url):
        raise ValidationError("Malformed url parameter")
    try:
        return unquote(raw_url, errors="strict")
    except UnicodeDecodeError as e:
        raise ValidationError("Malformed url parameter") from e


def resolve_redirect(raw_url: str | None, params: AffiliateParams) -> str:
    """Turn a percent-encoded item URL into its affiliate redirect target."""
    if raw_url is None or not raw_url.strip():
        raise ValidationError("Missing url parameter")
    return build_affiliate_url(decode_url(raw_url.strip()), params)
