"""Test fixtures: fake clock, mocked upstream client, affiliate params."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from mpautohunter.affiliate import AffiliateParams


class FakeClock:
    """Callable clock returning epoch seconds, advanced manually."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _json_response(status_code, json_data):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = ""
    resp.json.return_value = json_data
    return resp


@pytest.fixture()
def affiliate_params() -> AffiliateParams:
    return AffiliateParams(campaign_id="5338123456")


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def http_client():
    """Upstream client mock: token exchange succeeds, search returns no items."""
    client = AsyncMock()
    client.post = AsyncMock(return_value=_json_response(
        200, {"access_token": "v^1.1#token", "expires_in": 7200, "token_type": "Application Access Token"},
    ))
    client.get = AsyncMock(return_value=_json_response(200, {"total": 0, "itemSummaries": []}))
    return client
