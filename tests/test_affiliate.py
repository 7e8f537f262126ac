"""Tests for EPN affiliate URL building and redirect resolution."""

import pytest

from mpautohunter.affiliate import AffiliateParams, build_affiliate_url, decode_url, resolve_redirect
from mpautohunter.errors import ValidationError


class TestBuildAffiliateUrl:
    def test_url_without_query(self, affiliate_params):
        url = build_affiliate_url("https://www.ebay.com/itm/123456789", affiliate_params)
        assert url == (
            "https://www.ebay.com/itm/123456789"
            f"?mkevt=1&mkcid=1&campid={affiliate_params.campaign_id}&toolid=10001"
        )
        assert url.count("?") == 1

    def test_url_with_existing_query(self, affiliate_params):
        url = build_affiliate_url("https://x.test/i/1?a=1", affiliate_params)
        assert url.startswith("https://x.test/i/1?a=1&mkevt=1&mkcid=1&campid=")
        assert url.count("?") == 1
        assert url.endswith("&toolid=10001")

    def test_parameter_order_with_custom_id(self, affiliate_params):
        url = build_affiliate_url("https://x.test/i/1", affiliate_params, custom_id="brakes")
        query = url.split("?", 1)[1]
        names = [pair.split("=", 1)[0] for pair in query.split("&")]
        assert names == ["mkevt", "mkcid", "campid", "toolid", "customid"]
        assert query.endswith("customid=brakes")

    def test_values_are_percent_encoded(self):
        params = AffiliateParams(campaign_id="53/38 &x")
        url = build_affiliate_url("https://x.test/i/1", params, custom_id="a b&c=d")
        assert "campid=53%2F38%20%26x" in url
        assert url.endswith("&customid=a%20b%26c%3Dd")

    def test_empty_custom_id_is_ignored(self, affiliate_params):
        url = build_affiliate_url("https://x.test/i/1", affiliate_params, custom_id="")
        assert "customid" not in url

    @pytest.mark.parametrize("bad", ["", "not a url", "/itm/123", "ftp://x.test/file", "https://"])
    def test_malformed_item_url(self, affiliate_params, bad):
        with pytest.raises(ValidationError):
            build_affiliate_url(bad, affiliate_params)

    def test_params_are_immutable(self, affiliate_params):
        with pytest.raises(AttributeError):
            affiliate_params.campaign_id = "other"


class TestResolveRedirect:
    def test_decodes_and_rewrites(self, affiliate_params):
        target = resolve_redirect("https%3A%2F%2Fx.test%2Fi%2F1", affiliate_params)
        assert target == f"https://x.test/i/1?mkevt=1&mkcid=1&campid={affiliate_params.campaign_id}&toolid=10001"

    def test_already_decoded_url_passes_through(self, affiliate_params):
        target = resolve_redirect("https://x.test/i/1?var=2", affiliate_params)
        assert target.startswith("https://x.test/i/1?var=2&mkevt=1")

    def test_never_adds_custom_id(self, affiliate_params):
        assert "customid" not in resolve_redirect("https%3A%2F%2Fx.test%2Fi%2F1", affiliate_params)

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing_url(self, affiliate_params, raw):
        with pytest.raises(ValidationError, match="Missing"):
            resolve_redirect(raw, affiliate_params)

    @pytest.mark.parametrize("raw", ["%", "https%3A%2F%2Fx.test%2", "%zzfoo", "https%3A%2F%2Fx.test%2Fi%FF"])
    def test_undecodable_url(self, affiliate_params, raw):
        with pytest.raises(ValidationError, match="Malformed"):
            resolve_redirect(raw, affiliate_params)

    def test_decoded_value_must_be_a_url(self, affiliate_params):
        with pytest.raises(ValidationError):
            resolve_redirect("javascript%3Aalert(1)", affiliate_params)


def test_decode_url_handles_utf8():
    assert decode_url("https%3A%2F%2Fx.test%2F%E3%81%82") == "https://x.test/あ"


def test_resolve_redirect_decodes_exactly_once(affiliate_params):
    target = resolve_redirect("https%3A%2F%2Fx.test%2Fi%2F1%3Fq%3Da%2526b", affiliate_params)
    assert target.startswith("https://x.test/i/1?q=a%26b&mkevt=1")
