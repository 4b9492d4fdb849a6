"""Tests for the Vivos ad network adapter using httpx.MockTransport."""

import httpx
import pytest

from contextads.adapters.vivos_ad_source import VivosAdSource
from contextads.exceptions import AdSourceError

BASE_URL = "https://ads.example.com/api/ads"


def _source(handler, publisher_key: str = "pub_default") -> tuple[VivosAdSource, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return VivosAdSource(BASE_URL, publisher_key=publisher_key, client=client), client


def _json_handler(payload, seen: list | None = None, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=payload)

    return handler


# ---------------------------------------------------------------------------
# Tests: request shape
# ---------------------------------------------------------------------------

class TestRequest:
    @pytest.mark.asyncio
    async def test_keywords_and_default_publisher_key(self):
        seen: list[httpx.Request] = []
        source, _ = _source(_json_handler({"ads": []}, seen))
        await source.fetch(["gaming", "laptop"])

        request = seen[0]
        assert request.method == "GET"
        assert str(request.url).startswith(BASE_URL)
        assert request.url.params["keywords"] == "gaming laptop"
        assert request.url.params["publisher_key"] == "pub_default"

    @pytest.mark.asyncio
    async def test_publisher_key_override(self):
        seen: list[httpx.Request] = []
        source, _ = _source(_json_handler({"ads": []}, seen))
        await source.fetch(["shoes"], publisher_key="pub_other")
        assert seen[0].url.params["publisher_key"] == "pub_other"

    @pytest.mark.asyncio
    async def test_no_publisher_key_configured(self):
        seen: list[httpx.Request] = []
        source, _ = _source(_json_handler({"ads": []}, seen), publisher_key="")
        await source.fetch(["shoes"])
        assert "publisher_key" not in seen[0].url.params


# ---------------------------------------------------------------------------
# Tests: response mapping
# ---------------------------------------------------------------------------

class TestMapping:
    @pytest.mark.asyncio
    async def test_full_record(self):
        payload = {
            "ads": [
                {
                    "id": 42,
                    "title": "Acme Laptops",
                    "message": "Fast laptops for less",
                    "target_url": "https://acme.example",
                    "image_url": "https://acme.example/img.png",
                    "cpc_bid": 2.5,
                    "impression_url": "https://ads.example.com/imp/42",
                    "click_url": "https://ads.example.com/click/42",
                    "format": "banner",
                }
            ]
        }
        source, _ = _source(_json_handler(payload))
        ads = await source.fetch(["laptop"])

        assert len(ads) == 1
        ad = ads[0]
        assert ad.title == "Acme Laptops"
        assert ad.snippet == "Fast laptops for less"
        assert ad.link == "https://acme.example"
        assert ad.thumbnail == "https://acme.example/img.png"
        assert ad.source == "Acme Laptops"
        assert ad.bid_value == 2.5
        assert ad.ad_creative_id == "42"
        assert ad.impression_url == "https://ads.example.com/imp/42"
        assert ad.click_url == "https://ads.example.com/click/42"
        assert ad.format == "banner"

    @pytest.mark.asyncio
    async def test_defaults_for_empty_record(self):
        source, _ = _source(_json_handler({"ads": [{}]}))
        ad = (await source.fetch(["laptop"]))[0]
        assert ad.title == "Sponsored Ad"
        assert ad.link == "#"
        assert ad.snippet == "Click to learn more"
        assert ad.source == "Sponsored"
        assert ad.bid_value == 0.0
        assert ad.ad_creative_id is None
        assert ad.impression_url is None

    @pytest.mark.asyncio
    async def test_snippet_falls_back_to_title(self):
        source, _ = _source(_json_handler({"ads": [{"title": "Acme"}]}))
        ad = (await source.fetch(["acme"]))[0]
        assert ad.snippet == "Acme"

    @pytest.mark.asyncio
    async def test_string_bid_is_parsed(self):
        source, _ = _source(_json_handler({"ads": [{"title": "Acme", "cpc_bid": "1.75"}]}))
        ad = (await source.fetch(["acme"]))[0]
        assert ad.bid_value == 1.75

    @pytest.mark.asyncio
    async def test_missing_ads_key(self):
        source, _ = _source(_json_handler({"status": "ok"}))
        assert await source.fetch(["laptop"]) == []

    @pytest.mark.asyncio
    async def test_non_object_body(self):
        source, _ = _source(_json_handler(["unexpected"]))
        assert await source.fetch(["laptop"]) == []

    @pytest.mark.asyncio
    async def test_malformed_items_skipped(self):
        payload = {
            "ads": [
                {"title": "Good"},
                "junk",
                {"title": "Negative", "cpc_bid": -1},
                {"title": "Garbled", "cpc_bid": "abc"},
            ]
        }
        source, _ = _source(_json_handler(payload))
        ads = await source.fetch(["laptop"])
        assert [ad.title for ad in ads] == ["Good"]


# ---------------------------------------------------------------------------
# Tests: failures
# ---------------------------------------------------------------------------

class TestFailures:
    @pytest.mark.asyncio
    async def test_http_error_status(self):
        source, _ = _source(_json_handler({"error": "boom"}, status=500))
        with pytest.raises(AdSourceError) as exc_info:
            await source.fetch(["laptop"])
        assert exc_info.value.status_code == 500
        assert "status 500" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        source, _ = _source(handler)
        with pytest.raises(AdSourceError) as exc_info:
            await source.fetch(["laptop"])
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        source, _ = _source(lambda request: httpx.Response(200, content=b"<html>nope</html>"))
        with pytest.raises(AdSourceError):
            await source.fetch(["laptop"])


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_close_leaves_injected_client_open(self):
        source, client = _source(_json_handler({"ads": []}))
        await source.close()
        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_close_without_client(self):
        source = VivosAdSource(BASE_URL)
        await source.close()
