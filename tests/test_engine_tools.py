"""Tests for the engine MCP tool surface.

Tool functions are captured with a recording stand-in for FastMCP so they can
be called directly; the real server is only used to check registration.
"""

import json
import uuid

import pytest

from contextads.config.runtime import RuntimeSettings
from contextads.domain.advertising import CandidateAd
from contextads.interface.mcp.server import create_server
from contextads.interface.mcp.tools import (
    ALLOWED_AD_KEYS,
    ENGINE_ALLOWED_TOOLS,
    register_engine_tools,
)
from contextads.wiring import build_engine_context

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

SAMPLE_ADS = [
    CandidateAd(
        title="Gaming Laptop Deals",
        snippet="Top gaming laptops on sale",
        link="https://deals.example/laptops",
        bid_value=2.0,
        impression_url="https://ads.example/imp/1",
    ),
    CandidateAd(title="Laptop Bags", snippet="Carry your laptop", bid_value=5.0),
]


class FakeClock:
    def now(self) -> float:
        return 0.0


class FakeAdSource:
    def __init__(self, ads: list[CandidateAd] | None = None):
        self.ads = ads if ads is not None else list(SAMPLE_ADS)
        self.calls: list[dict] = []

    async def fetch(self, keywords, publisher_key=None):
        self.calls.append({"keywords": list(keywords), "publisher_key": publisher_key})
        return list(self.ads)


class FakeBeacon:
    def __init__(self):
        self.fired: list[str | None] = []

    def fire(self, url):
        self.fired.append(url)


class ToolRecorder:
    """Minimal FastMCP stand-in: ``tool()`` records the decorated function."""

    def __init__(self):
        self.tools: dict = {}

    def tool(self):
        def decorator(fn):
            self.tools[fn.__name__] = fn
            return fn

        return decorator


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _build(ads: list[CandidateAd] | None = None):
    context = build_engine_context(
        RuntimeSettings(publisher_key=""),
        ad_source=FakeAdSource(ads),
        beacon=FakeBeacon(),
        clock=FakeClock(),
    )
    recorder = ToolRecorder()
    register_engine_tools(recorder, context)
    return recorder.tools, context


def _get_tool_names(server) -> set[str]:
    """Extract registered tool names from a FastMCP server."""
    return set(server._tool_manager._tools.keys())


# ---------------------------------------------------------------------------
# Tests: registration
# ---------------------------------------------------------------------------

class TestRegistration:
    def test_recorder_sees_all_tools(self):
        tools, _ = _build()
        assert set(tools) == ENGINE_ALLOWED_TOOLS

    def test_server_exposes_exactly_allowed_tools(self):
        _, context = _build()
        server = create_server(context)
        assert _get_tool_names(server) == ENGINE_ALLOWED_TOOLS


# ---------------------------------------------------------------------------
# Tests: selection tools
# ---------------------------------------------------------------------------

class TestSelectionTools:
    @pytest.mark.asyncio
    async def test_ads_select(self):
        tools, _ = _build()
        out = json.loads(await tools["ads_select"]("gaming laptop"))

        assert out["source"] == "network"
        assert out["ad"]["title"] == "Gaming Laptop Deals"
        assert len(out["recommendations"]) == 2
        assert set(out["ad"]) <= ALLOWED_AD_KEYS
        uuid.UUID(out["request_id"])

    @pytest.mark.asyncio
    async def test_ads_select_blank_query(self):
        tools, context = _build()
        out = json.loads(await tools["ads_select"]("   "))
        assert "error" in out
        assert "request_id" in out
        assert context.ad_source.calls == []

    @pytest.mark.asyncio
    async def test_ads_select_no_ads(self):
        tools, _ = _build(ads=[])
        out = json.loads(await tools["ads_select"]("gaming laptop"))
        assert out["ad"] is None
        assert out["source"] == "none"

    @pytest.mark.asyncio
    async def test_ads_lookup_fires_impression(self):
        tools, context = _build()
        out = json.loads(await tools["ads_lookup"]("gaming laptop reviews", publisher_key="pub_9"))
        assert out["ad"]["title"] == "Gaming Laptop Deals"
        assert [r["title"] for r in out["recommendations"]] == ["Laptop Bags"]
        assert context.beacon.fired == ["https://ads.example/imp/1"]
        assert context.ad_source.calls[0]["publisher_key"] == "pub_9"

    @pytest.mark.asyncio
    async def test_ads_for_turn(self):
        tools, _ = _build()
        messages = [{"role": "user", "content": "best price on a gaming laptop"}]
        out = json.loads(await tools["ads_for_turn"](messages, "best price on a gaming laptop"))

        assert out["show_ad"] is True
        assert out["reason"] == "commercial_intent"
        assert out["ad"]["title"] == "Gaming Laptop Deals"
        assert out["commercial_intent"] == pytest.approx(0.7)
        assert "gaming" in out["conversation_keywords"]

    @pytest.mark.asyncio
    async def test_ads_for_turn_throttled(self):
        tools, context = _build()
        messages = [{"role": "user", "content": "tell me about hiking"}]
        out = json.loads(await tools["ads_for_turn"](messages, "tell me about hiking"))
        assert out["show_ad"] is False
        assert out["reason"] == "throttled"
        assert out["ad"] is None
        assert context.ad_source.calls == []

    @pytest.mark.asyncio
    async def test_ads_for_turn_rejects_bad_role(self):
        tools, context = _build()
        out = json.loads(await tools["ads_for_turn"]([{"role": "system", "content": "x"}], "hello"))
        assert "error" in out
        assert context.gate.turn_count == 0


# ---------------------------------------------------------------------------
# Tests: clicks, diagnostics and stats
# ---------------------------------------------------------------------------

class TestClickTools:
    def test_track_and_report(self):
        tools, _ = _build()
        status = json.loads(tools["ads_track_click"]("Acme", "https://acme.example", ad_id="42"))
        assert status["status"] == "success"
        tools["ads_track_click"]("Acme", "https://acme.example")

        report = json.loads(tools["ads_click_analytics"]())
        assert report["total_clicks"] == 2
        assert report["clicks_by_advertiser"] == {"Acme": 2}
        assert report["recent_clicks"][0]["ad_id"] == "42"

    def test_track_click_requires_link(self):
        tools, context = _build()
        out = json.loads(tools["ads_track_click"]("Acme", ""))
        assert "error" in out
        assert len(context.clicks) == 0

    def test_track_click_rejects_out_of_range_relevance(self):
        tools, _ = _build()
        out = json.loads(tools["ads_track_click"]("Acme", "https://acme.example", relevance_score=2.0))
        assert "error" in out


class TestDiagnosticTools:
    def test_analyze_text(self):
        tools, _ = _build()
        out = json.loads(tools["ads_analyze_text"]("best price for a laptop"))
        assert out["commercial_intent"] == pytest.approx(0.7)
        assert "laptop" in out["keywords"]
        assert "conversation_keywords" not in out

    def test_analyze_text_with_conversation(self):
        tools, _ = _build()
        messages = [
            {"role": "user", "content": "camera"},
            {"role": "assistant", "content": "tripod"},
        ]
        out = json.loads(tools["ads_analyze_text"]("cheap lens", messages))
        assert out["conversation_keywords"] == ["tripod", "camera"]
        assert out["conversation_query"] == "tripod camera cheap lens"

    def test_analyze_text_bad_messages(self):
        tools, _ = _build()
        out = json.loads(tools["ads_analyze_text"]("hello", [{"role": "robot"}]))
        assert "error" in out

    @pytest.mark.asyncio
    async def test_cache_stats(self):
        tools, _ = _build()
        await tools["ads_select"]("gaming laptop")
        out = json.loads(tools["ads_cache_stats"]())
        assert out["cache"]["size"] == 1
        assert out["cache"]["recently_shown"] == 1
        assert out["turns"] == 0
        assert out["tools"]["tool_calls"]["ads_select"] >= 1


class TestContextLifecycle:
    @pytest.mark.asyncio
    async def test_aclose_with_fakes(self):
        _, context = _build()
        context.sweeper.start()
        await context.aclose()
        assert not context.sweeper.running
