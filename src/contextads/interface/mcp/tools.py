"""Tool registry for the engine MCP server.

Strict input validation via Pydantic; response allowlists (field-level).
"""

from __future__ import annotations

import json
import time
import uuid
from dataclasses import asdict
from typing import Any

from ...domain.advertising import ConversationTurn
from ...domain.conversation import build_conversation_query, extract_conversation_keywords
from ...domain.keywords import build_search_query, calculate_commercial_intent, extract_keywords
from ...models.requests import AdRequest, ChatTurnRequest, ClickRequest, PublisherAdRequest
from ...wiring import EngineContext
from .observability import log_tool_invocation, metrics_snapshot

# ---------------------------------------------------------------------------
# Response allowlists (field-level)
# ---------------------------------------------------------------------------
ALLOWED_AD_KEYS = frozenset({
    "title",
    "link",
    "snippet",
    "thumbnail",
    "source",
    "bid_value",
    "ad_creative_id",
    "impression_url",
    "click_url",
    "format",
    "relevance_score",
    "combined_score",
    "matching_keywords",
})
ALLOWED_SELECTION_KEYS = frozenset({"ad", "recommendations", "total_ads", "source", "query", "keywords"})
ALLOWED_TURN_KEYS = frozenset({
    "show_ad",
    "turn",
    "reason",
    "conversation_keywords",
    "search_query",
    "commercial_intent",
    "ad",
    "recommendations",
})

ENGINE_ALLOWED_TOOLS = frozenset({
    "ads_for_turn",
    "ads_select",
    "ads_lookup",
    "ads_track_click",
    "ads_click_analytics",
    "ads_analyze_text",
    "ads_cache_stats",
})


def _new_trace_id() -> str:
    return str(uuid.uuid4())


def _shape_ad(ad: dict | None) -> dict | None:
    if ad is None:
        return None
    return {k: v for k, v in ad.items() if k in ALLOWED_AD_KEYS}


def _shape(model: Any, allowed: frozenset[str], trace_id: str) -> dict:
    """Return only allowed fields, with nested ads filtered as well."""
    d = model.model_dump(mode="json")
    out: dict = {k: v for k, v in d.items() if k in allowed}
    if "ad" in out:
        out["ad"] = _shape_ad(out["ad"])
    if "recommendations" in out:
        out["recommendations"] = [_shape_ad(r) for r in out["recommendations"]]
    out["request_id"] = trace_id
    return out


def _error_response(tool: str, trace_id: str, t0: float, error: Exception) -> str:
    latency_ms = (time.monotonic() - t0) * 1000
    log_tool_invocation(tool, trace_id, latency_ms, error=str(error))
    return json.dumps({"error": str(error), "request_id": trace_id})


# ---------------------------------------------------------------------------
# Engine tools
# ---------------------------------------------------------------------------


def register_engine_tools(mcp, context: EngineContext) -> None:
    """Register engine (LLM-host facing) tools bound to ``context``."""

    @mcp.tool()
    async def ads_for_turn(messages: list[dict[str, Any]], current_message: str) -> str:
        """Decide whether to show an ad for this chat turn and, if so, pick one.

        Call once per user message, after or alongside generating the reply.

        Args:
            messages: Conversation so far, oldest first; each item has 'role'
                ('user', 'assistant' or 'ad') and 'content'
            current_message: The latest user message

        Returns:
            JSON with show_ad, reason, conversation_keywords, search_query,
            commercial_intent, ad (or null) and recommendations
        """
        t0 = time.monotonic()
        trace_id = _new_trace_id()
        try:
            request = ChatTurnRequest(messages=messages, current_message=current_message)
        except ValueError as e:
            return _error_response("ads_for_turn", trace_id, t0, e)
        result = await context.chat_service.process_turn(request)
        latency_ms = (time.monotonic() - t0) * 1000
        log_tool_invocation(
            "ads_for_turn",
            trace_id,
            latency_ms,
            extra={"show_ad": result.show_ad, "reason": result.reason},
        )
        return json.dumps(_shape(result, ALLOWED_TURN_KEYS, trace_id), indent=2)

    @mcp.tool()
    async def ads_select(query: str, keywords: list[str] | None = None) -> str:
        """Select the best ad for a search query, reusing a cached pick when allowed.

        Args:
            query: Search query (also the cache key)
            keywords: Keywords for fetching and scoring (default: query words longer than 2 chars)

        Returns:
            JSON with ad (winner or null), recommendations (top 5), total_ads and source
        """
        t0 = time.monotonic()
        trace_id = _new_trace_id()
        try:
            request = AdRequest(query=query, keywords=keywords or [])
        except ValueError as e:
            return _error_response("ads_select", trace_id, t0, e)
        selection = await context.ad_service.select(request)
        latency_ms = (time.monotonic() - t0) * 1000
        log_tool_invocation(
            "ads_select",
            trace_id,
            latency_ms,
            extra={"source": selection.source, "total_ads": selection.total_ads},
        )
        return json.dumps(_shape(selection, ALLOWED_SELECTION_KEYS, trace_id), indent=2)

    @mcp.tool()
    async def ads_lookup(context_text: str, publisher_key: str | None = None) -> str:
        """Look up ads for a publisher page context (no caching, fires the impression).

        Args:
            context_text: Page or conversation context (max 10000 chars)
            publisher_key: Publisher key forwarded to the ad network

        Returns:
            JSON with ad (winner or null) and recommendations (runners-up)
        """
        t0 = time.monotonic()
        trace_id = _new_trace_id()
        try:
            request = PublisherAdRequest(context=context_text, publisher_key=publisher_key)
        except ValueError as e:
            return _error_response("ads_lookup", trace_id, t0, e)
        selection = await context.ad_service.lookup(request)
        latency_ms = (time.monotonic() - t0) * 1000
        log_tool_invocation("ads_lookup", trace_id, latency_ms, extra={"total_ads": selection.total_ads})
        return json.dumps(_shape(selection, ALLOWED_SELECTION_KEYS, trace_id), indent=2)

    @mcp.tool()
    def ads_track_click(
        advertiser: str,
        link: str,
        ad_id: str | None = None,
        bid_value: float | None = None,
        relevance_score: float | None = None,
        session_id: str | None = None,
    ) -> str:
        """Record a click on a displayed ad.

        Args:
            advertiser: Advertiser name (the ad title)
            link: Click-through URL
            ad_id: Ad creative identifier, when known
            bid_value: Bid of the clicked ad
            relevance_score: Relevance score at display time
            session_id: Client session identifier

        Returns:
            JSON status
        """
        t0 = time.monotonic()
        trace_id = _new_trace_id()
        try:
            click = ClickRequest(
                advertiser=advertiser,
                link=link,
                ad_id=ad_id,
                bid_value=bid_value,
                relevance_score=relevance_score,
                session_id=session_id,
            )
        except ValueError as e:
            return _error_response("ads_track_click", trace_id, t0, e)
        context.clicks.record(**click.model_dump())
        latency_ms = (time.monotonic() - t0) * 1000
        log_tool_invocation("ads_track_click", trace_id, latency_ms, extra={"advertiser": advertiser})
        return json.dumps({"status": "success", "message": "Click tracked successfully"})

    @mcp.tool()
    def ads_click_analytics() -> str:
        """Click totals per advertiser and the 20 most recent clicks."""
        report = context.clicks.analytics()
        return json.dumps(
            {
                "total_clicks": report.total_clicks,
                "clicks_by_advertiser": report.clicks_by_advertiser,
                "recent_clicks": [c.model_dump(mode="json") for c in report.recent_clicks],
            },
            indent=2,
        )

    @mcp.tool()
    def ads_analyze_text(text: str, messages: list[dict[str, Any]] | None = None) -> str:
        """Show the keywords, commercial intent and query derived from text (diagnostics).

        Args:
            text: Message to analyse
            messages: Optional conversation, oldest first, for recency-weighted keywords

        Returns:
            JSON with keywords, commercial_intent, search_query and, when
            messages are given, conversation_keywords and conversation_query
        """
        keywords = extract_keywords(text)
        out: dict[str, Any] = {
            "keywords": keywords,
            "commercial_intent": calculate_commercial_intent(text),
            "search_query": build_search_query(keywords),
        }
        if messages:
            try:
                turns = [ConversationTurn.model_validate(m) for m in messages]
            except ValueError as e:
                return json.dumps({"error": str(e)})
            conversation_keywords = extract_conversation_keywords(
                turns, context.settings.conversation_window
            )
            out["conversation_keywords"] = conversation_keywords
            out["conversation_query"] = build_conversation_query(text, conversation_keywords)
        return json.dumps(out, indent=2)

    @mcp.tool()
    def ads_cache_stats() -> str:
        """Ad cache counters, display-gate turn count and tool call metrics."""
        return json.dumps(
            {
                "cache": asdict(context.cache.stats()),
                "turns": context.gate.turn_count,
                "tools": metrics_snapshot(),
            },
            indent=2,
        )
