"""ChatTurnService: decide and attach an ad for one chat turn."""

from __future__ import annotations

import logging

from ..domain.conversation import (
    DEFAULT_CONVERSATION_WINDOW,
    build_conversation_query,
    extract_conversation_keywords,
)
from ..domain.display_policy import AdDisplayGate
from ..domain.keywords import calculate_commercial_intent
from ..models.requests import MAX_QUERY_LENGTH, AdRequest, ChatTurnRequest
from ..models.responses import TurnResult
from .ad_service import AdSelectionService

_LOGGER = logging.getLogger("contextads.services.chat")


class ChatTurnService:
    """Runs the display gate and, when it opens, the ad selection."""

    def __init__(
        self,
        ad_service: AdSelectionService,
        gate: AdDisplayGate,
        conversation_window: int = DEFAULT_CONVERSATION_WINDOW,
        logger: logging.Logger | None = None,
    ) -> None:
        self._ads = ad_service
        self._gate = gate
        self._window = conversation_window
        self._logger = logger or _LOGGER

    async def process_turn(self, request: ChatTurnRequest) -> TurnResult:
        conversation_keywords = extract_conversation_keywords(request.messages, self._window)
        search_query = build_conversation_query(request.current_message, conversation_keywords)
        intent = calculate_commercial_intent(request.current_message)
        decision = self._gate.evaluate(intent, len(conversation_keywords))

        self._logger.info(
            "turn_analysis",
            extra={
                "turn": decision.turn,
                "conversation_keywords": conversation_keywords,
                "search_query": search_query,
                "commercial_intent": intent,
                "show_ad": decision.show,
                "reason": decision.reason,
            },
        )

        result = TurnResult(
            show_ad=decision.show,
            turn=decision.turn,
            reason=decision.reason,
            conversation_keywords=conversation_keywords,
            search_query=search_query,
            commercial_intent=intent,
        )
        if not decision.show:
            return result

        # One long token (pasted hash, base64) can exceed the request limit.
        selection = await self._ads.select(
            AdRequest(query=search_query[:MAX_QUERY_LENGTH], keywords=conversation_keywords)
        )
        if selection.ad is None:
            return result.model_copy(update={"reason": "no_ads_found"})

        # The winner leads the recommendation list; the client shows it separately.
        recommendations = selection.recommendations[1:] if len(selection.recommendations) > 1 else []
        return result.model_copy(update={"ad": selection.ad, "recommendations": recommendations})
