"""Services: ad selection and chat turns; engines in domain."""

from ..domain.display_policy import AdDisplayGate
from ..domain.ranking_engine import RankingEngine
from .ad_service import AdSelectionService
from .chat_service import ChatTurnService

__all__ = [
    "AdDisplayGate",
    "AdSelectionService",
    "ChatTurnService",
    "RankingEngine",
]
