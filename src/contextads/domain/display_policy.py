"""Per-turn gate deciding whether an ad is surfaced."""

from __future__ import annotations

import threading
from dataclasses import dataclass

DEFAULT_AD_FREQUENCY = 3
DEFAULT_INTENT_THRESHOLD = 0.3


@dataclass(frozen=True)
class DisplayDecision:
    """Decision returned by the display gate."""

    show: bool
    turn: int
    reason: str


class AdDisplayGate:
    """Cadence gate with a commercial-intent override.

    Every call counts as one chat turn. An ad is shown on every
    ``frequency``-th turn, or whenever intent exceeds ``intent_threshold``,
    unless there are no keywords to target.
    """

    def __init__(
        self,
        frequency: int = DEFAULT_AD_FREQUENCY,
        intent_threshold: float = DEFAULT_INTENT_THRESHOLD,
    ) -> None:
        if frequency < 1:
            raise ValueError(f"frequency must be >= 1, got {frequency}")
        self._frequency = frequency
        self._threshold = intent_threshold
        self._turns = 0
        self._lock = threading.Lock()

    @property
    def turn_count(self) -> int:
        return self._turns

    def evaluate(self, commercial_intent: float, keyword_count: int) -> DisplayDecision:
        with self._lock:
            self._turns += 1
            turn = self._turns

        if turn % self._frequency == 0:
            reason = "cadence"
        elif commercial_intent > self._threshold:
            reason = "commercial_intent"
        else:
            return DisplayDecision(show=False, turn=turn, reason="throttled")

        if keyword_count == 0:
            return DisplayDecision(show=False, turn=turn, reason="no_keywords")
        return DisplayDecision(show=True, turn=turn, reason=reason)

    def reset(self) -> None:
        with self._lock:
            self._turns = 0
