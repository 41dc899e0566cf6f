"""Turn-type classifiers for logged API requests.

A request either starts a new user turn or continues a tool loop. The payload
log carries no explicit flag for this, so the default classifier infers it
from the shape of the conversation's last message. A log format that records
the flag directly can ship its own ``TurnClassifier`` subclass.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from backend.models import CONTINUATION, NEW_TURN


class TurnClassifier(ABC):
    """Base class for request turn-type classifiers."""

    @abstractmethod
    def classify(self, messages: list[dict[str, Any]] | None) -> str:
        """Return ``new_turn`` or ``continuation`` for a request's message list."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Classifier identifier."""


class LastMessageTurnClassifier(TurnClassifier):
    """Classify by the last message: a trailing ``tool_result`` block means a tool loop."""

    @property
    def name(self) -> str:
        return "last_message"

    def classify(self, messages: list[dict[str, Any]] | None) -> str:
        if not isinstance(messages, list) or not messages:
            return NEW_TURN

        last = messages[-1]
        if not isinstance(last, dict) or last.get("role") != "user":
            return NEW_TURN

        content = last.get("content")
        if isinstance(content, list) and content:
            last_block = content[-1]
            if isinstance(last_block, dict) and last_block.get("type") == "tool_result":
                return CONTINUATION
        return NEW_TURN


default_turn_classifier = LastMessageTurnClassifier()
