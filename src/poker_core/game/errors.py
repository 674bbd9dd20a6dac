"""Exception hierarchy for the poker rules engine.

Configuration problems and precondition violations are fatal. Action
failures are protocol outcomes the driver is expected to handle, e.g. by
asking for another action; each carries a ``reason`` code.
"""

from __future__ import annotations

import enum


class PokerError(Exception):
    """Base class for every error raised by poker_core."""


class ConfigError(PokerError, ValueError):
    """Malformed or inconsistent ruleset / abstraction configuration."""


class ActionFailure(enum.Enum):
    HAND_FINISHED = "hand_finished"
    ACTION_LIMIT = "action_limit"
    INVALID_ACTION = "invalid_action"


class ActionError(PokerError):
    reason: ActionFailure

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class HandFinishedError(ActionError):
    reason = ActionFailure.HAND_FINISHED


class ActionLimitError(ActionError):
    reason = ActionFailure.ACTION_LIMIT


class InvalidActionError(ActionError):
    reason = ActionFailure.INVALID_ACTION


class PreconditionError(PokerError, RuntimeError):
    """Caller or engine bug: the request makes no sense for this state."""
