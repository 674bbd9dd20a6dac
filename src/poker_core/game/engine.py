"""Game engine — deals cards and drives a GameState one action at a time."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass

from poker_core.game.actions import Action
from poker_core.game.card import Card
from poker_core.game.errors import PreconditionError
from poker_core.game.hand_eval import HandEvaluator
from poker_core.game.rules import GameInfo
from poker_core.game.state import GameState

logger = logging.getLogger(__name__)

Policy = Callable[[GameState, list[Action]], Action]


@dataclass(frozen=True)
class HandRecord:
    state: GameState
    hole_cards: list[list[Card]]
    board: list[Card]
    payouts: list[int]

    @property
    def chip_leak(self) -> int:
        """Chips lost to the split-remainder rounding rule (0 when exact)."""
        return -sum(self.payouts)


class GameEngine:
    def __init__(
        self,
        info: GameInfo,
        seed: int | None = None,
        rng: random.Random | None = None,
        evaluator: HandEvaluator | None = None,
    ) -> None:
        self.info = info
        self.rng = rng if rng is not None else random.Random(seed)
        self.evaluator = evaluator
        self.state: GameState | None = None
        self.hole_cards: list[list[Card]] = []
        self.board: list[Card] = []
        self.history: list[GameState] = []
        self._next_hand_id = 0

    def new_hand(self, hand_id: int | None = None) -> GameState:
        """Start a new hand: deal every card up front and post blinds."""
        if hand_id is None:
            hand_id = self._next_hand_id
        self._next_hand_id = hand_id + 1

        self.hole_cards, self.board = self.info.deal_hole_cards_and_board_cards(self.rng)
        self.state = GameState.new(self.info, hand_id)
        self.history = [self.state]
        logger.debug(
            "Hand %d dealt: %s | %s",
            hand_id,
            " ".join("".join(str(c) for c in hole) for hole in self.hole_cards),
            "".join(str(c) for c in self.board),
        )
        return self.state

    def _current(self, state: GameState | None) -> GameState:
        state = state or self.state
        if state is None:
            raise PreconditionError("No active hand")
        return state

    def get_legal_actions(self, state: GameState | None = None) -> list[Action]:
        """Return list of legal actions for the current player."""
        return self._current(state).legal_actions(self.info)

    def apply_action(self, action: Action, state: GameState | None = None) -> GameState:
        """Apply an action and return the resulting game state."""
        state = self._current(state)
        seat = state.current_player()
        new_state = state.apply_action(self.info, action)
        logger.debug("Hand %d: seat %d %s -> %s", state.hand_id, seat, action, new_state.betting_string())
        self.state = new_state
        self.history.append(new_state)
        return new_state

    def visible_board(self, state: GameState | None = None) -> list[Card]:
        state = self._current(state)
        return self.board[: self.info.total_board_cards(state.round)]

    def payouts(self, state: GameState | None = None) -> list[int]:
        state = self._current(state)
        return state.get_payouts(self.info, self.visible_board(state), self.hole_cards, self.evaluator)

    def play_hand(self, policy: Policy, hand_id: int | None = None) -> HandRecord:
        state = self.new_hand(hand_id)
        while not state.is_finished():
            state = self.apply_action(policy(state, self.get_legal_actions(state)), state)
        payouts = self.payouts(state)
        logger.debug("Hand %d finished %s payouts=%s", state.hand_id, state.betting_string(), payouts)
        return HandRecord(state=state, hole_cards=self.hole_cards, board=self.visible_board(state), payouts=payouts)


def random_policy(rng: random.Random) -> Policy:
    """Uniformly random choice among the legal actions."""

    def choose(state: GameState, actions: list[Action]) -> Action:
        return rng.choice(actions)

    return choose


def passive_policy(state: GameState, actions: list[Action]) -> Action:
    """Check or call every decision."""
    return Action.call()
