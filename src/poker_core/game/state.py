"""Per-hand game state: betting state machine and payout computation.

A ``GameState`` is a frozen value. ``apply_action`` returns a new state and
never touches the receiver, so states can be kept as nodes of a decision
tree, shared between threads or used as dictionary keys.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any

from poker_core.game.actions import Action, ActionType
from poker_core.game.card import Card
from poker_core.game.errors import (
    ActionLimitError,
    HandFinishedError,
    InvalidActionError,
    PreconditionError,
)
from poker_core.game.hand_eval import HandEvaluator, RankClass, rank_hand
from poker_core.game.rules import MAX_NUM_ACTIONS, GameInfo

logger = logging.getLogger(__name__)

# (action, seat of the acting player)
ActionRecord = tuple[Action, int]


@dataclass(frozen=True)
class GameState:
    hand_id: int
    # largest total commitment of any player so far, i.e. the amount to call
    max_spent: int
    # smallest raise-to amount in no limit games
    min_no_limit_raise_to: int
    # total chips committed by each player over the whole hand
    spent: tuple[int, ...]
    stack_player: tuple[int, ...]
    # sum_round_spent[r][p]: chips committed by player p during round r
    sum_round_spent: tuple[tuple[int, ...], ...]
    # action_log[r]: actions of round r in order
    action_log: tuple[tuple[ActionRecord, ...], ...]
    active_player: int
    round: int
    finished: bool
    players_folded: tuple[bool, ...]

    @classmethod
    def new(cls, info: GameInfo, hand_id: int = 0) -> GameState:
        """Start a hand: post blinds and seat the first player to act."""
        n = info.num_players
        max_spent = info.max_blind
        if not info.is_no_limit:
            min_raise_to = 0
        elif max_spent > 0:
            min_raise_to = max_spent * 2
        else:
            min_raise_to = 1

        empty_round = (0,) * n
        state = cls(
            hand_id=hand_id,
            max_spent=max_spent,
            min_no_limit_raise_to=min_raise_to,
            spent=tuple(info.blinds),
            stack_player=tuple(info.starting_stacks),
            sum_round_spent=(tuple(info.blinds),) + (empty_round,) * (info.num_rounds - 1),
            action_log=((),) * info.num_rounds,
            active_player=info.first_player[0],
            round=0,
            finished=False,
            players_folded=(False,) * n,
        )

        # A blind can put a player all-in before anyone acts.
        first = state._seat_from(info.first_player[0])
        if first is None:
            return replace(state, finished=True, round=info.num_rounds - 1)
        return replace(state, active_player=first)

    # -- queries ---------------------------------------------------------

    def pot_total(self, info: GameInfo) -> int:
        return sum(self.spent[: info.num_players])

    def player_stack(self, player: int) -> int:
        return self.stack_player[player]

    def player_spent(self, player: int) -> int:
        return self.spent[player]

    def current_round(self) -> int:
        return self.round

    def current_player(self) -> int:
        if self.finished:
            raise PreconditionError("state is finished so there is no active player")
        return self.active_player

    def is_finished(self) -> bool:
        return self.finished

    def has_folded(self, player: int) -> bool:
        return self.players_folded[player]

    def is_all_in(self, player: int) -> bool:
        return self.spent[player] >= self.stack_player[player]

    def can_act(self, player: int) -> bool:
        return not self.players_folded[player] and not self.is_all_in(player)

    def num_active_players(self, info: GameInfo) -> int:
        """Players who can still take actions (not folded, not all-in)."""
        return sum(1 for p in range(info.num_players) if self.can_act(p))

    def num_folded(self, info: GameInfo) -> int:
        return sum(1 for p in range(info.num_players) if self.players_folded[p])

    def num_called(self, info: GameInfo) -> int:
        """Players with chips behind who have matched the last raise this round."""
        count = 0
        for action, player in reversed(self.action_log[self.round]):
            if action.type == ActionType.FOLD:
                continue
            if not self.is_all_in(player):
                count += 1
            if action.is_raise:
                break
        return count

    def num_actions(self) -> int:
        return len(self.action_log[self.round])

    def num_raises(self) -> int:
        return sum(1 for action, _ in self.action_log[self.round] if action.is_raise)

    def _seat_from(self, start: int) -> int | None:
        """First seat at or after ``start`` that can still act."""
        n = len(self.spent)
        for offset in range(n):
            p = (start + offset) % n
            if self.can_act(p):
                return p
        return None

    def _next_player(self) -> int:
        if self.finished:
            raise PreconditionError("state is finished so there is no active player")
        p = self._seat_from(self.active_player + 1)
        return self.active_player if p is None else p

    # -- legality --------------------------------------------------------

    def raise_range(self, info: GameInfo) -> tuple[int, int]:
        """Inclusive (min, max) raise-to amounts for the active player.

        ``(0, 0)`` means no raise is possible.
        """
        if self.finished:
            return 0, 0
        if self.num_raises() >= info.max_raises[self.round]:
            return 0, 0
        if self.num_actions() + info.num_players > MAX_NUM_ACTIONS:
            logger.warning(
                "Making raise invalid since possible actions %d > MAX_NUM_ACTIONS",
                self.num_actions() + info.num_players,
            )
            return 0, 0
        if self.num_active_players(info) <= 1:
            return 0, 0
        if not info.is_no_limit:
            logger.warning("raise_range called with limit betting type")
            return 0, 0

        stack = self.stack_player[self.active_player]
        min_raise = self.min_no_limit_raise_to
        if stack < min_raise:
            if self.max_spent >= stack:
                return 0, 0
            # short stack may still shove for less than a full raise
            min_raise = stack
        return min_raise, stack

    def is_valid_action(self, info: GameInfo, action: Action) -> bool:
        if self.finished:
            return False

        player = self.active_player
        match action.type:
            case ActionType.FOLD:
                # an all-in player cannot fold
                return self.spent[player] != self.stack_player[player]
            case ActionType.CALL:
                return True
            case ActionType.RAISE:
                if self.num_raises() >= info.max_raises[self.round]:
                    return False
                if not info.is_no_limit:
                    return (
                        action.amount == info.raise_sizes[self.round]
                        and self.stack_player[player] > self.max_spent
                    )
                min_raise, max_raise = self.raise_range(info)
                return max_raise > 0 and min_raise <= action.amount <= max_raise
        return False

    def legal_actions(self, info: GameInfo) -> list[Action]:
        """Fold/call when legal plus the boundary raise sizes."""
        if self.finished:
            return []
        actions = [a for a in (Action.fold(), Action.call()) if self.is_valid_action(info, a)]
        if info.is_no_limit:
            min_raise, max_raise = self.raise_range(info)
            if max_raise > 0:
                actions.append(Action.raise_to(min_raise))
                if max_raise != min_raise:
                    actions.append(Action.raise_to(max_raise))
        else:
            limit_raise = Action.raise_to(info.raise_sizes[self.round])
            if self.is_valid_action(info, limit_raise):
                actions.append(limit_raise)
        return actions

    # -- transition ------------------------------------------------------

    def apply_action(self, info: GameInfo, action: Action) -> GameState:
        """Return the state after the active player takes ``action``.

        Raises a subclass of ``ActionError`` if the action cannot be applied.
        """
        if self.finished:
            raise HandFinishedError("cannot apply action to finished state")
        if self.num_actions() >= MAX_NUM_ACTIONS:
            raise ActionLimitError("cannot apply action to state: already at max actions for this round")
        if not self.is_valid_action(info, action):
            raise InvalidActionError(f"cannot apply an invalid action: {action}")

        player = self.active_player
        rnd = self.round
        max_spent = self.max_spent
        min_raise_to = self.min_no_limit_raise_to
        spent = list(self.spent)
        folded = list(self.players_folded)

        match action.type:
            case ActionType.FOLD:
                folded[player] = True
            case ActionType.CALL:
                spent[player] = min(self.stack_player[player], max_spent)
            case ActionType.RAISE:
                if info.is_no_limit:
                    if action.amount * 2 - max_spent > min_raise_to:
                        min_raise_to = action.amount * 2 - max_spent
                    max_spent = action.amount
                else:
                    max_spent = min(max_spent + info.raise_sizes[rnd], self.stack_player[player])
                spent[player] = max_spent

        round_spent = [list(row) for row in self.sum_round_spent]
        earlier_rounds = sum(row[player] for row in self.sum_round_spent[:rnd])
        round_spent[rnd][player] = spent[player] - earlier_rounds

        log = list(self.action_log)
        log[rnd] = log[rnd] + ((action, player),)

        state = replace(
            self,
            max_spent=max_spent,
            min_no_limit_raise_to=min_raise_to,
            spent=tuple(spent),
            sum_round_spent=tuple(tuple(row) for row in round_spent),
            action_log=tuple(log),
            players_folded=tuple(folded),
            active_player=self._next_player(),
        )

        if state.num_folded(info) + 1 >= info.num_players:
            return replace(state, finished=True)

        num_active = state.num_active_players(info)
        if state.num_called(info) < num_active:
            return state

        if num_active <= 1:
            # nobody left to bet against: run out the board
            return replace(state, finished=True, round=info.num_rounds - 1)
        if rnd + 1 >= info.num_rounds:
            return replace(state, finished=True)

        next_round = rnd + 1
        state = replace(
            state,
            round=next_round,
            min_no_limit_raise_to=max(1, info.max_blind) + state.max_spent,
        )
        first = state._seat_from(info.first_player[next_round])
        logger.debug("Hand %s advancing to round %d, seat %s first", self.hand_id, next_round, first)
        return replace(state, active_player=first)

    # -- payout ----------------------------------------------------------

    def get_payout(
        self,
        info: GameInfo,
        board_cards: Sequence[Card],
        hole_cards: Sequence[Sequence[Card]],
        player: int,
        evaluator: HandEvaluator | None = None,
    ) -> int:
        """Net chips won (positive) or lost (negative) by ``player``.

        Side pots are resolved layer by layer: each distinct commitment level
        closes a layer that the best non-folded hands among its contributors
        split. Chips committed by folded players above every live player's
        commitment go to the winners of the highest contested layer. The
        integer remainder of a split is dropped, so payouts of a hand only
        sum to zero when every split divides evenly.
        """
        if self.players_folded[player]:
            return -self.spent[player]

        if not self.finished:
            raise PreconditionError("cannot calculate payout when the hand is not over and the player has not folded")

        if self.num_folded(info) + 1 == info.num_players:
            return sum(s for p, s in enumerate(self.spent) if p != player)

        if self.spent[player] == 0:
            return 0

        remaining: list[int] = []
        ranks: list[RankClass | None] = []
        player_idx = -1
        for p in range(info.num_players):
            if self.spent[p] == 0:
                continue
            if self.players_folded[p]:
                ranks.append(None)
            else:
                if p == player:
                    player_idx = len(remaining)
                ranks.append(rank_hand([*hole_cards[p], *board_cards], evaluator))
            remaining.append(self.spent[p])

        if len(remaining) < 2:
            raise PreconditionError("side pot resolution needs at least two contributing players")
        return _resolve_side_pots(remaining, ranks)[player_idx]

    def get_payouts(
        self,
        info: GameInfo,
        board_cards: Sequence[Card],
        hole_cards: Sequence[Sequence[Card]],
        evaluator: HandEvaluator | None = None,
    ) -> list[int]:
        return [
            self.get_payout(info, board_cards, hole_cards, p, evaluator)
            for p in range(info.num_players)
        ]

    # -- presentation / persistence ---------------------------------------

    def betting_string(self) -> str:
        """ACPC style betting history, e.g. 'cc/r10f'."""
        rounds = []
        for rnd in range(self.round + 1):
            tokens = []
            for action, _ in self.action_log[rnd]:
                if action.is_raise:
                    tokens.append(f"r{action.amount}")
                else:
                    tokens.append(action.type.label[0])
            rounds.append("".join(tokens))
        return "/".join(rounds)

    def to_dict(self) -> dict[str, Any]:
        return {
            "hand_id": self.hand_id,
            "max_spent": self.max_spent,
            "min_no_limit_raise_to": self.min_no_limit_raise_to,
            "spent": list(self.spent),
            "stack_player": list(self.stack_player),
            "sum_round_spent": [list(row) for row in self.sum_round_spent],
            "action_log": [[[str(a), p] for a, p in row] for row in self.action_log],
            "active_player": self.active_player,
            "round": self.round,
            "finished": self.finished,
            "players_folded": list(self.players_folded),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        return cls(
            hand_id=data["hand_id"],
            max_spent=data["max_spent"],
            min_no_limit_raise_to=data["min_no_limit_raise_to"],
            spent=tuple(data["spent"]),
            stack_player=tuple(data["stack_player"]),
            sum_round_spent=tuple(tuple(row) for row in data["sum_round_spent"]),
            action_log=tuple(
                tuple((Action.from_str(a), p) for a, p in row) for row in data["action_log"]
            ),
            active_player=data["active_player"],
            round=data["round"],
            finished=data["finished"],
            players_folded=tuple(data["players_folded"]),
        )


def _resolve_side_pots(commitments: list[int], ranks: list[RankClass | None]) -> list[int]:
    """Net result of every contributor over successive pot layers.

    ``ranks`` is None for folded players: they fund layers but never win.
    """
    won = [0] * len(commitments)
    level = 0
    top_winners: list[int] = []
    for top in sorted(set(commitments)):
        contributors = [i for i, c in enumerate(commitments) if c >= top]
        live = [i for i in contributors if ranks[i] is not None]
        if not live:
            break
        win_rank = max(ranks[i] for i in live)
        top_winners = [i for i in live if ranks[i] == win_rank]
        share = (top - level) * len(contributors) // len(top_winners)
        for i in top_winners:
            won[i] += share
        level = top

    if not top_winners:
        raise PreconditionError("side pot layer has no eligible winner")

    # only folded players reached past the last contested layer
    uncontested = sum(c - level for c in commitments if c > level)
    for i in top_winners:
        won[i] += uncontested // len(top_winners)

    return [w - c for w, c in zip(won, commitments)]
