"""Kuhn Poker — minimal poker game.

3 cards, 2 players, 1 card each, no board.
Actions: check (call) or bet 1 chip; at most one bet per hand.
Both players ante 1 chip. The deck uses the three lowest ranks (2, 3, 4)
in place of J, Q, K; only their order matters.
"""

from __future__ import annotations

from poker_core.game.rules import BettingType, GameInfo


def kuhn_game_info(stack: int = 100) -> GameInfo:
    return GameInfo(
        starting_stacks=(stack, stack),
        blinds=(1, 1),
        raise_sizes=(1,),
        betting_type=BettingType.LIMIT,
        num_players=2,
        num_rounds=1,
        max_raises=(1,),
        first_player=(0,),
        num_suits=1,
        num_ranks=3,
        num_hole_cards=1,
        num_board_cards=(0,),
    )
