"""Leduc Hold'em — small limit poker game.

6 cards: two suits of three ranks.
2 players, 1 hole card each, 1 community card revealed in round 2.
Bet sizes: 2 chips first round, 4 chips second round.
Max 2 raises per round. Each player antes 1 chip.
Pair > high card. Higher pair/card wins ties.
"""

from __future__ import annotations

from poker_core.game.rules import BettingType, GameInfo


def leduc_game_info(stack: int = 100) -> GameInfo:
    return GameInfo(
        starting_stacks=(stack, stack),
        blinds=(1, 1),
        raise_sizes=(2, 4),
        betting_type=BettingType.LIMIT,
        num_players=2,
        num_rounds=2,
        max_raises=(2, 2),
        first_player=(0, 0),
        num_suits=2,
        num_ranks=3,
        num_hole_cards=1,
        num_board_cards=(0, 1),
    )
