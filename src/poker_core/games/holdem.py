"""Texas Hold'em rulesets, limit and no-limit, 2 to 10 players."""

from __future__ import annotations

from poker_core.game.rules import BettingType, GameInfo

MAX_HOLDEM_PLAYERS = 10
# no-limit games are bounded by stacks and the per-round action log instead
NO_LIMIT_MAX_RAISES = 255
LIMIT_MAX_RAISES = (3, 4, 4, 4)


def holdem_game_info(
    num_players: int = 2,
    stack: int = 200,
    small_blind: int = 1,
    big_blind: int = 2,
    betting_type: BettingType = BettingType.NO_LIMIT,
) -> GameInfo:
    """Seat 0 posts the small blind, seat 1 the big blind.

    Heads-up the small blind acts first preflop and the big blind first
    afterwards. With more players the seat after the big blind opens
    preflop and the small blind opens every later round.
    """
    if not 2 <= num_players <= MAX_HOLDEM_PLAYERS:
        raise ValueError(f"num_players must be in [2, {MAX_HOLDEM_PLAYERS}], got {num_players}")

    blinds = [0] * num_players
    blinds[0] = small_blind
    blinds[1] = big_blind

    if num_players == 2:
        first_player = (0, 1, 1, 1)
    else:
        first_player = (2, 0, 0, 0)

    if betting_type == BettingType.LIMIT:
        raise_sizes = (big_blind, big_blind, big_blind * 2, big_blind * 2)
        max_raises = LIMIT_MAX_RAISES
    else:
        raise_sizes = (0, 0, 0, 0)
        max_raises = (NO_LIMIT_MAX_RAISES,) * 4

    return GameInfo(
        starting_stacks=(stack,) * num_players,
        blinds=tuple(blinds),
        raise_sizes=raise_sizes,
        betting_type=betting_type,
        num_players=num_players,
        num_rounds=4,
        max_raises=max_raises,
        first_player=first_player,
        num_suits=4,
        num_ranks=13,
        num_hole_cards=2,
        num_board_cards=(0, 3, 1, 1),
    )
