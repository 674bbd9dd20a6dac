"""Named rulesets available to the CLI."""

from __future__ import annotations

from collections.abc import Callable

from poker_core.game.rules import BettingType, GameInfo
from poker_core.games.holdem import holdem_game_info
from poker_core.games.kuhn import kuhn_game_info
from poker_core.games.leduc import leduc_game_info

PRESETS: dict[str, Callable[[], GameInfo]] = {
    "kuhn": kuhn_game_info,
    "leduc": leduc_game_info,
    "holdem-nl": holdem_game_info,
    "holdem-limit": lambda: holdem_game_info(betting_type=BettingType.LIMIT),
    "holdem-nl-6max": lambda: holdem_game_info(num_players=6),
}


def get_preset(name: str) -> GameInfo:
    if name not in PRESETS:
        raise ValueError(f"Unknown preset: {name}. Choose from {list(PRESETS)}")
    return PRESETS[name]()
