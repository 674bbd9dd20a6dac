"""Game rules: the immutable ruleset shared by every hand."""

from __future__ import annotations

import enum
import json
import logging
import random
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Iterator

from poker_core.game.card import NUM_RANKS, NUM_SUITS, Card, iter_deck
from poker_core.game.deck import Deck
from poker_core.game.errors import ConfigError

logger = logging.getLogger(__name__)

MAX_PLAYERS = 22
MAX_ROUNDS = 4
MAX_NUM_ACTIONS = 32
MAX_BOARD_CARDS = 7
MAX_HOLE_CARDS = 5


class BettingType(enum.Enum):
    LIMIT = "Limit"
    NO_LIMIT = "NoLimit"


_PER_PLAYER = ("starting_stacks", "blinds")
_PER_ROUND = ("raise_sizes", "max_raises", "first_player", "num_board_cards")
_SCALARS = ("num_players", "num_rounds", "num_suits", "num_ranks", "num_hole_cards")


@dataclass(frozen=True)
class GameInfo:
    """Rules and parameters of a poker game.

    Per-player sequences have ``num_players`` entries, per-round sequences
    have ``num_rounds`` entries. Any inconsistency raises ``ConfigError``
    at construction time.
    """

    starting_stacks: tuple[int, ...]
    blinds: tuple[int, ...]
    # fixed raise size per round, limit games only
    raise_sizes: tuple[int, ...]
    betting_type: BettingType
    num_players: int
    num_rounds: int
    max_raises: tuple[int, ...]
    # first player to act in each round
    first_player: tuple[int, ...]
    num_suits: int
    num_ranks: int
    num_hole_cards: int
    # board cards revealed at the start of each round
    num_board_cards: tuple[int, ...]

    def __post_init__(self) -> None:
        for name in _PER_PLAYER + _PER_ROUND:
            object.__setattr__(self, name, tuple(getattr(self, name)))
        if not isinstance(self.betting_type, BettingType):
            raise ConfigError(f"betting_type must be a BettingType, got {self.betting_type!r}")
        self._validate()

    def _validate(self) -> None:
        for name in _SCALARS:
            _check_int(name, getattr(self, name))
        for name in _PER_PLAYER + _PER_ROUND:
            for value in getattr(self, name):
                _check_int(name, value)

        if not 2 <= self.num_players <= MAX_PLAYERS:
            raise ConfigError(f"num_players must be in [2, {MAX_PLAYERS}], got {self.num_players}")
        if not 1 <= self.num_rounds <= MAX_ROUNDS:
            raise ConfigError(f"num_rounds must be in [1, {MAX_ROUNDS}], got {self.num_rounds}")
        for name in _PER_PLAYER:
            if len(getattr(self, name)) != self.num_players:
                raise ConfigError(
                    f"{name} has {len(getattr(self, name))} entries, expected num_players={self.num_players}"
                )
        for name in _PER_ROUND:
            if len(getattr(self, name)) != self.num_rounds:
                raise ConfigError(
                    f"{name} has {len(getattr(self, name))} entries, expected num_rounds={self.num_rounds}"
                )

        if not 1 <= self.num_suits <= NUM_SUITS:
            raise ConfigError(f"num_suits must be in [1, {NUM_SUITS}], got {self.num_suits}")
        if not 1 <= self.num_ranks <= NUM_RANKS:
            raise ConfigError(f"num_ranks must be in [1, {NUM_RANKS}], got {self.num_ranks}")
        if not 1 <= self.num_hole_cards <= MAX_HOLE_CARDS:
            raise ConfigError(f"num_hole_cards must be in [1, {MAX_HOLE_CARDS}], got {self.num_hole_cards}")
        if self.total_board_cards(self.num_rounds - 1) > MAX_BOARD_CARDS:
            raise ConfigError(f"at most {MAX_BOARD_CARDS} board cards are supported")
        needed = self.num_players * self.num_hole_cards + self.total_board_cards(self.num_rounds - 1)
        if needed > self.deck_size:
            raise ConfigError(f"deck of {self.deck_size} cards cannot deal {needed} cards")

        for p in self.first_player:
            if not 0 <= p < self.num_players:
                raise ConfigError(f"first_player entry {p} is not a seat")
        for name in _PER_PLAYER + ("raise_sizes", "max_raises", "num_board_cards"):
            if any(v < 0 for v in getattr(self, name)):
                raise ConfigError(f"{name} must not contain negative values")
        for p in range(self.num_players):
            if self.blinds[p] > self.starting_stacks[p]:
                raise ConfigError(f"blind of seat {p} exceeds its starting stack")

    @property
    def is_no_limit(self) -> bool:
        return self.betting_type == BettingType.NO_LIMIT

    @property
    def deck_size(self) -> int:
        return self.num_ranks * self.num_suits

    @property
    def max_blind(self) -> int:
        return max(self.blinds)

    def total_board_cards(self, round: int) -> int:
        """Board cards visible in ``round``; they accumulate across rounds."""
        return sum(self.num_board_cards[: round + 1])

    def generate_deck(self) -> Iterator[Card]:
        """Lazily yield every card of this game's deck. Each call restarts."""
        return iter_deck(self.num_ranks, self.num_suits)

    def generate_shuffled_deck(self, rng: random.Random) -> list[Card]:
        cards = list(self.generate_deck())
        rng.shuffle(cards)
        return cards

    def deal_hole_cards_and_board_cards(self, rng: random.Random) -> tuple[list[list[Card]], list[Card]]:
        """Deal hole cards for every seat, then the full board for the hand."""
        deck = Deck(self.generate_deck(), rng)
        deck.shuffle()
        hole_cards = [deck.deal(self.num_hole_cards) for _ in range(self.num_players)]
        board_cards = deck.deal(self.total_board_cards(self.num_rounds - 1))
        return hole_cards, board_cards

    # -- serialization -------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = list(value)
            elif isinstance(value, BettingType):
                value = value.value
            d[f.name] = value
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameInfo:
        if not isinstance(data, dict):
            raise ConfigError(f"game info must be a JSON object, got {type(data).__name__}")
        expected = {f.name for f in fields(cls)}
        missing = expected - data.keys()
        extra = data.keys() - expected
        if missing:
            raise ConfigError(f"game info is missing fields: {sorted(missing)}")
        if extra:
            raise ConfigError(f"game info has unknown fields: {sorted(extra)}")

        kwargs = dict(data)
        try:
            kwargs["betting_type"] = BettingType(data["betting_type"])
        except ValueError:
            raise ConfigError(f"unknown betting_type {data['betting_type']!r}") from None
        for name in _PER_PLAYER + _PER_ROUND:
            if not isinstance(data[name], list):
                raise ConfigError(f"{name} must be a list")
        return cls(**kwargs)

    @classmethod
    def load(cls, path: str | Path) -> GameInfo:
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"failed to read game info from {path}: {exc}") from exc
        info = cls.from_dict(data)
        logger.debug("Loaded %d-player %s game from %s", info.num_players, info.betting_type.value, path)
        return info

    def save(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(self.to_dict(), indent=2) + "\n")


def _check_int(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must contain integers, got {value!r}")
