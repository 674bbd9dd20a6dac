"""Card abstraction — maps hole and board cards to bucket ids per round.

Each round uses one strategy from a closed set, chosen when the
abstraction is built and stored as a ``type`` tag in the config::

    {"round_infosets": [
        {"type": "NoBuckets", "num_suits": 2, "num_ranks": 3,
         "num_board_cards": 0, "num_hole_cards": 1},
        {"type": "LosslessBuckets", "num_suits": 2, "num_ranks": 3,
         "num_board_cards": 1, "num_hole_cards": 1}
    ]}
"""

from __future__ import annotations

import enum
import json
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from poker_core.abstraction.isomorphism import canonical_deal
from poker_core.game.card import Card
from poker_core.game.errors import ConfigError
from poker_core.game.rules import GameInfo

BucketId = int


class BucketStrategy(enum.Enum):
    # one bucket per exact deal
    NONE = "NoBuckets"
    # one bucket per suit-isomorphism class
    LOSSLESS = "LosslessBuckets"


@dataclass(frozen=True)
class RoundBuckets:
    strategy: BucketStrategy
    num_suits: int
    num_ranks: int
    num_board_cards: int
    num_hole_cards: int

    @classmethod
    def for_game(cls, info: GameInfo, round: int, strategy: BucketStrategy = BucketStrategy.NONE) -> RoundBuckets:
        return cls(
            strategy=strategy,
            num_suits=info.num_suits,
            num_ranks=info.num_ranks,
            num_board_cards=info.total_board_cards(round),
            num_hole_cards=info.num_hole_cards,
        )

    @property
    def num_buckets(self) -> int:
        """Upper bound on bucket ids (exclusive)."""
        return (self.num_suits * self.num_ranks) ** (self.num_hole_cards + self.num_board_cards)

    def get_bucket(self, board_cards: Sequence[Card], hole_cards: Sequence[Card]) -> BucketId:
        if len(hole_cards) < self.num_hole_cards or len(board_cards) < self.num_board_cards:
            raise ValueError(
                f"need {self.num_hole_cards} hole and {self.num_board_cards} board cards, "
                f"got {len(hole_cards)} and {len(board_cards)}"
            )
        hole = hole_cards[: self.num_hole_cards]
        board = board_cards[: self.num_board_cards]

        match self.strategy:
            case BucketStrategy.NONE:
                return self._encode([*hole, *board])
            case BucketStrategy.LOSSLESS:
                return self._encode(canonical_deal(hole, board))
        raise ValueError(f"unknown bucket strategy {self.strategy!r}")

    def _encode(self, cards: Iterable[Card]) -> BucketId:
        deck_size = self.num_suits * self.num_ranks
        bucket = 0
        for card in cards:
            bucket = bucket * deck_size + card.index(self.num_suits)
        return bucket

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["type"] = d.pop("strategy").value
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RoundBuckets:
        try:
            fields = dict(data)
            strategy = BucketStrategy(fields.pop("type"))
            buckets = cls(strategy=strategy, **fields)
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"malformed round buckets {data!r}: {exc}") from exc
        for name in ("num_suits", "num_ranks", "num_board_cards", "num_hole_cards"):
            value = getattr(buckets, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")
        return buckets


class CardAbstraction:
    """Per-round bucketing of hole and board cards."""

    def __init__(self, round_infosets: list[RoundBuckets]) -> None:
        self.round_infosets = list(round_infosets)

    @classmethod
    def for_game(cls, info: GameInfo, strategy: BucketStrategy = BucketStrategy.NONE) -> CardAbstraction:
        return cls([RoundBuckets.for_game(info, r, strategy) for r in range(info.num_rounds)])

    def get_bucket(self, round: int, board_cards: Sequence[Card], hole_cards: Sequence[Card]) -> BucketId:
        return self.round_infosets[round].get_bucket(board_cards, hole_cards)

    def to_dict(self) -> dict[str, Any]:
        return {"round_infosets": [r.to_dict() for r in self.round_infosets]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CardAbstraction:
        if not isinstance(data, dict) or not isinstance(data.get("round_infosets"), list):
            raise ConfigError("card abstraction needs a 'round_infosets' list")
        return cls([RoundBuckets.from_dict(r) for r in data["round_infosets"]])

    @classmethod
    def from_config(cls, path: str | Path) -> CardAbstraction:
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"failed to read card abstraction config {path}: {exc}") from exc
        return cls.from_dict(data)

    def save(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(self.to_dict(), indent=2) + "\n")
