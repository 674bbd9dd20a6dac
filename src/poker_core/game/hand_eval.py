"""Hand strength: rank classes from eval7, with a fallback for tiny hands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

import eval7

from poker_core.game.card import Card


class HandRank(IntEnum):
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8


_EVAL7_TYPE_TO_RANK = {
    0: HandRank.HIGH_CARD,
    1: HandRank.PAIR,
    2: HandRank.TWO_PAIR,
    3: HandRank.THREE_OF_A_KIND,
    4: HandRank.STRAIGHT,
    5: HandRank.FLUSH,
    6: HandRank.FULL_HOUSE,
    7: HandRank.FOUR_OF_A_KIND,
    8: HandRank.STRAIGHT_FLUSH,
}


@dataclass(frozen=True, slots=True, order=True)
class RankClass:
    """Totally ordered hand strength. Equal classes split the pot."""

    category: HandRank
    score: int

    def __str__(self) -> str:
        return f"{self.category.name.lower()} ({self.score})"


class HandEvaluator(Protocol):
    def rank_class(self, cards: Sequence[Card]) -> RankClass: ...


class Eval7Evaluator:
    """Evaluate 5-7 card hands with eval7."""

    def rank_class(self, cards: Sequence[Card]) -> RankClass:
        if not (5 <= len(cards) <= 7):
            raise ValueError(f"Need 5-7 cards, got {len(cards)}")
        score = eval7.evaluate([c.eval7_card for c in cards])
        hand_rank = _EVAL7_TYPE_TO_RANK.get(score >> 24, HandRank.HIGH_CARD)
        return RankClass(category=hand_rank, score=score)


DEFAULT_EVALUATOR = Eval7Evaluator()


def small_hand_rank(cards: Sequence[Card]) -> RankClass:
    """Rank a one or two card hand (Kuhn and Leduc style games).

    Two cards of equal rank are a pair, anything else is the highest card.
    """
    if len(cards) == 1:
        return RankClass(HandRank.HIGH_CARD, int(cards[0].rank))
    if len(cards) == 2:
        if cards[0].rank == cards[1].rank:
            return RankClass(HandRank.PAIR, int(cards[0].rank))
        return RankClass(HandRank.HIGH_CARD, int(max(cards[0].rank, cards[1].rank)))
    raise ValueError(f"small_hand_rank expects 1 or 2 cards, got {len(cards)}")


def rank_hand(cards: Sequence[Card], evaluator: HandEvaluator | None = None) -> RankClass:
    """Rank hole + board cards, bypassing the evaluator for tiny hands."""
    if len(cards) <= 2:
        return small_hand_rank(cards)
    return (evaluator or DEFAULT_EVALUATOR).rank_class(cards)
