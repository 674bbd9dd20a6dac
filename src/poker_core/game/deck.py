"""Deck implementation with shuffle and deal."""

from __future__ import annotations

import random
from collections.abc import Iterable

from poker_core.game.card import Card, make_deck


class Deck:
    """A deck drawing from a caller-owned RNG.

    The deck never touches the module-level ``random`` state, so a seeded
    ``random.Random`` fully determines every deal.
    """

    def __init__(self, cards: Iterable[Card] | None = None, rng: random.Random | None = None) -> None:
        self._full = list(cards) if cards is not None else make_deck()
        self._cards = list(self._full)
        self._rng = rng if rng is not None else random.Random()
        self._index = 0

    @classmethod
    def seeded(cls, seed: int, cards: Iterable[Card] | None = None) -> Deck:
        return cls(cards, random.Random(seed))

    def shuffle(self) -> None:
        self._rng.shuffle(self._cards)
        self._index = 0

    def deal(self, n: int = 1) -> list[Card]:
        if self._index + n > len(self._cards):
            raise RuntimeError("Not enough cards in deck")
        cards = self._cards[self._index : self._index + n]
        self._index += n
        return cards

    @property
    def remaining(self) -> int:
        return len(self._cards) - self._index

    @property
    def size(self) -> int:
        return len(self._full)

    def reset(self) -> None:
        self._cards = list(self._full)
        self._index = 0
        self.shuffle()

    def clone(self) -> Deck:
        """Copy with the same undealt cards and an independent RNG in the same state."""
        new = Deck.__new__(Deck)
        new._full = self._full
        new._cards = list(self._cards)
        new._rng = random.Random()
        new._rng.setstate(self._rng.getstate())
        new._index = self._index
        return new
