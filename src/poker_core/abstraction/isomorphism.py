"""Suit isomorphism for reducing card combinations."""

from __future__ import annotations

from collections.abc import Sequence

from poker_core.game.card import Card, Suit


def sort_cards(cards: Sequence[Card]) -> list[Card]:
    """Highest rank first, ties broken by suit."""
    return sorted(cards, key=lambda c: (-c.rank, c.suit))


def canonical_hand(cards: Sequence[Card]) -> tuple[Card, ...]:
    """Canonicalize suits so that equivalent hands map to the same key.

    Assigns suits in order of first appearance. E.g.:
    Ah Kh -> Ac Kc (hearts mapped to clubs as first suit)
    Ad Kd -> Ac Kc (same mapping)
    """
    suit_map: dict[Suit, Suit] = {}
    next_suit = iter(Suit)
    result = []

    for card in cards:
        if card.suit not in suit_map:
            suit_map[card.suit] = next(next_suit)
        result.append(Card(rank=card.rank, suit=suit_map[card.suit]))

    return tuple(result)


def canonical_deal(hole_cards: Sequence[Card], board_cards: Sequence[Card]) -> tuple[Card, ...]:
    """Canonical form of a deal: hole cards then board, each group sorted.

    Sorting within a group makes the key independent of deal order; the
    hole cards stay ahead of the board because they are private.
    """
    return canonical_hand(sort_cards(hole_cards) + sort_cards(board_cards))
