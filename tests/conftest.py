import pytest

from poker_core.game.hand_eval import HandRank, RankClass


class DistinctEvaluator:
    """Never ties: orders hands by their exact card set."""

    def rank_class(self, cards):
        score = 0
        for card in sorted(cards, key=lambda c: c.index()):
            score = score * 52 + card.index()
        return RankClass(HandRank.HIGH_CARD, score)


@pytest.fixture
def distinct_evaluator():
    return DistinctEvaluator()
