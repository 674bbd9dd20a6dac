"""Tests for card bucketing and suit isomorphism."""

import pytest

from poker_core.abstraction.card_abstraction import BucketStrategy, CardAbstraction, RoundBuckets
from poker_core.abstraction.isomorphism import canonical_deal, canonical_hand, sort_cards
from poker_core.game.card import Card, parse_cards
from poker_core.game.errors import ConfigError
from poker_core.games.holdem import holdem_game_info
from poker_core.games.leduc import leduc_game_info


class TestIsomorphism:
    def test_same_suit_pattern(self):
        assert canonical_hand(parse_cards("Ah Kh")) == canonical_hand(parse_cards("Ad Kd"))

    def test_first_suit_becomes_clubs(self):
        assert canonical_hand(parse_cards("Ah Kh")) == tuple(parse_cards("Ac Kc"))

    def test_offsuit_differs_from_suited(self):
        assert canonical_hand(parse_cards("Ah Kd")) != canonical_hand(parse_cards("Ah Kh"))

    def test_sort_cards(self):
        assert sort_cards(parse_cards("2c As Td")) == parse_cards("As Td 2c")

    def test_deal_keeps_hole_ahead_of_board(self):
        deal = canonical_deal(parse_cards("2s"), parse_cards("Ah"))
        assert deal == tuple(parse_cards("2c Ad"))


class TestNoBuckets:
    @pytest.fixture
    def abstraction(self):
        return CardAbstraction.for_game(leduc_game_info())

    def test_first_round_is_card_index(self, abstraction):
        assert abstraction.get_bucket(0, [], [Card.from_str("2c")]) == 0
        assert abstraction.get_bucket(0, [], [Card.from_str("4d")]) == 5

    def test_second_round_combines_hole_and_board(self, abstraction):
        bucket = abstraction.get_bucket(1, parse_cards("4d"), parse_cards("3c"))
        assert bucket == 2 * 6 + 5

    def test_num_buckets(self, abstraction):
        assert abstraction.round_infosets[0].num_buckets == 6
        assert abstraction.round_infosets[1].num_buckets == 36

    def test_all_deals_distinct(self, abstraction):
        info = leduc_game_info()
        deck = list(info.generate_deck())
        buckets = {
            abstraction.get_bucket(1, [board], [hole])
            for hole in deck
            for board in deck
            if hole != board
        }
        assert len(buckets) == 30

    def test_extra_cards_ignored(self, abstraction):
        hole = parse_cards("3c")
        assert abstraction.get_bucket(0, parse_cards("4d"), hole) == abstraction.get_bucket(0, [], hole)

    def test_too_few_cards(self, abstraction):
        with pytest.raises(ValueError):
            abstraction.get_bucket(1, [], parse_cards("3c"))


class TestLosslessBuckets:
    @pytest.fixture
    def abstraction(self):
        return CardAbstraction.for_game(holdem_game_info(), BucketStrategy.LOSSLESS)

    def test_suit_isomorphic_hands_share_bucket(self, abstraction):
        a = abstraction.get_bucket(0, [], parse_cards("Ah Kh"))
        b = abstraction.get_bucket(0, [], parse_cards("As Ks"))
        assert a == b

    def test_order_independent(self, abstraction):
        a = abstraction.get_bucket(0, [], parse_cards("Ah Kh"))
        b = abstraction.get_bucket(0, [], parse_cards("Kh Ah"))
        assert a == b

    def test_suited_and_offsuit_differ(self, abstraction):
        a = abstraction.get_bucket(0, [], parse_cards("Ah Kh"))
        b = abstraction.get_bucket(0, [], parse_cards("Ah Kd"))
        assert a != b

    def test_flop_flush_draw(self, abstraction):
        a = abstraction.get_bucket(1, parse_cards("2h 7h Jc"), parse_cards("Ah Kh"))
        b = abstraction.get_bucket(1, parse_cards("Js 2d 7d"), parse_cards("Kd Ad"))
        c = abstraction.get_bucket(1, parse_cards("2s 7h Jc"), parse_cards("Ah Kh"))
        assert a == b
        assert a != c


class TestConfig:
    def test_round_trip(self, tmp_path):
        abstraction = CardAbstraction(
            [
                RoundBuckets.for_game(leduc_game_info(), 0),
                RoundBuckets.for_game(leduc_game_info(), 1, BucketStrategy.LOSSLESS),
            ]
        )
        path = tmp_path / "cards.json"
        abstraction.save(path)
        loaded = CardAbstraction.from_config(path)
        assert loaded.round_infosets == abstraction.round_infosets

    def test_type_tag(self):
        data = RoundBuckets.for_game(leduc_game_info(), 1, BucketStrategy.LOSSLESS).to_dict()
        assert data == {
            "type": "LosslessBuckets",
            "num_suits": 2,
            "num_ranks": 3,
            "num_board_cards": 1,
            "num_hole_cards": 1,
        }

    def test_unknown_type(self):
        data = {"type": "EmdBuckets", "num_suits": 2, "num_ranks": 3, "num_board_cards": 0, "num_hole_cards": 1}
        with pytest.raises(ConfigError):
            RoundBuckets.from_dict(data)

    def test_negative_count(self):
        data = {"type": "NoBuckets", "num_suits": 2, "num_ranks": 3, "num_board_cards": -1, "num_hole_cards": 1}
        with pytest.raises(ConfigError, match="num_board_cards"):
            RoundBuckets.from_dict(data)

    def test_missing_rounds(self):
        with pytest.raises(ConfigError, match="round_infosets"):
            CardAbstraction.from_dict({})
