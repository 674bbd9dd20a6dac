"""Tests for payout computation and side-pot resolution."""

import random
from dataclasses import replace

import pytest

from poker_core.game.actions import Action
from poker_core.game.card import parse_cards
from poker_core.game.errors import PreconditionError
from poker_core.game.rules import BettingType, GameInfo
from poker_core.game.state import GameState
from poker_core.games.holdem import holdem_game_info

HU = holdem_game_info(num_players=2, stack=100, small_blind=1, big_blind=2)

# three players, one private card each, no board, no blinds
ONE_CARD = GameInfo(
    starting_stacks=(100, 100, 100),
    blinds=(0, 0, 0),
    raise_sizes=(0,),
    betting_type=BettingType.NO_LIMIT,
    num_players=3,
    num_rounds=1,
    max_raises=(255,),
    first_player=(0,),
    num_suits=4,
    num_ranks=13,
    num_hole_cards=1,
    num_board_cards=(0,),
)


def _hole(*hands):
    return [parse_cards(h) for h in hands]


def _play(info, *actions, state=None):
    state = state or GameState.new(info)
    for action in actions:
        state = state.apply_action(info, action)
    return state


def _finished(info, spent, folded=None):
    state = GameState.new(info)
    return replace(
        state,
        spent=tuple(spent),
        max_spent=max(spent),
        players_folded=tuple(folded or (False,) * info.num_players),
        finished=True,
    )


class TestHeadsUp:
    def test_check_down_showdown(self):
        state = _play(HU, *[Action.call()] * 8)
        board = parse_cards("Kd 9s 5h 3c Jc")
        hole = _hole("As Ah", "2c 7d")
        assert state.get_payout(HU, board, hole, 0) == 2
        assert state.get_payout(HU, board, hole, 1) == -2

    def test_split_pot_heads_up(self):
        state = _play(HU, *[Action.call()] * 8)
        board = parse_cards("As Ks Qd Jh Tc")
        hole = _hole("2c 3d", "4c 5d")
        assert state.get_payouts(HU, board, hole) == [0, 0]

    def test_fold_wins_blinds(self):
        state = _play(HU, Action.fold())
        hole = _hole("As Ah", "2c 7d")
        assert state.get_payout(HU, [], hole, 0) == -1
        assert state.get_payout(HU, [], hole, 1) == 1

    def test_payout_before_finish(self):
        state = _play(HU, Action.call())
        with pytest.raises(PreconditionError):
            state.get_payout(HU, [], _hole("As Ah", "2c 7d"), 0)


THREE = holdem_game_info(num_players=3, stack=100)
THREE_HOLE = _hole("2c 3d", "As Ah", "Kc Qd")
THREE_BOARD = parse_cards("Kd 9s 5h 3c Jc")


class TestThreePlayerFold:
    def test_folder_loses_spend_immediately(self):
        state = _play(THREE, Action.raise_to(10), Action.fold())
        assert not state.is_finished()
        assert state.get_payout(THREE, [], THREE_HOLE, 0) == -1

    def test_remaining_players_showdown(self):
        state = _play(THREE, Action.raise_to(10), Action.fold(), Action.call())
        state = _play(THREE, *[Action.call()] * 6, state=state)
        assert state.is_finished()
        assert state.get_payouts(THREE, THREE_BOARD, THREE_HOLE) == [-1, 11, -10]

    def test_last_player_standing(self):
        state = _play(THREE, Action.raise_to(10), Action.fold(), Action.fold())
        assert state.is_finished()
        assert state.get_payouts(THREE, [], THREE_HOLE) == [-1, -2, 3]


class TestSidePots:
    def test_short_all_in_wins_only_main_pot(self):
        info = replace(ONE_CARD, starting_stacks=(5, 100, 100))
        state = _play(info, Action.raise_to(5), Action.raise_to(20), Action.call())
        assert state.is_finished()
        assert state.spent == (5, 20, 20)

        hole = _hole("As", "Kd", "2c")
        assert state.get_payout(info, [], hole, 0) == 10
        assert state.get_payout(info, [], hole, 1) == 10
        assert state.get_payout(info, [], hole, 2) == -20

    def test_short_all_in_loses_main_pot(self):
        state = _finished(ONE_CARD, (5, 20, 20))
        hole = _hole("2c", "As", "Kd")
        assert state.get_payouts(ONE_CARD, [], hole) == [-5, 25, -20]

    def test_uncalled_excess_is_returned(self):
        info = replace(ONE_CARD, starting_stacks=(5, 100, 100))
        state = _play(info, Action.raise_to(5), Action.raise_to(20), Action.fold())
        assert state.is_finished()
        assert state.spent == (5, 20, 0)
        hole = _hole("As", "Kd", "2c")
        assert state.get_payouts(info, [], hole) == [5, -5, 0]

    def test_folded_player_funds_pots_but_never_wins(self):
        state = _finished(ONE_CARD, (5, 20, 12), folded=(False, False, True))
        hole = _hole("As", "Kd", "Ac")
        assert state.get_payouts(ONE_CARD, [], hole) == [10, 2, -12]

    def test_layered_all_ins(self):
        state = _finished(ONE_CARD, (10, 30, 60))
        hole = _hole("As", "Kd", "2c")
        # main pot 30 to seat 0, side pot 40 to seat 1, seat 2's excess 30 back
        assert state.get_payouts(ONE_CARD, [], hole) == [20, 10, -30]

    def test_even_split_conserves_chips(self):
        state = _finished(ONE_CARD, (4, 4, 4))
        hole = _hole("As", "Ad", "2c")
        assert state.get_payouts(ONE_CARD, [], hole) == [2, 2, -4]

    def test_split_remainder_is_dropped(self):
        # 9 chip pot split two ways: each winner nets 3 * 1 // 2 == 1
        state = _finished(ONE_CARD, (3, 3, 3))
        hole = _hole("As", "Ad", "2c")
        payouts = state.get_payouts(ONE_CARD, [], hole)
        assert payouts == [1, 1, -3]
        assert sum(payouts) == -1

    def test_player_with_nothing_in_the_pot(self):
        state = _play(ONE_CARD, Action.call(), Action.call(), Action.call())
        assert state.is_finished()
        assert state.get_payouts(ONE_CARD, [], _hole("As", "Kd", "2c")) == [0, 0, 0]


class TestFoldedChipsAboveLivePlayers:
    INFO = GameInfo(
        starting_stacks=(5, 8, 100, 100),
        blinds=(0, 0, 0, 0),
        raise_sizes=(0, 0),
        betting_type=BettingType.NO_LIMIT,
        num_players=4,
        num_rounds=2,
        max_raises=(255, 255),
        first_player=(0, 0),
        num_suits=4,
        num_ranks=13,
        num_hole_cards=1,
        num_board_cards=(0, 0),
    )

    def _both_deep_stacks_fold(self):
        state = _play(
            self.INFO,
            Action.raise_to(5),
            Action.raise_to(8),
            Action.raise_to(20),
            Action.call(),
        )
        assert state.current_round() == 1
        state = _play(self.INFO, Action.fold(), Action.fold(), state=state)
        assert state.is_finished()
        assert state.spent == (5, 8, 20, 20)
        return state

    def test_top_live_player_collects_folded_excess(self):
        state = self._both_deep_stacks_fold()
        hole = _hole("As", "Kd", "Qc", "Jh")
        # seat 0 wins the 20 chip main pot, seat 1 the 9 chip side pot plus
        # the 24 chips only the folded seats put above 8
        assert state.get_payouts(self.INFO, [], hole) == [15, 25, -20, -20]

    def test_best_hand_collects_everything(self):
        state = self._both_deep_stacks_fold()
        hole = _hole("Kd", "As", "Qc", "Jh")
        assert state.get_payouts(self.INFO, [], hole) == [-5, 45, -20, -20]

    def test_tied_top_players_share_folded_excess(self):
        state = _finished(ONE_CARD, (10, 10, 30), folded=(False, False, True))
        hole = _hole("As", "Ad", "2c")
        assert state.get_payouts(ONE_CARD, [], hole) == [15, 15, -30]


class TestChipConservation:
    @staticmethod
    def _play_random_hand(info, seed, evaluator):
        rng = random.Random(seed)
        hole, board = info.deal_hole_cards_and_board_cards(rng)
        state = GameState.new(info, hand_id=seed)
        while not state.is_finished():
            state = state.apply_action(info, rng.choice(state.legal_actions(info)))
        visible = board[: info.total_board_cards(state.current_round())]
        return state, state.get_payouts(info, visible, hole, evaluator)

    @pytest.mark.parametrize("num_players", [2, 3, 5])
    def test_random_hands_sum_to_zero(self, num_players, distinct_evaluator):
        info = holdem_game_info(num_players=num_players, stack=50)
        for seed in range(40):
            state, payouts = self._play_random_hand(info, seed, distinct_evaluator)
            assert sum(payouts) == 0
            for p in range(num_players):
                if state.has_folded(p):
                    assert payouts[p] == -state.player_spent(p)

    @pytest.mark.parametrize("betting_type", [BettingType.NO_LIMIT, BettingType.LIMIT])
    @pytest.mark.parametrize("num_players", [3, 6, 9])
    def test_uneven_stacks_sum_to_zero(self, num_players, betting_type, distinct_evaluator):
        base = holdem_game_info(num_players=num_players, betting_type=betting_type)
        for seed in range(60):
            stacks = random.Random(seed).choices(range(2, 61), k=num_players)
            info = replace(base, starting_stacks=tuple(stacks))
            _, payouts = self._play_random_hand(info, seed, distinct_evaluator)
            assert sum(payouts) == 0, (stacks, payouts)
