"""
End-to-end tests chaining generation, conversion and element removal.

These tests exercise several collections together the way the elimination
script does, and check that every intermediate collection stays valid.
"""

import sys
from pathlib import Path

import pytest

from dense import TiedDense, TotalDense
from orders import Tied
from orders.tied import valid_tied

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "scripts"))

from simulate_elimination import first_preferences, run_rounds  # noqa: E402


@pytest.mark.integration
class TestConversionPipeline:
    def test_total_to_tied_to_cardinal_to_binary(self, rng):
        total = TotalDense(5)
        total.generate_uniform(rng, 30)
        first_orders = [c.order.tolist() for c in total]

        tied = total.to_tied()
        tied.remove_element(4)
        cardinal = tied.to_cardinal()
        binary = cardinal.to_binary(2)

        assert total.is_empty()
        assert tied.is_empty()
        assert cardinal.is_empty()
        assert len(binary) == 30
        assert binary.elements == 4

        # Without ties the scores are 3, 2, 1, 0 by rank, so the top two are high
        for order, flags in zip(first_orders, binary):
            survivors = [x for x in order if x != 4]
            assert flags.values[survivors].tolist() == [True, True, False, False]

    def test_repeated_removal_keeps_orders_valid(self, rng):
        tied = TiedDense(6)
        tied.generate_uniform(rng, 25)

        while tied.elements > 1:
            tied.remove_element(int(rng.integers(0, tied.elements)))
            for order in tied:
                assert valid_tied(tied.elements, order.order, order.tied)
            assert len(tied) == 25

        tied.remove_element(0)
        assert tied.is_empty()

    def test_incomplete_copy_survives_removal(self, rng):
        tied = TiedDense(4)
        tied.generate_uniform(rng, 10)
        owned = [t.to_owned() for t in tied]

        incomplete = tied.to_incomplete()
        incomplete.remove_element(2)

        for original, after in zip(owned, incomplete):
            expected = [x - (x > 2) for x in original.order.tolist() if x != 2]
            assert after.order.tolist() == expected


@pytest.mark.integration
class TestEliminationScript:
    def test_first_preferences_split_ties(self, sample_tied):
        ballots = TiedDense.from_refs([sample_tied, Tied([1, 0, 2, 3], [False, False, False])])
        votes = first_preferences(ballots)

        assert votes.tolist() == [0.5, 1.0, 0.5, 0.0]

    def test_run_rounds(self, rng):
        ballots = TiedDense(4)
        ballots.generate_uniform(rng, 200)
        labels = ["A", "B", "C", "D"]

        summary = run_rounds(ballots, labels, remaining=1)

        assert ballots.elements == 1
        assert len(labels) == 1
        assert sorted(summary["round"].unique().tolist()) == [1, 2, 3]
        # Every ballot's vote is fully allocated each round
        per_round = summary.groupby("round")["votes"].sum()
        assert all(abs(total - 200) < 1e-9 for total in per_round)
