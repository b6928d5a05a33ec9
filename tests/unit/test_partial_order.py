"""
Unit tests for the partial order relation engine.
"""

import numpy as np
import pytest

from orders.config import set_debug_checks
from orders.errors import InconsistentOrderError
from orders.partial_order import (
    PartialOrder,
    PartialOrderBuilder,
    Relation,
    find_inconsistency,
)


@pytest.mark.unit
class TestPartialOrderBuilder:
    """Test building relations through the checked and unchecked paths."""

    def test_new_relation_is_all_incomparable(self):
        po = PartialOrderBuilder(3).finish()

        assert po.elements == 3
        assert po.incomparable(0, 1)
        assert po.incomparable(2, 0)
        assert po.ord(1, 1) == Relation.EQUAL

    def test_finish_accepts_closed_relation(self):
        builder = PartialOrderBuilder(3)
        builder.set(0, 1)
        builder.set(1, 2)
        builder.set(0, 2)
        po = builder.finish()

        assert po.ord(0, 2) == Relation.LESS
        assert po.ord(2, 0) == Relation.GREATER
        assert po.lt(0, 1)
        assert not po.lt(1, 0)
        assert po.le(1, 1)
        assert not po.lt(1, 1)
        assert po.is_valid()

    def test_finish_rejects_missing_transitive_pair(self):
        builder = PartialOrderBuilder(3)
        builder.set(0, 1)
        builder.set(1, 2)

        with pytest.raises(InconsistentOrderError, match="not transitive"):
            builder.finish()

    def test_finish_rejects_cycle(self):
        builder = PartialOrderBuilder(2)
        builder.set(0, 1)
        builder.set(1, 0)

        with pytest.raises(InconsistentOrderError, match="not antisymmetric"):
            builder.finish()

    def test_set_out_of_range(self):
        builder = PartialOrderBuilder(2)
        with pytest.raises(IndexError):
            builder.set(0, 2)
        with pytest.raises(IndexError):
            builder.set(-1, 0)

    def test_set_after_finish(self):
        builder = PartialOrderBuilder(2)
        builder.finish()
        with pytest.raises(RuntimeError):
            builder.set(0, 1)

    def test_negative_elements(self):
        with pytest.raises(ValueError):
            PartialOrderBuilder(-1)

    def test_empty_universe(self):
        po = PartialOrderBuilder(0).finish()
        assert po.elements == 0
        assert po.is_valid()

    def test_unchecked_asserts_under_debug_checks(self):
        builder = PartialOrderBuilder(3)
        builder.set(0, 1)
        builder.set(1, 2)

        with pytest.raises(AssertionError):
            builder.finish_unchecked()

    def test_unchecked_gives_wrong_answers_without_checks(self):
        set_debug_checks(False)
        builder = PartialOrderBuilder(3)
        builder.set(0, 1)
        builder.set(1, 2)
        po = builder.finish_unchecked()

        # The missing pair reads as incomparable rather than crashing
        assert po.lt(0, 1)
        assert po.incomparable(0, 2)
        assert not po.is_valid()


@pytest.mark.unit
class TestPartialOrder:
    """Test queries and equality on finished relations."""

    def test_relation_is_read_only(self):
        builder = PartialOrderBuilder(2)
        builder.set(0, 1)
        po = builder.finish()

        with pytest.raises(ValueError):
            po._le[1, 0] = True

    def test_equality(self):
        a = PartialOrderBuilder(2)
        a.set(0, 1)
        b = PartialOrderBuilder(2)
        b.set(0, 1)

        assert a.finish() == b.finish()
        assert PartialOrderBuilder(2).finish() != PartialOrderBuilder(3).finish()

    def test_eq_only_for_same_element(self):
        po = PartialOrderBuilder(2).finish()
        assert po.eq(0, 0)
        assert not po.eq(0, 1)


@pytest.mark.unit
@pytest.mark.invariant
class TestFindInconsistency:
    """Test the consistency check directly on matrices."""

    def test_reflexivity(self):
        assert find_inconsistency(np.zeros((2, 2), dtype=bool)) == (
            "not reflexive",
            0,
            0,
        )

    def test_consistent_chain(self):
        le = np.array(
            [
                [True, True, True],
                [False, True, True],
                [False, False, True],
            ]
        )
        assert find_inconsistency(le) is None
        assert PartialOrder(le).is_valid()

    def test_reports_missing_pair(self):
        le = np.array(
            [
                [True, True, False],
                [False, True, True],
                [False, False, True],
            ]
        )
        assert find_inconsistency(le) == ("not transitive", 0, 2)
