"""
Unit tests for the thin single-order value types: cardinal, binary and specific.
"""

import numpy as np
import pytest

from orders import Binary, BinaryRef, Cardinal, CardinalRef, Relation, Specific


@pytest.mark.unit
class TestCardinal:
    def test_owned_copies_input(self):
        values = np.array([1, 2])
        cardinal = Cardinal(values)
        values[0] = 9

        assert cardinal.values.tolist() == [1, 2]
        assert cardinal.elements == 2

    def test_ref_shares_input(self):
        values = np.array([1, 2], dtype=np.int64)
        assert np.shares_memory(CardinalRef(values).values, values)

    def test_rejects_two_dimensional(self):
        with pytest.raises(ValueError):
            Cardinal([[1, 2], [3, 4]])

    def test_to_binary(self):
        assert Cardinal([3, 1, 1]).to_binary(2) == Binary([True, False, False])

    def test_to_partial(self):
        po = Cardinal([3, 1, 1]).to_partial()

        assert po.ord(1, 0) == Relation.LESS
        assert po.incomparable(1, 2)
        assert po.is_valid()

    def test_as_ref_and_back(self):
        cardinal = Cardinal([0, 5])
        assert cardinal.as_ref() == cardinal
        assert cardinal.as_ref().to_owned() == cardinal


@pytest.mark.unit
class TestBinary:
    def test_to_partial(self):
        po = Binary([True, False, True]).to_partial()

        assert po.ord(1, 0) == Relation.LESS
        assert po.incomparable(0, 2)
        assert po.is_valid()

    def test_ref_round_trip(self):
        binary = Binary([True, False])
        assert binary.as_ref().to_owned() == binary
        assert BinaryRef([True, False]) == binary

    def test_rejects_two_dimensional(self):
        with pytest.raises(ValueError):
            Binary([[True], [False]])


@pytest.mark.unit
class TestSpecific:
    def test_construction(self):
        specific = Specific(1, 3)

        assert specific.value == 1
        assert specific.elements == 3
        assert len(specific) == 1

    @pytest.mark.parametrize("value,elements", [(3, 3), (-1, 3), (0, 0)])
    def test_rejects_out_of_range(self, value, elements):
        with pytest.raises(ValueError):
            Specific(value, elements)

    def test_to_partial(self):
        po = Specific(1, 3).to_partial()

        assert po.ord(0, 1) == Relation.LESS
        assert po.ord(1, 2) == Relation.GREATER
        assert po.incomparable(0, 2)

    def test_random(self, rng):
        assert 0 <= Specific.random(rng, 4).value < 4
        with pytest.raises(ValueError):
            Specific.random(rng, 0)
