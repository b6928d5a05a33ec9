"""
Unit tests for the growable packed array backing every dense collection.
"""

from unittest.mock import patch

import numpy as np
import pytest

from dense import ChainIDense, TiedDense, TiedIDense, TotalDense
from dense._buffer import PackedArray, spans
from orders import Chain, ChainI, Tied, TiedI
from orders.errors import AddError, AllocError


@pytest.mark.unit
class TestPackedArray:
    def test_append_and_extend(self):
        packed = PackedArray(np.intp)
        packed.append(4)
        packed.extend([5, 6])

        assert len(packed) == 3
        assert packed.data.tolist() == [4, 5, 6]
        assert packed.last() == 6

    def test_last_of_empty(self):
        assert PackedArray(np.intp).last() == 0
        assert PackedArray(np.intp).last(default=-1) == -1

    def test_capacity_grows_geometrically(self):
        packed = PackedArray(np.intp)
        packed.extend(range(4))
        packed.append(4)

        assert packed.capacity == 8
        packed.reserve(2)
        assert packed.capacity == 8

    def test_copies_initial_values(self):
        values = np.array([1, 2, 3])
        packed = PackedArray(np.intp, values)
        values[0] = 0

        assert packed.data.tolist() == [1, 2, 3]

    def test_view_is_read_only(self):
        packed = PackedArray(np.intp, [1, 2, 3])
        view = packed.view(1, 3)

        assert view.tolist() == [2, 3]
        with pytest.raises(ValueError):
            view[0] = 0
        # The backing array itself stays writable
        packed.data[0] = 7
        assert packed.data.tolist() == [7, 2, 3]

    def test_replace_and_clear(self):
        packed = PackedArray(np.bool_, [True, False])
        packed.replace(np.array([[False], [False], [True]]))

        assert packed.data.tolist() == [False, False, True]
        packed.clear()
        assert len(packed) == 0
        assert packed.capacity == 0

    def test_reserve_failure_leaves_data(self):
        packed = PackedArray(np.intp, [1, 2])
        with patch.object(PackedArray, "_allocate", side_effect=MemoryError):
            with pytest.raises(AllocError):
                packed.reserve(10)

        assert packed.data.tolist() == [1, 2]

    def test_spans(self):
        starts, lengths = spans(np.array([2, 2, 5]))

        assert starts.tolist() == [0, 2, 2]
        assert lengths.tolist() == [2, 0, 3]

    def test_spans_empty(self):
        starts, lengths = spans(np.array([], dtype=np.intp))
        assert starts.size == 0
        assert lengths.size == 0


@pytest.mark.unit
class TestAllocationFailure:
    """Test that allocation failure surfaces as AllocError and changes nothing."""

    def test_push_total(self):
        dense = TotalDense(3)
        generation = dense.generation
        with patch.object(PackedArray, "_allocate", side_effect=MemoryError):
            with pytest.raises(AllocError):
                dense.push(Chain([2, 1, 0]))

        assert len(dense) == 0
        assert dense.generation == generation

    def test_push_tied_is_an_add_error(self):
        dense = TiedDense(2)
        with patch.object(PackedArray, "_allocate", side_effect=MemoryError):
            with pytest.raises(AddError):
                dense.push(Tied([1, 0], [True]))

        assert len(dense) == 0

    def test_to_cardinal(self, sample_tied):
        dense = TiedDense(4)
        dense.push(sample_tied)
        with patch.object(PackedArray, "_allocate", side_effect=MemoryError):
            with pytest.raises(AllocError):
                dense.to_cardinal()

        # The source is only consumed once the scores are allocated
        assert len(dense) == 1


@pytest.fixture
def chain_i():
    dense = ChainIDense(4)
    dense.push(ChainI(4, [3, 1, 2]))
    return dense


@pytest.fixture
def tied_i():
    dense = TiedIDense(4)
    dense.push(TiedI(4, [3, 1, 2], [True, False]))
    return dense


@pytest.mark.unit
class TestOffsetAllocationFailure:
    """Test that a failed reservation in the last offset buffer leaves every buffer as it was."""

    def test_push_chain_incomplete(self, chain_i):
        generation = chain_i.generation
        with patch.object(chain_i._order_end, "_allocate", side_effect=MemoryError):
            with pytest.raises(AllocError):
                chain_i.push(ChainI(4, [0, 1]))

        assert len(chain_i) == 1
        assert len(chain_i._orders) == 3
        assert chain_i._order_end.data.tolist() == [3]
        assert chain_i.generation == generation

    def test_generate_chain_incomplete(self, chain_i, rng):
        generation = chain_i.generation
        with patch.object(chain_i._order_end, "_allocate", side_effect=MemoryError):
            with pytest.raises(AllocError):
                chain_i.generate_uniform(rng, 5)

        assert len(chain_i) == 1
        assert len(chain_i._orders) == 3
        assert chain_i._order_end.data.tolist() == [3]
        assert chain_i.generation == generation

    def test_push_tied_incomplete(self, tied_i):
        generation = tied_i.generation
        with patch.object(tied_i._tie_end, "_allocate", side_effect=MemoryError):
            with pytest.raises(AllocError):
                tied_i.push(TiedI(4, [0, 1], [True]))

        assert len(tied_i) == 1
        assert len(tied_i._orders) == 3
        assert len(tied_i._ties) == 2
        assert tied_i._order_end.data.tolist() == [3]
        assert tied_i._tie_end.data.tolist() == [2]
        assert tied_i.generation == generation

    def test_generate_tied_incomplete(self, tied_i, rng):
        generation = tied_i.generation
        with patch.object(tied_i._tie_end, "_allocate", side_effect=MemoryError):
            with pytest.raises(AllocError):
                tied_i.generate_uniform(rng, 5)

        assert len(tied_i) == 1
        assert len(tied_i._orders) == 3
        assert len(tied_i._ties) == 2
        assert tied_i._order_end.data.tolist() == [3]
        assert tied_i._tie_end.data.tolist() == [2]
        assert tied_i.get(0).order.tolist() == [3, 1, 2]
        assert tied_i.generation == generation
