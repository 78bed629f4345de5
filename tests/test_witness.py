"""
FRI witness grouping tests.

Layers are implicit in the flat witness: two consecutive runs, each a count
followed by that many elements, make up one layer.
"""

import pytest

from calldata.errors import ParseError
from calldata.fri_state import FriStateConstant, FriStateVariable
from calldata.witness import FriLayer, group_witness_into_layers
from primitives.reader import FeltReader


class TestGroupWitnessIntoLayers:

    def test_two_layers(self):
        flat = [2, 10, 11, 1, 99, 1, 20, 0]
        layers = group_witness_into_layers(flat)
        assert layers == [FriLayer([10, 11], [99]), FriLayer([20], [])]

    def test_empty(self):
        assert group_witness_into_layers([]) == []

    def test_flat_round_trip(self):
        layers = [FriLayer([1, 2, 3, 4], [5, 6]), FriLayer([7, 8], [9])]
        flat = [x for layer in layers for x in layer.flat()]
        assert group_witness_into_layers(flat) == layers

    def test_zero_length_runs(self):
        assert group_witness_into_layers([0, 0, 0, 0]) == [FriLayer([], []), FriLayer([], [])]

    def test_dangling_run(self):
        with pytest.raises(ParseError, match="no authentication run"):
            group_witness_into_layers([2, 10, 11, 1, 99, 1, 20])

    def test_truncated_leaves(self):
        with pytest.raises(ParseError, match="truncated leaves"):
            group_witness_into_layers([5, 1, 2])

    def test_truncated_authentications(self):
        with pytest.raises(ParseError, match="truncated authentications"):
            group_witness_into_layers([1, 7, 3, 1])


class TestFriState:
    """State fragment encodings."""

    def test_constant_layout(self):
        constant = FriStateConstant(2, [11, 12], [21, 22], [3, 1], 99)
        assert constant.encode() == [2, 2, 11, 12, 2, 21, 22, 2, 3, 1, 99]
        assert FriStateConstant.decode(FeltReader(constant.encode())) == constant

    def test_variable_layout(self):
        variable = FriStateVariable(1, [(4, 40), (7, 70)])
        assert variable.encode() == [1, 4, 4, 40, 7, 70]
        assert FriStateVariable.decode(FeltReader(variable.encode())) == variable

    def test_variable_odd_pairs(self):
        with pytest.raises(ValueError):
            FriStateVariable.decode(FeltReader([0, 3, 1, 2, 3]))
