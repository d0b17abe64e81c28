import pickle

import numpy as np
import pytest
from numpy.testing import assert_equal

from qmaster.dimensions import (
    Basis, CompositeBasis, flatten, type_from_dims,
)
from qmaster.exceptions import InvalidParameter


def test_flatten():
    l = [[[0], 1], 2]
    assert_equal(flatten(l), [0, 1, 2])


@pytest.mark.parametrize(["dims", "expected"], [
    pytest.param([[5, 11], [5, 11]], 'oper', id="oper"),
    pytest.param([[5, 11], [1, 1]], 'ket', id="ket"),
    pytest.param([[1, 1], [5, 11]], 'bra', id="bra"),
    pytest.param([[[5, 11], [5, 11]], [[5, 11], [5, 11]]], 'super',
                 id="super"),
    pytest.param([[[5, 11], [5, 11]], [1]], 'operator-ket',
                 id="operator-ket"),
    pytest.param([[1], [1]], 'oper', id="oper-1d"),
    pytest.param([[[1], [1]], [[1], [1]]], 'super', id="super-1d"),
    pytest.param([[[1], [1]], [1]], 'operator-ket', id="operator-ket-1d"),
])
def test_type_from_dims(dims, expected):
    assert type_from_dims(dims) == expected


class TestBasis:
    def test_dimension_and_label(self):
        cavity = Basis(5, label="cavity")
        assert cavity.N == 5
        assert len(cavity) == 5
        assert cavity.label == "cavity"
        assert cavity.dims == [5]
        assert list(cavity) == [0, 1, 2, 3, 4]
        assert 4 in cavity
        assert 5 not in cavity

    @pytest.mark.parametrize("N", [0, -3, 2.5, "5", True])
    def test_invalid_dimension(self, N):
        with pytest.raises(InvalidParameter):
            Basis(N)

    def test_immutable(self):
        basis = Basis(3)
        with pytest.raises(AttributeError):
            basis.N = 4
        with pytest.raises(AttributeError):
            basis._N = 4

    def test_equality_and_hash(self):
        assert Basis(3) == Basis(3)
        assert Basis(3, "a") != Basis(3, "b")
        assert Basis(3) != Basis(4)
        assert len({Basis(3), Basis(3), Basis(4)}) == 2

    def test_numpy_integer_dimension(self):
        assert Basis(np.int64(7)).N == 7

    def test_pickle(self):
        basis = Basis(4, label="mechanics")
        assert pickle.loads(pickle.dumps(basis)) == basis

    def test_check_index(self):
        basis = Basis(3)
        assert basis.check_index(2) == 2
        with pytest.raises(InvalidParameter):
            basis.check_index(3)


class TestCompositeBasis:
    def test_product(self):
        space = Basis(5, "cavity") * Basis(11, "mechanics")
        assert isinstance(space, CompositeBasis)
        assert space.dims == [5, 11]
        assert space.N == 55
        assert space[1].label == "mechanics"

    def test_product_flattens(self):
        space = (Basis(2) * Basis(3)) * Basis(4)
        assert space.dims == [2, 3, 4]
        space = Basis(2) * (Basis(3) * Basis(4))
        assert space.dims == [2, 3, 4]

    def test_row_major_index(self):
        space = CompositeBasis.from_dims([5, 11])
        assert space.index(0, 0) == 0
        assert space.index(0, 2) == 2
        assert space.index(1, 0) == 11
        assert space.index(3, 7) == 3 * 11 + 7
        assert space.index([4, 10]) == 54

    def test_occupations_inverts_index(self):
        space = CompositeBasis.from_dims([3, 4, 2])
        for idx in range(space.N):
            assert space.index(*space.occupations(idx)) == idx

    @pytest.mark.parametrize("occupations", [(5, 0), (0, 11), (-1, 0),
                                             (1,), (1, 1, 1)])
    def test_invalid_index(self, occupations):
        space = CompositeBasis.from_dims([5, 11])
        with pytest.raises(InvalidParameter):
            space.index(*occupations)

    def test_invalid_flat_index(self):
        with pytest.raises(InvalidParameter):
            CompositeBasis.from_dims([2, 2]).occupations(4)

    def test_equality_and_pickle(self):
        space = Basis(5, "cavity") * Basis(11, "mechanics")
        assert space == CompositeBasis(Basis(5, "cavity"),
                                       Basis(11, "mechanics"))
        assert space != CompositeBasis.from_dims([5, 11])
        assert pickle.loads(pickle.dumps(space)) == space
        assert hash(space) == hash(pickle.loads(pickle.dumps(space)))

    def test_empty(self):
        with pytest.raises(InvalidParameter):
            CompositeBasis()
