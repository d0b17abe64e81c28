import numpy as np
import pytest
from numpy.testing import assert_allclose

from qmaster import (
    Basis, basis, fock, fock_dm, ket2dm, thermal_dm, coherent, coherent_dm,
    maximally_mixed_dm, zero_ket, product_state, num, destroy, expect,
    tensor, InvalidParameter,
)


def test_basis_single_mode():
    psi = basis(4, 2)
    assert psi.isket
    assert psi.dims == [[4], [1]]
    assert_allclose(psi.full().ravel(), [0, 0, 1, 0])
    assert fock(4, 2) == psi


@pytest.mark.parametrize(["occupations", "index"], [
    pytest.param([0, 0], 0, id="vacuum"),
    pytest.param([0, 2], 2, id="two phonons"),
    pytest.param([1, 2], 13, id="photon and phonons"),
    pytest.param([4, 10], 54, id="last"),
])
def test_basis_composite_index(occupations, index):
    "composite index is n_a * N_b + n_b"
    psi = basis([5, 11], occupations)
    assert psi.dims == [[5, 11], [1, 1]]
    data = psi.full().ravel()
    assert data[index] == 1
    assert np.count_nonzero(data) == 1


def test_basis_from_composite_basis():
    space = Basis(5, label="cavity") * Basis(11, label="mechanics")
    assert basis(space, [0, 2]) == basis([5, 11], [0, 2])


@pytest.mark.parametrize(["N", "n"], [
    pytest.param(5, 5, id="too large"),
    pytest.param(5, -1, id="negative"),
    pytest.param([5, 11], [0, 11], id="composite too large"),
    pytest.param([5, 11], [0], id="missing occupation"),
    pytest.param(5, 1.5, id="not integer"),
])
def test_basis_out_of_range(N, n):
    with pytest.raises(InvalidParameter):
        basis(N, n)


def test_fock_dm():
    rho = fock_dm(5, 3)
    assert rho.isoper
    assert rho.tr() == pytest.approx(1)
    assert expect(num(5), rho) == pytest.approx(3)
    assert ket2dm(basis(5, 3)) == rho


def test_ket2dm_errors():
    with pytest.raises(TypeError):
        ket2dm(num(3))


def test_product_state():
    rho = product_state(basis(5, 0), basis(11, 2))
    assert rho == basis([5, 11], [0, 2]).proj()
    assert rho == tensor(fock_dm(5, 0), fock_dm(11, 2))


@pytest.mark.parametrize("method", ["operator", "analytic"])
def test_thermal_dm(method):
    N = 40
    n = 0.5
    rho = thermal_dm(N, n, method=method)
    assert rho.isherm
    assert rho.tr() == pytest.approx(1, abs=1e-10)
    assert expect(num(N), rho) == pytest.approx(n, abs=1e-10)
    p = np.real(rho.diag())
    assert np.all(np.diff(p) < 0)


def test_thermal_dm_zero():
    assert thermal_dm(5, 0) == fock_dm(5, 0)


def test_thermal_dm_errors():
    with pytest.raises(InvalidParameter):
        thermal_dm(5, -0.1)
    with pytest.raises(InvalidParameter):
        thermal_dm(5, 0.5, method='unknown')


def test_coherent():
    N = 25
    alpha = 1.2j
    psi = coherent(N, alpha)
    assert psi.norm() == pytest.approx(1, abs=1e-10)
    assert expect(destroy(N), psi) == pytest.approx(alpha, abs=1e-6)
    assert expect(num(N), coherent_dm(N, alpha)) == \
        pytest.approx(abs(alpha) ** 2, abs=1e-6)


def test_maximally_mixed_dm():
    rho = maximally_mixed_dm(4)
    assert_allclose(rho.full(), np.eye(4) / 4)
    assert rho.isherm


def test_zero_ket():
    psi = zero_ket([2, 3])
    assert psi.isket
    assert psi.dims == [[2, 3], [1, 1]]
    assert psi.norm() == 0


def test_single_level_states():
    "In a one dimensional space kets and density matrices coincide"
    rho = fock_dm(1, 0)
    assert rho.isoper
    assert_allclose(rho.full(), [[1]])
    assert ket2dm(basis(1, 0)) == rho
