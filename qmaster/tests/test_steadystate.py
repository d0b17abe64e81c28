import numpy as np
import pytest
from numpy.testing import assert_allclose

from qmaster import (
    Qobj, steadystate, liouvillian, destroy, num, qeye, basis, fock_dm,
    thermal_dm, expect, tensor, InvalidParameter, SteadyStateNotFound,
)


def _thermal_oscillator(N=20, n_th=0.5, gamma=1.0):
    a = destroy(N)
    c_ops = [(a, gamma * (n_th + 1)), (a.dag(), gamma * n_th)]
    return num(N), c_ops


@pytest.mark.parametrize(["method", "kwargs"], [
    pytest.param("eigen", {}, id="eigen"),
    pytest.param("eigen", {"sparse": False}, id="eigen dense"),
    pytest.param("direct", {}, id="direct"),
    pytest.param("direct", {"sparse": False}, id="direct dense"),
    pytest.param("svd", {}, id="svd"),
])
def test_thermal_oscillator(method, kwargs):
    "Steady state of a damped oscillator is the thermal state"
    N = 20
    n_th = 0.5
    H, c_ops = _thermal_oscillator(N, n_th)
    rho_ss = steadystate(H, c_ops, method=method, **kwargs)
    assert rho_ss.isherm
    assert rho_ss.dims == [[N], [N]]
    assert rho_ss.tr() == pytest.approx(1, abs=1e-10)
    assert_allclose(rho_ss.full(), thermal_dm(N, n_th).full(), atol=1e-8)
    assert expect(num(N), rho_ss) == pytest.approx(n_th, abs=1e-6)


def test_vacuum_steady_state():
    N = 6
    a = destroy(N)
    rho_ss = steadystate(num(N), [np.sqrt(0.5) * a])
    assert_allclose(rho_ss.full(), fock_dm(N, 0).full(), atol=1e-8)


def test_driven_cavity():
    "A driven damped cavity settles in a coherent state"
    N = 20
    kappa = 1.0
    eta = 0.5
    delta = 0.0
    a = destroy(N)
    H = -delta * a.dag() * a + eta * (a + a.dag())
    rho_ss = steadystate(H, [(a, kappa)])
    alpha = -2j * eta / kappa
    assert expect(a, rho_ss) == pytest.approx(alpha, abs=1e-6)
    assert expect(num(N), rho_ss) == pytest.approx(abs(alpha) ** 2, abs=1e-6)


def test_liouvillian_input():
    H, c_ops = _thermal_oscillator(10, 0.2)
    L = liouvillian(H, c_ops)
    assert_allclose(steadystate(L).full(), steadystate(H, c_ops).full(),
                    atol=1e-8)


def test_return_info():
    H, c_ops = _thermal_oscillator(10, 0.2)
    rho_ss, info = steadystate(H, c_ops, return_info=True)
    assert info['method'] == 'eigen'
    assert abs(info['eigenvalue']) < 1e-8
    assert info['residual_norm'] < 1e-8
    assert info['solution_time'] >= 0
    _, info = steadystate(H, c_ops, method='direct', return_info=True)
    assert info['method'] == 'direct'
    assert info['eigenvalue'] is None
    assert info['residual_norm'] < 1e-8


@pytest.mark.parametrize("sparse", [True, False])
def test_no_zero_eigenvalue(sparse):
    "A Liouvillian shifted away from zero has no steady state"
    H, c_ops = _thermal_oscillator(10, 0.2)
    L = liouvillian(H, c_ops)
    shifted = Qobj(L.full() - np.eye(L.shape[0]), dims=L.dims)
    assert shifted.issuper
    with pytest.raises(SteadyStateNotFound):
        steadystate(shifted, method='eigen', sparse=sparse)


def test_no_collapse_operators():
    with pytest.raises(InvalidParameter):
        steadystate(num(4), [])
    with pytest.raises(InvalidParameter):
        steadystate(num(4), [(destroy(4), 0.0)])


def test_invalid_arguments():
    H, c_ops = _thermal_oscillator(4, 0.2)
    with pytest.raises(TypeError):
        steadystate(basis(4, 0), c_ops)
    with pytest.raises(TypeError):
        steadystate(H, c_ops, use_rcm=True)
    with pytest.raises(TypeError):
        steadystate(H, c_ops, info={"method": "svd"})
    with pytest.raises(ValueError):
        steadystate(H, c_ops, method='power')
    with pytest.raises(InvalidParameter):
        steadystate(H, [(destroy(4), -1.0)])


def test_composite_dims():
    a = destroy(3)
    H = num(3)
    A = tensor(a, qeye(2))
    rho_ss = steadystate(tensor(H, qeye(2)), [A, tensor(qeye(3), destroy(2))])
    assert rho_ss.dims == [[3, 2], [3, 2]]
    assert_allclose(rho_ss.full(), basis([3, 2], [0, 0]).proj().full(),
                    atol=1e-8)
