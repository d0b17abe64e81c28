# This file is part of qmaster, built on QuTiP: Quantum Toolbox in Python.
#
#    Copyright (c) 2011 and later, Paul D. Nation and Robert J. Johansson.
#    All rights reserved.
#
#    Redistribution and use in source and binary forms, with or without
#    modification, are permitted provided that the following conditions are
#    met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
#    3. Neither the name of the QuTiP: Quantum Toolbox in Python nor the names
#       of its contributors may be used to endorse or promote products derived
#       from this software without specific prior written permission.
#
#    THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
#    "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
#    LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A
#    PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT
#    HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL,
#    SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
#    LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE,
#    DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY
#    THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT
#    (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
#    OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
###############################################################################

import numpy as np
import pytest
from numpy.testing import assert_allclose

from qmaster import (
    expect, variance, num, destroy, qeye, basis, fock_dm, coherent,
    coherent_dm, thermal_dm, tensor, DimensionMismatch,
)


def test_expect_ket_and_dm():
    N = 6
    psi = basis(N, 3)
    assert expect(num(N), psi) == 3
    assert expect(num(N), fock_dm(N, 3)) == pytest.approx(3)
    assert isinstance(expect(num(N), psi), float)
    assert isinstance(expect(num(N), fock_dm(N, 3)), float)


def test_expect_non_hermitian():
    N = 20
    alpha = 0.5 + 0.5j
    value = expect(destroy(N), coherent_dm(N, alpha))
    assert isinstance(value, complex)
    assert value == pytest.approx(alpha, abs=1e-8)


def test_expect_dm_sparse_and_dense():
    rho = thermal_dm(150, 1.0)
    assert rho.issparse
    n = num(150)
    assert expect(n, rho) == pytest.approx(1.0, abs=1e-8)
    assert expect(n.to_dense(), rho) == pytest.approx(1.0, abs=1e-8)
    assert expect(n, rho.to_dense()) == pytest.approx(1.0, abs=1e-8)


def test_expect_lists():
    N = 5
    states = [basis(N, n) for n in range(N)]
    assert_allclose(expect(num(N), states), np.arange(N))
    ops = [num(N), qeye(N)]
    assert_allclose(expect(ops, fock_dm(N, 2)), [2, 1])
    values = expect(ops, states)
    assert_allclose(values[0], np.arange(N))
    assert_allclose(values[1], np.ones(N))


def test_expect_composite():
    psi = basis([5, 11], [1, 2])
    n_b = tensor(qeye(5), num(11))
    n_a = tensor(num(5), qeye(11))
    assert expect(n_a, psi) == pytest.approx(1)
    assert expect(n_b, psi) == pytest.approx(2)


def test_expect_dimension_mismatch():
    with pytest.raises(DimensionMismatch):
        expect(num(4), basis(5, 0))


def test_expect_type_errors():
    with pytest.raises(TypeError):
        expect(num(3), np.eye(3))
    with pytest.raises(TypeError):
        expect(basis(3, 0), basis(3, 0))


def test_variance():
    N = 30
    alpha = 1.1
    psi = coherent(N, alpha)
    assert variance(num(N), psi) == pytest.approx(alpha ** 2, abs=1e-6)
    assert variance(num(N), basis(N, 4)) == pytest.approx(0, abs=1e-12)
