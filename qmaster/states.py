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
"""
Number states, thermal states and coherent states of truncated Fock spaces.
"""

__all__ = ['basis', 'fock', 'fock_dm', 'ket2dm', 'thermal_dm', 'coherent',
           'coherent_dm', 'maximally_mixed_dm', 'zero_ket', 'product_state']

import numbers

import numpy as np
import scipy.sparse as sp

from qmaster.qobj import Qobj
from qmaster.dimensions import Basis, CompositeBasis
from qmaster.operators import displace, _dimension
from qmaster.tensor import tensor
from qmaster.exceptions import InvalidParameter


def _composite(N):
    if isinstance(N, CompositeBasis):
        return N
    if isinstance(N, Basis):
        return CompositeBasis(N)
    if isinstance(N, (list, tuple)):
        return CompositeBasis.from_dims([_dimension(n) for n in N])
    return CompositeBasis(Basis(_dimension(N)))


def basis(N, n=0, offset=0):
    """Generates the vector representation of a Fock state.

    Parameters
    ----------
    N : int, list of ints, Basis or CompositeBasis
        Number of Fock states in Hilbert space. A list (or composite basis)
        builds the product state of several modes.

    n : int or list of ints
        Occupation number of each mode.

    offset : int (default 0)
        The lowest number state that is included in the finite number state
        representation of the state.

    Returns
    -------
    state : qobj
        Qobj representing the requested number state ``|n>``.

    Examples
    --------
    >>> basis([5, 11], [0, 2]).dims # doctest: +SKIP
    [[5, 11], [1, 1]]

    Notes
    -----
    ``basis(N, 0)`` is the ground state.
    """
    space = _composite(N)
    if not isinstance(n, (list, tuple, np.ndarray)):
        n = [n]
    n = list(n)
    if len(n) != len(space.bases):
        raise InvalidParameter("Expected %d occupation numbers, got %d"
                               % (len(space.bases), len(n)))
    for occupation in n:
        if not isinstance(occupation, numbers.Integral) \
                or occupation < offset:
            raise InvalidParameter("Occupation numbers must be integers "
                                   ">= %d, not %r" % (offset, occupation))
    idx = space.index([occupation - offset for occupation in n])

    bas = sp.lil_matrix((space.N, 1), dtype=complex)  # column of zeros
    bas[idx, 0] = 1  # 1 located at position n
    return Qobj(bas.tocsr(), dims=[space.dims, [1] * len(space.dims)])


def fock(N, n=0, offset=0):
    """Bosonic Fock (number) state.

    Same as :func:`qmaster.states.basis`.
    """
    return basis(N, n=n, offset=offset)


def fock_dm(N, n=0, offset=0):
    """Density matrix representation of a Fock state.

    Constructed via outer product of :func:`qmaster.states.fock`.
    """
    return basis(N, n, offset=offset).proj()


def ket2dm(Q):
    """Takes input ket or bra vector and returns density matrix
    formed by outer product.

    Parameters
    ----------
    Q : qobj
        Ket or bra type quantum object.

    Returns
    -------
    dm : qobj
        Density matrix formed by outer product of `Q`.
    """
    if Q.isket or Q.isbra or Q.shape == [1, 1]:
        out = Q.proj()
        out.isherm = True
        return out
    raise TypeError("Input is not a ket or bra vector.")


def product_state(*states):
    """Density matrix of a product of single-mode states.

    Kets are turned into projectors before taking the tensor product.
    """
    if len(states) == 1 and isinstance(states[0], (list, tuple)):
        states = states[0]
    return tensor([ket2dm(s) if s.isket else s for s in states])


def thermal_dm(N, n, method='operator'):
    """Density matrix for a thermal state of n particles

    Parameters
    ----------
    N : int or Basis
        Number of basis states in Hilbert space.

    n : float
        Expectation value for number of particles in thermal state.

    method : string {'operator', 'analytic'}
        ``string`` that sets the method used to generate the
        thermal state probabilities

    Returns
    -------
    dm : qobj
        Thermal state density matrix.

    Notes
    -----
    The 'operator' method (default) generates the thermal state using the
    truncated number operator and is normalized on the truncated space. The
    'analytic' method uses the analytic coefficients derived in an infinite
    Hilbert space, which are not normalized when truncated too aggressively.
    """
    N = _dimension(N)
    if n < 0:
        raise InvalidParameter("Thermal occupation must be non-negative")
    if n == 0:
        return fock_dm(N, 0)
    i = np.arange(N)
    if method == 'operator':
        beta = np.log(1.0 / n + 1.0)
        diags = np.exp(-beta * i)
        diags = diags / np.sum(diags)
    elif method == 'analytic':
        diags = (1.0 + n) ** (-1.0) * (n / (1.0 + n)) ** i
    else:
        raise InvalidParameter(
            "'method' keyword argument must be 'operator' or 'analytic'")
    return Qobj(sp.diags(diags, 0, shape=(N, N), format='csr'), isherm=True)


def coherent(N, alpha, offset=0):
    """Generates a coherent state with eigenvalue alpha.

    Constructed by displacing the vacuum with the truncated displacement
    operator, so the result is normalized on the truncated space.
    """
    N = _dimension(N)
    x = basis(N, offset, offset=offset)
    return displace(N, alpha, offset=offset) * x


def coherent_dm(N, alpha, offset=0):
    """Density matrix representation of a coherent state.
    """
    return ket2dm(coherent(N, alpha, offset=offset))


def maximally_mixed_dm(N):
    """
    Returns the maximally mixed density matrix for a Hilbert space of
    dimension N.
    """
    N = _dimension(N)
    return Qobj(sp.identity(N, dtype=complex, format='csr') / N,
                isherm=True)


def zero_ket(N):
    """
    Creates the zero ket vector with shape Nx1 and dimensions `dims`.
    """
    space = _composite(N)
    return Qobj(sp.csr_matrix((space.N, 1), dtype=complex),
                dims=[space.dims, [1] * len(space.dims)])
