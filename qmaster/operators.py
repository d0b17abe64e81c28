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
This module contains functions for generating Qobj representation of the
operators acting on truncated Fock spaces.
"""

__all__ = ['destroy', 'create', 'qeye', 'identity', 'num', 'position',
           'momentum', 'displace', 'commutator', 'qzero']

import numbers

import numpy as np
import scipy.sparse as sp
import scipy.linalg as la

from qmaster.qobj import Qobj
from qmaster.dimensions import Basis, CompositeBasis
from qmaster.exceptions import InvalidParameter


def _dimension(N):
    """
    Hilbert space dimension from an integer or a :class:`Basis`.
    """
    if isinstance(N, Basis):
        return N.N
    if not isinstance(N, numbers.Integral) or isinstance(N, bool):
        raise InvalidParameter("Hilbert space dimension must be integer "
                               "value, not %r" % (N,))
    if N < 1:
        raise InvalidParameter("Hilbert space dimension must be positive, "
                               "not %d" % N)
    return int(N)


def _dims_list(N):
    if isinstance(N, CompositeBasis):
        return N.dims
    if isinstance(N, (list, tuple)):
        return [_dimension(n) for n in N]
    return [_dimension(N)]


#
# DESTROY returns annihilation operator for N dimensional Hilbert space
# out = destroy(N), N is integer value &  N>0
#
def destroy(N, offset=0, dtype=None):
    '''Destruction (lowering) operator.

    Parameters
    ----------
    N : int or Basis
        Dimension of Hilbert space.

    offset : int (default 0)
        The lowest number state that is included in the finite number state
        representation of the operator.

    dtype : {None, 'dense', 'sparse'}
        Storage representation.

    Returns
    -------
    oper : qobj
        Qobj for lowering operator.

    Examples
    --------
    >>> destroy(4) # doctest: +SKIP
    Quantum object: dims = [[4], [4]], shape = [4, 4], type = oper, \
isherm = False
    Qobj data =
    [[0.         1.         0.         0.        ]
     [0.         0.         1.41421356 0.        ]
     [0.         0.         0.         1.73205081]
     [0.         0.         0.         0.        ]]

    '''
    N = _dimension(N)
    data = np.sqrt(np.arange(offset + 1, N + offset, dtype=complex))
    ind = np.arange(1, N, dtype=np.int32)
    ptr = np.arange(N + 1, dtype=np.int32)
    ptr[-1] = N - 1
    data = sp.csr_matrix((data, ind, ptr), shape=(N, N))
    return Qobj(data, isherm=(N == 1), dtype=dtype)


#
# create returns creation operator for N dimensional Hilbert space
# out = create(N), N is integer value &  N>0
#
def create(N, offset=0, dtype=None):
    '''Creation (raising) operator.

    Parameters
    ----------
    N : int or Basis
        Dimension of Hilbert space.

    offset : int (default 0)
        The lowest number state that is included in the finite number state
        representation of the operator.

    Returns
    -------
    oper : qobj
        Qobj for raising operator.
    '''
    return destroy(N, offset=offset, dtype=dtype).dag()


#
# QEYE returns identity operator for an N dimensional space
# a = qeye(N), N is integer & N>0
#
def qeye(N, dtype=None):
    """
    Identity operator

    Parameters
    ----------
    N : int, list of ints, Basis or CompositeBasis
        Dimension of Hilbert space. If provided as a list of ints,
        then the dimension is the product over this list, but the
        ``dims`` property of the new Qobj are set to this list.

    Returns
    -------
    oper : qobj
        Identity operator Qobj.
    """
    dims = _dims_list(N)
    size = int(np.prod(dims))
    return Qobj(sp.eye(size, size, dtype=complex, format='csr'),
                dims=[dims, dims], isherm=True, dtype=dtype)


def identity(N, dtype=None):
    """Identity operator. Alternative name to :func:`qeye`.
    """
    return qeye(N, dtype=dtype)


def qzero(N, dtype=None):
    """
    Zero operator

    Parameters
    ----------
    N : int, list of ints, Basis or CompositeBasis
        Dimension of Hilbert space.

    Returns
    -------
    qzero : qobj
        Zero operator Qobj.
    """
    dims = _dims_list(N)
    size = int(np.prod(dims))
    return Qobj(sp.csr_matrix((size, size), dtype=complex),
                dims=[dims, dims], isherm=True, dtype=dtype)


#
# NUMBER operator
#
def num(N, offset=0, dtype=None):
    """Quantum object for number operator.

    Parameters
    ----------
    N : int or Basis
        The dimension of the Hilbert space.

    offset : int (default 0)
        The lowest number state that is included in the finite number state
        representation of the operator.

    Returns
    -------
    oper: qobj
        Qobj for number operator.
    """
    N = _dimension(N)
    data = sp.diags(np.arange(offset, N + offset, dtype=complex), 0,
                    shape=(N, N), format='csr')
    return Qobj(data, isherm=True, dtype=dtype)


def position(N, offset=0):
    """
    Position operator x=1/sqrt(2)*(a+a.dag())
    """
    a = destroy(N, offset=offset)
    out = 1.0 / np.sqrt(2.0) * (a + a.dag())
    out.isherm = True
    return out


def momentum(N, offset=0):
    """
    Momentum operator p=-1j/sqrt(2)*(a-a.dag())
    """
    a = destroy(N, offset=offset)
    out = -1j / np.sqrt(2.0) * (a - a.dag())
    out.isherm = True
    return out


def displace(N, alpha, offset=0):
    """Single-mode displacement operator.

    Parameters
    ----------
    N : int or Basis
        Dimension of Hilbert space.

    alpha : float/complex
        Displacement amplitude.

    Returns
    -------
    oper : qobj
        Displacement operator.
    """
    a = destroy(N, offset=offset)
    generator = alpha * a.dag() - np.conj(alpha) * a
    return Qobj(la.expm(generator.full()), dims=generator.dims)


def commutator(A, B, kind="normal"):
    """
    Return the commutator of kind `kind` (normal, anti) of the
    two operators A and B.
    """
    if kind == 'normal':
        return A * B - B * A

    elif kind == 'anti':
        return A * B + B * A

    else:
        raise TypeError("Unknown commutator kind '%s'" % kind)
