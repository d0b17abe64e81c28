"""
Superoperators acting on density matrices in the column-stacked
vectorization ``vec(rho)``, and the Lindblad Liouvillian.
"""

__all__ = ['liouvillian', 'lindblad_dissipator', 'spre', 'spost', 'sprepost',
           'operator_to_vector', 'vector_to_operator', 'mat2vec', 'vec2mat',
           'vec2mat_index', 'mat2vec_index', 'collapse_operators']

import numbers

import numpy as np
import scipy.sparse as sp

from qmaster.qobj import Qobj
from qmaster.exceptions import DimensionMismatch, InvalidParameter


def mat2vec(mat):
    """
    Private function reshaping matrix to vector.
    """
    return mat.T.reshape(np.prod(np.shape(mat)), 1)


def vec2mat(vec, shape=None):
    """
    Private function reshaping vector to matrix.
    """
    if shape is None:
        n = int(np.sqrt(len(vec)))
        shape = (n, n)
    return vec.reshape(shape[::-1]).T


def vec2mat_index(N, I):
    """
    Convert a vector index to a matrix index pair that is compatible with the
    vector to matrix rearrangement done by the vec2mat function.
    """
    j = int(I / N)
    i = I - N * j
    return i, j


def mat2vec_index(N, i, j):
    """
    Convert a matrix index pair to a vector index that is compatible with the
    matrix to vector rearrangement done by the mat2vec function.
    """
    return i + N * j


def _super_dims(op_dims):
    return [[op_dims[0], op_dims[1]], [op_dims[0], op_dims[1]]]


def _identity(N):
    return sp.identity(N, dtype=complex, format='csr')


def _csr(data):
    return sp.csr_matrix(data, dtype=complex)


def operator_to_vector(op):
    """
    Create a vector representation of a quantum operator given
    the matrix representation.
    """
    if not op.isoper:
        raise TypeError("Only operators can be vectorized")
    return Qobj(mat2vec(op.full()), dims=[op.dims, [1]])


def vector_to_operator(op):
    """
    Create a matrix representation given a quantum operator in
    vector form.
    """
    if not op.isoperket:
        raise TypeError("Only operator-kets can be turned into operators")
    dims = op.dims[0]
    return Qobj(vec2mat(op.full()), dims=dims)


def spost(A):
    """Superoperator formed from post-multiplication by operator A

    Parameters
    ----------
    A : Qobj
        Quantum operator for post multiplication.

    Returns
    -------
    super : Qobj
        Superoperator formed from input qauntum object.
    """
    if not isinstance(A, Qobj):
        raise TypeError('Input is not a quantum object')

    if not A.isoper:
        raise TypeError('Input is not a quantum operator')

    data = sp.kron(_csr(A.data).T, _identity(A.shape[0]), format='csr')
    return Qobj(data, dims=_super_dims(A.dims), isherm=A._isherm,
                copy=False, superrep='super')


def spre(A):
    """Superoperator formed from pre-multiplication by operator A.

    Parameters
    ----------
    A : Qobj
        Quantum operator for pre-multiplication.

    Returns
    --------
    super : Qobj
        Superoperator formed from input quantum object.
    """
    if not isinstance(A, Qobj):
        raise TypeError('Input is not a quantum object')

    if not A.isoper:
        raise TypeError('Input is not a quantum operator')

    data = sp.kron(_identity(A.shape[1]), _csr(A.data), format='csr')
    return Qobj(data, dims=_super_dims(A.dims), isherm=A._isherm,
                copy=False, superrep='super')


def sprepost(A, B):
    """Superoperator formed from pre-multiplication by operator A and post-
    multiplication of operator B.
    """
    return spre(A) * spost(B)


def collapse_operators(c_ops):
    """
    Normalize a list of jump channels into rate-weighted collapse operators.

    Each entry is either a bare operator ``C`` (used as is) or a pair
    ``(J, rate)`` which becomes ``sqrt(rate) * J``. Rates must be
    non-negative; channels with zero rate are dropped.

    Returns
    -------
    c_ops : list of :class:`qmaster.Qobj`
    """
    if c_ops is None:
        return []
    if isinstance(c_ops, (Qobj, tuple)):
        c_ops = [c_ops]

    out = []
    for channel in c_ops:
        if isinstance(channel, Qobj):
            op, rate = channel, None
        elif isinstance(channel, (tuple, list)) and len(channel) == 2:
            op, rate = channel
        else:
            raise TypeError("Collapse channels must be operators or "
                            "(operator, rate) pairs, not %r" % (channel,))
        if not isinstance(op, Qobj) or not op.isoper:
            raise TypeError("Collapse operator must be a quantum operator")
        if rate is None:
            out.append(op)
            continue
        if not isinstance(rate, numbers.Real) or not np.isfinite(rate):
            raise InvalidParameter("Rate must be a finite real number, not "
                                   "%r" % (rate,))
        if rate < 0:
            raise InvalidParameter("Rate must be non-negative, got %g"
                                   % rate)
        if rate > 0:
            out.append(op * np.sqrt(rate))
    return out


def lindblad_dissipator(a, b=None):
    """
    Lindblad dissipator (generalized) for a single pair of collapse operators
    (a, b), or for a single collapse operator (a) when b is not specified:

    .. math::

        \\mathcal{D}[a,b]\\rho = a \\rho b^\\dagger -
        \\frac{1}{2}a^\\dagger b\\rho - \\frac{1}{2}\\rho a^\\dagger b

    Parameters
    ----------
    a : Qobj
        Left part of collapse operator.

    b : Qobj (optional)
        Right part of collapse operator. If not specified, b defaults to a.

    Returns
    -------
    D : qobj
        Lindblad dissipator superoperator.
    """
    if b is None:
        b = a
    ad_b = a.dag() * b
    D = spre(a) * spost(b.dag()) - 0.5 * spre(ad_b) - 0.5 * spost(ad_b)
    D.isherm = None
    return D


def liouvillian(H, c_ops=[]):
    """Assembles the Liouvillian superoperator from a Hamiltonian
    and a ``list`` of collapse operators.

    .. math::

        \\mathcal{L} = -i(I \\otimes H - H^T \\otimes I) +
        \\sum_k \\left(C_k^* \\otimes C_k
        - \\frac{1}{2} I \\otimes C_k^\\dagger C_k
        - \\frac{1}{2} (C_k^\\dagger C_k)^T \\otimes I\\right)

    acting on the column-stacked density matrix.

    Parameters
    ----------
    H : Qobj or None
        System Hamiltonian, or an already assembled superoperator.

    c_ops : array_like
        A ``list`` of collapse operators, or ``(operator, rate)`` pairs.

    Returns
    -------
    L : Qobj
        Liouvillian superoperator.
    """
    c_ops = collapse_operators(c_ops)

    if H is not None:
        if not isinstance(H, Qobj):
            raise TypeError("Hamiltonian must be a quantum object")
        if H.isoper:
            op_dims = H.dims
        elif H.issuper:
            op_dims = H.dims[0]
        else:
            raise TypeError("Invalid type for Hamiltonian.")
    elif c_ops:
        op_dims = c_ops[0].dims
    else:
        raise TypeError("Either H or c_ops must be given.")

    if op_dims[0] != op_dims[1]:
        raise DimensionMismatch("Liouvillians need square operators, got "
                                "dims %s" % (op_dims,))
    N = int(np.prod(op_dims[0]))
    spI = _identity(N)

    if H is None:
        data = sp.csr_matrix((N * N, N * N), dtype=complex)
    elif H.isoper:
        h = _csr(H.data)
        data = -1j * sp.kron(spI, h, format='csr')
        data = data + 1j * sp.kron(h.T, spI, format='csr')
    else:
        data = _csr(H.data)

    for c_ in c_ops:
        if c_.dims != op_dims:
            raise DimensionMismatch("Collapse operator dims %s do not match "
                                    "Hamiltonian dims %s"
                                    % (c_.dims, op_dims))
        c = _csr(c_.data)
        cdc = c.conj().T @ c
        data = data + sp.kron(c.conj(), c, format='csr')
        data = data - 0.5 * sp.kron(spI, cdc, format='csr')
        data = data - 0.5 * sp.kron(cdc.T, spI, format='csr')

    return Qobj(data.tocsr(), dims=_super_dims(op_dims), copy=False,
                superrep='super')
