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
"""The Quantum Object (Qobj) class, for representing quantum states and
operators, and related functions.
"""

__all__ = ['Qobj', 'ptrace', 'dag', 'isequal', 'issuper', 'isoper',
           'isket', 'isbra', 'isherm', 'shape', 'dims']

import numbers
import string
import warnings

import numpy as np
import scipy.sparse as sp
import scipy.linalg as la

from qmaster.settings import settings
from qmaster.version import version as __version__
from qmaster.dimensions import (flatten, type_from_dims, is_scalar,
                                CompositeBasis)
from qmaster.exceptions import DimensionMismatch, InvalidParameter

_SCALARS = (numbers.Number, np.number)


def _is_sparse(data):
    return sp.issparse(data)


def _to_dense(data):
    if _is_sparse(data):
        return data.toarray()
    return np.asarray(data)


def _use_sparse(shape, dtype):
    if dtype is None:
        return max(shape) > settings.sparse_threshold
    if dtype in ('sparse', 'csr'):
        return True
    if dtype in ('dense', 'array'):
        return False
    raise InvalidParameter("Unknown storage type %r, expected 'dense' or "
                           "'sparse'" % (dtype,))


def _as_backing(data, sparse):
    if sparse:
        if _is_sparse(data):
            return sp.csr_matrix(data, dtype=complex, copy=True)
        return sp.csr_matrix(np.asarray(data, dtype=complex))
    return np.array(_to_dense(data), dtype=complex, copy=True)


def _data_add(left, right):
    if _is_sparse(left) and _is_sparse(right):
        return (left + right).tocsr()
    return _to_dense(left) + _to_dense(right)


def _data_matmul(left, right):
    if _is_sparse(left) and _is_sparse(right):
        return (left @ right).tocsr()
    return _to_dense(left) @ _to_dense(right)


def _hermitian_defect(data):
    diff = data - data.conj().T
    if _is_sparse(diff):
        return abs(diff).max() if diff.nnz else 0.
    return np.max(np.abs(diff)) if diff.size else 0.


class Qobj(object):
    """A class for representing quantum objects, such as quantum operators
    and states.

    The Qobj class is the representation of quantum operators and state
    vectors. This class also implements math operations +,-,* between Qobj
    instances (and / by a C-number), as well as a collection of common
    operator/state operations.  The Qobj constructor optionally takes a
    dimension ``list`` and/or shape ``list`` as arguments.

    The matrix is stored dense (``numpy.ndarray``) or sparse
    (``scipy.sparse.csr_matrix``). Unless ``dtype`` is given, objects whose
    leading dimension exceeds ``settings.sparse_threshold`` are stored sparse.

    Parameters
    ----------
    inpt : array_like
        Data for vector/matrix representation of the quantum object.
    dims : list
        Dimensions of object used for tensor products.
    isherm : bool
        Flag specifying if quantum object is Hermitian, if known.
    copy : bool
        Flag specifying whether Qobj should get a copy of the
        input data, or use the original.
    dtype : {None, 'dense', 'sparse'}
        Storage representation.

    Attributes
    ----------
    data : ndarray or csr_matrix
        Matrix representing state or operator.
    dims : list
        List of dimensions keeping track of the tensor structure.
    shape : list
        Shape of the underlying `data` array.
    type : str
        Type of quantum object: 'bra', 'ket', 'oper', 'operator-ket',
        'operator-bra', or 'super'.
    isherm : bool
        Indicates if quantum object represents Hermitian operator.
    """
    __array_priority__ = 100  # sets Qobj priority above numpy arrays

    def __init__(self, inpt=None, dims=None, isherm=None, copy=True,
                 dtype=None, superrep=None):
        self._isherm = isherm
        self._type = None
        self.superrep = superrep

        if isinstance(inpt, Qobj):
            data = inpt.data
            if dims is None:
                dims = [list(inpt.dims[0]), list(inpt.dims[1])]
            if self._isherm is None:
                self._isherm = inpt._isherm
            if superrep is None:
                self.superrep = inpt.superrep
        elif inpt is None:
            data = np.zeros((1, 1), dtype=complex)
        elif _is_sparse(inpt):
            data = inpt
        elif isinstance(inpt, _SCALARS):
            data = np.array([[inpt]], dtype=complex)
        else:
            data = np.asarray(inpt, dtype=complex)
            if data.ndim == 1:
                data = data[:, np.newaxis]
            elif data.ndim != 2:
                raise InvalidParameter("Qobj data must be one or two "
                                       "dimensional")

        sparse = _use_sparse(data.shape, dtype)
        if (copy or _is_sparse(data) != sparse or data.dtype != complex
                or (sparse and data.format != "csr")):
            data = _as_backing(data, sparse)
        self._data = data

        if dims is None:
            dims = [[int(data.shape[0])], [int(data.shape[1])]]
        if (int(np.prod(flatten(dims[0]))) != data.shape[0]
                or int(np.prod(flatten(dims[1]))) != data.shape[1]):
            raise DimensionMismatch("dims %s do not match the data shape %s"
                                    % (dims, list(data.shape)))
        self.dims = dims

        if self.type == 'super' and self.superrep is None:
            self.superrep = 'super'

    # -------------------------------------------------------------------------
    # storage
    #
    @property
    def data(self):
        return self._data

    @property
    def issparse(self):
        return _is_sparse(self._data)

    def to_dense(self):
        """Copy of this object stored as a dense ``numpy.ndarray``."""
        return Qobj(self, dtype='dense')

    def to_sparse(self):
        """Copy of this object stored as a ``scipy.sparse.csr_matrix``."""
        return Qobj(self, dtype='sparse')

    def full(self, squeeze=False):
        """Dense array from quantum object.

        Parameters
        ----------
        squeeze : bool {False, True}
            Squeeze output array.

        Returns
        -------
        data : array
            Array of complex data from quantum objects `data` attribute.
        """
        out = np.array(_to_dense(self._data), dtype=complex)
        return out.squeeze() if squeeze else out

    def _new(self, data, dims=None, isherm=None):
        out = Qobj(data, dims=dims if dims is not None else self.dims,
                   isherm=isherm, copy=False, superrep=self.superrep)
        return out.tidyup() if settings.auto_tidyup else out

    # -------------------------------------------------------------------------
    # arithmetic
    #
    def __add__(self, other):
        """
        ADDITION with Qobj on LEFT [ ex. Qobj+4 ]
        """
        if isinstance(other, _SCALARS):
            if other == 0:
                return self
            if self.type not in ('oper', 'super'):
                raise TypeError("Can only add a scalar to an operator")
            ident = sp.identity(self.shape[0], dtype=complex, format='csr')
            isherm = self._isherm if np.imag(other) == 0 else None
            return self._new(_data_add(self._data, other * ident),
                             isherm=isherm)

        if not isinstance(other, Qobj):
            return NotImplemented

        if self.dims != other.dims:
            raise DimensionMismatch('Incompatible quantum object dimensions: '
                                    '%s and %s' % (self.dims, other.dims))
        if self._isherm and other._isherm:
            isherm = True
        else:
            isherm = None
        return self._new(_data_add(self._data, other._data), isherm=isherm)

    def __radd__(self, other):
        """
        ADDITION with Qobj on RIGHT [ ex. 4+Qobj ]
        """
        return self + other

    def __sub__(self, other):
        """
        SUBTRACTION with Qobj on LEFT [ ex. Qobj-4 ]
        """
        return self + (-other)

    def __rsub__(self, other):
        """
        SUBTRACTION with Qobj on RIGHT [ ex. 4-Qobj ]
        """
        return (-self) + other

    def __mul__(self, other):
        """
        MULTIPLICATION with Qobj on LEFT [ ex. Qobj*4 ]
        """
        if isinstance(other, Qobj):
            return self.__matmul__(other)

        if isinstance(other, _SCALARS):
            isherm = self._isherm if np.imag(other) == 0 else None
            return self._new(self._data * other, isherm=isherm)

        if isinstance(other, list):
            # if other is a list, do element-wise multiplication
            return np.array([self * item for item in other], dtype=object)

        return NotImplemented

    def __rmul__(self, other):
        """
        MULTIPLICATION with Qobj on RIGHT [ ex. 4*Qobj ]
        """
        if isinstance(other, _SCALARS):
            return self * other

        if isinstance(other, list):
            return np.array([item * self for item in other], dtype=object)

        return NotImplemented

    def __matmul__(self, other):
        if not isinstance(other, Qobj):
            return NotImplemented
        if self.dims[1] != other.dims[0]:
            raise DimensionMismatch("Incompatible Qobj dimensions for "
                                    "multiplication: %s and %s"
                                    % (self.dims, other.dims))
        dims = [self.dims[0], other.dims[1]]
        if is_scalar(dims[0]) and is_scalar(dims[1]):
            dims = [[1], [1]]
        return self._new(_data_matmul(self._data, other._data), dims=dims)

    def __truediv__(self, other):
        """
        DIVISION (by numbers only)
        """
        if isinstance(other, _SCALARS):
            return self * (1. / other)
        return NotImplemented

    def __neg__(self):
        """
        NEGATION operation.
        """
        return Qobj(-self._data, dims=self.dims, isherm=self._isherm,
                    copy=False, superrep=self.superrep)

    def __pow__(self, n, m=None):  # calculates powers of Qobj
        """
        POWER operation.
        """
        if self.type not in ['oper', 'super']:
            raise TypeError("Raising a qobj to some power works only for " +
                            "operators and super-operators (square matrices).")
        if m is not None:
            raise NotImplementedError("modulo is not implemented for Qobj")
        if not isinstance(n, (int, np.integer)) or n < 0:
            raise InvalidParameter("Only non-negative integer powers are "
                                   "supported")
        out = Qobj(sp.identity(self.shape[0], dtype=complex, format='csr'),
                   dims=self.dims, isherm=True)
        for _ in range(int(n)):
            out = out * self
        out._isherm = self._isherm
        return out

    def __abs__(self):
        return abs(self._data)

    def __getitem__(self, ind):
        """
        GET qobj elements.
        """
        out = self._data[ind]
        if sp.issparse(out):
            return np.asarray(out.todense())
        return out

    def __eq__(self, other):
        """
        EQUALITY operator.
        """
        if not isinstance(other, Qobj) or self.dims != other.dims:
            return False
        diff = _data_add(self._data, -other._data)
        if _is_sparse(diff):
            return not diff.nnz or abs(diff).max() <= settings.atol
        return bool(np.all(np.abs(diff) <= settings.atol))

    def __ne__(self, other):
        return not (self == other)

    __hash__ = None

    def __call__(self, other):
        """
        Acts this Qobj on another Qobj either by left-multiplication,
        or by vectorization and devectorization, as appropriate.
        """
        if not isinstance(other, Qobj):
            raise TypeError("Only defined for quantum objects.")

        if self.type == "super":
            if other.type == "ket":
                other = other.proj()
            if other.type == "oper":
                from qmaster.superoperator import (vector_to_operator,
                                                   operator_to_vector)
                return vector_to_operator(self * operator_to_vector(other))
            raise TypeError("Can only act super on oper or ket.")

        elif self.type == "oper":
            if other.type == "ket":
                return self * other
            raise TypeError("Can only act oper on ket.")

        raise TypeError("Can only act on quantum objects with a super or "
                        "oper type.")

    def __str__(self):
        s = ""
        t = self.type
        shape = self.shape
        if t in ('oper', 'super'):
            s += ("Quantum object: " +
                  "dims = " + str(self.dims) +
                  ", shape = " + str(shape) +
                  ", type = " + t +
                  ", isherm = " + str(self.isherm) +
                  (
                      ", superrep = {0.superrep}".format(self)
                      if t == "super" and self.superrep != "super"
                      else ""
                  ) + "\n")
        else:
            s += ("Quantum object: " +
                  "dims = " + str(self.dims) +
                  ", shape = " + str(shape) +
                  ", type = " + t + "\n")
        s += "Qobj data =\n"

        if shape[0] > 10000 or shape[1] > 10000:
            # if the system is huge, don't attempt to convert to a
            # dense matrix and then to string, because it is pointless
            # and is likely going to produce memory errors. Instead print the
            # sparse data string representation
            s += str(self._data)

        elif all(np.imag(self.full()).flatten() == 0):
            s += str(np.real(self.full()))

        else:
            s += str(self.full())

        return s

    def __repr__(self):
        # give complete information on Qobj without print statement in
        # command-line we cant realistically serialize a Qobj into a string,
        # so we simply return the informal __str__ representation instead.)
        return self.__str__()

    def __getstate__(self):
        # defines what happens when Qobj object gets pickled
        state = dict(self.__dict__)
        state['qmaster_version'] = __version__[:5]
        return state

    def __setstate__(self, state):
        # defines what happens when loading a pickled Qobj
        state.pop('qmaster_version', None)
        self.__dict__.update(state)

    # -------------------------------------------------------------------------
    # linear algebra
    #
    def dag(self):
        """Adjoint operator of quantum object.
        """
        dims = [self.dims[1], self.dims[0]]
        return Qobj(self._data.conj().T, dims=dims, isherm=self._isherm,
                    copy=False, superrep=self.superrep)

    def conj(self):
        """Conjugate operator of quantum object.
        """
        return Qobj(self._data.conj(), dims=self.dims, copy=False,
                    superrep=self.superrep)

    def trans(self):
        """Transposed operator.
        """
        dims = [self.dims[1], self.dims[0]]
        return Qobj(self._data.T, dims=dims, superrep=self.superrep)

    def tr(self):
        """Trace of a quantum object.

        Returns
        -------
        trace : float
            Returns ``real`` if operator is Hermitian, returns ``complex``
            otherwise.
        """
        out = complex(self._data.diagonal().sum())
        return out.real if self.isherm else out

    def diag(self):
        """Diagonal elements of quantum object.
        """
        out = np.asarray(self._data.diagonal())
        if np.any(np.imag(out) > settings.atol) or not self.isherm:
            return out
        return np.real(out)

    def norm(self, norm=None):
        """Norm of a quantum object.

        Default norm is L2-norm for kets and trace-norm for operator.  Other
        ket and operator norms may be specified using the `norm` parameter.

        Parameters
        ----------
        norm : str
            Which norm to use for ket/bra vectors: L2 'l2', max norm 'max',
            or for operators: trace 'tr', Frobius 'fro', one 'one', or max
            'max'.

        Returns
        -------
        norm : float
            Requested norm of the operator or state quantum object.
        """
        if self.type in ['oper', 'super']:
            if norm is None or norm == 'tr':
                if self.isherm:
                    vals = la.eigvalsh(self.full())
                    return float(np.sum(np.abs(vals)))
                return float(np.sum(la.svdvals(self.full())))
            elif norm == 'fro':
                return float(np.sqrt(np.sum(np.abs(self.full()) ** 2)))
            elif norm == 'one':
                return float(np.max(np.sum(np.abs(self.full()), axis=0)))
            elif norm == 'max':
                return float(np.max(np.abs(self.full())))
            raise InvalidParameter("For matrices, norm must be 'tr', 'fro', "
                                   "'one', or 'max'.")
        else:
            if norm is None or norm == 'l2':
                return float(np.sqrt(np.sum(np.abs(self.full()) ** 2)))
            elif norm == 'max':
                return float(np.max(np.abs(self.full())))
            raise InvalidParameter("For vectors, norm must be 'l2', or "
                                   "'max'.")

    def unit(self, norm=None):
        """Operator or state normalized to unity.

        Uses norm from Qobj.norm().
        """
        return self / self.norm(norm=norm)

    def proj(self):
        """Form the projector from a given ket or bra vector.
        """
        if self.isket or self.shape == [1, 1]:
            # a one dimensional ket reads as an operator
            return self * self.dag()
        elif self.isbra:
            return self.dag() * self
        raise TypeError("Projector can only be formed from a bra or ket.")

    def ptrace(self, sel):
        """Partial trace of the quantum object.

        Parameters
        ----------
        sel : int/list
            An ``int`` or ``list`` of components to keep after partial trace.
            The selected subsystems will *not* be reordered, no matter order
            they are supplied to `ptrace`.

        Returns
        -------
        oper : :class:`qmaster.Qobj`
            Quantum object representing partial trace with selected
            components remaining.
        """
        if isinstance(sel, (int, np.integer)):
            sel = [sel]
        rho = self.proj() if self.isket else self
        if rho.type != 'oper':
            raise TypeError("Partial trace requires a ket or an operator.")
        sub_dims = rho.dims[0]
        keep = sorted(set(int(s) for s in sel))
        if not keep or keep[0] < 0 or keep[-1] >= len(sub_dims):
            raise InvalidParameter("Selection %s is out of range for dims %s"
                                   % (sel, sub_dims))
        n = len(sub_dims)
        letters = string.ascii_letters
        rows = [letters[i] for i in range(n)]
        cols = [letters[n + i] if i in keep else letters[i]
                for i in range(n)]
        out = [rows[i] for i in keep] + [cols[i] for i in keep]
        tensor = rho.full().reshape(sub_dims + sub_dims)
        reduced = np.einsum(
            "".join(rows) + "".join(cols) + "->" + "".join(out), tensor)
        new_dims = [sub_dims[i] for i in keep]
        size = int(np.prod(new_dims))
        return Qobj(reduced.reshape(size, size), dims=[new_dims, new_dims],
                    isherm=rho._isherm)

    def tidyup(self, atol=None):
        """Removes small elements from the quantum object.

        Parameters
        ----------
        atol : float
            Absolute tolerance used by tidyup. Default is set
            via qmaster global settings parameters.

        Returns
        -------
        oper : :class:`qmaster.Qobj`
            Quantum object with small elements removed.
        """
        if atol is None:
            atol = settings.atol

        if self.issparse:
            if self._data.nnz:
                values = self._data.data
                values.real[np.abs(values.real) < atol] = 0
                values.imag[np.abs(values.imag) < atol] = 0
                self._data.eliminate_zeros()
        else:
            data = self._data
            data.real[np.abs(data.real) < atol] = 0
            data.imag[np.abs(data.imag) < atol] = 0
        return self

    def check_herm(self):
        """Check if the quantum object is hermitian.

        Returns
        -------
        isherm : bool
            Returns the new value of isherm property.
        """
        self._isherm = None
        return self.isherm

    def eigenenergies(self, sort='low'):
        """Eigenenergies of a quantum object.

        Eigenenergies (eigenvalues) are defined for operators or
        superoperators only.

        Parameters
        ----------
        sort : str
            Sort eigenvalues 'low' to high, or 'high' to low.

        Returns
        -------
        eigvals : array
            Array of eigenvalues for operator.
        """
        if self.type not in ('oper', 'super'):
            raise TypeError("Eigenenergies are defined for operators only")
        if self.isherm and not settings.eigh_unsafe:
            evals = la.eigvalsh(self.full())
        else:
            evals = la.eigvals(self.full())
            if self.isherm:
                evals = np.real(evals)
        order = np.argsort(np.real(evals))
        if sort == 'high':
            order = order[::-1]
        return evals[order]

    # -------------------------------------------------------------------------
    # properties
    #
    @property
    def isherm(self):
        if self._isherm is not None:
            # used previously computed value
            return self._isherm
        if self.shape[0] != self.shape[1]:
            self._isherm = False
        else:
            self._isherm = bool(_hermitian_defect(self._data)
                                <= settings.atol)
        return self._isherm

    @isherm.setter
    def isherm(self, isherm):
        self._isherm = isherm

    @property
    def type(self):
        if not self._type:
            self._type = type_from_dims(self.dims)
        return self._type

    @property
    def shape(self):
        return list(self._data.shape)

    @property
    def basis(self):
        """:class:`qmaster.CompositeBasis` of the Hilbert space acted on."""
        if self.type in ('ket', 'oper'):
            return CompositeBasis.from_dims(self.dims[0])
        if self.type == 'bra':
            return CompositeBasis.from_dims(self.dims[1])
        raise TypeError("Only kets, bras and operators have a basis")

    @property
    def isbra(self):
        return self.type == 'bra'

    @property
    def isket(self):
        return self.type == 'ket'

    @property
    def isoper(self):
        return self.type == 'oper'

    @property
    def issuper(self):
        return self.type == 'super'

    @property
    def isoperket(self):
        return self.type == 'operator-ket'


# -----------------------------------------------------------------------------
# Functions acting on Qobj class
#
def dag(A):
    """Adjont operator (dagger) of a quantum object.
    """
    if not isinstance(A, Qobj):
        raise TypeError("Input is not a quantum object")
    return A.dag()


def ptrace(Q, sel):
    """Partial trace of the Qobj with selected components remaining.
    """
    if not isinstance(Q, Qobj):
        raise TypeError("Input is not a quantum object")
    return Q.ptrace(sel)


def dims(inpt):
    """Returns the dims attribute of a quantum object.
    """
    if isinstance(inpt, Qobj):
        return inpt.dims
    warnings.warn("Input is not a quantum object")
    return None


def shape(inpt):
    """Returns the shape attribute of a quantum object.
    """
    if isinstance(inpt, Qobj):
        return inpt.shape
    return np.shape(inpt)


def isket(Q):
    """Determines if given quantum object is a ket-vector.
    """
    return isinstance(Q, Qobj) and Q.isket


def isbra(Q):
    """Determines if given quantum object is a bra-vector.
    """
    return isinstance(Q, Qobj) and Q.isbra


def isoper(Q):
    """Determines if given quantum object is a operator.
    """
    return isinstance(Q, Qobj) and Q.isoper


def issuper(Q):
    """Determines if given quantum object is a super-operator.
    """
    return isinstance(Q, Qobj) and Q.issuper


def isequal(A, B, tol=None):
    """Determines if two qobj objects are equal to within given tolerance.

    Parameters
    ----------
    A : :class:`qmaster.Qobj`
        Qobj one
    B : :class:`qmaster.Qobj`
        Qobj two
    tol : float
        Tolerence for equality to be valid

    Returns
    -------
    isequal : bool
        True if qobjs are equal, False otherwise.
    """
    if tol is None:
        tol = settings.atol
    if not isinstance(A, Qobj) or not isinstance(B, Qobj):
        return False
    if A.dims != B.dims:
        return False
    return bool(np.all(np.abs(A.full() - B.full()) <= tol))


def isherm(Q):
    """Determines if given operator is Hermitian.
    """
    return isinstance(Q, Qobj) and Q.isherm
