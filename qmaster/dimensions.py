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
Bases of truncated Fock spaces and internal helpers for manipulating dims
specifications.
"""

__all__ = ['Basis', 'CompositeBasis']

import numbers

import numpy as np

from qmaster.exceptions import InvalidParameter


def flatten(l):
    """Flattens a list of lists to the first level.

    Given a list containing a mix of scalars and lists,
    flattens down to a list of the scalars within the original
    list.

    Examples
    --------

    >>> flatten([[[0], 1], 2]) # doctest: +SKIP
    [0, 1, 2]

    """
    if not isinstance(l, list):
        return [l]
    else:
        return sum(map(flatten, l), [])


def is_scalar(dims):
    """
    Returns True if a dims specification is effectively
    a scalar (has dimension 1).
    """
    return np.prod(flatten(dims)) == 1


def is_vector(dims):
    return (
        isinstance(dims, list) and
        isinstance(dims[0], (int, np.integer))
    )


def is_vectorized_oper(dims):
    return (
        isinstance(dims, list) and
        isinstance(dims[0], list)
    )


def type_from_dims(dims, enforce_square=True):
    # a one-dimensional space is square before it is a vector
    if dims[0] == dims[1]:
        if is_vector(dims[0]):
            return 'oper'
        if is_vectorized_oper(dims[0]) and dims[0][0] == dims[0][1]:
            return 'super'

    bra_like, ket_like = map(is_scalar, dims)

    if bra_like and not is_vectorized_oper(dims[0]):
        if is_vector(dims[1]):
            return 'bra'
        elif is_vectorized_oper(dims[1]):
            return 'operator-bra'

    if ket_like:
        if is_vector(dims[0]):
            return 'ket'
        elif is_vectorized_oper(dims[0]):
            return 'operator-ket'

    elif is_vector(dims[0]) and (dims[0] == dims[1] or not enforce_square):
        return 'oper'

    elif (
            is_vectorized_oper(dims[0])
            and (
                (
                    dims[0] == dims[1] and
                    dims[0][0] == dims[1][0]
                ) or not enforce_square
            )
    ):
        return 'super'

    return 'other'


def _check_dimension(N):
    if not isinstance(N, numbers.Integral) or isinstance(N, bool):
        raise InvalidParameter("Basis dimension must be an integer, "
                               "not %r" % (N,))
    if N < 1:
        raise InvalidParameter("Basis dimension must be at least 1, "
                               "not %d" % N)
    return int(N)


class Basis:
    """
    A truncated Fock basis: an ordered index set ``0, 1, ..., N-1`` labelling
    occupation numbers.

    Parameters
    ----------
    N : int
        Dimension of the basis.
    label : str, optional
        Name of the mode living in this basis (e.g. ``"cavity"``).
    """
    __slots__ = ('_N', '_label')

    def __init__(self, N, label=None):
        object.__setattr__(self, '_N', _check_dimension(N))
        object.__setattr__(self, '_label', label)

    def __setattr__(self, name, value):
        raise AttributeError("Basis is immutable")

    def __reduce__(self):
        return (Basis, (self._N, self._label))

    @property
    def N(self):
        return self._N

    @property
    def label(self):
        return self._label

    @property
    def dims(self):
        return [self._N]

    def __len__(self):
        return self._N

    def __iter__(self):
        return iter(range(self._N))

    def __contains__(self, n):
        return isinstance(n, numbers.Integral) and 0 <= n < self._N

    def __mul__(self, other):
        """Tensor product of bases: ``cavity * mechanics``."""
        if isinstance(other, (Basis, CompositeBasis)):
            return CompositeBasis(self, other)
        return NotImplemented

    def __eq__(self, other):
        return (isinstance(other, Basis)
                and self._N == other._N and self._label == other._label)

    def __hash__(self):
        return hash(('Basis', self._N, self._label))

    def __repr__(self):
        if self._label is None:
            return "Basis(%d)" % self._N
        return "Basis(%d, label=%r)" % (self._N, self._label)

    def check_index(self, n):
        if n not in self:
            raise InvalidParameter("Occupation %r is outside the basis of "
                                   "dimension %d" % (n, self._N))
        return int(n)


class CompositeBasis:
    """
    Tensor product of an ordered list of :class:`Basis`.

    The composite index ``(i, j, ...)`` maps to the row-major flat index, so
    for two factors of dimensions ``N1`` and ``N2`` the state ``|i>|j>`` sits
    at position ``i*N2 + j``.

    Parameters
    ----------
    *bases : Basis, CompositeBasis or int
        Factors of the product. Composite factors are flattened, integers are
        converted to unlabelled bases.
    """
    __slots__ = ('_bases',)

    def __init__(self, *bases):
        flat = []
        for basis in bases:
            if isinstance(basis, CompositeBasis):
                flat.extend(basis.bases)
            elif isinstance(basis, Basis):
                flat.append(basis)
            else:
                flat.append(Basis(basis))
        if not flat:
            raise InvalidParameter("A composite basis needs at least one "
                                   "factor")
        object.__setattr__(self, '_bases', tuple(flat))

    @classmethod
    def from_dims(cls, dims):
        """Build a composite basis from a list of dimensions."""
        return cls(*[Basis(N) for N in dims])

    def __setattr__(self, name, value):
        raise AttributeError("CompositeBasis is immutable")

    def __reduce__(self):
        return (CompositeBasis, self._bases)

    @property
    def bases(self):
        return self._bases

    @property
    def dims(self):
        return [basis.N for basis in self._bases]

    @property
    def N(self):
        return int(np.prod(self.dims))

    def __len__(self):
        return self.N

    def __getitem__(self, idx):
        return self._bases[idx]

    def __mul__(self, other):
        if isinstance(other, (Basis, CompositeBasis)):
            return CompositeBasis(self, other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, Basis):
            return CompositeBasis(other, self)
        return NotImplemented

    def __eq__(self, other):
        return isinstance(other, CompositeBasis) and \
            self._bases == other._bases

    def __hash__(self):
        return hash(('CompositeBasis',) + self._bases)

    def __repr__(self):
        return "CompositeBasis(%s)" % ", ".join(map(repr, self._bases))

    def index(self, *occupations):
        """
        Flat (row-major) index of the product state
        ``|occupations[0]>|occupations[1]>...``.
        """
        if len(occupations) == 1 and isinstance(occupations[0],
                                                (list, tuple)):
            occupations = tuple(occupations[0])
        if len(occupations) != len(self._bases):
            raise InvalidParameter(
                "Expected %d occupations, got %d"
                % (len(self._bases), len(occupations)))
        idx = 0
        for basis, n in zip(self._bases, occupations):
            idx = idx * basis.N + basis.check_index(n)
        return idx

    def occupations(self, index):
        """Inverse of :meth:`index`."""
        if not 0 <= index < self.N:
            raise InvalidParameter("Index %r is outside the composite basis "
                                   "of dimension %d" % (index, self.N))
        out = []
        for basis in reversed(self._bases):
            index, n = divmod(index, basis.N)
            out.append(n)
        return tuple(reversed(out))
