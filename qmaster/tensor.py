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
Module for the creation of composite quantum objects via the tensor product.
"""

__all__ = ['tensor', 'expand_operator']

import numpy as np
import scipy.sparse as sp

from qmaster.qobj import Qobj
from qmaster.settings import settings
from qmaster.operators import qeye
from qmaster.exceptions import DimensionMismatch, InvalidParameter


def _kron(left, right):
    if sp.issparse(left) or sp.issparse(right):
        return sp.kron(left, right, format='csr')
    return np.kron(left, right)


def tensor(*args):
    """Calculates the tensor product of input operators.

    Parameters
    ----------
    args : array_like
        ``list`` or ``array`` of quantum objects for tensor product.

    Returns
    -------
    obj : qobj
        A composite quantum object.

    Examples
    --------
    >>> tensor([destroy(2), qeye(3)]).dims # doctest: +SKIP
    [[2, 3], [2, 3]]
    """

    if not args:
        raise TypeError("Requires at least one input argument")

    if len(args) == 1 and isinstance(args[0], (list, tuple, np.ndarray)):
        # this is the case when tensor is called on the form:
        # tensor([q1, q2, q3, ...])
        qlist = list(args[0])

    elif len(args) == 1 and isinstance(args[0], Qobj):
        # tensor is called with a single Qobj as an argument, do nothing
        return args[0]

    else:
        # this is the case when tensor is called on the form:
        # tensor(q1, q2, q3, ...)
        qlist = list(args)

    if not qlist:
        raise TypeError("Requires at least one input argument")

    if not all([isinstance(q, Qobj) for q in qlist]):
        # raise error if one of the inputs is not a quantum object
        raise TypeError("One of inputs is not a quantum object")

    if any(q.issuper for q in qlist):
        raise TypeError("Tensor products of superoperators are not "
                        "supported")

    data = qlist[0].data
    dims = [list(qlist[0].dims[0]), list(qlist[0].dims[1])]
    isherm = qlist[0].isherm
    for q in qlist[1:]:
        data = _kron(data, q.data)
        dims = [dims[0] + q.dims[0], dims[1] + q.dims[1]]
        isherm = isherm and q.isherm

    out = Qobj(data, dims=dims, isherm=True if isherm else None, copy=False)
    return out.tidyup() if settings.auto_tidyup else out


def expand_operator(oper, dims, target):
    """
    Embed a single-mode operator into a composite space, with identities on
    every other mode.

    Parameters
    ----------
    oper : :class:`qmaster.Qobj`
        Operator acting on one mode.
    dims : list of int or :class:`qmaster.CompositeBasis`
        Dimensions of every mode of the composite space.
    target : int
        Position of the mode ``oper`` acts on.

    Returns
    -------
    expanded : :class:`qmaster.Qobj`
        ``I x ... x oper x ... x I``.
    """
    if hasattr(dims, 'dims'):
        dims = dims.dims
    dims = list(dims)
    if not isinstance(target, (int, np.integer)) \
            or not 0 <= target < len(dims):
        raise InvalidParameter("Target mode %r is out of range for dims %s"
                               % (target, dims))
    if not oper.isoper:
        raise TypeError("Only operators can be expanded")
    if oper.dims[0] != [dims[target]]:
        raise DimensionMismatch("Operator of dims %s cannot act on mode %d "
                                "of dimension %d"
                                % (oper.dims, target, dims[target]))
    factors = [qeye(N) for N in dims]
    factors[target] = oper
    return tensor(factors)
