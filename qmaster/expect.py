"""
Expectation values and variances of operators in kets and density matrices.
"""

__all__ = ['expect', 'variance']

import numpy as np

from qmaster.qobj import Qobj, isoper, _is_sparse
from qmaster.exceptions import DimensionMismatch


def expect(oper, state):
    '''Calculates the expectation value for operator(s) and state(s).

    Parameters
    ----------
    oper : qobj/array-like
        A single or a `list` or operators for expectation value.

    state : qobj/array-like
        A single or a `list` of quantum states or density matrices, or a
        :class:`qmaster.solver.Result` holding stored states.

    Returns
    -------
    expt : float/complex/array-like
        Expectation value.  ``real`` if `oper` is Hermitian, ``complex``
        otherwise. A (nested) array of expectaction values of state or
        operator are arrays.

    Examples
    --------
    >>> expect(num(4), basis(4, 3)) == 3 # doctest: +NORMALIZE_WHITESPACE
        True

    '''
    if hasattr(state, 'states') and not isinstance(state, Qobj):
        state = state.states

    if isinstance(state, Qobj) and isinstance(oper, Qobj):
        return _single_qobj_expect(oper, state)

    elif isinstance(oper, (list, np.ndarray)):
        if isinstance(state, Qobj):
            if (all([op.isherm for op in oper]) and
                    (state.isket or state.isherm)):
                return np.array([_single_qobj_expect(o, state) for o in oper])
            else:
                return np.array([_single_qobj_expect(o, state) for o in oper],
                                dtype=complex)
        else:
            return [expect(o, state) for o in oper]

    elif isinstance(state, (list, np.ndarray)):
        if not all(isinstance(x, Qobj) for x in state):
            raise TypeError('Arguments must be quantum objects')
        if oper.isherm and all([(op.isherm or op.type == 'ket')
                                for op in state]):
            return np.array([_single_qobj_expect(oper, x) for x in state])
        else:
            return np.array([_single_qobj_expect(oper, x) for x in state],
                            dtype=complex)
    else:
        raise TypeError('Arguments must be quantum objects')


def _trace_product(A, B):
    """tr(A B) without forming the full product."""
    if _is_sparse(A):
        A = A.tocsr()
        if _is_sparse(B):
            return complex(A.multiply(B.T).sum())
        return complex(A.multiply(np.asarray(B).T).sum())
    if _is_sparse(B):
        return complex(B.multiply(np.asarray(A).T).sum())
    return complex(np.einsum('ij,ji->', A, B))


def _single_qobj_expect(oper, state):
    """
    Private function used by expect to calculate expectation values of Qobjs.
    """
    if isoper(oper):
        if oper.dims[1] != state.dims[0]:
            raise DimensionMismatch('Operator and state do not have same '
                                    'tensor structure: %s and %s' %
                                    (oper.dims[1], state.dims[0]))

        if state.type == 'oper':
            # calculates expectation value via TR(op*rho)
            out = _trace_product(oper.data, state.data)
            return out.real if oper.isherm and state.isherm else out

        elif state.type == 'ket':
            # calculates expectation value via <psi|op|psi>
            out = (state.dag() * oper * state).full()[0, 0]
            return float(np.real(out)) if oper.isherm else complex(out)

        raise TypeError('State must be a ket or a density matrix')
    else:
        raise TypeError('Invalid operand types')


def variance(oper, state):
    """
    Variance of an operator for the given state vector or density matrix.

    Parameters
    ----------
    oper : qobj
        Operator for expectation value.

    state : qobj/list
        A single or `list` of quantum states or density matrices..

    Returns
    -------
    var : float
        Variance of operator 'oper' for given state.

    """
    return expect(oper ** 2, state) - expect(oper, state) ** 2
